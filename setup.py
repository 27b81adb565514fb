from setuptools import setup, find_packages

setup(
    name="minipow",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=[
        "pynacl==1.6.2",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "minipow=main:main",
        ],
    },
    python_requires=">=3.8",
)
