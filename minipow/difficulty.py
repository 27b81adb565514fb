import re
from typing import Union

from .config import DEFAULT_DIFFICULTY, DIGEST_LENGTH
from .exceptions import InvalidDifficultyError

Difficulty = Union[str, int]

# Only lowercase hex prefixes no longer than a digest can ever match
PREFIX_PATTERN = re.compile(r"[0-9a-f]{0,%d}" % DIGEST_LENGTH)


def normalize_difficulty(difficulty: Difficulty = DEFAULT_DIFFICULTY) -> str:
    """
    Turn a difficulty into the prefix a digest must start with.

    Strings are used as the prefix directly. Integers are a count of leading
    zero hex digits, so 3 becomes "000". Prefixes no digest can start with
    (uppercase, non-hex, longer than a digest) raise InvalidDifficultyError.
    """
    if difficulty is None:
        return DEFAULT_DIFFICULTY

    if isinstance(difficulty, bool) or not isinstance(difficulty, (str, int)):
        raise InvalidDifficultyError(
            f"Difficulty must be a prefix string or a number of leading zeros, got {difficulty!r}"
        )

    if isinstance(difficulty, int):
        if difficulty < 0:
            raise InvalidDifficultyError("Difficulty must be a non-negative integer.")
        difficulty = "0" * difficulty

    if not PREFIX_PATTERN.fullmatch(difficulty):
        raise InvalidDifficultyError(
            f"Difficulty {difficulty!r} can never match: expected at most "
            f"{DIGEST_LENGTH} lowercase hex digits"
        )

    return difficulty


def meets_difficulty(digest: str, difficulty: Difficulty = DEFAULT_DIFFICULTY) -> bool:
    return digest.startswith(normalize_difficulty(difficulty))


def expected_attempts(difficulty: Difficulty = DEFAULT_DIFFICULTY) -> int:
    return 16 ** len(normalize_difficulty(difficulty))
