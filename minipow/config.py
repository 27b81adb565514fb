"""
config.py - minipow configuration constants.
Shared settings for the miner, the verifier and the demo.
"""

# Default difficulty prefix (two leading zero hex digits)
DEFAULT_DIFFICULTY = "00"

# Largest nonce the search may try; reaching it is fatal
MAX_NONCE = 2 ** 64 - 1

# Length of a hex SHA-256 digest
DIGEST_LENGTH = 64

# previous_hash used by block 0
GENESIS_PREVIOUS_HASH = "0" * 64

# Genesis block timestamp in seconds (fixed for reproducibility)
GENESIS_TIMESTAMP = 1704067200

# Attempts between debug progress lines
PROGRESS_INTERVAL = 100_000
