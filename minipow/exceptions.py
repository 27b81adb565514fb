class MiningError(Exception):
    """Base class for errors raised by the proof-of-work core."""


class InvalidBlockError(MiningError, ValueError):
    """Raised when a block is missing a required field or a field has the wrong shape."""


class InvalidDifficultyError(MiningError, ValueError):
    """Raised when a difficulty is neither a prefix string nor a non-negative count."""


class MiningExceededError(MiningError):
    """Raised when max_attempts, timeout, or cancellation is exceeded during mining."""


class MiningCancelledError(MiningExceededError):
    """Raised when a search is stopped from outside before a nonce is found."""


class NonceSpaceExhaustedError(MiningError):
    """Raised when every nonce up to the ceiling has been tried without success."""


class HashingUnavailableError(RuntimeError):
    """Raised at import time when SHA-256 is not provided by hashlib."""
