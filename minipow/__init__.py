# Core types
from .snapshot import BlockSnapshot, render_transactions
from .block import Block, create_genesis_block

# Hashing
from .hasher import serialize, calculate_hash
from .difficulty import normalize_difficulty, meets_difficulty, expected_attempts

# Mining
from .pow import mine_block, Miner, MiningResult
from .parallel import mine_block_parallel

# Verification
from .verify import verify_result, validate_block

# Errors
from .exceptions import (
    MiningError,
    InvalidBlockError,
    InvalidDifficultyError,
    MiningExceededError,
    MiningCancelledError,
    NonceSpaceExhaustedError,
    HashingUnavailableError,
)

__all__ = [
    # Core
    "BlockSnapshot",
    "render_transactions",
    "Block",
    "create_genesis_block",
    # Hashing
    "serialize",
    "calculate_hash",
    "normalize_difficulty",
    "meets_difficulty",
    "expected_attempts",
    # Mining
    "mine_block",
    "Miner",
    "MiningResult",
    "mine_block_parallel",
    # Verification
    "verify_result",
    "validate_block",
    # Errors
    "MiningError",
    "InvalidBlockError",
    "InvalidDifficultyError",
    "MiningExceededError",
    "MiningCancelledError",
    "NonceSpaceExhaustedError",
    "HashingUnavailableError",
]
