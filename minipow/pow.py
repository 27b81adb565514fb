import logging
import time
from typing import NamedTuple

from .config import DEFAULT_DIFFICULTY, MAX_NONCE, PROGRESS_INTERVAL
from .difficulty import expected_attempts, normalize_difficulty
from .exceptions import MiningCancelledError, MiningExceededError, NonceSpaceExhaustedError
from .hasher import calculate_hash
from .snapshot import BlockSnapshot


class MiningResult(NamedTuple):
    nonce: int
    hash: str


def validate_max_nonce(max_nonce):
    if isinstance(max_nonce, bool) or not isinstance(max_nonce, int) or max_nonce < 0:
        raise ValueError("max_nonce must be a non-negative integer.")
    if max_nonce > MAX_NONCE:
        raise ValueError(f"max_nonce cannot exceed {MAX_NONCE}.")


def validate_max_attempts(max_attempts):
    if max_attempts is None:
        return
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts <= 0:
        raise ValueError("max_attempts must be a positive integer.")


def mine_block(
    block,
    difficulty=DEFAULT_DIFFICULTY,
    max_nonce=MAX_NONCE,
    max_attempts=None,
    timeout_seconds=None,
    stop_event=None,
    logger=None,
    progress_callback=None,
):
    """
    Mines a block using Proof-of-Work and returns the lowest qualifying nonce.

    The block is read through a BlockSnapshot and never mutated. Passing
    max_nonce without a match raises NonceSpaceExhaustedError. Running out of
    max_attempts or timeout_seconds raises MiningExceededError, and a set
    stop_event or a progress_callback returning False raises
    MiningCancelledError.
    """
    log = logger or logging.getLogger(__name__)

    snapshot = BlockSnapshot.from_block(block)
    target = normalize_difficulty(difficulty)
    validate_max_nonce(max_nonce)
    validate_max_attempts(max_attempts)

    local_nonce = 0
    start_time = time.monotonic()

    log.info(
        "Mining block %s (Difficulty: %r, ~%d attempts expected)",
        snapshot.index,
        target,
        expected_attempts(target),
    )

    while True:

        # Never wrap around past the ceiling
        if local_nonce > max_nonce:
            log.warning("Nonce space exhausted at %d for block %s.", max_nonce, snapshot.index)
            raise NonceSpaceExhaustedError(
                f"Mining failed: no nonce up to {max_nonce} satisfies difficulty {target!r}"
            )

        if max_attempts is not None and local_nonce >= max_attempts:
            log.warning("Max attempts exceeded during mining.")
            raise MiningExceededError("Mining failed: max_attempts exceeded")

        if timeout_seconds is not None and (time.monotonic() - start_time) > timeout_seconds:
            log.warning("Mining timeout exceeded.")
            raise MiningExceededError("Mining failed: timeout exceeded")

        if stop_event is not None and stop_event.is_set():
            log.info("Mining cancelled via stop_event.")
            raise MiningCancelledError("Mining cancelled")

        block_hash = calculate_hash(snapshot, local_nonce)

        if block_hash.startswith(target):
            log.info(
                "Success! Nonce: %d, Hash: %s (%.2fs)",
                local_nonce,
                block_hash,
                time.monotonic() - start_time,
            )
            return MiningResult(local_nonce, block_hash)

        if progress_callback:
            should_continue = progress_callback(local_nonce, block_hash)
            if should_continue is False:
                log.info("Mining cancelled via progress_callback.")
                raise MiningCancelledError("Mining cancelled")

        local_nonce += 1

        if local_nonce % PROGRESS_INTERVAL == 0:
            log.debug("Trying nonce %d...", local_nonce)


class Miner:
    """
    Holds mining settings and mines blocks with them.

    Keeps no state between calls, so one Miner can mine many blocks, including
    from several threads at once.
    """

    def __init__(self, difficulty=DEFAULT_DIFFICULTY, max_nonce=MAX_NONCE, logger=None):
        self.difficulty = normalize_difficulty(difficulty)
        validate_max_nonce(max_nonce)
        self.max_nonce = max_nonce
        self.logger = logger

    def mine(self, block, stop_event=None, timeout_seconds=None, max_attempts=None, progress_callback=None):
        return mine_block(
            block,
            difficulty=self.difficulty,
            max_nonce=self.max_nonce,
            max_attempts=max_attempts,
            timeout_seconds=timeout_seconds,
            stop_event=stop_event,
            logger=self.logger,
            progress_callback=progress_callback,
        )

    def __repr__(self):
        return f"Miner(difficulty={self.difficulty!r})"
