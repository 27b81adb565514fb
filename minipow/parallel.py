"""
parallel.py - Opt-in parallel Proof-of-Work search.

Worker k of n tries nonces k, k + n, k + 2n, ... so the strides never overlap.
The first worker to find a qualifying nonce sets a shared stop event and the
others return at their next check. Any qualifying nonce is a valid result, so
the nonce returned here may be larger than the one mine_block would find.
"""

import logging
import multiprocessing
import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, ProcessPoolExecutor, ThreadPoolExecutor, wait
from contextlib import ExitStack

from .config import DEFAULT_DIFFICULTY, MAX_NONCE
from .difficulty import normalize_difficulty
from .exceptions import MiningCancelledError, MiningExceededError, NonceSpaceExhaustedError
from .hasher import calculate_hash
from .pow import MiningResult, validate_max_nonce
from .snapshot import BlockSnapshot

FOUND = "found"
EXHAUSTED = "exhausted"
STOPPED = "stopped"

# Attempts between stop-event checks; a manager event costs a round trip
STOP_CHECK_INTERVAL = 1024

# Seconds between checks of the caller's stop_event and deadline
POLL_INTERVAL = 0.05


def search_stride(snapshot, target, start, step, max_nonce, stop_event):
    """
    Search start, start + step, ... up to max_nonce.

    Lives at module level so process pools can pickle it.
    Returns a (status, nonce) pair where status is FOUND, EXHAUSTED or STOPPED.
    """
    nonce = start
    attempts = 0

    while nonce <= max_nonce:
        if attempts % STOP_CHECK_INTERVAL == 0 and stop_event.is_set():
            return STOPPED, None

        if calculate_hash(snapshot, nonce).startswith(target):
            stop_event.set()
            return FOUND, nonce

        nonce += step
        attempts += 1

    return EXHAUSTED, None


def mine_block_parallel(
    block,
    difficulty=DEFAULT_DIFFICULTY,
    workers=None,
    max_nonce=MAX_NONCE,
    use_processes=False,
    timeout_seconds=None,
    stop_event=None,
    logger=None,
):
    """Mines a block across several workers and returns the first qualifying result."""
    log = logger or logging.getLogger(__name__)

    snapshot = BlockSnapshot.from_block(block)
    target = normalize_difficulty(difficulty)
    validate_max_nonce(max_nonce)

    if workers is None:
        workers = os.cpu_count() or 1
    if isinstance(workers, bool) or not isinstance(workers, int) or workers <= 0:
        raise ValueError("workers must be a positive integer.")

    deadline = None if timeout_seconds is None else time.monotonic() + timeout_seconds
    found_nonces = []
    cancelled = False
    timed_out = False

    log.info(
        "Mining block %s with %d %s (Difficulty: %r)",
        snapshot.index,
        workers,
        "processes" if use_processes else "threads",
        target,
    )

    with ExitStack() as stack:
        if use_processes:
            manager = stack.enter_context(multiprocessing.Manager())
            internal_stop = manager.Event()
            executor = stack.enter_context(ProcessPoolExecutor(max_workers=workers))
        else:
            internal_stop = threading.Event()
            executor = stack.enter_context(ThreadPoolExecutor(max_workers=workers))

        # Runs before the executor shuts down, so workers always get released
        stack.callback(internal_stop.set)

        pending = {
            executor.submit(search_stride, snapshot, target, k, workers, max_nonce, internal_stop)
            for k in range(workers)
        }

        while pending:
            done, pending = wait(pending, timeout=POLL_INTERVAL, return_when=FIRST_COMPLETED)

            for future in done:
                status, nonce = future.result()
                if status == FOUND:
                    found_nonces.append(nonce)

            if found_nonces or internal_stop.is_set():
                continue

            if stop_event is not None and stop_event.is_set():
                log.info("Parallel mining cancelled via stop_event.")
                cancelled = True
                internal_stop.set()
            elif deadline is not None and time.monotonic() > deadline:
                log.warning("Parallel mining timeout exceeded.")
                timed_out = True
                internal_stop.set()

    if found_nonces:
        nonce = min(found_nonces)
        block_hash = calculate_hash(snapshot, nonce)
        log.info("Success! Nonce: %d, Hash: %s", nonce, block_hash)
        return MiningResult(nonce, block_hash)

    if cancelled:
        raise MiningCancelledError("Mining cancelled")
    if timed_out:
        raise MiningExceededError("Mining failed: timeout exceeded")

    log.warning("Nonce space exhausted at %d for block %s.", max_nonce, snapshot.index)
    raise NonceSpaceExhaustedError(
        f"Mining failed: no nonce up to {max_nonce} satisfies difficulty {target!r}"
    )
