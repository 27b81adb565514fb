import hashlib
import logging
import threading
import unittest

from minipow import (
    Block,
    BlockSnapshot,
    InvalidBlockError,
    InvalidDifficultyError,
    Miner,
    MiningCancelledError,
    MiningExceededError,
    MiningResult,
    NonceSpaceExhaustedError,
    calculate_hash,
    mine_block,
    verify_result,
)
from minipow.config import GENESIS_PREVIOUS_HASH, MAX_NONCE

# No digest will realistically start with this in a test run
UNREACHABLE = "0" * 16


class TestMineBlock(unittest.TestCase):
    def setUp(self):
        self.snapshot = BlockSnapshot.create(0, "0", "[]", GENESIS_PREVIOUS_HASH)

    def test_concrete_genesis_scenario(self):
        """Index 0, timestamp "0", no transactions, prefix "0"."""
        nonce, digest = mine_block(self.snapshot, difficulty="0")

        self.assertTrue(digest.startswith("0"))
        expected = hashlib.sha256(f"{nonce}00[]{'0' * 64}".encode("utf-8")).hexdigest()
        self.assertEqual(digest, expected)
        self.assertTrue(verify_result(self.snapshot, nonce, digest, "0"))

    def test_default_difficulty(self):
        result = mine_block(self.snapshot)
        self.assertIsInstance(result, MiningResult)
        self.assertTrue(result.hash.startswith("00"))

    def test_integer_difficulty(self):
        result = mine_block(self.snapshot, difficulty=1)
        self.assertTrue(result.hash.startswith("0"))

    def test_empty_prefix_matches_nonce_zero(self):
        result = mine_block(self.snapshot, difficulty="")
        self.assertEqual(result.nonce, 0)
        self.assertEqual(result.hash, calculate_hash(self.snapshot, 0))

    def test_returns_smallest_nonce(self):
        """Every nonce below the winner fails the prefix."""
        first = calculate_hash(self.snapshot, 0)[0]
        prefix = "f" if first != "f" else "e"

        nonce, digest = mine_block(self.snapshot, difficulty=prefix)

        self.assertGreater(nonce, 0)
        self.assertTrue(digest.startswith(prefix))
        for smaller in range(nonce):
            self.assertFalse(calculate_hash(self.snapshot, smaller).startswith(prefix))

    def test_result_round_trips_through_hasher(self):
        nonce, digest = mine_block(self.snapshot, difficulty="00")
        self.assertEqual(calculate_hash(self.snapshot, nonce), digest)

    def test_block_is_not_mutated(self):
        block = Block(index=1, previous_hash="ab" * 32, transactions=[{"x": 1}], timestamp=5)
        mine_block(block, difficulty="0")
        self.assertIsNone(block.nonce)
        self.assertIsNone(block.hash)
        self.assertEqual(block.transactions, [{"x": 1}])

    def test_exhaustion_is_fatal_and_distinct(self):
        with self.assertRaises(NonceSpaceExhaustedError):
            mine_block(self.snapshot, difficulty=UNREACHABLE, max_nonce=500)

    def test_exhaustion_tries_the_ceiling(self):
        seen = []
        with self.assertRaises(NonceSpaceExhaustedError):
            mine_block(
                self.snapshot,
                difficulty=UNREACHABLE,
                max_nonce=9,
                progress_callback=lambda nonce, _: seen.append(nonce),
            )
        self.assertEqual(seen, list(range(10)))

    def test_max_nonce_bounds(self):
        with self.assertRaises(ValueError):
            mine_block(self.snapshot, max_nonce=MAX_NONCE + 1)
        with self.assertRaises(ValueError):
            mine_block(self.snapshot, max_nonce=-1)

    def test_attempt_budget_is_not_exhaustion(self):
        with self.assertRaises(MiningExceededError) as cm:
            mine_block(self.snapshot, difficulty=UNREACHABLE, max_attempts=100)
        self.assertNotIsInstance(cm.exception, NonceSpaceExhaustedError)
        self.assertNotIsInstance(cm.exception, MiningCancelledError)

    def test_timeout(self):
        with self.assertRaises(MiningExceededError):
            mine_block(self.snapshot, difficulty=UNREACHABLE, timeout_seconds=0.05)

    def test_stop_event_cancels(self):
        stop = threading.Event()
        stop.set()
        with self.assertRaises(MiningCancelledError):
            mine_block(self.snapshot, difficulty=UNREACHABLE, stop_event=stop)

    def test_progress_callback_cancels(self):
        seen = []

        def callback(nonce, digest):
            seen.append(nonce)
            return nonce < 5

        with self.assertRaises(MiningCancelledError):
            mine_block(self.snapshot, difficulty=UNREACHABLE, progress_callback=callback)
        self.assertEqual(seen, [0, 1, 2, 3, 4, 5])

    def test_impossible_difficulty_rejected_before_search(self):
        """Prefixes no hex digest can start with fail fast instead of searching."""
        calls = []
        for prefix in ("0A", "zz", "0" * 65):
            with self.subTest(prefix=prefix):
                with self.assertRaises(InvalidDifficultyError):
                    mine_block(
                        self.snapshot,
                        difficulty=prefix,
                        progress_callback=lambda *args: calls.append(args),
                    )
        self.assertEqual(calls, [])

    def test_invalid_max_attempts(self):
        for value in ("5", True, 0, -3, 2.0):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    mine_block(self.snapshot, difficulty="0", max_attempts=value)

    def test_invalid_block_rejected_before_search(self):
        calls = []
        with self.assertRaises(InvalidBlockError):
            mine_block(
                {"index": "zero", "timestamp": 0, "transactions": [], "previous_hash": "00"},
                progress_callback=lambda *args: calls.append(args),
            )
        self.assertEqual(calls, [])

    def test_logs_success(self):
        test_logger = logging.getLogger("minipow.test")
        with self.assertLogs(test_logger, level="INFO") as cm:
            mine_block(self.snapshot, difficulty="0", logger=test_logger)
        self.assertTrue(any("Success!" in line for line in cm.output))


class TestMiner(unittest.TestCase):
    def test_miner_is_reusable(self):
        miner = Miner(difficulty=1)
        first = BlockSnapshot.create(0, "0", "[]", GENESIS_PREVIOUS_HASH)
        result = miner.mine(first)
        second = BlockSnapshot.create(1, "1", "[]", result.hash)

        self.assertEqual(miner.mine(first), result)
        next_result = miner.mine(second)
        self.assertTrue(next_result.hash.startswith("0"))
        self.assertEqual(next_result, mine_block(second, difficulty="0"))

    def test_miner_rejects_impossible_difficulty(self):
        with self.assertRaises(InvalidDifficultyError):
            Miner(difficulty="0A")

    def test_miner_passes_attempt_budget(self):
        miner = Miner(difficulty=UNREACHABLE)
        with self.assertRaises(MiningExceededError) as cm:
            miner.mine(BlockSnapshot.create(0, "0", "[]", GENESIS_PREVIOUS_HASH), max_attempts=20)
        self.assertIn("max_attempts", str(cm.exception))

    def test_miner_respects_ceiling(self):
        miner = Miner(difficulty=UNREACHABLE, max_nonce=50)
        with self.assertRaises(NonceSpaceExhaustedError):
            miner.mine(BlockSnapshot.create(0, "0", "[]", GENESIS_PREVIOUS_HASH))


if __name__ == '__main__':
    unittest.main()
