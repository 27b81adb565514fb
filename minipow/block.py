import time
from typing import Any, List, Optional

from .config import GENESIS_PREVIOUS_HASH, GENESIS_TIMESTAMP
from .difficulty import normalize_difficulty
from .snapshot import BlockSnapshot, transaction_to_dict


class Block:
    """
    Minimal block record around the mining core.

    Produces the read-only snapshot the miner hashes, takes the (nonce, hash)
    result back, and links the next block to its hash.
    """

    def __init__(
        self,
        index: int,
        previous_hash: str,
        transactions: Optional[List[Any]] = None,
        timestamp: Optional[int] = None,
        difficulty=None,
    ):
        self.index = index
        self.previous_hash = previous_hash
        self.transactions = transactions if transactions is not None else []

        # Timestamp in ms; defaults to the current time
        self.timestamp = (
            round(time.time() * 1000)
            if timestamp is None
            else timestamp
        )

        self.difficulty: Optional[str] = (
            None if difficulty is None else normalize_difficulty(difficulty)
        )
        self.nonce: Optional[int] = None
        self.hash: Optional[str] = None

    @property
    def is_finalized(self) -> bool:
        return self.hash is not None

    def to_snapshot(self) -> BlockSnapshot:
        return BlockSnapshot.from_block(self)

    def finalize(self, result) -> "Block":
        """Embed a mining result's nonce and hash into this block."""
        nonce, block_hash = result
        self.nonce = nonce
        self.hash = block_hash
        return self

    def next_block(self, transactions=None, timestamp=None, difficulty=None) -> "Block":
        if not self.is_finalized:
            raise ValueError(f"Block #{self.index} has not been mined yet")

        return Block(
            index=self.index + 1,
            previous_hash=self.hash,
            transactions=transactions,
            timestamp=timestamp,
            difficulty=self.difficulty if difficulty is None else difficulty,
        )

    def to_dict(self):
        if isinstance(self.transactions, str):
            transactions = self.transactions
        else:
            transactions = [transaction_to_dict(tx) for tx in self.transactions]

        return {
            "index": self.index,
            "previous_hash": self.previous_hash,
            "timestamp": self.timestamp,
            "transactions": transactions,
            "difficulty": self.difficulty,
            "nonce": self.nonce,
            "hash": self.hash,
        }

    @staticmethod
    def from_dict(data: dict) -> "Block":
        """Create block from dictionary."""
        block = Block(
            index=data["index"],
            previous_hash=data["previous_hash"],
            transactions=data.get("transactions", []),
            timestamp=data["timestamp"],
            difficulty=data.get("difficulty"),
        )
        block.nonce = data.get("nonce")
        block.hash = data.get("hash")
        return block

    def __repr__(self):
        return f"Block(#{self.index}, nonce={self.nonce}, hash={self.hash[:8] if self.hash else 'None'})"


def create_genesis_block(transactions=None, difficulty=None) -> "Block":
    """Create the unmined genesis (first) block."""
    return Block(
        index=0,
        previous_hash=GENESIS_PREVIOUS_HASH,
        transactions=transactions,
        timestamp=GENESIS_TIMESTAMP * 1000,  # Convert to ms
        difficulty=difficulty,
    )
