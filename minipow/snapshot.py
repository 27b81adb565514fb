import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from .exceptions import InvalidBlockError

SNAPSHOT_FIELDS = ("index", "timestamp", "transactions", "previous_hash")


def transaction_to_dict(tx: Any) -> Any:
    to_dict = getattr(tx, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return tx


def render_transactions(transactions: Any) -> str:
    """
    Render a transaction sequence to its canonical string form.

    A string is taken as already canonical and returned unchanged. Any other
    sequence is dumped as compact JSON with sorted keys, so the same records
    always produce the same string.
    """
    if isinstance(transactions, str):
        return transactions

    if isinstance(transactions, (bytes, bytearray, Mapping)) or not isinstance(transactions, Sequence):
        raise InvalidBlockError(
            f"transactions must be a sequence or a string, got {type(transactions).__name__}"
        )

    try:
        return json.dumps(
            [transaction_to_dict(tx) for tx in transactions],
            sort_keys=True,
            separators=(",", ":"),
        )
    except TypeError as e:
        raise InvalidBlockError(f"transactions are not serializable: {e}") from e


@dataclass(frozen=True)
class BlockSnapshot:
    """Read-only view of the four block fields that go into the mining hash."""

    index: int
    timestamp: Union[int, str]
    transactions: str
    previous_hash: str

    def __post_init__(self):
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise InvalidBlockError(f"index must be an integer, got {self.index!r}")
        if self.index < 0:
            raise InvalidBlockError(f"index must be non-negative, got {self.index}")

        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, (int, str)):
            raise InvalidBlockError(f"timestamp must be an integer or string, got {self.timestamp!r}")

        if not isinstance(self.transactions, str):
            raise InvalidBlockError("transactions must already be rendered; use BlockSnapshot.create()")

        if not isinstance(self.previous_hash, str):
            raise InvalidBlockError(f"previous_hash must be a string, got {self.previous_hash!r}")

    @classmethod
    def create(cls, index, timestamp, transactions, previous_hash) -> "BlockSnapshot":
        return cls(
            index=index,
            timestamp=timestamp,
            transactions=render_transactions(transactions),
            previous_hash=previous_hash,
        )

    @classmethod
    def from_block(cls, block: Any) -> "BlockSnapshot":
        """
        Build a snapshot from anything exposing index, timestamp, transactions
        and previous_hash, either as attributes or as mapping keys.
        """
        if isinstance(block, cls):
            return block

        values = {}
        for field in SNAPSHOT_FIELDS:
            if isinstance(block, Mapping):
                if field not in block:
                    raise InvalidBlockError(f"block is missing required field '{field}'")
                values[field] = block[field]
            else:
                if not hasattr(block, field):
                    raise InvalidBlockError(f"block is missing required field '{field}'")
                values[field] = getattr(block, field)

        return cls.create(**values)

    def to_dict(self):
        return {field: getattr(self, field) for field in SNAPSHOT_FIELDS}
