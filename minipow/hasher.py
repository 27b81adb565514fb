import hashlib

from .exceptions import HashingUnavailableError
from .snapshot import BlockSnapshot

if "sha256" not in hashlib.algorithms_available:
    raise HashingUnavailableError("hashlib does not provide sha256")


def serialize(snapshot: BlockSnapshot, nonce: int) -> str:
    """
    Build the hash input for a snapshot and nonce.

    Fields are concatenated with no separators, in the order
    nonce, index, timestamp, transactions, previous_hash. Numeric fields of
    variable length make the boundaries ambiguous (index=1, timestamp=23 and
    index=12, timestamp=3 give the same string). Existing chains depend on this
    exact layout, so it is kept as is.
    """
    if isinstance(nonce, bool) or not isinstance(nonce, int):
        raise ValueError(f"Nonce must be an integer, got {nonce!r}")
    if nonce < 0:
        raise ValueError(f"Nonce must be non-negative, got {nonce}")

    return (
        f"{nonce}"
        f"{snapshot.index}"
        f"{snapshot.timestamp}"
        f"{snapshot.transactions}"
        f"{snapshot.previous_hash}"
    )


def calculate_hash(snapshot: BlockSnapshot, nonce: int) -> str:
    """Calculates the SHA256 hex digest of a snapshot with the given nonce."""
    return hashlib.sha256(serialize(snapshot, nonce).encode("utf-8")).hexdigest()
