import logging
from collections.abc import Mapping

from .config import DEFAULT_DIFFICULTY, DIGEST_LENGTH
from .difficulty import normalize_difficulty
from .hasher import calculate_hash
from .snapshot import BlockSnapshot

logger = logging.getLogger(__name__)


def verify_result(block, nonce, digest, difficulty=DEFAULT_DIFFICULTY) -> bool:
    """
    Check a claimed (nonce, digest) pair without searching.

    Recomputes the hash for the block and nonce, then checks that it equals
    the claimed digest and starts with the difficulty prefix. Malformed claims
    are rejected with a warning; a malformed block or difficulty still raises.
    """
    snapshot = BlockSnapshot.from_block(block)
    required_prefix = normalize_difficulty(difficulty)

    if isinstance(nonce, bool) or not isinstance(nonce, int) or nonce < 0:
        logger.warning("Block %s rejected: Invalid nonce %r", snapshot.index, nonce)
        return False

    if not isinstance(digest, str) or len(digest) != DIGEST_LENGTH:
        logger.warning("Block %s rejected: Malformed hash %r", snapshot.index, digest)
        return False

    computed_hash = calculate_hash(snapshot, nonce)
    if digest != computed_hash:
        logger.warning("Block %s rejected: Invalid hash %s", snapshot.index, digest)
        return False

    if not computed_hash.startswith(required_prefix):
        logger.warning("Block %s rejected: Hash does not meet difficulty %r", snapshot.index, required_prefix)
        return False

    return True


def validate_block(block, difficulty=None) -> bool:
    """
    Verify a finalized block that carries its own nonce and hash.

    Works on objects and on dicts like those produced by Block.to_dict().
    When no difficulty is given, the block's own difficulty field is used,
    falling back to the default prefix.
    """
    if isinstance(block, Mapping):
        fields = block
    else:
        fields = {name: getattr(block, name, None) for name in ("nonce", "hash", "difficulty")}

    if difficulty is None:
        difficulty = fields.get("difficulty")
        if difficulty is None:
            difficulty = DEFAULT_DIFFICULTY

    return verify_result(block, fields.get("nonce"), fields.get("hash"), difficulty)
