import argparse
import logging

from nacl.encoding import HexEncoder
from nacl.signing import SigningKey

from minipow import (
    MiningExceededError,
    create_genesis_block,
    mine_block,
    mine_block_parallel,
    validate_block,
)
from minipow.config import DEFAULT_DIFFICULTY

logger = logging.getLogger(__name__)


def create_wallet():
    sk = SigningKey.generate()
    pk = sk.verify_key.encode(encoder=HexEncoder).decode()
    return sk, pk


def signed_transfer(sk, sender, receiver, amount):
    """Build a transfer record and sign its payload; the miner treats it as opaque."""
    payload = f"{sender}:{receiver}:{amount}"
    signature = sk.sign(payload.encode(), encoder=HexEncoder).signature.decode()
    return {
        "sender": sender,
        "receiver": receiver,
        "amount": amount,
        "signature": signature,
    }


def mine(block, args):
    if args.workers > 1:
        return mine_block_parallel(
            block,
            difficulty=block.difficulty,
            workers=args.workers,
            timeout_seconds=args.timeout,
        )
    return mine_block(block, difficulty=block.difficulty, timeout_seconds=args.timeout)


def run_demo(args):
    alice_sk, alice_pk = create_wallet()
    _, bob_pk = create_wallet()

    logger.info("Alice Address: %s...", alice_pk[:10])
    logger.info("Bob Address: %s...", bob_pk[:10])

    block = create_genesis_block(difficulty=args.difficulty)
    chain = []

    for height in range(args.blocks):
        if height > 0:
            tx = signed_transfer(alice_sk, alice_pk, bob_pk, height * 10)
            block = chain[-1].next_block(transactions=[tx])

        try:
            result = mine(block, args)
        except MiningExceededError as e:
            logger.error("Block #%s not mined: %s", block.index, e)
            return 1

        block.finalize(result)

        if not validate_block(block):
            logger.error("Block #%s failed verification", block.index)
            return 1

        chain.append(block)
        logger.info("Block #%s added (nonce=%d, hash=%s...)", block.index, block.nonce, block.hash[:16])

    logger.info("Mined %d block(s). Tip: %s", len(chain), chain[-1].hash if chain else None)
    return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Mine a short proof-of-work chain")

    parser.add_argument(
        "--blocks",
        type=int,
        default=3,
        help="Number of blocks to mine, genesis included"
    )

    parser.add_argument(
        "--difficulty",
        type=str,
        default=DEFAULT_DIFFICULTY,
        help="Prefix every block hash must start with"
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Search with this many threads (1 = sequential lowest-nonce search)"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up on a block after this many seconds"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    # Setup logging
    level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )

    return run_demo(args)


if __name__ == "__main__":
    raise SystemExit(main())
