#!/usr/bin/env python3
"""
Reward Engine CLI

Tooling for publishing condition roots and checking rewards.

Usage:
    # Build a condition tree from {"<claimant>": <count>, ...}
    python cli.py tree conditions.json

    # Check a claimant's proof against a published root
    python cli.py verify --root <hex> --claimant <addr> --count 3 --proof <hex> <hex>

    # Preview a weighted auction reward
    python cli.py preview --shares 4 --count 0 --base 5000 --extra 2500

    # Run both reward programs against in-memory collaborators
    python cli.py demo
"""

import argparse
import json
import logging
import sys

from nacl.signing import SigningKey
from nacl.encoding import HexEncoder

from rewardengine import (
    ClaimRequest,
    InMemoryAuctionSource,
    InMemoryNftRegistry,
    MerkleTree,
    RewardEngine,
    RewardEngineError,
    compute_auction_reward,
    derive_address,
    leaf_hash,
    verify_proof,
)
from rewardengine.config import SECONDS_PER_DAY

logger = logging.getLogger(__name__)


def create_wallet():
    sk = SigningKey.generate()
    pk = sk.verify_key.encode(encoder=HexEncoder).decode()
    return sk, pk


def load_conditions(path):
    """Read a {claimant: condition_count} JSON object."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict) or not data:
        raise ValueError("Conditions file must be a non-empty JSON object")

    conditions = {}
    for claimant, count in data.items():
        if not isinstance(count, int) or count < 0:
            raise ValueError(f"Invalid condition count for {claimant}: {count}")
        conditions[claimant] = count
    return conditions


def build_tree_report(conditions):
    tree = MerkleTree.from_conditions(conditions)
    return {
        "root": tree.root.hex(),
        "claims": {
            claimant: {
                "condition_count": count,
                "leaf": leaf_hash(claimant, count).hex(),
                "proof": [node.hex() for node in tree.proof_for(claimant, count)],
            }
            for claimant, count in sorted(conditions.items())
        },
    }


def cmd_tree(args):
    report = build_tree_report(load_conditions(args.conditions))
    print(json.dumps(report, indent=2))
    return 0


def cmd_verify(args):
    valid = verify_proof(args.proof or [], args.root, leaf_hash(args.claimant, args.count))
    print(json.dumps({"valid": valid}))
    return 0 if valid else 1


def cmd_preview(args):
    reward = compute_auction_reward(args.shares, args.count, args.base, args.extra)
    print(json.dumps({"reward": reward}))
    return 0


def run_demo(start_timestamp=1704067200):
    """
    Walk both programs end to end and return the final engine snapshot.
    """
    clock = {"now": start_timestamp}

    _, owner_pk = create_wallet()
    alice_sk, alice_pk = create_wallet()
    _, bob_pk = create_wallet()

    engine = RewardEngine(owner_pk, max_supply=10_000, clock=lambda: clock["now"])
    logger.info("Engine address: %s", engine.address)

    # -------------------------------
    # Auction program
    # -------------------------------

    logger.info("[1] Auction: publishing condition root")
    tree = MerkleTree.from_conditions({alice_pk: 2, bob_pk: 0})

    source = InMemoryAuctionSource(derive_address(owner_pk, "auction"))
    source.authorize_consumer(engine.address)
    engine.set_auction_source(owner_pk, source)
    engine.set_weighted_auction(owner_pk, True, 5000, 5000, tree.root)

    source.record_shares(alice_pk, 400)
    source.record_shares(bob_pk, 100)

    logger.info("[2] Auction: Alice claims with a signed weighted request")
    request = ClaimRequest.weighted_auction(alice_pk, tree.proof_for(alice_pk, 2), 2, nonce=0)
    request.sign(alice_sk)
    receipt = engine.apply_request(request)
    logger.info("Alice minted %d (shares=%d, conditions=%d)", receipt.minted, receipt.shares, receipt.condition_count)

    logger.info("[3] Auction: Bob claims with no proof and falls back to base weight")
    receipt = engine.claim_weighted_auction_reward(bob_pk, [], 3)
    logger.info("Bob minted %d (proof verified: %s)", receipt.minted, receipt.proof_verified)

    # -------------------------------
    # Holding program
    # -------------------------------

    logger.info("[4] Holding: Alice holds assets 1 and 2 for two days")
    registry = InMemoryNftRegistry(derive_address(owner_pk, "nft"))
    registry.set_owner(1, alice_pk)
    registry.set_owner(2, alice_pk)
    registry.set_owner(3, bob_pk)
    engine.set_holding_rewards(owner_pk, True, 100, start_timestamp, registry)

    clock["now"] += 2 * SECONDS_PER_DAY
    minted = engine.claim_holding_rewards(alice_pk, [1, 2])
    logger.info("Alice minted %d from holding", minted)

    logger.info("[5] Holding: Alice tries to include Bob's asset")
    try:
        engine.claim_holding_rewards(alice_pk, [1, 3])
    except RewardEngineError as e:
        logger.info("Rejected as expected: %s", e)

    # -------------------------------
    # Final State
    # -------------------------------

    logger.info("[6] Final State Check")
    logger.info("Alice Balance: %d", engine.ledger.balance_of(alice_pk))
    logger.info("Bob Balance: %d", engine.ledger.balance_of(bob_pk))
    logger.info("Total Supply: %d / %d", engine.ledger.total_supply(), engine.guard.max_supply)
    return engine.to_dict()


def cmd_demo(args):
    snapshot = run_demo()
    print(json.dumps(snapshot, indent=2))
    return 0


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Reward Engine tooling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py tree conditions.json
  python cli.py preview --shares 4 --count 0 --base 5000 --extra 0
  python cli.py demo --debug
        """
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    tree = subparsers.add_parser("tree", help="Build a condition tree and print root and proofs")
    tree.add_argument("conditions", help="JSON file mapping claimant to condition count")
    tree.set_defaults(func=cmd_tree)

    verify = subparsers.add_parser("verify", help="Verify a condition proof")
    verify.add_argument("--root", required=True, help="Condition root (hex)")
    verify.add_argument("--claimant", required=True, help="Claimant address")
    verify.add_argument("--count", type=int, required=True, help="Claimed condition count")
    verify.add_argument("--proof", nargs="*", default=[], help="Sibling hashes (hex), leaf to root")
    verify.set_defaults(func=cmd_verify)

    preview = subparsers.add_parser("preview", help="Preview a weighted auction reward")
    preview.add_argument("--shares", type=int, required=True)
    preview.add_argument("--count", type=int, default=0, help="Condition count (default: 0)")
    preview.add_argument("--base", type=int, required=True, help="Base weight in bps")
    preview.add_argument("--extra", type=int, default=0, help="Extra weight per condition in bps")
    preview.set_defaults(func=cmd_preview)

    demo = subparsers.add_parser("demo", help="Run both programs against in-memory collaborators")
    demo.set_defaults(func=cmd_demo)

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

    try:
        return args.func(args)
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
