import logging
from typing import List, Optional

from rewardengine.config import ZERO_HASH
from rewardengine.errors import AuctionContractNotConfigured, AuctionRewardsNotSet, WrongRewardsClaim
from rewardengine.merkle import leaf_hash, to_bytes32, verify_proof
from rewardengine.rewards import compute_auction_reward

logger = logging.getLogger(__name__)

PHASE_PULLED = "pulled"
PHASE_SETTLED = "settled"


class WeightedAuctionConfig:
    def __init__(self, enabled=False, base_weight_bps=0, extra_weight_bps=0, condition_root=ZERO_HASH, auction_source=None):
        for name, value in (("base_weight_bps", base_weight_bps), ("extra_weight_bps", extra_weight_bps)):
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer")
        self.enabled = bool(enabled)
        self.base_weight_bps = base_weight_bps
        self.extra_weight_bps = extra_weight_bps
        self.condition_root = to_bytes32(condition_root)
        self.auction_source = auction_source

    @property
    def proofs_required(self) -> bool:
        return self.condition_root != ZERO_HASH

    def to_dict(self):
        return {
            "enabled": self.enabled,
            "base_weight_bps": self.base_weight_bps,
            "extra_weight_bps": self.extra_weight_bps,
            "condition_root": self.condition_root.hex(),
            "auction_source": getattr(self.auction_source, "address", None),
        }

    @staticmethod
    def from_dict(data: dict, auction_source=None) -> "WeightedAuctionConfig":
        return WeightedAuctionConfig(
            enabled=data.get("enabled", False),
            base_weight_bps=data.get("base_weight_bps", 0),
            extra_weight_bps=data.get("extra_weight_bps", 0),
            condition_root=data.get("condition_root") or ZERO_HASH,
            auction_source=auction_source,
        )


class InMemoryAuctionSource:
    """
    Auction shares source: accumulates shares per account and hands them
    out exactly once to an authorized consumer.
    """

    def __init__(self, address: str):
        self.address = address
        self.shares = {}
        self.consumers = set()

    def authorize_consumer(self, consumer: str):
        self.consumers.add(consumer)

    def revoke_consumer(self, consumer: str):
        self.consumers.discard(consumer)

    def is_authorized_consumer(self, consumer: str) -> bool:
        return consumer in self.consumers

    def record_shares(self, account: str, amount: int):
        if not isinstance(amount, int) or amount < 0:
            raise ValueError("Shares must be a non-negative integer")
        self.shares[account] = self.shares.get(account, 0) + amount

    def shares_of(self, account: str) -> int:
        return self.shares.get(account, 0)

    def pull_and_clear_shares(self, account: str) -> int:
        """Destructive read: returns the account's shares and zeroes them."""
        return self.shares.pop(account, 0)


class AuctionClaimReceipt:
    """
    Two-phase record of one auction claim.
    'pulled' once shares are consumed at the source, 'settled' once minted.
    """

    def __init__(self, claimant: str, claimed_condition_count: int):
        self.claimant = claimant
        self.claimed_condition_count = claimed_condition_count
        self.phase = None
        self.shares = 0
        self.condition_count = 0
        self.proof_verified = False
        self.reward = 0
        self.minted = 0

    @property
    def settled(self) -> bool:
        return self.phase == PHASE_SETTLED

    def to_dict(self):
        return {
            "claimant": self.claimant,
            "phase": self.phase,
            "shares": self.shares,
            "claimed_condition_count": self.claimed_condition_count,
            "condition_count": self.condition_count,
            "proof_verified": self.proof_verified,
            "reward": self.reward,
            "minted": self.minted,
        }

    def __repr__(self):
        return f"AuctionClaim({self.claimant[:8]}, {self.phase}, shares={self.shares}, minted={self.minted})"


class AuctionClaimOrchestrator:
    """
    Runs one auction claim end to end: pull shares once, verify the
    condition proof, compute the weighted reward, clamp and mint.
    """

    def __init__(self, address: str, guard, gate, config: Optional[WeightedAuctionConfig] = None):
        self.address = address
        self.guard = guard
        self.gate = gate
        self.config = config or WeightedAuctionConfig()
        # Claims whose shares were consumed but never minted
        self.unsettled: List[AuctionClaimReceipt] = []

    def verify_condition(self, proof, claimant: str, condition_count: int) -> bool:
        return verify_proof(proof, self.config.condition_root, leaf_hash(claimant, condition_count))

    def preview(self, shares: int, condition_count: int) -> int:
        return compute_auction_reward(
            shares,
            condition_count,
            self.config.base_weight_bps,
            self.config.extra_weight_bps,
        )

    def _require_source(self):
        config = self.config
        if not config.enabled or config.auction_source is None:
            logger.warning("Auction claim rejected: rewards not set")
            raise AuctionRewardsNotSet("Auction rewards are disabled or have no source")

        source = config.auction_source
        if not source.is_authorized_consumer(self.address):
            logger.warning("Auction claim rejected: engine %s... not a shares consumer", self.address[:8])
            raise AuctionContractNotConfigured("Auction source does not recognize this engine")
        return source

    def claim_base(self, caller: str) -> AuctionClaimReceipt:
        """Base-weight claim with condition count 0; refused when proofs are configured."""
        self._require_source()
        if self.config.proofs_required:
            logger.warning("Base claim rejected for %s...: condition root is set", caller[:8])
            raise WrongRewardsClaim("Program requires a condition proof")
        return self.claim(caller, [], 0)

    def claim(self, caller: str, proof, condition_count: int) -> AuctionClaimReceipt:
        if not isinstance(condition_count, int) or isinstance(condition_count, bool) or condition_count < 0:
            raise ValueError("Condition count must be a non-negative integer")

        source = self._require_source()
        self.gate.ensure_unlocked()
        self.guard.ensure_below_cap()

        receipt = AuctionClaimReceipt(caller, condition_count)

        # Irreversible: shares are gone from the source from here on
        receipt.shares = source.pull_and_clear_shares(caller)
        receipt.phase = PHASE_PULLED

        try:
            receipt.proof_verified = self.verify_condition(proof, caller, condition_count)
            # A missing or bad proof degrades to the base weight
            receipt.condition_count = condition_count if receipt.proof_verified else 0

            receipt.reward = self.preview(receipt.shares, receipt.condition_count)
            receipt.minted = self.guard.clamp(receipt.reward)
            self.gate.mint(caller, receipt.minted)
        except Exception:
            self.unsettled.append(receipt)
            logger.error(
                "Auction claim for %s... aborted after consuming %d shares",
                caller[:8],
                receipt.shares,
            )
            raise

        receipt.phase = PHASE_SETTLED
        logger.info(
            "Auction claim %s...: shares=%d conditions=%d reward=%d minted=%d",
            caller[:8],
            receipt.shares,
            receipt.condition_count,
            receipt.reward,
            receipt.minted,
        )
        return receipt
