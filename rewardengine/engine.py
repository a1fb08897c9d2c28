import logging
import threading
import time

from rewardengine.access import Authority
from rewardengine.auction import AuctionClaimOrchestrator, WeightedAuctionConfig
from rewardengine.config import (
    ACTION_CLAIM_BASE_AUCTION,
    ACTION_CLAIM_HOLDING,
    ACTION_CLAIM_WEIGHTED_AUCTION,
    DEFAULT_MAX_SUPPLY,
    ZERO_HASH,
)
from rewardengine.holding import HoldingAccrualLedger, NftHoldingConfig
from rewardengine.ledger import InMemoryLedger, derive_address
from rewardengine.minting import MintGate, MintOptions, SupplyCapGuard

logger = logging.getLogger(__name__)


class RewardEngine:
    """
    Mints rewards from two programs against one ledger and one supply ceiling.

    Every state transition holds the engine lock, so per-asset timestamps and
    total supply are read and written under exclusive access.
    """

    def __init__(self, owner, ledger=None, max_supply=DEFAULT_MAX_SUPPLY, clock=None):
        self.authority = Authority(owner)
        self.ledger = ledger if ledger is not None else InMemoryLedger()
        self.address = derive_address(owner, "reward-engine")
        self.clock = clock or time.time
        self._lock = threading.RLock()

        self.guard = SupplyCapGuard(self.ledger, max_supply)
        self.gate = MintGate(self.ledger, self.authority)
        self.auction = AuctionClaimOrchestrator(self.address, self.guard, self.gate)
        self.holding = HoldingAccrualLedger(self.guard, self.gate)

        # { sender: next expected request nonce }
        self.nonces = {}

    def now(self) -> int:
        return int(self.clock())

    # =========================================================================
    # CLAIM SURFACE
    # =========================================================================

    def claim_base_auction_reward(self, caller):
        with self._lock:
            return self.auction.claim_base(caller)

    def claim_weighted_auction_reward(self, caller, proof, condition_count):
        with self._lock:
            return self.auction.claim(caller, proof, condition_count)

    def claim_holding_rewards(self, caller, asset_ids):
        with self._lock:
            return self.holding.claim(caller, asset_ids, self.now())

    def preview_reward(self, shares, condition_count):
        return self.auction.preview(shares, condition_count)

    def preview_holding_rewards(self, caller, asset_ids):
        with self._lock:
            return self.holding.preview(caller, asset_ids, self.now())

    def verify_condition(self, proof, claimant, condition_count):
        return self.auction.verify_condition(proof, claimant, condition_count)

    def owner_mint(self, caller, account, amount):
        """Administrative mint, capped like every other mint. Returns the minted amount."""
        with self._lock:
            self.authority.require(caller)
            self.gate.ensure_unlocked(admin=True)
            self.guard.ensure_below_cap()
            minted = self.guard.clamp(amount)
            self.gate.admin_mint(caller, account, minted)
            logger.info("Owner mint: %d to %s...", minted, account[:8])
            return minted

    # =========================================================================
    # SIGNED REQUESTS
    # =========================================================================

    def apply_request(self, request):
        """
        Verify and dispatch a signed claim request.
        Raises ValueError for a bad signature or nonce; the nonce only
        advances when the claim itself succeeds.
        """
        with self._lock:
            if not request.verify():
                logger.warning("Rejected request with invalid signature from %s...", request.sender[:8])
                raise ValueError("Invalid signature")

            expected_nonce = self.nonces.get(request.sender, 0)
            if request.nonce != expected_nonce:
                raise ValueError(f"Bad nonce: expected {expected_nonce}, got {request.nonce}")

            params = request.params
            if request.action == ACTION_CLAIM_BASE_AUCTION:
                result = self.claim_base_auction_reward(request.sender)
            elif request.action == ACTION_CLAIM_WEIGHTED_AUCTION:
                result = self.claim_weighted_auction_reward(
                    request.sender,
                    params.get("proof") or [],
                    params.get("condition_count") or 0,
                )
            elif request.action == ACTION_CLAIM_HOLDING:
                result = self.claim_holding_rewards(request.sender, params.get("asset_ids") or [])
            else:
                raise ValueError(f"Unknown claim action: {request.action}")

            self.nonces[request.sender] = expected_nonce + 1
            return result

    # =========================================================================
    # CONFIGURATION SURFACE (authority only)
    # =========================================================================

    def set_auction_source(self, caller, auction_source):
        with self._lock:
            self.authority.require(caller)
            self.auction.config.auction_source = auction_source
            logger.info("Auction source set to %s", getattr(auction_source, "address", auction_source))

    def set_weighted_auction(self, caller, enabled, base_weight_bps, extra_weight_bps, condition_root=ZERO_HASH):
        with self._lock:
            self.authority.require(caller)
            self.auction.config = WeightedAuctionConfig(
                enabled=enabled,
                base_weight_bps=base_weight_bps,
                extra_weight_bps=extra_weight_bps,
                condition_root=condition_root,
                auction_source=self.auction.config.auction_source,
            )
            logger.info("Weighted auction configured: %s", self.auction.config.to_dict())

    def set_holding_rewards(self, caller, enabled, reward_rate_per_day_bps, distribution_start_timestamp, nft_source=None):
        with self._lock:
            self.authority.require(caller)
            self.holding.config = NftHoldingConfig(
                enabled=enabled,
                reward_rate_per_day_bps=reward_rate_per_day_bps,
                distribution_start_timestamp=distribution_start_timestamp,
                nft_source=nft_source if nft_source is not None else self.holding.config.nft_source,
            )
            logger.info("Holding rewards configured: %s", self.holding.config.to_dict())

    def set_mint_options(self, caller, mint_locked, owner_mint_locked):
        with self._lock:
            self.authority.require(caller)
            self.gate.options = MintOptions(mint_locked, owner_mint_locked)
            logger.info("Mint options set: %s", self.gate.options)

    def set_max_supply(self, caller, max_supply):
        with self._lock:
            self.authority.require(caller)
            self.guard.set_max_supply(max_supply)
            logger.info("Max supply set to %d", max_supply)

    def transfer_authority(self, caller, new_owner):
        with self._lock:
            self.authority.transfer(caller, new_owner)

    def to_dict(self):
        """Read-only snapshot of configuration and claim bookkeeping."""
        with self._lock:
            return {
                "address": self.address,
                "owner": self.authority.owner,
                "total_supply": self.ledger.total_supply(),
                "supply": self.guard.to_dict(),
                "mint_options": self.gate.options.to_dict(),
                "weighted_auction": self.auction.config.to_dict(),
                "holding": self.holding.config.to_dict(),
                "last_claimed": dict(self.holding.last_claimed),
                "unsettled_auction_claims": [receipt.to_dict() for receipt in self.auction.unsettled],
            }
