import logging
from typing import Dict, Optional, Sequence

from rewardengine.errors import HoldingRewardsNotSet, OwnershipError
from rewardengine.rewards import compute_holding_accrual

logger = logging.getLogger(__name__)


class NftHoldingConfig:
    def __init__(self, enabled=False, reward_rate_per_day_bps=0, distribution_start_timestamp=0, nft_source=None):
        for name, value in (
            ("reward_rate_per_day_bps", reward_rate_per_day_bps),
            ("distribution_start_timestamp", distribution_start_timestamp),
        ):
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer")
        self.enabled = bool(enabled)
        self.reward_rate_per_day_bps = reward_rate_per_day_bps
        self.distribution_start_timestamp = distribution_start_timestamp
        self.nft_source = nft_source

    def to_dict(self):
        return {
            "enabled": self.enabled,
            "reward_rate_per_day_bps": self.reward_rate_per_day_bps,
            "distribution_start_timestamp": self.distribution_start_timestamp,
            "nft_source": getattr(self.nft_source, "address", None),
        }

    @staticmethod
    def from_dict(data: dict, nft_source=None) -> "NftHoldingConfig":
        return NftHoldingConfig(
            enabled=data.get("enabled", False),
            reward_rate_per_day_bps=data.get("reward_rate_per_day_bps", 0),
            distribution_start_timestamp=data.get("distribution_start_timestamp", 0),
            nft_source=nft_source,
        )


class InMemoryNftRegistry:
    """NFT ownership registry: asset id -> owner address."""

    def __init__(self, address: str):
        self.address = address
        self.owners: Dict[int, str] = {}

    def set_owner(self, asset_id: int, owner: str):
        self.owners[asset_id] = owner

    def owner_of(self, asset_id: int) -> Optional[str]:
        return self.owners.get(asset_id)


class HoldingAccrualLedger:
    """
    Per-asset last-claimed timestamps and batch time-accrual claims.

    Accruals for a batch are staged first and timestamps are committed only
    after the single batch mint succeeds, so a failing id leaves every
    timestamp in the batch untouched.
    """

    def __init__(self, guard, gate, config: Optional[NftHoldingConfig] = None):
        self.guard = guard
        self.gate = gate
        self.config = config or NftHoldingConfig()
        # { asset_id: unix seconds of last successful claim }
        self.last_claimed: Dict[int, int] = {}

    def last_claimed_at(self, asset_id: int) -> int:
        return self.last_claimed.get(asset_id, 0)

    def _require_registry(self):
        if not self.config.enabled or self.config.nft_source is None:
            logger.warning("Holding claim rejected: rewards not set")
            raise HoldingRewardsNotSet("Holding rewards are disabled or have no NFT registry")
        return self.config.nft_source

    def _stage(self, caller: str, asset_ids: Sequence[int], now: int):
        """
        Validate ownership and compute accruals without touching state.
        Returns (total, {asset_id: new_timestamp}).
        """
        registry = self._require_registry()
        start = self.config.distribution_start_timestamp
        rate = self.config.reward_rate_per_day_bps

        staged: Dict[int, int] = {}
        total = 0
        for asset_id in asset_ids:
            if registry.owner_of(asset_id) != caller:
                logger.warning("Holding claim rejected: %s... does not own asset %s", caller[:8], asset_id)
                raise OwnershipError(asset_id, caller)

            last = staged.get(asset_id, self.last_claimed_at(asset_id))
            elapsed = now - max(start, last)
            accrued = compute_holding_accrual(elapsed, rate)
            logger.debug("Asset %s: elapsed=%d accrued=%d", asset_id, max(elapsed, 0), accrued)

            total += accrued
            # Advance even when nothing accrued so partial days can't be resubmitted
            staged[asset_id] = max(now, last)

        return total, staged

    def preview(self, caller: str, asset_ids: Sequence[int], now: int) -> int:
        total, _ = self._stage(caller, asset_ids, now)
        return total

    def claim(self, caller: str, asset_ids: Sequence[int], now: int) -> int:
        """Claim holding rewards for a batch of owned assets. Returns the minted amount."""
        if not isinstance(now, int) or now < 0:
            raise ValueError("Claim time must be a non-negative integer")

        self._require_registry()
        self.gate.ensure_unlocked()
        self.guard.ensure_below_cap()

        total, staged = self._stage(caller, list(asset_ids), now)

        amount = self.guard.clamp(total)
        self.gate.mint(caller, amount)

        self.last_claimed.update(staged)
        logger.info(
            "Holding claim %s...: assets=%d accrued=%d minted=%d",
            caller[:8],
            len(staged),
            total,
            amount,
        )
        return amount
