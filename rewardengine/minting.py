import logging

from rewardengine.errors import MaxSupplyExceeded, MintLocked, OwnerMintLocked

logger = logging.getLogger(__name__)


class MintOptions:
    """Two independent locks: one for every mint, one for administrative mints only."""

    def __init__(self, mint_locked=False, owner_mint_locked=False):
        self.mint_locked = bool(mint_locked)
        self.owner_mint_locked = bool(owner_mint_locked)

    def to_dict(self):
        return {
            "mint_locked": self.mint_locked,
            "owner_mint_locked": self.owner_mint_locked,
        }

    @staticmethod
    def from_dict(data: dict) -> "MintOptions":
        return MintOptions(
            mint_locked=data.get("mint_locked", False),
            owner_mint_locked=data.get("owner_mint_locked", False),
        )

    def __repr__(self):
        return f"MintOptions(locked={self.mint_locked}, owner_locked={self.owner_mint_locked})"


class SupplyCapGuard:
    """
    Keeps total minted units at or below max_supply.

    Reward paths call ensure_below_cap() on entry and clamp() right before
    the mint, so two programs in one call can never jointly overshoot.
    """

    def __init__(self, ledger, max_supply: int):
        self.ledger = ledger
        self.max_supply = self._validate(max_supply)

    @staticmethod
    def _validate(max_supply):
        if not isinstance(max_supply, int) or isinstance(max_supply, bool) or max_supply < 0:
            raise ValueError("Max supply must be a non-negative integer")
        return max_supply

    def set_max_supply(self, max_supply: int):
        self.max_supply = self._validate(max_supply)

    def remaining(self) -> int:
        return max(0, self.max_supply - self.ledger.total_supply())

    def ensure_below_cap(self):
        total = self.ledger.total_supply()
        if total >= self.max_supply:
            logger.warning("Claim rejected: supply %d at cap %d", total, self.max_supply)
            raise MaxSupplyExceeded(total, self.max_supply)

    def clamp(self, requested: int) -> int:
        remaining = self.remaining()
        if requested > remaining:
            logger.info("Clamping mint %d to remaining headroom %d", requested, remaining)
            return remaining
        return requested

    def to_dict(self):
        return {"max_supply": self.max_supply}


class MintGate:
    """Policy filter in front of the ledger mint primitive; keeps no accounting."""

    def __init__(self, ledger, authority, options=None):
        self.ledger = ledger
        self.authority = authority
        self.options = options or MintOptions()

    def ensure_unlocked(self, admin=False):
        """Raise if the mint is locked; admin mints also honour the owner lock."""
        if self.options.mint_locked:
            logger.warning("Mint rejected: minting is locked")
            raise MintLocked("Minting is locked")
        if admin and self.options.owner_mint_locked:
            logger.warning("Admin mint rejected: owner minting is locked")
            raise OwnerMintLocked("Owner minting is locked")

    def mint(self, account: str, amount: int):
        """Reward mint: blocked only by the global lock."""
        self.ensure_unlocked()
        self.ledger.mint(account, amount)

    def admin_mint(self, caller: str, account: str, amount: int):
        """Administrative mint: authority only, blocked by both locks."""
        self.authority.require(caller)
        self.ensure_unlocked(admin=True)
        self.ledger.mint(account, amount)
