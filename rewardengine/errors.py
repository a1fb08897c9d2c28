class RewardEngineError(Exception):
    """Base class for every named abort condition raised by the engine."""


class MintLocked(RewardEngineError):
    """Raised when any mint is attempted while minting is globally locked."""


class OwnerMintLocked(RewardEngineError):
    """Raised when an administrative mint is attempted while owner minting is locked."""


class AuctionRewardsNotSet(RewardEngineError):
    """Raised when auction rewards are disabled or no auction source is configured."""


class AuctionContractNotConfigured(RewardEngineError):
    """Raised when the auction source does not accept this engine as a shares consumer."""


class WrongRewardsClaim(RewardEngineError):
    """Raised when the base claim path is used against a proof-gated program."""


class OwnershipError(RewardEngineError):
    """Raised when a holding claim references an asset the caller does not own."""

    def __init__(self, asset_id, caller):
        super().__init__(f"Asset {asset_id} is not owned by {str(caller)[:8]}...")
        self.asset_id = asset_id
        self.caller = caller


class HoldingRewardsNotSet(RewardEngineError):
    """Raised when holding rewards are disabled or no NFT registry is configured."""


class MaxSupplyExceeded(RewardEngineError):
    """Raised when total supply has already reached the supply ceiling."""

    def __init__(self, total_supply, max_supply):
        super().__init__(f"Total supply {total_supply} has reached max supply {max_supply}")
        self.total_supply = total_supply
        self.max_supply = max_supply


class Unauthorized(RewardEngineError):
    """Raised when a caller without authority touches configuration or admin mint."""
