# Engine
from .engine import RewardEngine
from .request import ClaimRequest

# Programs
from .auction import AuctionClaimOrchestrator, AuctionClaimReceipt, InMemoryAuctionSource, WeightedAuctionConfig
from .holding import HoldingAccrualLedger, InMemoryNftRegistry, NftHoldingConfig

# Minting
from .ledger import InMemoryLedger, derive_address
from .minting import MintGate, MintOptions, SupplyCapGuard
from .access import Authority

# Proofs and math
from .merkle import MerkleTree, hash_pair, leaf_hash, to_bytes32, verify_proof
from .rewards import compute_auction_reward, compute_holding_accrual

from .errors import (
    AuctionContractNotConfigured,
    AuctionRewardsNotSet,
    HoldingRewardsNotSet,
    MaxSupplyExceeded,
    MintLocked,
    OwnerMintLocked,
    OwnershipError,
    RewardEngineError,
    Unauthorized,
    WrongRewardsClaim,
)

__all__ = [
    # Engine
    "RewardEngine",
    "ClaimRequest",
    # Programs
    "AuctionClaimOrchestrator",
    "AuctionClaimReceipt",
    "InMemoryAuctionSource",
    "WeightedAuctionConfig",
    "HoldingAccrualLedger",
    "InMemoryNftRegistry",
    "NftHoldingConfig",
    # Minting
    "InMemoryLedger",
    "derive_address",
    "MintGate",
    "MintOptions",
    "SupplyCapGuard",
    "Authority",
    # Proofs and math
    "MerkleTree",
    "hash_pair",
    "leaf_hash",
    "to_bytes32",
    "verify_proof",
    "compute_auction_reward",
    "compute_holding_accrual",
    # Errors
    "RewardEngineError",
    "MintLocked",
    "OwnerMintLocked",
    "AuctionRewardsNotSet",
    "AuctionContractNotConfigured",
    "WrongRewardsClaim",
    "OwnershipError",
    "HoldingRewardsNotSet",
    "MaxSupplyExceeded",
    "Unauthorized",
]
