"""
config.py - Reward engine constants.
Fixed arithmetic and hashing settings shared by both reward programs.
"""

# Basis points denominator (weights and rates are integers out of 10000)
BPS_DENOMINATOR = 10_000

# Holding rewards accrue per day of ownership
SECONDS_PER_DAY = 86_400

# Merkle nodes are 32-byte SHA-256 digests
HASH_SIZE = 32

# A zero condition root disables proofs (flat-weight auction rewards)
ZERO_HASH = b"\x00" * HASH_SIZE

# Ledger invariant: balances and total supply fit in an unsigned 256-bit word
MAX_UINT256 = 2 ** 256 - 1

# Supply ceiling used when the engine is created without one
DEFAULT_MAX_SUPPLY = 1_000_000_000

# Signed claim request actions
ACTION_CLAIM_BASE_AUCTION = "claim_base_auction"
ACTION_CLAIM_WEIGHTED_AUCTION = "claim_weighted_auction"
ACTION_CLAIM_HOLDING = "claim_holding"
