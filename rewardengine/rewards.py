from rewardengine.config import BPS_DENOMINATOR, SECONDS_PER_DAY


def _require_non_negative(name, value):
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer")


def compute_auction_reward(shares: int, condition_count: int, base_weight_bps: int, extra_weight_bps: int) -> int:
    """
    Convert auction shares into a mint amount.

    reward = floor(shares * base / 10000) * (1 + floor(count * extra / 10000))

    Both factors are floored independently, so the result is non-decreasing
    in shares and in condition count, and is 0 whenever shares is 0.
    """
    _require_non_negative("shares", shares)
    _require_non_negative("condition_count", condition_count)
    _require_non_negative("base_weight_bps", base_weight_bps)
    _require_non_negative("extra_weight_bps", extra_weight_bps)

    base_reward = shares * base_weight_bps // BPS_DENOMINATOR
    multiplier = 1 + condition_count * extra_weight_bps // BPS_DENOMINATOR
    return base_reward * multiplier


def compute_holding_accrual(elapsed_seconds: int, reward_rate_per_day_bps: int) -> int:
    """Units accrued by one asset held for elapsed_seconds (never negative)."""
    _require_non_negative("reward_rate_per_day_bps", reward_rate_per_day_bps)
    if elapsed_seconds <= 0:
        return 0
    return elapsed_seconds * reward_rate_per_day_bps // SECONDS_PER_DAY
