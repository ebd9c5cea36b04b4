"""Vote token circulating supply and staked share of the base token supply"""
import logging
from typing import Optional

from aurora_staking.economics.schedule import Schedule, to_token_units

logger = logging.getLogger(__name__)


def circulating_supply(vote_schedule: Schedule, reference_time_ms: int) -> int:
    """
    Vote tokens emitted so far, interpolated linearly over the whole schedule.

    ``total * (t - start) // (end - start)`` where ``total`` is the
    schedule's first remaining-reward entry.

    Raises:
        ValueError: If the reference time is outside ``[start, end]``;
            callers clamp into the schedule's domain first
    """
    start = vote_schedule.start_time()
    end = vote_schedule.end_time()
    if not start <= reference_time_ms <= end:
        raise ValueError(
            f'Reference time {reference_time_ms} outside vote schedule [{start}, {end}]'
        )
    return vote_schedule.total_allocation * (reference_time_ms - start) // (end - start)


def staked_pct_of_supply(
    total_staked: int,
    base_price_usd: Optional[float],
    base_market_cap_usd: Optional[float],
    decimals: int = 18,
) -> Optional[float]:
    """
    Percentage of the base token's circulating supply that is staked.

    Circulating supply is derived from market data as ``market_cap / price``.

    Returns:
        Percentage as float, or None if price or market cap is unavailable
    """
    if not base_price_usd or not base_market_cap_usd:
        logger.warning(
            f"Staked percentage unavailable (price={base_price_usd}, market_cap={base_market_cap_usd})"
        )
        return None

    supply = base_market_cap_usd / base_price_usd
    staked = float(to_token_units(total_staked, decimals))
    return (staked * 100) / supply


def vote_power_pct(vote_total_balance: int, vote_supply: int, decimals: int = 18) -> Optional[float]:
    """Account's share of the circulating vote supply, None while supply is zero"""
    if vote_supply == 0:
        return None
    balance = float(to_token_units(vote_total_balance, decimals))
    supply = float(to_token_units(vote_supply, decimals))
    return (balance * 100) / supply
