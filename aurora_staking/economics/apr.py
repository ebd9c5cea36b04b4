"""APR calculation from reward schedules and USD prices"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from aurora_staking.economics.rewards import daily_rates
from aurora_staking.economics.schedule import Schedule, to_token_units
from aurora_staking.errors import ConfigurationError, MissingPrice

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class AprBreakdown:
    """
    APRs in percent.

    ``base`` is the staked token's own stream (index 0, "aurora");
    ``streams`` holds the remaining reward streams in schedule order.
    """
    total: float
    streams: Tuple[float, ...]
    base: float


def calculate_aprs(
    schedules: Sequence[Schedule],
    decimals: Sequence[int],
    unit_prices: Sequence[Optional[float]],
    total_staked: int,
    reference_time_ms: int,
) -> AprBreakdown:
    """
    Annualize each stream's one-day reward in USD against the staked value.

    Token amounts stay exact (integer / Decimal) until the conversion to
    float right before the USD multiplication.

    Args:
        schedules: One schedule per stream, base token first
        decimals: Token decimals aligned with ``schedules``
        unit_prices: USD unit prices aligned with ``schedules``
        total_staked: Raw amount of base token staked
        reference_time_ms: Reference time in milliseconds

    Returns:
        AprBreakdown with total, per-stream (excluding base) and base APR

    Raises:
        MissingPrice: If the base price, or the price of a stream with a
            non-zero reward rate, is absent
        ConfigurationError: If ``decimals`` is not aligned with ``schedules``
    """
    if not schedules:
        raise ValueError('At least the base token schedule is required')
    if len(decimals) != len(schedules):
        raise ConfigurationError(
            f'Stream decimals misaligned: {len(decimals)} decimals for {len(schedules)} schedules'
        )
    if len(unit_prices) != len(schedules):
        raise MissingPrice(
            min(len(unit_prices), len(schedules)),
            f'Stream prices misaligned: {len(unit_prices)} prices for {len(schedules)} schedules',
        )

    base_price = unit_prices[0]
    if base_price is None:
        raise MissingPrice(0)

    one_day_rewards = daily_rates(schedules, reference_time_ms)
    staked_value = float(to_token_units(total_staked, decimals[0])) * base_price

    reward_values: List[float] = []
    for i, reward in enumerate(one_day_rewards):
        price = unit_prices[i]
        if price is None:
            if reward:
                raise MissingPrice(i)
            reward_values.append(0.0)
            continue
        reward_values.append(float(to_token_units(reward, decimals[i])) * DAYS_PER_YEAR * price)

    cumulated_reward = 0.0
    for value in reward_values:
        cumulated_reward += value

    if staked_value > 0:
        total = (cumulated_reward * 100) / staked_value
        streams = [(value * 100) / staked_value for value in reward_values]
    else:
        total = 0.0
        streams = [0.0 for _ in reward_values]

    logger.debug(f"APRs: total={total}, base={streams[0]}, streams={streams[1:]}")
    return AprBreakdown(total=total, streams=tuple(streams[1:]), base=streams[0])
