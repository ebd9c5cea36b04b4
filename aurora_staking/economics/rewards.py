"""Daily reward rate derived from a stream's emission schedule"""
import logging
from typing import List, Sequence

from aurora_staking.economics.schedule import (
    ONE_DAY_MS,
    ONE_DAY_SECONDS,
    Schedule,
    ScheduleBoundary,
)
from aurora_staking.errors import DivisionByZero

logger = logging.getLogger(__name__)


def daily_rate(schedule: Schedule, reference_time_ms: int) -> int:
    """
    One-day reward projection for a schedule at a reference time.

    The rate is 0 before the schedule starts and during its final day.
    Otherwise it is the active interval's linear emission scaled to one
    day: ``(remaining[i] - remaining[i+1]) * 86400 // (times[i+1] - times[i])``.

    Args:
        schedule: Validated emission schedule
        reference_time_ms: Reference time in milliseconds

    Returns:
        Raw token amount emitted per day (integer)

    Raises:
        DivisionByZero: If the active interval has zero duration
    """
    if reference_time_ms <= schedule.start_time():
        return 0  # didn't start
    if reference_time_ms >= schedule.end_time() - ONE_DAY_MS:
        return 0  # ended

    index = schedule.interval_at(reference_time_ms // 1000)
    if isinstance(index, ScheduleBoundary):
        return 0

    duration = schedule.times[index + 1] - schedule.times[index]
    if duration == 0:
        raise DivisionByZero(
            f'Zero-length schedule interval at index {index} ({schedule.times[index]})'
        )

    emitted = schedule.remaining[index] - schedule.remaining[index + 1]
    return emitted * ONE_DAY_SECONDS // duration


def daily_rates(schedules: Sequence[Schedule], reference_time_ms: int) -> List[int]:
    """Daily reward rate for every schedule, in order"""
    rates = [daily_rate(schedule, reference_time_ms) for schedule in schedules]
    logger.debug(f"Daily rewards at {reference_time_ms}: {rates}")
    return rates
