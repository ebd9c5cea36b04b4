"""
Reward emission schedules.

A schedule is the piecewise-linear function of remaining reward versus
time for one stream, stored on-chain as two parallel arrays: schedule
times (unix seconds) and the reward still to be emitted at each time.
"""
from dataclasses import dataclass
from decimal import Decimal, localcontext
from enum import Enum
from typing import Sequence, Tuple, Union

from aurora_staking.errors import InvalidSchedule

ONE_DAY_SECONDS = 86400
ONE_DAY_MS = ONE_DAY_SECONDS * 1000


class ScheduleBoundary(Enum):
    """Result of an interval lookup outside the emission window"""
    NOT_STARTED = 'not_started'
    ENDED = 'ended'


@dataclass(frozen=True)
class Schedule:
    """
    Validated emission schedule for a single stream.

    Attributes:
        times: Strictly increasing schedule times in seconds (length >= 2)
        remaining: Non-increasing rewards left at each time, ending at 0
    """
    times: Tuple[int, ...]
    remaining: Tuple[int, ...]

    def __post_init__(self):
        times = tuple(self.times)
        remaining = tuple(self.remaining)
        for name, values in (('times', times), ('rewards', remaining)):
            for i, value in enumerate(values):
                if isinstance(value, bool) or not isinstance(value, int):
                    raise InvalidSchedule(
                        f'Invalid schedule: {name}[{i}] is {type(value).__name__} {value!r}, '
                        f'expected int'
                    )
        object.__setattr__(self, 'times', times)
        object.__setattr__(self, 'remaining', remaining)

        if len(times) < 2 or len(remaining) < 2:
            raise InvalidSchedule(
                f'Invalid schedule: need at least 2 entries, got {len(times)} times '
                f'and {len(remaining)} rewards'
            )
        if len(times) != len(remaining):
            raise InvalidSchedule(
                f'Invalid schedule: {len(times)} times but {len(remaining)} rewards'
            )
        for i in range(1, len(times)):
            if times[i] <= times[i - 1]:
                raise InvalidSchedule(
                    f'Invalid schedule: times not strictly increasing at index {i} '
                    f'({times[i - 1]} -> {times[i]})'
                )
            if remaining[i] > remaining[i - 1]:
                raise InvalidSchedule(
                    f'Invalid schedule: rewards increase at index {i} '
                    f'({remaining[i - 1]} -> {remaining[i]})'
                )
        if remaining[-1] != 0:
            raise InvalidSchedule(
                f'Invalid schedule: last reward must be 0, got {remaining[-1]}'
            )

    @classmethod
    def from_raw(cls, raw: Sequence[Sequence[int]]) -> 'Schedule':
        """
        Build a schedule from a ``getStreamSchedule`` return value.

        Args:
            raw: Pair of (schedule_times, schedule_rewards)

        Returns:
            Validated Schedule

        Raises:
            InvalidSchedule: If the value is not a pair of sequences
        """
        if not isinstance(raw, (list, tuple)) or len(raw) != 2:
            raise InvalidSchedule(f'Invalid schedule found: expected 2 arrays, got {raw!r}')
        times, rewards = raw
        if not isinstance(times, (list, tuple)) or not isinstance(rewards, (list, tuple)):
            raise InvalidSchedule('Invalid schedule found: arrays expected')
        return cls(times=tuple(times), remaining=tuple(rewards))

    def start_time(self) -> int:
        """Emission start in milliseconds"""
        return self.times[0] * 1000

    def end_time(self) -> int:
        """Emission end in milliseconds"""
        return self.times[-1] * 1000

    @property
    def total_allocation(self) -> int:
        return self.remaining[0]

    def interval_at(self, reference_time_seconds: int) -> Union[int, ScheduleBoundary]:
        """
        Find the active interval for a reference time.

        Returns:
            Index ``i`` with ``times[i] <= t < times[i+1]``, or a
            ScheduleBoundary when ``t`` is outside ``[times[0], times[-1])``
        """
        if reference_time_seconds < self.times[0]:
            return ScheduleBoundary.NOT_STARTED
        if reference_time_seconds >= self.times[-1]:
            return ScheduleBoundary.ENDED
        for i in range(len(self.times) - 1):
            if reference_time_seconds < self.times[i + 1]:
                return i
        return ScheduleBoundary.ENDED


def to_token_units(amount: int, decimals: int) -> Decimal:
    """
    Convert a raw integer amount into token units without rounding.

    The context precision is widened to the amount's digit count so that
    the shift by ``10**decimals`` stays exact.
    """
    value = Decimal(int(amount))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits))
        return value.scaleb(-decimals)
