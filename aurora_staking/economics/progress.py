"""Elapsed-time progress of emission schedules"""
from typing import List, Sequence

from aurora_staking.economics.schedule import Schedule

MIN_PROGRESS_PCT = 10.0


def progress_pct(schedule: Schedule, reference_time_ms: int) -> float:
    """
    Share of the schedule's duration elapsed, in percent.

    Floored at 10 so that unstarted streams still render a visible bar;
    values past the end are not capped.
    """
    start = schedule.start_time()
    end = schedule.end_time()
    progress = (reference_time_ms - start) / (end - start) * 100
    return progress if progress > MIN_PROGRESS_PCT else MIN_PROGRESS_PCT


def streams_progress(schedules: Sequence[Schedule], reference_time_ms: int) -> List[float]:
    return [progress_pct(schedule, reference_time_ms) for schedule in schedules]
