"""
Hourly coverage derived from effective (original + pending) values.
Overnight legs count towards the late hours of their own date and the early
hours of the following date. Split shifts contribute each leg on its own.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Callable, Iterable, Optional

from .timeutils import leg_hours, total_hours
from .types import CellKey, ScheduleValue, DayCoverage


EffectiveValue = Callable[[CellKey], ScheduleValue]


def presence_by_hour(
    effective_value: EffectiveValue,
    roster: Iterable[str],
    day: date,
) -> dict[int, set[str]]:
    """hour -> employees present during that clock hour of `day`."""
    previous = day - timedelta(days=1)
    present: dict[int, set[str]] = defaultdict(set)

    for emp_id in roster:
        for start, end in effective_value(CellKey(emp_id, day)).legs():
            own_hours, _ = leg_hours(start, end)
            for hour in own_hours:
                present[hour].add(emp_id)
        # spillover from the previous date's overnight legs
        for start, end in effective_value(CellKey(emp_id, previous)).legs():
            _, spill_hours = leg_hours(start, end)
            for hour in spill_hours:
                present[hour].add(emp_id)

    return dict(present)


def employees_present(
    effective_value: EffectiveValue,
    roster: Iterable[str],
    day: date,
    hour: int,
) -> set[str]:
    return presence_by_hour(effective_value, roster, day).get(hour, set())


def hourly_coverage(
    effective_value: EffectiveValue,
    roster: Iterable[str],
    day: date,
) -> dict[int, int]:
    """hour -> number of employees present; hours nobody covers are omitted."""
    return {
        hour: len(emp_ids)
        for hour, emp_ids in sorted(presence_by_hour(effective_value, roster, day).items())
    }


def active_hours(
    effective_value: EffectiveValue,
    roster: Iterable[str],
    dates: Iterable[date],
) -> list[int]:
    """Union of clock hours touched by any shift on the given dates."""
    roster = list(roster)
    hours: set[int] = set()
    for day in dates:
        for emp_id in roster:
            for start, end in effective_value(CellKey(emp_id, day)).legs():
                own_hours, spill_hours = leg_hours(start, end)
                hours.update(own_hours)
                hours.update(spill_hours)
    return sorted(hours)


def coverage_grid(
    effective_value: EffectiveValue,
    roster: Iterable[str],
    dates: Iterable[date],
    hours: Optional[Iterable[int]] = None,
    holidays: Optional[dict[date, str]] = None,
) -> list[DayCoverage]:
    """
    Per-date coverage restricted to `hours` (default: the active hours).
    The filter only selects which counts are reported, never how they are computed.
    """
    roster = list(roster)
    dates = list(dates)
    holidays = holidays or {}
    shown = sorted(set(hours)) if hours is not None else active_hours(effective_value, roster, dates)

    grid = []
    for day in dates:
        counts = hourly_coverage(effective_value, roster, day)
        grid.append(DayCoverage(
            date=day,
            hours={hour: counts.get(hour, 0) for hour in shown},
            is_holiday=day in holidays,
            holiday_description=holidays.get(day),
        ))
    return grid


def monthly_hours(
    effective_value: EffectiveValue,
    roster: Iterable[str],
    dates: Iterable[date],
) -> dict[str, float]:
    """Scheduled hours per employee over the dates. Day offs count as zero."""
    dates = list(dates)
    return {
        emp_id: sum(total_hours(effective_value(CellKey(emp_id, day))) for day in dates)
        for emp_id in roster
    }
