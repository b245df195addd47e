"""
Labour compliance: runs of consecutive working days.
A pure function of the effective schedule, the roster and the displayed dates.
"""

from datetime import date
from typing import Callable, Iterable, Optional

from shiftgrid.core.config import settings

from .timeutils import is_working
from .types import CellKey, ScheduleValue, ComplianceViolation


def find_consecutive_day_violations(
    effective_value: Callable[[CellKey], ScheduleValue],
    roster: Iterable[str],
    dates: Iterable[date],
    max_consecutive_days: Optional[int] = None,
) -> list[ComplianceViolation]:
    """
    Report every run of working days at least `max_consecutive_days` long
    (7 by default). Day offs, empty cells and unconfigured 00:00-00:00
    shifts break a run. Each disjoint run produces its own violation.
    """
    limit = settings.MAX_CONSECUTIVE_WORKING_DAYS if max_consecutive_days is None else max_consecutive_days
    dates = list(dates)
    violations = []

    for emp_id in roster:
        run = 0
        run_start = None
        previous = None
        for day in dates:
            if is_working(effective_value(CellKey(emp_id, day))):
                if run == 0:
                    run_start = day
                run += 1
            else:
                if run >= limit:
                    violations.append(ComplianceViolation(emp_id, run, run_start, previous))
                run = 0
            previous = day
        if run >= limit:
            violations.append(ComplianceViolation(emp_id, run, run_start, previous))

    return violations
