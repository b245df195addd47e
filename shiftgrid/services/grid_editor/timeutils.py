"""
Shift time arithmetic.
All times are local wall-clock "HH:MM" strings; a shift whose end is earlier
than its start runs past midnight. Nothing in here raises for malformed stored
data - unparseable times count as zero hours - except the explicit validators.
"""

import math
import re
from dataclasses import replace
from typing import Optional

from shiftgrid.core.config import settings

from .exceptions import ValidationError
from .types import ScheduleValue, DayOffKind, ZERO_TIMES


MINUTES_PER_DAY = 24 * 60
HOURS_PER_DAY = 24

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$")

_TIME_FIELDS = (
    "start_time",
    "end_time",
    "start_time_2",
    "end_time_2",
    "break_start",
    "break_end",
)


def is_valid_time(value: Optional[str]) -> bool:
    return isinstance(value, str) and _TIME_RE.match(value) is not None


def normalize_time(value: str, field: Optional[str] = None) -> str:
    """Return `value` as HH:MM, accepting HH:MM:SS. Raises ValidationError otherwise."""
    if not is_valid_time(value):
        raise ValidationError(f"Invalid time {value!r}, expected HH:MM", field=field)
    return value[:5]


def to_minutes(value: str) -> int:
    """Minutes since midnight for a valid HH:MM[:SS] string."""
    match = _TIME_RE.match(value)
    if match is None:
        raise ValidationError(f"Invalid time {value!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def _safe_minutes(value: Optional[str]) -> Optional[int]:
    if not is_valid_time(value):
        return None
    return to_minutes(value)


def format_minutes(minutes: int) -> str:
    minutes = minutes % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def shift_hours(start: Optional[str], end: Optional[str]) -> float:
    """
    Duration of one leg in hours.
    end > start: plain difference. end < start: wraps past midnight.
    end == start: zero (an unconfigured leg, never a 24h shift).
    """
    start_m, end_m = _safe_minutes(start), _safe_minutes(end)
    if start_m is None or end_m is None or start_m == end_m:
        return 0.0
    if end_m < start_m:
        end_m += MINUTES_PER_DAY
    return (end_m - start_m) / 60


def total_hours(value: ScheduleValue) -> float:
    """Sum of each leg computed independently; legs never share a wraparound."""
    return sum(shift_hours(start, end) for start, end in value.legs())


def is_unconfigured(value: ScheduleValue) -> bool:
    """True when there is no shift: both times missing or both 00:00."""
    if value.start_time is None and value.end_time is None:
        return True
    return value.start_time in ZERO_TIMES and value.end_time in ZERO_TIMES


def is_working(value: Optional[ScheduleValue]) -> bool:
    """A configured, non day-off shift."""
    if value is None or value.is_day_off:
        return False
    return not is_unconfigured(value)


def requires_break(
    start: Optional[str],
    end: Optional[str],
    min_shift_hours: Optional[float] = None,
) -> bool:
    threshold = settings.AUTO_BREAK_MIN_SHIFT_HOURS if min_shift_hours is None else min_shift_hours
    return shift_hours(start, end) > threshold


def default_break(
    start: str,
    end: str,
    min_shift_hours: Optional[float] = None,
    break_minutes: Optional[int] = None,
    snap_minutes: Optional[int] = None,
) -> Optional[tuple[str, str]]:
    """
    Default break window for a continuous shift, or None when the shift is
    not long enough to need one. The break starts at the shift midpoint
    snapped down to the snap boundary. Callers must not use this for split shifts.
    """
    if not requires_break(start, end, min_shift_hours):
        return None
    length = settings.AUTO_BREAK_MINUTES if break_minutes is None else break_minutes
    snap = settings.BREAK_SNAP_MINUTES if snap_minutes is None else snap_minutes

    start_m = to_minutes(start)
    end_m = to_minutes(end)
    if end_m <= start_m:
        end_m += MINUTES_PER_DAY

    midpoint = start_m + (end_m - start_m) / 2
    break_start = math.floor(midpoint / snap) * snap
    return format_minutes(break_start), format_minutes(break_start + length)


def leg_hours(start: Optional[str], end: Optional[str]) -> tuple[list[int], list[int]]:
    """
    Clock hours a leg occupies as (hours on its own date, hours on the next date).

    Hour h is occupied when start.hour <= h < end rounded up to the hour.
    An overnight leg fills the rest of its own date and spills the early
    hours into the following date.
    """
    start_m, end_m = _safe_minutes(start), _safe_minutes(end)
    if start_m is None or end_m is None or start_m == end_m:
        return [], []
    start_hour = start_m // 60
    end_hour = math.ceil(end_m / 60)
    if end_m > start_m:
        return list(range(start_hour, end_hour)), []
    return list(range(start_hour, HOURS_PER_DAY)), list(range(0, end_hour))


def value_from_options(
    start: str,
    end: str,
    position: Optional[str] = None,
    include_break: bool = False,
    start2: Optional[str] = None,
    end2: Optional[str] = None,
) -> ScheduleValue:
    """
    Build the value applied by the toolbar. A split shift never carries a
    break; a continuous shift gets the default break only when requested
    and long enough.
    """
    if start2 not in (None, "", *ZERO_TIMES) and end2 not in (None, "", *ZERO_TIMES):
        return ScheduleValue.split(start, end, start2, end2, position=position)

    window = None
    if include_break and start and end:
        window = default_break(normalize_time(start, "start_time"), normalize_time(end, "end_time"))
    if window is None:
        return ScheduleValue.shift(start, end, position=position)
    return ScheduleValue.shift(start, end, position=position, break_start=window[0], break_end=window[1])


def validate_schedule_value(value: ScheduleValue) -> ScheduleValue:
    """
    Check a proposed value and return it with times normalised to HH:MM.
    Raises ValidationError; never returns a partially fixed value.
    """
    normalized = {}
    for name in _TIME_FIELDS:
        raw = getattr(value, name)
        normalized[name] = None if raw is None else normalize_time(raw, name)

    if value.is_day_off:
        for name in _TIME_FIELDS:
            if normalized[name] is not None:
                raise ValidationError("A day off cannot carry shift times", field=name)
        if value.position is not None:
            raise ValidationError("A day off cannot carry a work position", field="position")
        kind = DayOffKind.DAY_OFF if value.day_off_kind == DayOffKind.NONE else value.day_off_kind
        return replace(value, day_off_kind=kind)

    if value.day_off_kind != DayOffKind.NONE:
        raise ValidationError("Day-off kind set on a working value", field="day_off_kind")

    start, end = normalized["start_time"], normalized["end_time"]
    if (start is None) != (end is None):
        raise ValidationError("Start and end times must be set together", field="end_time" if end is None else "start_time")

    start2, end2 = normalized["start_time_2"], normalized["end_time_2"]
    if (start2 is None) != (end2 is None):
        raise ValidationError("Second range needs both start and end", field="end_time_2" if end2 is None else "start_time_2")
    if start2 in ZERO_TIMES and end2 in ZERO_TIMES:
        normalized["start_time_2"] = normalized["end_time_2"] = None
        start2 = end2 = None
    if start2 is not None and start is None:
        raise ValidationError("Second range without a primary range", field="start_time_2")

    break_start, break_end = normalized["break_start"], normalized["break_end"]
    if (break_start is None) != (break_end is None):
        raise ValidationError("Break start and end must be set together", field="break_end" if break_end is None else "break_start")
    if start2 is not None and break_start is not None:
        raise ValidationError("Split shifts cannot carry a break", field="break_start")
    if break_start is not None and start is None:
        raise ValidationError("Break without a shift", field="break_start")

    return replace(value, **normalized)


def normalize_value(value: Optional[ScheduleValue]) -> Optional[ScheduleValue]:
    """
    Lenient normalisation for stored values: trims seconds from valid times,
    drops a break stored on a split shift and leaves anything unparseable
    untouched.
    """
    if value is None:
        return None
    changes = {}
    for name in _TIME_FIELDS:
        raw = getattr(value, name)
        if raw is not None and is_valid_time(raw) and len(raw) != 5:
            changes[name] = raw[:5]
    if value.has_split and (value.break_start is not None or value.break_end is not None):
        changes["break_start"] = changes["break_end"] = None
    return replace(value, **changes) if changes else value
