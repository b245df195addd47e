"""
Pending change overlay.
Holds proposed cell values on top of the persisted originals, drops edits that
return a cell to its original value, and reduces the remaining edits to the
upsert/delete batch the persistence collaborator applies.
"""

import logging
from collections import Counter
from datetime import date
from typing import Callable, Iterable, Optional

from shiftgrid.core.config import settings
from shiftgrid.schemas.employee_schedules import ScheduleUpsert

from .timeutils import normalize_value, validate_schedule_value
from .types import (
    CellKey,
    ScheduleValue,
    PendingChange,
    ScheduleDiff,
    EMPTY_VALUE,
)


logger = logging.getLogger(__name__)

OriginalLookup = Callable[[str, date], Optional[ScheduleValue]]

_UNSET = object()


class PendingChangeOverlay:
    """
    Store of proposed values keyed by cell. Owned by one editor session and
    rebased after a successful save, reset on discard or month navigation.
    """

    def __init__(self, get_original: OriginalLookup, day_off_sentinel: Optional[str] = None):
        self._get_original = get_original
        self._changes: dict[CellKey, PendingChange] = {}
        self.day_off_sentinel = day_off_sentinel or settings.DAY_OFF_SENTINEL_TIME

    def __len__(self) -> int:
        return len(self._changes)

    def __contains__(self, key: object) -> bool:
        return key in self._changes

    def __iter__(self):
        return iter(self.changes())

    def original_value(self, key: CellKey) -> Optional[ScheduleValue]:
        return normalize_value(self._get_original(key.employee_id, key.date))

    def effective_value(self, key: CellKey) -> ScheduleValue:
        """Pending value if any, else the original, else the empty value."""
        change = self._changes.get(key)
        if change is not None:
            return change.proposed_value
        original = self.original_value(key)
        return original if original is not None else EMPTY_VALUE

    def has_change(self, key: CellKey) -> bool:
        return key in self._changes

    def changes(self) -> list[PendingChange]:
        return sorted(self._changes.values(), key=lambda c: (c.key.date, c.key.employee_id))

    def set_value(self, key: CellKey, proposed: ScheduleValue, original=_UNSET) -> bool:
        """
        Record `proposed` for `key`. When it equals the original field by field
        the entry is removed instead. Returns True if a pending entry remains.
        Raises ValidationError for malformed values, leaving the overlay untouched.
        """
        value = validate_schedule_value(proposed)
        if original is _UNSET:
            original = self.original_value(key)
        else:
            original = normalize_value(original)
        return self._store(key, value, original)

    def set_many(self, items: Iterable[tuple[CellKey, ScheduleValue]]) -> int:
        """
        Apply several edits as one step: every value is validated before any
        is stored. Later items win for repeated keys. Returns the number of
        cells that ended up with a pending entry.
        """
        validated = [(key, validate_schedule_value(value)) for key, value in items]
        pending = 0
        for key, value in validated:
            if self._store(key, value, self.original_value(key)):
                pending += 1
        return pending

    def _store(self, key: CellKey, value: ScheduleValue, original: Optional[ScheduleValue]) -> bool:
        baseline = original if original is not None else EMPTY_VALUE
        if value == baseline:
            if self._changes.pop(key, None) is not None:
                logger.debug(f"Edit on {key} reverted to original, dropping pending change")
            return False
        self._changes[key] = PendingChange(key=key, proposed_value=value, original_value=original)
        return True

    def discard(self) -> None:
        self._changes = {}

    def rebase(self, intended: dict[CellKey, ScheduleValue]) -> int:
        """
        Re-check cells against originals that changed underneath the overlay.
        Each cell keeps a pending entry only if its intended value still differs
        from the new original. Returns the number of entries left pending.
        """
        remaining = 0
        for key, value in intended.items():
            if self._store(key, value, self.original_value(key)):
                remaining += 1
        return remaining

    def affected_employees(self) -> Counter:
        """employee_id -> number of pending cells."""
        return Counter(key.employee_id for key in self._changes)

    def diff(self) -> ScheduleDiff:
        """
        Reduce pending changes to persistence operations. A value with a start
        time or a day off is upserted (day offs carry the sentinel times the
        row shape requires); a cleared value becomes a delete.
        """
        result = ScheduleDiff()
        for change in self.changes():
            value = change.proposed_value
            if value.is_day_off or value.start_time is not None:
                result.upserts.append(self._to_upsert(change.key, value))
            else:
                result.deletes.append(change.key)
        return result

    def _to_upsert(self, key: CellKey, value: ScheduleValue) -> ScheduleUpsert:
        sentinel = self.day_off_sentinel
        day = key.date
        return ScheduleUpsert(
            employee_id=key.employee_id,
            schedule_date=day,
            schedule_month=day.month,
            schedule_year=day.year,
            day_of_week=day.weekday(),
            start_time=value.start_time or sentinel,
            end_time=value.end_time or sentinel,
            start_time_2=value.start_time_2 if value.has_split else None,
            end_time_2=value.end_time_2 if value.has_split else None,
            break_start=value.break_start,
            break_end=value.break_end,
            is_day_off=value.is_day_off,
            day_off_kind=value.day_off_kind,
            work_position=value.position,
        )
