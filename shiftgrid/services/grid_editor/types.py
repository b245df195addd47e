"""
Internal data types for the schedule grid editor.
Value objects are immutable; edits always produce new instances.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from shiftgrid.db.models.employee_schedules import DayOffKind
from shiftgrid.schemas.employee_schedules import ScheduleUpsert


ZERO_TIMES = ("00:00", "00:00:00")


def _is_zero_time(value: Optional[str]) -> bool:
    return value is None or value in ZERO_TIMES


@dataclass(frozen=True)
class CellKey:
    """Identity of one grid cell. Row/column indices are derived, never stored."""
    employee_id: str
    date: date

    def __str__(self) -> str:
        return f"{self.employee_id}:{self.date.isoformat()}"


@dataclass(frozen=True)
class ScheduleValue:
    """
    Shift definition for one cell.

    Build values through the named constructors; they only produce shapes
    that satisfy the day-off / timed / split invariants. The raw constructor
    stays available for data read back from storage, which is checked by
    `validate_schedule_value` before it is ever written.
    """
    is_day_off: bool = False
    day_off_kind: DayOffKind = DayOffKind.NONE
    position: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    start_time_2: Optional[str] = None
    end_time_2: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None

    @classmethod
    def empty(cls) -> "ScheduleValue":
        return cls()

    @classmethod
    def day_off(cls, kind: DayOffKind = DayOffKind.DAY_OFF) -> "ScheduleValue":
        if kind == DayOffKind.NONE:
            kind = DayOffKind.DAY_OFF
        return cls(is_day_off=True, day_off_kind=kind)

    @classmethod
    def vacation(cls) -> "ScheduleValue":
        return cls.day_off(DayOffKind.VACATION)

    @classmethod
    def birthday(cls) -> "ScheduleValue":
        return cls.day_off(DayOffKind.BIRTHDAY)

    @classmethod
    def shift(
        cls,
        start: str,
        end: str,
        position: Optional[str] = None,
        break_start: Optional[str] = None,
        break_end: Optional[str] = None,
    ) -> "ScheduleValue":
        return cls(
            position=position,
            start_time=start,
            end_time=end,
            break_start=break_start,
            break_end=break_end,
        )

    @classmethod
    def split(
        cls,
        start: str,
        end: str,
        start2: str,
        end2: str,
        position: Optional[str] = None,
    ) -> "ScheduleValue":
        # breaks only apply to continuous shifts
        return cls(
            position=position,
            start_time=start,
            end_time=end,
            start_time_2=start2,
            end_time_2=end2,
        )

    @property
    def has_split(self) -> bool:
        return not _is_zero_time(self.start_time_2) and not _is_zero_time(self.end_time_2)

    @property
    def has_break(self) -> bool:
        return self.break_start is not None and self.break_end is not None

    @property
    def effective_break(self) -> Optional[tuple[str, str]]:
        """Break window that is honoured; always None for split shifts."""
        if self.has_split or self.is_day_off or not self.has_break:
            return None
        return self.break_start, self.break_end

    @property
    def is_empty(self) -> bool:
        return not self.is_day_off and self.start_time is None and self.end_time is None

    def legs(self) -> list[tuple[str, str]]:
        """Configured (start, end) ranges; the second leg only for split shifts."""
        if self.is_day_off:
            return []
        legs = []
        if self.start_time is not None and self.end_time is not None:
            legs.append((self.start_time, self.end_time))
        if self.has_split:
            legs.append((self.start_time_2, self.end_time_2))
        return legs


EMPTY_VALUE = ScheduleValue()


@dataclass(frozen=True)
class PendingChange:
    key: CellKey
    proposed_value: ScheduleValue
    original_value: Optional[ScheduleValue]


@dataclass(frozen=True)
class ClipboardCell:
    row_offset: int  # employee rows
    col_offset: int  # date columns
    value: ScheduleValue


@dataclass(frozen=True)
class ClipboardEntry:
    cells: tuple[ClipboardCell, ...]
    source_description: str

    @property
    def is_fill(self) -> bool:
        """Single-cell clipboards are pasted as a fill, ignoring offsets."""
        return len(self.cells) == 1


@dataclass
class ScheduleDiff:
    """Batch handed to the persistence collaborator. A key is never in both lists."""
    upserts: list[ScheduleUpsert] = field(default_factory=list)
    deletes: list[CellKey] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.upserts and not self.deletes

    @property
    def change_count(self) -> int:
        return len(self.upserts) + len(self.deletes)


@dataclass(frozen=True)
class ComplianceViolation:
    employee_id: str
    consecutive_days: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass
class DayCoverage:
    date: date
    hours: dict[int, int] = field(default_factory=dict)  # hour -> employees present
    is_holiday: bool = False
    holiday_description: Optional[str] = None

    @property
    def peak(self) -> int:
        return max(self.hours.values(), default=0)


@dataclass(frozen=True)
class AffectedEmployee:
    employee_id: str
    name: str
    changes_count: int


@dataclass
class ChangeNotification:
    """Emitted after a successful save; delivery is up to the notifier."""
    affected_employees: list[AffectedEmployee]
    total_changes: int
    summary: str


@dataclass
class SaveResult:
    success: bool
    upserted: int = 0
    deleted: int = 0
    notification: Optional[ChangeNotification] = None


@dataclass
class EditorContext:
    """Everything needed to open an editing session for one month."""
    year: int
    month: int
    dates: list[date]
    roster: list[str]  # employee ids in row order
    originals: dict[CellKey, ScheduleValue] = field(default_factory=dict)
    employee_names: dict[str, str] = field(default_factory=dict)
    holidays: dict[date, str] = field(default_factory=dict)
    positions: dict[str, str] = field(default_factory=dict)  # key -> label

    def get_original(self, employee_id: str, day: date) -> Optional[ScheduleValue]:
        return self.originals.get(CellKey(employee_id, day))
