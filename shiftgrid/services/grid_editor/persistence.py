"""
Boundary contracts of the editor and two implementations:
an in-memory store (embedding, tests) and a SQLAlchemy repository over
the employee_schedules table.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Protocol

from sqlalchemy import select, delete, and_, tuple_
from sqlalchemy.orm import Session

from shiftgrid.db.models.employee_schedules import EmployeeSchedules
from shiftgrid.schemas.employee_schedules import ScheduleBase, ScheduleResponse

from .timeutils import is_valid_time
from .types import CellKey, ScheduleValue, ScheduleDiff, ChangeNotification, DayOffKind, ZERO_TIMES


logger = logging.getLogger(__name__)


class OriginalScheduleSource(Protocol):
    def get_original(self, employee_id: str, day: date) -> Optional[ScheduleValue]:
        ...


class SchedulePersistence(Protocol):
    async def apply_diff(self, diff: ScheduleDiff, published_by: Optional[str] = None) -> None:
        """Apply the whole batch; raise on failure."""
        ...


class ChangeNotifier(Protocol):
    def __call__(self, notification: ChangeNotification) -> None:
        ...


def _trim(value: Optional[str]) -> Optional[str]:
    if value is not None and is_valid_time(value):
        return value[:5]
    return value


def value_from_record(record: ScheduleBase) -> ScheduleValue:
    """Stored row -> cell value. Day-off rows drop their sentinel times, split rows their break."""
    if record.is_day_off:
        kind = record.day_off_kind if record.day_off_kind != DayOffKind.NONE else DayOffKind.DAY_OFF
        return ScheduleValue.day_off(kind)

    start_2, end_2 = _trim(record.start_time_2), _trim(record.end_time_2)
    if start_2 in ZERO_TIMES and end_2 in ZERO_TIMES:
        start_2 = end_2 = None
    break_start, break_end = _trim(record.break_start), _trim(record.break_end)
    if start_2 is not None and end_2 is not None:
        # split shifts never carry a break
        break_start = break_end = None
    return ScheduleValue(
        position=record.work_position,
        start_time=_trim(record.start_time),
        end_time=_trim(record.end_time),
        start_time_2=start_2,
        end_time_2=end_2,
        break_start=break_start,
        break_end=break_end,
    )


class InMemoryScheduleStore:
    """
    Dictionary-backed original source and persistence in one object.
    Applying a diff updates the same values later reads return.
    Set `fail_with` to make the next `apply_diff` calls raise it.
    """

    def __init__(self, values: Optional[dict[CellKey, ScheduleValue]] = None):
        self.values: dict[CellKey, ScheduleValue] = dict(values or {})
        self.applied: list[ScheduleDiff] = []
        self.fail_with: Optional[Exception] = None

    def get_original(self, employee_id: str, day: date) -> Optional[ScheduleValue]:
        return self.values.get(CellKey(employee_id, day))

    async def apply_diff(self, diff: ScheduleDiff, published_by: Optional[str] = None) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        for record in diff.upserts:
            self.values[CellKey(record.employee_id, record.schedule_date)] = value_from_record(record)
        for key in diff.deletes:
            self.values.pop(key, None)
        self.applied.append(diff)


class SqlScheduleRepository:
    """
    employee_schedules access for one database session.
    Reads are served from a snapshot loaded per date range; writes apply a
    whole diff in a single transaction.
    """

    def __init__(self, db: Session):
        self.db = db
        self._snapshot: dict[CellKey, ScheduleValue] = {}
        self._loaded: set[date] = set()

    def load_range(self, start: date, end: date) -> dict[CellKey, ScheduleValue]:
        """Load all rows between start and end inclusive into the snapshot."""
        stmt = select(EmployeeSchedules).where(
            and_(
                EmployeeSchedules.schedule_date >= start,
                EmployeeSchedules.schedule_date <= end,
            )
        )
        rows = self.db.execute(stmt).scalars().all()

        loaded = {}
        for row in rows:
            record = ScheduleResponse.model_validate(row)
            loaded[CellKey(record.employee_id, record.schedule_date)] = value_from_record(record)

        day = start
        while day <= end:
            self._loaded.add(day)
            day += timedelta(days=1)
        self._snapshot = {k: v for k, v in self._snapshot.items() if not (start <= k.date <= end)}
        self._snapshot.update(loaded)
        return loaded

    def get_original(self, employee_id: str, day: date) -> Optional[ScheduleValue]:
        if day not in self._loaded:
            self.load_range(day, day)
        return self._snapshot.get(CellKey(employee_id, day))

    async def apply_diff(self, diff: ScheduleDiff, published_by: Optional[str] = None) -> None:
        if diff.is_empty:
            return
        published_at = datetime.now(timezone.utc)
        try:
            self._upsert(diff, published_by, published_at)
            if diff.deletes:
                # one batched statement for every cleared cell
                keys = [(k.employee_id, k.date) for k in diff.deletes]
                self.db.execute(
                    delete(EmployeeSchedules)
                    .where(tuple_(EmployeeSchedules.employee_id, EmployeeSchedules.schedule_date).in_(keys))
                    .execution_options(synchronize_session=False)
                )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to apply schedule diff ({diff.change_count} changes): {e}")
            raise

        for record in diff.upserts:
            self._snapshot[CellKey(record.employee_id, record.schedule_date)] = value_from_record(record)
        for key in diff.deletes:
            self._snapshot.pop(key, None)

    def _upsert(self, diff: ScheduleDiff, published_by: Optional[str], published_at: datetime) -> None:
        if not diff.upserts:
            return
        keys = [(u.employee_id, u.schedule_date) for u in diff.upserts]
        stmt = select(EmployeeSchedules).where(
            tuple_(EmployeeSchedules.employee_id, EmployeeSchedules.schedule_date).in_(keys)
        )
        existing = {
            (row.employee_id, row.schedule_date): row
            for row in self.db.execute(stmt).scalars().all()
        }

        for record in diff.upserts:
            data = record.model_dump()
            row = existing.get((record.employee_id, record.schedule_date))
            if row is None:
                self.db.add(EmployeeSchedules(**data, published_at=published_at, published_by=published_by))
                continue
            for field, value in data.items():
                setattr(row, field, value)
            row.published_at = published_at
            row.published_by = published_by
