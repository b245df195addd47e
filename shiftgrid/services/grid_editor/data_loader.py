"""
Data loader for the grid editor.
Fetches the roster, holidays, work positions and persisted schedules for one
month and converts them to internal types.
"""

import calendar
from datetime import date
from typing import Optional

from sqlalchemy import select, and_
from sqlalchemy.orm import Session

from shiftgrid.db.models.employees import Employees
from shiftgrid.db.models.holidays import Holidays
from shiftgrid.db.models.work_positions import WorkPositions

from .persistence import SqlScheduleRepository
from .types import EditorContext


def month_dates(year: int, month: int) -> list[date]:
    """Every date of the month in calendar order."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    _, days = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, days + 1)]


def load_roster(db: Session, employee_ids: Optional[list[str]] = None) -> list[Employees]:
    """Active employees in grid row order."""

    stmt = select(Employees).where(Employees.is_active == True)
    if employee_ids is not None:
        stmt = stmt.where(Employees.id.in_(employee_ids))
    stmt = stmt.order_by(Employees.display_order, Employees.full_name)
    return list(db.execute(stmt).scalars().all())


def load_holidays(db: Session, start: date, end: date) -> dict[date, str]:
    stmt = select(Holidays).where(
        and_(
            Holidays.day_date >= start,
            Holidays.day_date <= end,
        )
    )
    return {h.day_date: h.description for h in db.execute(stmt).scalars().all()}


def load_positions(db: Session) -> dict[str, str]:
    """Active work positions, key -> label."""

    stmt = select(WorkPositions).where(WorkPositions.is_active == True).order_by(WorkPositions.sort_order)
    return {p.key: p.label for p in db.execute(stmt).scalars().all()}


def load_editor_context(
    db: Session,
    year: int,
    month: int,
    employee_ids: Optional[list[str]] = None,
) -> EditorContext:
    """
    Load everything needed to edit one month.

    Originals only cover employees on the returned roster; rows belonging to
    inactive employees stay untouched in the database.
    """
    dates = month_dates(year, month)
    employees = load_roster(db, employee_ids)
    roster = [e.id for e in employees]

    repository = SqlScheduleRepository(db)
    loaded = repository.load_range(dates[0], dates[-1])
    on_roster = set(roster)

    return EditorContext(
        year=year,
        month=month,
        dates=dates,
        roster=roster,
        originals={key: value for key, value in loaded.items() if key.employee_id in on_roster},
        employee_names={e.id: e.full_name for e in employees},
        holidays=load_holidays(db, dates[0], dates[-1]),
        positions=load_positions(db),
    )
