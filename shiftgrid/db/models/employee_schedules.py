from sqlalchemy import String, Integer, Boolean, Date, DateTime, ForeignKey, Enum as SQLEnum, Index, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime
from enum import Enum
from typing import Optional
from shiftgrid.db.database import Base


class DayOffKind(str, Enum):
    NONE = "NONE"
    DAY_OFF = "DAY_OFF"
    BIRTHDAY = "BIRTHDAY"
    VACATION = "VACATION"


class EmployeeSchedules(Base):
    __tablename__ = "employee_schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[str] = mapped_column(String(36), ForeignKey("employees.id"), nullable=False)
    schedule_date: Mapped[date] = mapped_column(Date, nullable=False)
    schedule_month: Mapped[int] = mapped_column(Integer, nullable=False)
    schedule_year: Mapped[int] = mapped_column(Integer, nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    # wall-clock HH:MM strings, no timezone
    start_time: Mapped[str] = mapped_column(String(8), nullable=False)
    end_time: Mapped[str] = mapped_column(String(8), nullable=False)
    start_time_2: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    end_time_2: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    break_start: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    break_end: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    is_day_off: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    day_off_kind: Mapped[DayOffKind] = mapped_column(SQLEnum(DayOffKind, name="day_off_kind_enum"), nullable=False, default=DayOffKind.NONE)
    work_position: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    published_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("employee_id", "schedule_date", name="uq_employee_schedules_employee_date"),
        Index("ix_employee_schedules_date", "schedule_date"),
    )
