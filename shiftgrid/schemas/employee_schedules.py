from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional
from shiftgrid.db.models.employee_schedules import DayOffKind


class ScheduleBase(BaseModel):
    employee_id: str
    schedule_date: date
    start_time: str
    end_time: str
    start_time_2: Optional[str] = None
    end_time_2: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    is_day_off: bool = False
    day_off_kind: DayOffKind = DayOffKind.NONE
    work_position: Optional[str] = None


class ScheduleUpsert(ScheduleBase):
    """One row written by the persistence collaborator, keyed by (employee_id, schedule_date)."""
    schedule_month: int
    schedule_year: int
    day_of_week: int


class ScheduleResponse(ScheduleBase):
    id: int
    published_at: Optional[datetime] = None
    published_by: Optional[str] = None

    class Config:
        from_attributes = True
