from shiftgrid.db.database import Base

# Import models
from shiftgrid.db.models.employees import Employees
from shiftgrid.db.models.employee_schedules import EmployeeSchedules, DayOffKind
from shiftgrid.db.models.holidays import Holidays
from shiftgrid.db.models.work_positions import WorkPositions

__all__ = [
    "Base",
    # Models
    "Employees",
    "EmployeeSchedules",
    "Holidays",
    "WorkPositions",
    # Enums
    "DayOffKind",
]
