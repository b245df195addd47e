"""
Schedule grid editor package.

Usage:
    import asyncio
    from shiftgrid.db.database import SessionLocal
    from shiftgrid.services.grid_editor import (
        CellKey, EditorSession, SqlScheduleRepository, load_editor_context,
    )

    db = SessionLocal()
    context = load_editor_context(db, year=2025, month=3)
    session = EditorSession.from_context(context, persistence=SqlScheduleRepository(db))

    # Select a rectangle and apply a shift to it
    first, last = context.roster[0], context.roster[2]
    session.click(CellKey(first, context.dates[0]))
    session.click(CellKey(last, context.dates[4]), shift=True)
    session.apply_with_options("09:00", "18:00", position="cashier", include_break=True)

    # Violations block the save; otherwise the diff is published in one batch
    if not session.violations():
        result = asyncio.run(session.save(published_by="manager-1"))
"""

from .types import (
    CellKey,
    ScheduleValue,
    DayOffKind,
    EMPTY_VALUE,
    PendingChange,
    ClipboardCell,
    ClipboardEntry,
    ScheduleDiff,
    ComplianceViolation,
    DayCoverage,
    AffectedEmployee,
    ChangeNotification,
    SaveResult,
    EditorContext,
)
from .exceptions import GridEditorError, ValidationError, SaveBlockedError, PersistenceError
from .timeutils import (
    shift_hours,
    total_hours,
    default_break,
    is_unconfigured,
    is_working,
    value_from_options,
    validate_schedule_value,
)
from .grid_index import GridIndex, GridGeometry
from .overlay import PendingChangeOverlay
from .selection import SelectionEngine
from .clipboard import ClipboardEngine
from .coverage import employees_present, hourly_coverage, active_hours, coverage_grid, monthly_hours
from .compliance import find_consecutive_day_violations
from .persistence import (
    OriginalScheduleSource,
    SchedulePersistence,
    ChangeNotifier,
    InMemoryScheduleStore,
    SqlScheduleRepository,
)
from .data_loader import load_editor_context, month_dates
from .session import EditorSession

__all__ = [
    # Types
    "CellKey",
    "ScheduleValue",
    "DayOffKind",
    "EMPTY_VALUE",
    "PendingChange",
    "ClipboardCell",
    "ClipboardEntry",
    "ScheduleDiff",
    "ComplianceViolation",
    "DayCoverage",
    "AffectedEmployee",
    "ChangeNotification",
    "SaveResult",
    "EditorContext",
    # Errors
    "GridEditorError",
    "ValidationError",
    "SaveBlockedError",
    "PersistenceError",
    # Main entry points
    "EditorSession",
    "load_editor_context",
    "month_dates",
    # Persistence
    "OriginalScheduleSource",
    "SchedulePersistence",
    "ChangeNotifier",
    "InMemoryScheduleStore",
    "SqlScheduleRepository",
    # Lower-level components
    "GridIndex",
    "GridGeometry",
    "PendingChangeOverlay",
    "SelectionEngine",
    "ClipboardEngine",
    "find_consecutive_day_violations",
    "employees_present",
    "hourly_coverage",
    "active_hours",
    "coverage_grid",
    "monthly_hours",
    "shift_hours",
    "total_hours",
    "default_break",
    "is_unconfigured",
    "is_working",
    "value_from_options",
    "validate_schedule_value",
]
