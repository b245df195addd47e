"""
Editor session - main orchestration layer.

One session edits one displayed month. It owns the grid index, the pending
change overlay, the selection and the clipboard, routes gestures and bulk
actions to them, derives coverage and compliance from the effective values
and hands the reconciled diff to the persistence collaborator on save.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from .clipboard import ClipboardEngine
from .compliance import find_consecutive_day_violations
from .coverage import (
    active_hours,
    coverage_grid,
    employees_present,
    hourly_coverage,
    monthly_hours,
)
from .exceptions import GridEditorError, PersistenceError, SaveBlockedError
from .grid_index import GridGeometry, GridIndex
from .overlay import PendingChangeOverlay
from .persistence import ChangeNotifier, OriginalScheduleSource, SchedulePersistence
from .selection import SelectionEngine
from .timeutils import value_from_options
from .types import (
    AffectedEmployee,
    CellKey,
    ChangeNotification,
    ClipboardEntry,
    ComplianceViolation,
    DayCoverage,
    EditorContext,
    SaveResult,
    ScheduleValue,
    EMPTY_VALUE,
)


logger = logging.getLogger(__name__)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class EditorSession:
    """
    Editing state for one roster/month.

    Values saved through this session are remembered as the new originals,
    so cells keep showing what was published even when the original source
    is a snapshot that the persistence collaborator does not update.
    """

    def __init__(
        self,
        roster: Iterable[str],
        dates: Iterable[date],
        original_source: OriginalScheduleSource,
        persistence: Optional[SchedulePersistence] = None,
        notifier: Optional[ChangeNotifier] = None,
        employee_names: Optional[dict[str, str]] = None,
        positions: Optional[dict[str, str]] = None,
        holidays: Optional[dict[date, str]] = None,
        geometry: Optional[GridGeometry] = None,
        max_consecutive_days: Optional[int] = None,
    ):
        self.original_source = original_source
        self.persistence = persistence
        self.notifier = notifier
        self.employee_names = dict(employee_names or {})
        self.positions = dict(positions or {})
        self.holidays = dict(holidays or {})
        self.geometry = geometry or GridGeometry(cell_width=1.0, cell_height=1.0)
        self.max_consecutive_days = max_consecutive_days

        self._committed: dict[CellKey, Optional[ScheduleValue]] = {}
        self.grid = GridIndex(roster, dates)
        self.overlay = PendingChangeOverlay(self._get_original)
        self.selection = SelectionEngine(self.grid)
        self.clipboard = ClipboardEngine()

    @classmethod
    def from_context(
        cls,
        context: EditorContext,
        persistence: Optional[SchedulePersistence] = None,
        notifier: Optional[ChangeNotifier] = None,
        **kwargs,
    ) -> "EditorSession":
        """Open a session over a loaded month; the context is the original source."""
        return cls(
            context.roster,
            context.dates,
            context,
            persistence=persistence,
            notifier=notifier,
            employee_names=context.employee_names,
            positions=context.positions,
            holidays=context.holidays,
            **kwargs,
        )

    def _get_original(self, employee_id: str, day: date) -> Optional[ScheduleValue]:
        key = CellKey(employee_id, day)
        if key in self._committed:
            return self._committed[key]
        return self.original_source.get_original(employee_id, day)

    @property
    def roster(self) -> tuple[str, ...]:
        return self.grid.roster

    @property
    def dates(self) -> tuple[date, ...]:
        return self.grid.dates

    # ---- gestures ----------------------------------------------------

    def click(self, key: CellKey, shift: bool = False, ctrl: bool = False) -> None:
        self.selection.click(key, shift=shift, ctrl=ctrl)

    def drag_start(self, key: Optional[CellKey]) -> None:
        self.selection.drag_start(key)

    def drag_start_at_point(self, x: float, y: float) -> Optional[CellKey]:
        key = self.geometry.resolve_cell(self.grid, x, y)
        self.selection.drag_start(key)
        return key

    def drag_move(self, key: Optional[CellKey]) -> None:
        self.selection.drag_move(key)

    def drag_move_to_point(self, x: float, y: float) -> Optional[CellKey]:
        """Resolve a pointer position to a cell and extend the drag to it."""
        key = self.geometry.resolve_cell(self.grid, x, y)
        self.selection.drag_move(key)
        return key

    def drag_end(self) -> None:
        self.selection.drag_end()

    def select_row(self, employee_id: str) -> None:
        self.selection.select_row(employee_id)

    def select_column(self, day: date) -> None:
        self.selection.select_column(day)

    def escape(self) -> None:
        self.selection.escape()

    # ---- cell access -------------------------------------------------

    def set_cell(self, employee_id: str, day: date, value: ScheduleValue) -> bool:
        """Edit one cell. Returns True if a pending change remains afterwards."""
        return self.overlay.set_value(CellKey(employee_id, day), value)

    def effective_value(self, key: CellKey) -> ScheduleValue:
        return self.overlay.effective_value(key)

    def has_pending_change(self, key: CellKey) -> bool:
        return self.overlay.has_change(key)

    @property
    def pending_count(self) -> int:
        return len(self.overlay)

    def affected_employees(self) -> list[AffectedEmployee]:
        """Employees with pending changes, in roster order."""
        counts = self.overlay.affected_employees()
        order = self.grid.employee_to_row
        return [
            AffectedEmployee(
                employee_id=emp_id,
                name=self.employee_names.get(emp_id, emp_id),
                changes_count=count,
            )
            for emp_id, count in sorted(counts.items(), key=lambda item: (order.get(item[0], len(order)), item[0]))
        ]

    # ---- bulk actions ------------------------------------------------

    def _apply_to_selection(self, value: ScheduleValue, clear_selection: bool) -> int:
        targets = self.selection.ordered()
        if not targets:
            return 0
        self.overlay.set_many((key, value) for key in targets)
        if clear_selection:
            self.selection.escape()
        return len(targets)

    def clear_cells(self) -> int:
        return self._apply_to_selection(EMPTY_VALUE, clear_selection=True)

    def apply_day_off(self) -> int:
        return self._apply_to_selection(ScheduleValue.day_off(), clear_selection=False)

    def apply_vacation(self) -> int:
        return self._apply_to_selection(ScheduleValue.vacation(), clear_selection=False)

    def apply_birthday(self) -> int:
        return self._apply_to_selection(ScheduleValue.birthday(), clear_selection=False)

    def apply_with_options(
        self,
        start: str,
        end: str,
        position: Optional[str] = None,
        include_break: bool = False,
        start2: Optional[str] = None,
        end2: Optional[str] = None,
    ) -> int:
        if not self.selection.has_selection:
            return 0
        value = value_from_options(start, end, position, include_break, start2, end2)
        return self._apply_to_selection(value, clear_selection=True)

    def apply_quick_schedule(self, start: str, end: str) -> int:
        return self.apply_with_options(start, end)

    # ---- clipboard ---------------------------------------------------

    def copy(self) -> Optional[ClipboardEntry]:
        return self.clipboard.copy(self.selection.ordered(), self.grid, self.effective_value, self.positions)

    def paste(self) -> int:
        """Paste onto the selection. Returns the number of cells written."""
        if not self.clipboard.has_content or not self.selection.has_selection:
            return 0
        pasted = self.clipboard.paste(self.selection.ordered(), self.grid, self.overlay.set_many)
        if pasted:
            self.selection.escape()
        return pasted

    def clear_clipboard(self) -> None:
        self.clipboard.clear()

    # ---- derived views -----------------------------------------------

    def violations(self) -> list[ComplianceViolation]:
        return find_consecutive_day_violations(
            self.effective_value,
            self.grid.roster,
            self.grid.dates,
            self.max_consecutive_days,
        )

    def coverage(self, hours: Optional[Iterable[int]] = None) -> list[DayCoverage]:
        return coverage_grid(self.effective_value, self.grid.roster, self.grid.dates, hours, self.holidays)

    def hourly_coverage(self, day: date) -> dict[int, int]:
        return hourly_coverage(self.effective_value, self.grid.roster, day)

    def employees_present(self, day: date, hour: int) -> set[str]:
        return employees_present(self.effective_value, self.grid.roster, day, hour)

    def active_hours(self) -> list[int]:
        return active_hours(self.effective_value, self.grid.roster, self.grid.dates)

    def monthly_hours(self) -> dict[str, float]:
        return monthly_hours(self.effective_value, self.grid.roster, self.grid.dates)

    # ---- lifecycle ---------------------------------------------------

    def discard(self) -> None:
        """Drop every pending change and the selection. The clipboard survives."""
        dropped = len(self.overlay)
        self.overlay.discard()
        self.selection.escape()
        logger.info(f"Discarded {_plural(dropped, 'pending change')}")

    def navigate(
        self,
        dates: Iterable[date],
        roster: Optional[Iterable[str]] = None,
        original_source: Optional[OriginalScheduleSource] = None,
        holidays: Optional[dict[date, str]] = None,
    ) -> None:
        """
        Switch to another month (or roster). Pending changes and the
        selection are dropped; the clipboard is kept.
        """
        self.grid = GridIndex(self.grid.roster if roster is None else roster, dates)
        if original_source is not None:
            self.original_source = original_source
            self._committed = {}
        if holidays is not None:
            self.holidays = dict(holidays)
        self.overlay.discard()
        self.selection.reset(self.grid)
        logger.info(
            f"Navigated to {len(self.grid.dates)} dates"
            f"{' from ' + self.grid.dates[0].isoformat() if self.grid.dates else ''}"
            f" for {_plural(len(self.grid.roster), 'employee')}"
        )

    def reload(self, original_source: OriginalScheduleSource) -> None:
        """Replace the original data for the current month, dropping pending changes."""
        self.navigate(self.grid.dates, original_source=original_source)

    async def save(self, published_by: Optional[str] = None) -> SaveResult:
        """
        Publish pending changes.

        Raises:
            SaveBlockedError: consecutive working day violations are outstanding;
                the persistence collaborator is not called.
            PersistenceError: the collaborator failed; pending changes are kept.
        """
        violations = self.violations()
        if violations:
            logger.warning(f"Save blocked by {_plural(len(violations), 'compliance violation')}")
            raise SaveBlockedError(violations)

        diff = self.overlay.diff()
        if diff.is_empty:
            return SaveResult(success=True)

        if self.persistence is None:
            raise GridEditorError("No persistence collaborator configured")

        affected = self.affected_employees()
        changes = self.overlay.changes()
        try:
            await self.persistence.apply_diff(diff, published_by=published_by)
        except Exception as e:
            logger.error(f"Saving {_plural(diff.change_count, 'change')} failed: {e}")
            raise PersistenceError(e) from e

        # the overlay stays editable while apply_diff runs
        intended = {change.key: self.overlay.effective_value(change.key) for change in changes}
        for change in changes:
            value = change.proposed_value
            self._committed[change.key] = None if value.is_empty else value
        self.overlay.rebase(intended)
        self.selection.escape()
        if self.overlay:
            logger.info(f"{_plural(len(self.overlay), 'edit')} made during save left pending")

        notification = ChangeNotification(
            affected_employees=affected,
            total_changes=diff.change_count,
            summary=f"{_plural(diff.change_count, 'change')} for {_plural(len(affected), 'employee')}",
        )
        if self.notifier is not None:
            self.notifier(notification)

        logger.info(f"Saved {notification.summary} ({len(diff.upserts)} upserted, {len(diff.deletes)} deleted)")
        return SaveResult(
            success=True,
            upserted=len(diff.upserts),
            deleted=len(diff.deletes),
            notification=notification,
        )
