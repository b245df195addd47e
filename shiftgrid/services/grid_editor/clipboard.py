"""
Anchor-relative clipboard.
Copies remember each cell's offset from the selection's earliest-date,
lowest-row cell; pastes replay those offsets from the target's anchor and
skip whatever lands outside the grid.
"""

import logging
from typing import Callable, Iterable, Optional

from .grid_index import GridIndex
from .types import (
    CellKey,
    ClipboardCell,
    ClipboardEntry,
    DayOffKind,
    ScheduleValue,
)


logger = logging.getLogger(__name__)

PastePlan = list[tuple[CellKey, ScheduleValue]]


def describe_value(value: ScheduleValue, positions: Optional[dict[str, str]] = None) -> str:
    """Short label for a copied cell."""
    if value.is_day_off:
        if value.day_off_kind == DayOffKind.VACATION:
            return "Vacation"
        if value.day_off_kind == DayOffKind.BIRTHDAY:
            return "Birthday"
        return "Day off"
    if value.start_time and value.end_time:
        label = f"{value.start_time[:5]}-{value.end_time[:5]}"
        if value.has_split:
            label += f" / {value.start_time_2[:5]}-{value.end_time_2[:5]}"
        if value.position:
            label += f" ({(positions or {}).get(value.position, value.position)})"
        return label
    return "Empty"


class ClipboardEngine:
    """Survives selection changes and month navigation; replaced only by the next copy."""

    def __init__(self):
        self.entry: Optional[ClipboardEntry] = None

    @property
    def has_content(self) -> bool:
        return self.entry is not None

    def clear(self) -> None:
        self.entry = None

    def copy(
        self,
        selection: Iterable[CellKey],
        grid: GridIndex,
        effective_value: Callable[[CellKey], ScheduleValue],
        positions: Optional[dict[str, str]] = None,
    ) -> Optional[ClipboardEntry]:
        """
        Capture the selection relative to its anchor. An empty selection (or
        one entirely outside the grid) leaves the clipboard unchanged.
        """
        located = []
        for key in selection:
            position = grid.index_of(key)
            if position is not None:
                located.append((key, position))
        if not located:
            return None

        # earliest date first, then lowest roster row
        located.sort(key=lambda item: (item[1][1], item[1][0]))
        _, (anchor_row, anchor_col) = located[0]
        logger.debug(f"Copy anchor at row {anchor_row}, column {anchor_col}")

        cells = tuple(
            ClipboardCell(
                row_offset=row - anchor_row,
                col_offset=col - anchor_col,
                value=effective_value(key),
            )
            for key, (row, col) in located
        )
        if len(cells) == 1:
            description = describe_value(cells[0].value, positions)
        else:
            description = f"{len(cells)} cells"

        self.entry = ClipboardEntry(cells=cells, source_description=description)
        return self.entry

    def plan_paste(self, targets: Iterable[CellKey], grid: GridIndex) -> PastePlan:
        """
        Every (cell, value) a paste would write, computed before anything is
        applied. A single-cell clipboard fills every target; a multi-cell
        clipboard is replayed from the targets' anchor.
        """
        if self.entry is None:
            return []
        targets = [key for key in targets if key in grid]
        if not targets:
            return []

        if self.entry.is_fill:
            value = self.entry.cells[0].value
            return [(key, value) for key in targets]

        _, anchor_row, anchor_col = grid.anchor_of(targets)
        logger.debug(f"Paste anchor at row {anchor_row}, column {anchor_col}")

        plan: PastePlan = []
        for cell in self.entry.cells:
            target = grid.cell_at(anchor_row + cell.row_offset, anchor_col + cell.col_offset)
            if target is None:
                continue
            plan.append((target, cell.value))
        return plan

    def paste(
        self,
        targets: Iterable[CellKey],
        grid: GridIndex,
        apply: Callable[[PastePlan], object],
    ) -> int:
        """Compute the full paste, hand it to `apply` in one call, return the cell count."""
        plan = self.plan_paste(targets, grid)
        if plan:
            apply(plan)
        return len(plan)
