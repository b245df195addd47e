"""
Spreadsheet-style cell selection.
A state machine over gestures: click, shift+click range, ctrl/cmd+click
toggle, rectangular drag, whole row/column and escape. Gestures on cells that
are not in the current grid are ignored.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .grid_index import GridIndex
from .types import CellKey


logger = logging.getLogger(__name__)


@dataclass
class DragState:
    start_cell: CellKey
    current_cell: CellKey


class SelectionEngine:

    def __init__(self, grid: GridIndex):
        self.grid = grid
        self._selected: set[CellKey] = set()
        self.anchor: Optional[CellKey] = None
        self._drag: Optional[DragState] = None

    # ---- state -------------------------------------------------------

    @property
    def cells(self) -> frozenset[CellKey]:
        return frozenset(self._selected)

    @property
    def count(self) -> int:
        return len(self._selected)

    @property
    def has_selection(self) -> bool:
        return bool(self._selected)

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    def is_selected(self, key: CellKey) -> bool:
        return key in self._selected

    def ordered(self) -> list[CellKey]:
        """Selected cells by date, then roster row."""
        return sorted(
            self._selected,
            key=lambda k: (self.grid.date_to_column.get(k.date, -1), self.grid.employee_to_row.get(k.employee_id, -1)),
        )

    def reset(self, grid: GridIndex) -> None:
        """Switch to a rebuilt grid; the old selection no longer means anything."""
        self.grid = grid
        self.clear()

    def clear(self) -> None:
        self._selected = set()
        self.anchor = None
        self._drag = None

    def escape(self) -> None:
        self._selected = set()
        self._drag = None

    # ---- clicks ------------------------------------------------------

    def click(self, key: CellKey, shift: bool = False, ctrl: bool = False) -> None:
        if key not in self.grid:
            return

        if shift and self.anchor is not None and self.anchor in self.grid:
            # anchor stays put so the range can be re-extended
            self._selected = set(self.grid.rectangle(self.anchor, key))
        elif ctrl:
            if key in self._selected:
                self._selected.discard(key)
            else:
                self._selected.add(key)
            self.anchor = key
        else:
            self._selected = {key}
            self.anchor = key

    # ---- drag --------------------------------------------------------

    def drag_start(self, key: Optional[CellKey]) -> None:
        if key is None or key not in self.grid:
            return
        self._drag = DragState(start_cell=key, current_cell=key)
        self._selected = {key}
        self.anchor = key

    def drag_move(self, key: Optional[CellKey]) -> None:
        """
        Recompute the rectangle on every move. An unresolved pointer keeps
        the last region instead of dropping the selection.
        """
        if self._drag is None or key is None or key not in self.grid:
            return
        if key == self._drag.current_cell:
            return
        self._drag.current_cell = key
        self._selected = set(self.grid.rectangle(self._drag.start_cell, key))
        logger.debug(f"Drag {self._drag.start_cell} -> {key}: {len(self._selected)} cells")

    def drag_end(self) -> None:
        if self._drag is None:
            return
        self._selected = set(self.grid.rectangle(self._drag.start_cell, self._drag.current_cell))
        self.anchor = self._drag.current_cell
        self._drag = None

    # ---- bulk --------------------------------------------------------

    def select_row(self, employee_id: str) -> None:
        cells = self.grid.row_cells(employee_id)
        if not cells:
            return
        self._selected = set(cells)

    def select_column(self, day: date) -> None:
        cells = self.grid.column_cells(day)
        if not cells:
            return
        self._selected = set(cells)
