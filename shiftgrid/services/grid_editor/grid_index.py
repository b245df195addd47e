"""
Bidirectional mapping between cell keys and (row, column) coordinates of the
displayed month. Rows are employees in roster order, columns are dates.
Lookups outside the grid return None; callers treat that as "skip".
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator, Optional

from .types import CellKey


class GridIndex:
    """
    Immutable index over one roster/month. Rebuild (construct a new one)
    whenever the roster or displayed dates change; a stale index maps keys
    to the wrong cells.
    """

    def __init__(self, roster: Iterable[str], dates: Iterable[date]):
        self.roster: tuple[str, ...] = tuple(roster)
        self.dates: tuple[date, ...] = tuple(dates)
        self.employee_to_row: dict[str, int] = {emp_id: row for row, emp_id in enumerate(self.roster)}
        self.date_to_column: dict[date, int] = {day: col for col, day in enumerate(self.dates)}

    @property
    def row_count(self) -> int:
        return len(self.roster)

    @property
    def column_count(self) -> int:
        return len(self.dates)

    @property
    def is_empty(self) -> bool:
        return not self.roster or not self.dates

    def __contains__(self, key: object) -> bool:
        return (
            isinstance(key, CellKey)
            and key.employee_id in self.employee_to_row
            and key.date in self.date_to_column
        )

    def index_of(self, key: CellKey) -> Optional[tuple[int, int]]:
        row = self.employee_to_row.get(key.employee_id)
        col = self.date_to_column.get(key.date)
        if row is None or col is None:
            return None
        return row, col

    def cell_at(self, row: int, col: int) -> Optional[CellKey]:
        if not (0 <= row < len(self.roster) and 0 <= col < len(self.dates)):
            return None
        return CellKey(self.roster[row], self.dates[col])

    def anchor_of(self, keys: Iterable[CellKey]) -> Optional[tuple[CellKey, int, int]]:
        """
        Reference cell of a set of keys: earliest date, then lowest row.
        Keys outside the grid are ignored. Returns (key, row, col).
        """
        best = None
        for key in keys:
            position = self.index_of(key)
            if position is None:
                continue
            row, col = position
            if best is None or (col, row) < (best[2], best[1]):
                best = (key, row, col)
        return best

    def rectangle(self, first: CellKey, second: CellKey) -> list[CellKey]:
        """All cells in the inclusive rectangle spanned by two cells."""
        a = self.index_of(first)
        b = self.index_of(second)
        if a is None or b is None:
            return []
        row_lo, row_hi = sorted((a[0], b[0]))
        col_lo, col_hi = sorted((a[1], b[1]))
        return [
            CellKey(self.roster[row], self.dates[col])
            for row in range(row_lo, row_hi + 1)
            for col in range(col_lo, col_hi + 1)
        ]

    def row_cells(self, employee_id: str) -> list[CellKey]:
        if employee_id not in self.employee_to_row:
            return []
        return [CellKey(employee_id, day) for day in self.dates]

    def column_cells(self, day: date) -> list[CellKey]:
        if day not in self.date_to_column:
            return []
        return [CellKey(emp_id, day) for emp_id in self.roster]

    def cells(self) -> Iterator[CellKey]:
        for emp_id in self.roster:
            for day in self.dates:
                yield CellKey(emp_id, day)


# Offsets tried around a pointer when the exact point misses every cell,
# nearest first.
_SAMPLE_OFFSETS = (
    (0.0, 0.0),
    (2.0, 0.0), (-2.0, 0.0), (0.0, 2.0), (0.0, -2.0),
    (4.0, 4.0), (-4.0, 4.0), (4.0, -4.0), (-4.0, -4.0),
)


@dataclass(frozen=True)
class GridGeometry:
    """
    Uniform cell layout used to turn pointer positions into cells.
    `gutter` is the spacing between adjacent cells; points landing in it
    belong to no cell directly.
    """
    cell_width: float
    cell_height: float
    origin_x: float = 0.0
    origin_y: float = 0.0
    gutter: float = 0.0

    def _axis_hit(self, offset: float, size: float) -> Optional[int]:
        pitch = size + self.gutter
        index = math.floor(offset / pitch)
        if offset - index * pitch >= size:
            return None
        return index

    def _axis_nearest(self, offset: float, size: float) -> int:
        pitch = size + self.gutter
        index = math.floor(offset / pitch)
        inside = offset - index * pitch
        if inside >= size and inside - size >= self.gutter / 2:
            index += 1
        return index

    def resolve_cell(self, index: GridIndex, x: float, y: float) -> Optional[CellKey]:
        """
        Cell under the pointer. Tries the exact point, then nearby samples,
        then snaps a point sitting in a gutter or on a border to the nearest
        cell. Points outside the grid bounds resolve to None.
        """
        if index.is_empty:
            return None
        local_x = x - self.origin_x
        local_y = y - self.origin_y
        width = index.column_count * (self.cell_width + self.gutter) - self.gutter
        height = index.row_count * (self.cell_height + self.gutter) - self.gutter
        if not (0 <= local_x <= width and 0 <= local_y <= height):
            return None

        for dx, dy in _SAMPLE_OFFSETS:
            sx, sy = local_x + dx, local_y + dy
            if not (0 <= sx < width and 0 <= sy < height):
                continue
            col = self._axis_hit(sx, self.cell_width)
            row = self._axis_hit(sy, self.cell_height)
            if col is not None and row is not None:
                cell = index.cell_at(row, col)
                if cell is not None:
                    return cell

        col = min(self._axis_nearest(local_x, self.cell_width), index.column_count - 1)
        row = min(self._axis_nearest(local_y, self.cell_height), index.row_count - 1)
        return index.cell_at(row, col)
