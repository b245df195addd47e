import pytest

from shiftgrid.services.grid_editor.clipboard import ClipboardEngine, describe_value
from shiftgrid.services.grid_editor.types import ScheduleValue, EMPTY_VALUE

from conftest import cell


A = ScheduleValue.shift("09:00", "17:00")
B = ScheduleValue.shift("12:00", "20:00", position="kitchen")
C = ScheduleValue.day_off()


@pytest.fixture
def values() -> dict:
    return {cell(1, 2): A, cell(1, 3): B, cell(2, 2): C}


@pytest.fixture
def clipboard() -> ClipboardEngine:
    return ClipboardEngine()


def lookup(values):
    return lambda key: values.get(key, EMPTY_VALUE)


class TestDescribeValue:

    def test_labels(self):
        assert describe_value(ScheduleValue.vacation()) == "Vacation"
        assert describe_value(ScheduleValue.birthday()) == "Birthday"
        assert describe_value(ScheduleValue.day_off()) == "Day off"
        assert describe_value(EMPTY_VALUE) == "Empty"

    def test_shift_label_uses_position_lookup(self):
        assert describe_value(B, {"kitchen": "Kitchen"}) == "12:00-20:00 (Kitchen)"
        assert describe_value(B) == "12:00-20:00 (kitchen)"

    def test_split_label(self):
        value = ScheduleValue.split("10:00", "14:00", "18:00", "22:00")
        assert describe_value(value) == "10:00-14:00 / 18:00-22:00"


class TestCopy:

    def test_offsets_relative_to_anchor(self, clipboard, grid, values):
        entry = clipboard.copy([cell(2, 2), cell(1, 3), cell(1, 2)], grid, lookup(values))

        offsets = {(c.row_offset, c.col_offset): c.value for c in entry.cells}
        assert offsets == {(0, 0): A, (0, 1): B, (1, 0): C}
        assert entry.source_description == "3 cells"

    def test_single_cell_is_fill(self, clipboard, grid, values):
        entry = clipboard.copy([cell(1, 3)], grid, lookup(values), {"kitchen": "Kitchen"})
        assert entry.is_fill
        assert entry.source_description == "12:00-20:00 (Kitchen)"

    def test_empty_selection_keeps_clipboard(self, clipboard, grid, values):
        clipboard.copy([cell(1, 2)], grid, lookup(values))
        assert clipboard.copy([], grid, lookup(values)) is None
        assert clipboard.entry.cells[0].value == A

    def test_clear(self, clipboard, grid, values):
        clipboard.copy([cell(1, 2)], grid, lookup(values))
        clipboard.clear()
        assert not clipboard.has_content


class TestPaste:

    def test_replays_offsets_from_new_anchor(self, clipboard, grid, values):
        clipboard.copy([cell(1, 2), cell(1, 3), cell(2, 2)], grid, lookup(values))
        plan = dict(clipboard.plan_paste([cell(4, 10)], grid))
        assert plan == {cell(4, 10): A, cell(4, 11): B, cell(5, 10): C}

    def test_anchor_uses_earliest_target(self, clipboard, grid, values):
        clipboard.copy([cell(1, 2), cell(1, 3), cell(2, 2)], grid, lookup(values))
        plan = dict(clipboard.plan_paste([cell(3, 6), cell(0, 5), cell(2, 5)], grid))
        assert set(plan) == {cell(0, 5), cell(0, 6), cell(1, 5)}

    def test_out_of_grid_targets_are_skipped(self, clipboard, grid, values):
        clipboard.copy([cell(1, 2), cell(1, 3), cell(2, 2)], grid, lookup(values))
        # bottom-right corner: only the anchor cell lands inside the grid
        plan = dict(clipboard.plan_paste([cell(5, 30)], grid))
        assert plan == {cell(5, 30): A}

    def test_fill_ignores_offsets(self, clipboard, grid, values):
        clipboard.copy([cell(1, 3)], grid, lookup(values))
        targets = [cell(0, 0), cell(3, 7), cell(5, 30)]
        plan = clipboard.plan_paste(targets, grid)
        assert dict(plan) == {key: B for key in targets}

    def test_paste_applies_once(self, clipboard, grid, values):
        clipboard.copy([cell(1, 2), cell(1, 3)], grid, lookup(values))
        calls = []
        count = clipboard.paste([cell(0, 0)], grid, calls.append)
        assert count == 2
        assert len(calls) == 1

    def test_paste_onto_self_is_idempotent(self, clipboard, grid, values):
        selection = [cell(1, 2), cell(1, 3), cell(2, 2), cell(2, 3)]
        clipboard.copy(selection, grid, lookup(values))

        pasted = dict(values)
        clipboard.paste(selection, grid, lambda plan: pasted.update(plan))
        for key in selection:
            assert pasted.get(key, EMPTY_VALUE) == lookup(values)(key)

    def test_empty_clipboard_pastes_nothing(self, clipboard, grid):
        calls = []
        assert clipboard.paste([cell(0, 0)], grid, calls.append) == 0
        assert calls == []
