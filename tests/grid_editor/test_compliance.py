from datetime import date, timedelta

from shiftgrid.services.grid_editor.compliance import find_consecutive_day_violations
from shiftgrid.services.grid_editor.types import CellKey, ScheduleValue, EMPTY_VALUE

from conftest import get_test_dates


WORK = ScheduleValue.shift("09:00", "18:00")


def schedule(emp_id: str, pattern: str) -> dict:
    """W = working, O = day off, . = nothing scheduled, Z = 00:00-00:00; one char per date from March 1."""
    values = {}
    for offset, mark in enumerate(pattern):
        day = date(2025, 3, 1) + timedelta(days=offset)
        if mark == "W":
            values[CellKey(emp_id, day)] = WORK
        elif mark == "O":
            values[CellKey(emp_id, day)] = ScheduleValue.day_off()
        elif mark == "Z":
            values[CellKey(emp_id, day)] = ScheduleValue.shift("00:00", "00:00")
    return values


def violations_for(values: dict, roster=("emp-1",), **kwargs):
    effective = lambda key: values.get(key, EMPTY_VALUE)
    return find_consecutive_day_violations(effective, list(roster), get_test_dates(), **kwargs)


class TestConsecutiveDays:

    def test_six_days_is_fine(self):
        assert violations_for(schedule("emp-1", "WWWWWWO")) == []

    def test_seven_days_then_day_off(self):
        violations = violations_for(schedule("emp-1", "WWWWWWWO"))
        assert len(violations) == 1
        assert violations[0].employee_id == "emp-1"
        assert violations[0].consecutive_days == 7
        assert violations[0].start_date == date(2025, 3, 1)
        assert violations[0].end_date == date(2025, 3, 7)

    def test_two_separate_runs(self):
        violations = violations_for(schedule("emp-1", "WWWWWWWOWWWWWWWW"))
        assert [v.consecutive_days for v in violations] == [7, 8]

    def test_run_at_month_end(self):
        pattern = "O" * 21 + "W" * 10
        violations = violations_for(schedule("emp-1", pattern))
        assert len(violations) == 1
        assert violations[0].consecutive_days == 10
        assert violations[0].end_date == date(2025, 3, 31)

    def test_empty_and_unconfigured_break_runs(self):
        assert violations_for(schedule("emp-1", "WWWW.WWWWZWWW")) == []

    def test_per_employee(self):
        values = schedule("emp-1", "WWWWWWW")
        values.update(schedule("emp-2", "WWWWWW"))
        violations = violations_for(values, roster=("emp-1", "emp-2"))
        assert [v.employee_id for v in violations] == ["emp-1"]

    def test_custom_limit(self):
        assert len(violations_for(schedule("emp-1", "WWWWW"), max_consecutive_days=5)) == 1

    def test_scenario_day_off_then_six_working_days(self):
        values = schedule("emp-1", "OWWWWWW")
        assert violations_for(values) == []

        values[CellKey("emp-1", date(2025, 3, 8))] = WORK
        violations = violations_for(values)
        assert len(violations) == 1
        assert violations[0].consecutive_days == 7
