from datetime import date

from shiftgrid.services.grid_editor.coverage import (
    presence_by_hour,
    employees_present,
    hourly_coverage,
    active_hours,
    coverage_grid,
    monthly_hours,
)
from shiftgrid.services.grid_editor.types import CellKey, ScheduleValue, EMPTY_VALUE


MAR_10 = date(2025, 3, 10)
MAR_11 = date(2025, 3, 11)
MAR_12 = date(2025, 3, 12)


def lookup(values: dict):
    return lambda key: values.get(key, EMPTY_VALUE)


class TestOvernightCoverage:

    def test_overnight_shift_spills_into_next_date(self):
        values = {CellKey("emp-1", MAR_10): ScheduleValue.shift("22:00", "02:00")}
        effective = lookup(values)
        roster = ["emp-1"]

        assert hourly_coverage(effective, roster, MAR_10) == {22: 1, 23: 1}
        assert hourly_coverage(effective, roster, MAR_11) == {0: 1, 1: 1}
        assert hourly_coverage(effective, roster, MAR_12) == {}

        assert employees_present(effective, roster, MAR_10, 23) == {"emp-1"}
        assert employees_present(effective, roster, MAR_11, 0) == {"emp-1"}
        assert employees_present(effective, roster, MAR_11, 1) == {"emp-1"}
        assert employees_present(effective, roster, MAR_11, 2) == set()
        assert employees_present(effective, roster, MAR_10, 1) == set()

    def test_spill_and_own_shift_counted_once(self):
        values = {
            CellKey("emp-1", MAR_10): ScheduleValue.shift("22:00", "02:00"),
            CellKey("emp-1", MAR_11): ScheduleValue.shift("01:00", "05:00"),
        }
        presence = presence_by_hour(lookup(values), ["emp-1"], MAR_11)
        assert presence[1] == {"emp-1"}


class TestHourlyCoverage:

    def test_counts_employees(self):
        values = {
            CellKey("emp-1", MAR_10): ScheduleValue.shift("09:00", "13:00"),
            CellKey("emp-2", MAR_10): ScheduleValue.shift("11:00", "15:00"),
        }
        coverage = hourly_coverage(lookup(values), ["emp-1", "emp-2"], MAR_10)
        assert coverage == {9: 1, 10: 1, 11: 2, 12: 2, 13: 1, 14: 1}

    def test_split_legs_counted_independently(self):
        values = {CellKey("emp-1", MAR_10): ScheduleValue.split("10:00", "12:00", "18:00", "20:00")}
        coverage = hourly_coverage(lookup(values), ["emp-1"], MAR_10)
        assert sorted(coverage) == [10, 11, 18, 19]

    def test_day_off_and_unconfigured_do_not_count(self):
        values = {
            CellKey("emp-1", MAR_10): ScheduleValue.day_off(),
            CellKey("emp-2", MAR_10): ScheduleValue.shift("00:00", "00:00"),
        }
        assert hourly_coverage(lookup(values), ["emp-1", "emp-2"], MAR_10) == {}

    def test_malformed_times_are_ignored(self):
        values = {CellKey("emp-1", MAR_10): ScheduleValue(start_time="nine", end_time="17:00")}
        assert hourly_coverage(lookup(values), ["emp-1"], MAR_10) == {}


class TestCoverageGrid:

    def test_active_hours_union(self):
        values = {
            CellKey("emp-1", MAR_10): ScheduleValue.shift("09:00", "11:00"),
            CellKey("emp-2", MAR_11): ScheduleValue.shift("23:00", "01:00"),
        }
        assert active_hours(lookup(values), ["emp-1", "emp-2"], [MAR_10, MAR_11]) == [0, 9, 10, 23]

    def test_filter_does_not_change_counts(self):
        values = {
            CellKey("emp-1", MAR_10): ScheduleValue.shift("09:00", "18:00"),
            CellKey("emp-2", MAR_10): ScheduleValue.shift("14:00", "22:00"),
        }
        roster = ["emp-1", "emp-2"]
        full = coverage_grid(lookup(values), roster, [MAR_10])
        afternoon = coverage_grid(lookup(values), roster, [MAR_10], hours=range(14, 18))

        assert afternoon[0].hours == {14: 2, 15: 2, 16: 2, 17: 2}
        for hour, count in afternoon[0].hours.items():
            assert full[0].hours[hour] == count
        assert full[0].peak == 2

    def test_filter_reports_zero_for_uncovered_hours(self):
        values = {CellKey("emp-1", MAR_10): ScheduleValue.shift("09:00", "10:00")}
        grid = coverage_grid(lookup(values), ["emp-1"], [MAR_10], hours=[8, 9])
        assert grid[0].hours == {8: 0, 9: 1}

    def test_holiday_marker(self):
        grid = coverage_grid(lookup({}), ["emp-1"], [MAR_10, MAR_11], holidays={MAR_11: "Carnival"})
        assert grid[0].is_holiday is False
        assert grid[1].is_holiday is True
        assert grid[1].holiday_description == "Carnival"
        assert grid[1].peak == 0


class TestMonthlyHours:

    def test_sums_per_employee(self):
        values = {
            CellKey("emp-1", MAR_10): ScheduleValue.shift("09:00", "17:00"),
            CellKey("emp-1", MAR_11): ScheduleValue.split("10:00", "14:00", "18:00", "22:00"),
            CellKey("emp-1", MAR_12): ScheduleValue.day_off(),
            CellKey("emp-2", MAR_10): ScheduleValue.shift("22:00", "02:00"),
        }
        totals = monthly_hours(lookup(values), ["emp-1", "emp-2", "emp-3"], [MAR_10, MAR_11, MAR_12])
        assert totals == {"emp-1": 16.0, "emp-2": 4.0, "emp-3": 0}
