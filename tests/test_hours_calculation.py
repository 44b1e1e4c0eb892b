# tests/test_hours_calculation.py
"""
Unit tests for the hours engine.

Tests verify interval overlap, shift resolution across midnight, holiday
splitting and breakdown (night) hours for the default position catalog.
"""

import datetime
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from desglose.core.constants import NIGHT_HOURS_BREAKDOWN_ID
from desglose.core.hours import (
    applicable_breakdowns,
    breakdown_hours,
    compute_daily_hours,
    effective_standard_hours,
    extra_hours,
    holiday_hours,
    make_holiday_set,
    overlap_hours,
    toggle_holiday,
)
from desglose.core.models import Breakdown, HoursConfig, Position
from desglose.core.time_utils import (
    InvalidClockFormat,
    parse_clock,
    resolve_shift,
    shift_duration_hours,
)

DAY = datetime.date(2025, 1, 8)
NEXT_DAY = DAY + datetime.timedelta(days=1)


def dt(day: datetime.date, hour: int, minute: int = 0) -> datetime.datetime:
    return datetime.datetime.combine(day, datetime.time(hour, minute))


class TestOverlap:
    """Test the interval overlap calculator."""

    def test_overlap_is_symmetric(self):
        a = (dt(DAY, 8), dt(DAY, 16))
        b = (dt(DAY, 12), dt(DAY, 20))
        assert overlap_hours(*a, *b) == overlap_hours(*b, *a) == 4.0

    def test_touching_intervals_do_not_overlap(self):
        assert overlap_hours(dt(DAY, 8), dt(DAY, 12), dt(DAY, 12), dt(DAY, 16)) == 0.0

    def test_disjoint_intervals(self):
        assert overlap_hours(dt(DAY, 1), dt(DAY, 2), dt(DAY, 10), dt(DAY, 11)) == 0.0

    def test_contained_interval(self):
        assert overlap_hours(dt(DAY, 0), dt(NEXT_DAY, 0), dt(DAY, 10), dt(DAY, 11, 30)) == 1.5

    def test_reversed_interval_is_rejected(self):
        with pytest.raises(ValueError):
            overlap_hours(dt(DAY, 12), dt(DAY, 8), dt(DAY, 0), dt(DAY, 23))


class TestClockParsing:
    """Test "HH:MM" parsing."""

    @pytest.mark.parametrize("value", ["00:00", "06:30", "23:59"])
    def test_valid_clocks(self, value):
        assert parse_clock(value).strftime("%H:%M") == value

    @pytest.mark.parametrize("value", ["24:00", "6:30", "06:3", "0630", "ab:cd", "", None, 630])
    def test_invalid_clocks(self, value):
        with pytest.raises(InvalidClockFormat):
            parse_clock(value)

    def test_invalid_clock_is_value_error(self):
        with pytest.raises(ValueError):
            parse_clock("25:00")

    def test_time_object_drops_seconds(self):
        assert parse_clock(datetime.time(7, 15, 42)) == datetime.time(7, 15)


class TestShiftResolution:
    """Test resolving clocks into datetimes."""

    def test_day_shift_stays_on_same_day(self):
        start, end = resolve_shift(DAY, "06:30", "14:30")
        assert start == dt(DAY, 6, 30)
        assert end == dt(DAY, 14, 30)

    def test_night_shift_crosses_midnight(self):
        start, end = resolve_shift(DAY, "22:30", "06:30")
        assert start == dt(DAY, 22, 30)
        assert end == dt(NEXT_DAY, 6, 30)

    def test_equal_clocks_mean_24_hours(self):
        assert shift_duration_hours(DAY, "08:00", "08:00") == 24.0

    @pytest.mark.parametrize(
        "start,end",
        [("00:00", "00:01"), ("23:59", "00:00"), ("12:00", "11:59"), ("06:30", "06:30"), ("22:00", "06:00")],
    )
    def test_duration_is_within_bounds(self, start, end):
        assert 0 < shift_duration_hours(DAY, start, end) <= 24

    def test_bad_clock_raises(self):
        with pytest.raises(InvalidClockFormat):
            resolve_shift(DAY, "9:00", "17:00")


class TestHolidayHours:
    """Test the holiday split at midnight."""

    def test_no_holidays(self):
        start, end = resolve_shift(DAY, "22:30", "06:30")
        assert holiday_hours(start, end, frozenset(), DAY) == 0.0

    def test_holiday_on_shift_day_counts_until_midnight(self):
        start, end = resolve_shift(DAY, "22:30", "06:30")
        assert holiday_hours(start, end, make_holiday_set([DAY]), DAY) == 1.5

    def test_holiday_on_next_day_counts_after_midnight(self):
        start, end = resolve_shift(DAY, "22:30", "06:30")
        assert holiday_hours(start, end, make_holiday_set([NEXT_DAY]), DAY) == 6.5

    def test_both_days_holiday_counts_whole_shift(self):
        start, end = resolve_shift(DAY, "22:30", "06:30")
        assert holiday_hours(start, end, make_holiday_set([DAY, NEXT_DAY]), DAY) == 8.0

    def test_day_shift_ignores_next_day_holiday(self):
        start, end = resolve_shift(DAY, "06:30", "14:30")
        assert holiday_hours(start, end, make_holiday_set([NEXT_DAY]), DAY) == 0.0

    def test_full_day_on_holiday(self):
        start, end = resolve_shift(DAY, "00:00", "00:00")
        assert holiday_hours(start, end, make_holiday_set([DAY]), DAY) == 24.0

    def test_toggle_twice_restores_set(self):
        holidays = make_holiday_set([NEXT_DAY])
        assert toggle_holiday(toggle_holiday(holidays, DAY), DAY) == holidays

    def test_datetimes_are_collapsed_to_dates(self):
        holidays = make_holiday_set([dt(DAY, 10), DAY])
        assert holidays == frozenset({DAY})


class TestBreakdownHours:
    """Test breakdown (night) hours for the default catalog."""

    @pytest.fixture
    def night(self, breakdowns):
        return breakdowns[NIGHT_HOURS_BREAKDOWN_ID]

    def _night_for(self, night, start_clock, end_clock):
        start, end = resolve_shift(DAY, start_clock, end_clock)
        return breakdown_hours(start, end, night, DAY)

    def test_cn_shift(self, night):
        assert self._night_for(night, "22:30", "06:30") == 7.5

    def test_tn1_shift_matches_interval(self, night):
        assert self._night_for(night, "22:00", "06:00") == 8.0

    def test_cm_shift_has_no_night_hours(self, night):
        assert self._night_for(night, "06:30", "14:30") == 0.0

    def test_evening_shift(self, night):
        assert self._night_for(night, "14:30", "22:30") == 0.5

    def test_shift_ending_after_midnight(self, night):
        assert self._night_for(night, "18:00", "02:00") == 4.0

    def test_early_morning_shift_uses_previous_day_interval(self, night):
        assert self._night_for(night, "00:00", "02:00") == 2.0

    def test_full_day_shift(self, night):
        # 00:00-06:00 from the previous night plus 22:00-24:00
        assert self._night_for(night, "00:00", "00:00") == 8.0

    def test_breakdown_without_interval(self):
        manual_only = Breakdown(name="Guardia")
        start, end = resolve_shift(DAY, "22:00", "06:00")
        assert breakdown_hours(start, end, manual_only, DAY) == 0.0

    @pytest.mark.parametrize("start_clock,end_clock", [("22:30", "06:30"), ("04:00", "23:00"), ("05:00", "05:00")])
    def test_never_exceeds_total(self, night, start_clock, end_clock):
        assert self._night_for(night, start_clock, end_clock) <= shift_duration_hours(DAY, start_clock, end_clock)


class TestApplicableBreakdowns:
    """Test which breakdowns are computed for a position."""

    def test_global_breakdown_applies_to_every_position(self, catalog, breakdowns):
        assert applicable_breakdowns(catalog["CM"], breakdowns) == [NIGHT_HOURS_BREAKDOWN_ID]
        assert applicable_breakdowns(None, breakdowns) == [NIGHT_HOURS_BREAKDOWN_ID]

    def test_position_list_first_then_globals(self, breakdowns):
        catalog_breakdowns = {
            **breakdowns,
            "reten": Breakdown(name="Retén", time_start="08:00", time_end="10:00", position_id="X"),
        }
        position = Position(start="08:00", end="16:00", breakdowns=["reten"])
        assert applicable_breakdowns(position, catalog_breakdowns) == ["reten", NIGHT_HOURS_BREAKDOWN_ID]

    def test_unknown_association_is_skipped(self, breakdowns):
        position = Position(start="08:00", end="16:00", breakdowns=["missing"])
        assert applicable_breakdowns(position, breakdowns) == [NIGHT_HOURS_BREAKDOWN_ID]

    def test_owned_breakdown_does_not_leak_to_other_positions(self, breakdowns):
        catalog_breakdowns = {**breakdowns, "reten": Breakdown(name="Retén", position_id="X")}
        position = Position(start="08:00", end="16:00")
        assert "reten" not in applicable_breakdowns(position, catalog_breakdowns)


class TestDailyHours:
    """Test the full per-day computation."""

    def test_cn_holiday_scenario(self, catalog, breakdowns, hours_config):
        position = catalog["CN"]
        daily = compute_daily_hours(
            DAY,
            position.start,
            position.end,
            make_holiday_set([NEXT_DAY]),
            effective_standard_hours(position, hours_config),
            applicable_breakdowns(position, breakdowns),
            breakdowns,
        )
        assert daily["total"] == 8.0
        assert daily["extra"] == 0.0
        assert daily["holiday"] == 6.5
        assert daily["custom"] == {NIGHT_HOURS_BREAKDOWN_ID: 7.5}

    def test_extra_hours_over_standard(self, breakdowns):
        daily = compute_daily_hours(DAY, "06:00", "16:30", frozenset(), 8.0, [], breakdowns)
        assert daily["total"] == 10.5
        assert daily["extra"] == 2.5

    def test_same_input_same_output(self, catalog, breakdowns, hours_config):
        args = (DAY, "21:00", "07:00", make_holiday_set([DAY]), 8.0, [NIGHT_HOURS_BREAKDOWN_ID], breakdowns)
        assert compute_daily_hours(*args) == compute_daily_hours(*args)

    def test_extra_hours_never_negative(self):
        assert extra_hours(4.0, 8.0) == 0.0

    def test_position_standard_hours_win_over_global(self):
        config = HoursConfig(standard_daily_hours=8)
        assert effective_standard_hours(Position(start="08:00", end="15:00", standard_hours=7), config) == 7
        assert effective_standard_hours(Position(start="08:00", end="15:00", standard_hours=0), config) == 0
        assert effective_standard_hours(Position(start="08:00", end="15:00"), config) == 8
        assert effective_standard_hours(None, config) == 8
