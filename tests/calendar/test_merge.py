"""Tests for the field-level merge rule."""

import copy

import pytest

from business_calendar.calendar.merge import merge, merge_day
from business_calendar.calendar.models import Day, DayType, WeekDay

BASE_DAY = Day(WeekDay.WEDNESDAY, True, DayType.NORMAL, "Ordinary")


class TestMergeDay:
    def test_working_always_taken_from_overlay(self):
        assert merge_day(BASE_DAY, Day(working=False)).working is False
        assert merge_day(Day(working=False), Day(working=True)).working is True

    def test_empty_overlay_fields_keep_base(self):
        merged = merge_day(BASE_DAY, Day(working=False))
        assert merged == Day(WeekDay.WEDNESDAY, False, DayType.NORMAL, "Ordinary")

    def test_non_empty_overlay_fields_win(self):
        overlay = Day(WeekDay.THURSDAY, True, DayType.PRE_HOLIDAY, "Shortened")
        assert merge_day(BASE_DAY, overlay) == overlay

    def test_type_and_working_are_not_reconciled(self):
        base = Day(WeekDay.MONDAY, False, DayType.HOLIDAY, "New Year")
        merged = merge_day(base, Day(working=True))
        assert merged.type == DayType.HOLIDAY
        assert merged.working is True

    @pytest.mark.parametrize(
        "overlay",
        [
            Day(),
            Day(week_day=WeekDay.FRIDAY),
            Day(type=DayType.HOLIDAY, working=False),
            Day(desc="Label only", working=True),
            Day(WeekDay.SUNDAY, False, DayType.WEEKEND, "All set"),
        ],
    )
    def test_overlay_precedence(self, overlay):
        merged = merge_day(BASE_DAY, overlay)
        assert merged.working == overlay.working
        assert merged.week_day == (overlay.week_day or BASE_DAY.week_day)
        assert merged.type == (overlay.type or BASE_DAY.type)
        assert merged.desc == (overlay.desc or BASE_DAY.desc)


class TestMerge:
    def test_february_example(self):
        base = {
            2: {
                21: Day(WeekDay.MONDAY, True, DayType.NORMAL),
                22: Day(WeekDay.TUESDAY, True, DayType.NORMAL),
                23: Day(WeekDay.WEDNESDAY, True, DayType.NORMAL),
            }
        }
        overlay = {
            2: {
                22: Day(WeekDay.TUESDAY, True, DayType.PRE_HOLIDAY),
                23: Day(working=False, type=DayType.HOLIDAY),
                24: Day(WeekDay.THURSDAY, True, DayType.NORMAL),
            }
        }

        assert merge(base, overlay) == {
            2: {
                21: Day(WeekDay.MONDAY, True, DayType.NORMAL),
                22: Day(WeekDay.TUESDAY, True, DayType.PRE_HOLIDAY),
                23: Day(WeekDay.WEDNESDAY, False, DayType.HOLIDAY),
                24: Day(WeekDay.THURSDAY, True, DayType.NORMAL),
            }
        }

    def test_keys_are_union_of_inputs(self):
        base = {1: {1: Day(working=True), 2: Day()}, 3: {5: Day()}}
        overlay = {1: {2: Day(), 3: Day()}, 4: {10: Day()}}

        merged = merge(base, overlay)

        assert set(merged) == {1, 3, 4}
        assert set(merged[1]) == {1, 2, 3}
        assert set(merged[3]) == {5}
        assert set(merged[4]) == {10}

    def test_overlay_only_day_is_used_verbatim(self):
        overlay_day = Day(working=False)
        merged = merge({1: {1: Day(WeekDay.SATURDAY, False, DayType.WEEKEND)}}, {1: {2: overlay_day}})
        assert merged[1][2] == overlay_day

    def test_inputs_are_not_mutated(self, new_year_holidays):
        base = {1: {1: Day(WeekDay.SATURDAY, False, DayType.WEEKEND), 10: Day(WeekDay.MONDAY, True, DayType.NORMAL)}}
        base_snapshot = copy.deepcopy(base)
        overlay_snapshot = copy.deepcopy(new_year_holidays)

        merged = merge(base, new_year_holidays)
        merged[1][31] = Day()
        merged[2] = {}

        assert base == base_snapshot
        assert new_year_holidays == overlay_snapshot

    def test_result_does_not_alias_input_months(self):
        base = {1: {1: Day()}}
        overlay = {2: {1: Day()}}

        merged = merge(base, overlay)

        assert merged[1] is not base[1]
        assert merged[2] is not overlay[2]

    def test_empty_inputs(self, new_year_holidays):
        assert merge({}, {}) == {}
        assert merge({}, new_year_holidays) == new_year_holidays
        assert merge(new_year_holidays, {}) == new_year_holidays
