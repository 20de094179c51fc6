"""Tests for the calendar data model and its JSON representation."""

from datetime import date

import pytest

from business_calendar.calendar.models import (
    Day,
    DayType,
    WeekDay,
    copy_year,
    month_from_dict,
    year_from_dict,
    year_to_dict,
)


class TestWeekDay:
    def test_from_date(self):
        assert WeekDay.from_date(date(2022, 1, 1)) == WeekDay.SATURDAY
        assert WeekDay.from_date(date(2022, 1, 3)) == WeekDay.MONDAY

    def test_unknown_is_empty(self):
        assert not WeekDay.UNKNOWN
        assert not DayType.UNKNOWN


class TestDaySerialization:
    def test_to_dict_uses_wire_names(self):
        day = Day(WeekDay.MONDAY, True, DayType.PRE_HOLIDAY, "Shortened day")
        assert day.to_dict() == {"weekDay": "mon", "working": True, "type": "preHoliday", "desc": "Shortened day"}

    def test_to_dict_omits_empty_desc_and_weekday(self):
        assert Day(working=False, type=DayType.HOLIDAY).to_dict() == {"working": False, "type": "holiday"}

    def test_from_dict_defaults(self):
        assert Day.from_dict({"type": "noWork"}) == Day(type=DayType.NON_WORKING)

    def test_from_dict_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            Day.from_dict({"type": "party"})

    @pytest.mark.parametrize("working", ["false", "true", 0, 1, "no"])
    def test_from_dict_requires_boolean_working(self, working):
        with pytest.raises(ValueError, match="working must be a boolean"):
            Day.from_dict({"working": working, "type": "holiday"})

    def test_from_dict_requires_string_desc(self):
        with pytest.raises(ValueError, match="desc must be a string"):
            Day.from_dict({"type": "holiday", "desc": 2022})

    def test_from_dict_null_fields(self):
        assert Day.from_dict({"working": None, "type": "holiday", "desc": None}) == Day(type=DayType.HOLIDAY)


class TestYearHelpers:
    def test_year_round_trip_with_string_keys(self):
        raw = {"1": {"1": {"weekDay": "sat", "working": False, "type": "holiday"}}}
        year = year_from_dict(raw)
        assert year == {1: {1: Day(WeekDay.SATURDAY, False, DayType.HOLIDAY)}}
        assert year_to_dict(year) == raw

    def test_invalid_month_number(self):
        with pytest.raises(ValueError):
            year_from_dict({"13": {}})

    def test_invalid_day_number(self):
        with pytest.raises(ValueError):
            month_from_dict({32: {"type": "normal"}})

    def test_copy_year_is_independent(self, new_year_holidays):
        copied = copy_year(new_year_holidays)
        copied[1][4] = Day(type=DayType.NORMAL)
        copied[2] = {}

        assert 4 not in new_year_holidays[1]
        assert 2 not in new_year_holidays
