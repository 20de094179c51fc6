"""Baseline source: every day of the year classified as weekday or weekend."""

from __future__ import annotations

import calendar as std_calendar
from collections.abc import Iterable
from datetime import date

from business_calendar.calendar.models import Day, DayType, WeekDay, Year

DEFAULT_WEEKEND = (5, 6)  # Saturday, Sunday


class GenericSource:
    """Generates a full year in which the configured weekend days are days off.

    Weekend days are date.weekday() numbers, Monday is 0.
    """

    def __init__(self, weekend: Iterable[int] = DEFAULT_WEEKEND) -> None:
        self.weekend = frozenset(weekend)

    def get_year(self, year: int) -> Year:
        cal: Year = {}
        for mon in range(1, 13):
            days_in_month = std_calendar.monthrange(year, mon)[1]
            cal[mon] = {day_num: self._make_day(date(year, mon, day_num)) for day_num in range(1, days_in_month + 1)}
        return cal

    def _make_day(self, day: date) -> Day:
        is_weekend = day.weekday() in self.weekend
        return Day(
            week_day=WeekDay.from_date(day),
            working=not is_weekend,
            type=DayType.WEEKEND if is_weekend else DayType.NORMAL,
        )

    def __repr__(self) -> str:
        return f"GenericSource(weekend={sorted(self.weekend)})"
