"""Calendar data model.

A year is stored as nested plain dicts: month number (1-12) -> day of month
(1-31) -> Day. A missing key means "no data for that day", which is different
from a Day whose fields are all empty. Days are immutable, so copying a year
only copies the two dict levels.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any


class WeekDay(StrEnum):
    """Day of week as used in the JSON representation."""

    UNKNOWN = ""
    MONDAY = "mon"
    TUESDAY = "tue"
    WEDNESDAY = "wed"
    THURSDAY = "thu"
    FRIDAY = "fri"
    SATURDAY = "sat"
    SUNDAY = "sun"

    @classmethod
    def from_date(cls, day: date) -> WeekDay:
        """Week day of a date, date.weekday() counts from Monday."""
        return _WEEKDAYS_BY_INDEX[day.weekday()]


_WEEKDAYS_BY_INDEX = [
    WeekDay.MONDAY,
    WeekDay.TUESDAY,
    WeekDay.WEDNESDAY,
    WeekDay.THURSDAY,
    WeekDay.FRIDAY,
    WeekDay.SATURDAY,
    WeekDay.SUNDAY,
]


class DayType(StrEnum):
    """Classification of a calendar day."""

    UNKNOWN = ""
    NORMAL = "normal"  # Regular working day
    WEEKEND = "weekend"
    PRE_HOLIDAY = "preHoliday"  # Shortened working day before a holiday
    HOLIDAY = "holiday"
    NON_WORKING = "noWork"  # Working day declared non-working by decree


@dataclass(frozen=True)
class Day:
    """One calendar day's classification."""

    week_day: WeekDay = WeekDay.UNKNOWN
    working: bool = False
    type: DayType = DayType.UNKNOWN
    desc: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.week_day:
            data["weekDay"] = self.week_day.value
        data["working"] = self.working
        data["type"] = self.type.value
        if self.desc:
            data["desc"] = self.desc
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Day:
        """Build a Day from its JSON representation.

        Missing or null fields take their empty values.

        Raises:
            ValueError: If weekDay or type hold an unknown value, working is
                not a boolean or desc is not a string
            TypeError: If data is not a mapping
        """
        if not isinstance(data, dict):
            raise TypeError(f"day must be a mapping, got {type(data).__name__}")

        working = data.get("working")
        if working is None:
            working = False
        elif not isinstance(working, bool):
            raise ValueError(f"working must be a boolean, got {working!r}")

        desc = data.get("desc")
        if desc is None:
            desc = ""
        elif not isinstance(desc, str):
            raise ValueError(f"desc must be a string, got {desc!r}")

        return cls(
            week_day=WeekDay(data.get("weekDay") or ""),
            working=working,
            type=DayType(data.get("type") or ""),
            desc=desc,
        )


Month = dict[int, Day]
Year = dict[int, Month]


def copy_month(month: Month) -> Month:
    return dict(month)


def copy_year(year: Year) -> Year:
    """Return an independent copy of a year record."""
    return {mon: copy_month(days) for mon, days in year.items()}


def month_to_dict(month: Month) -> dict[str, dict[str, Any]]:
    return {str(day_num): day.to_dict() for day_num, day in sorted(month.items())}


def month_from_dict(data: dict[Any, Any]) -> Month:
    """Parse a month from JSON, keys may be strings or ints.

    Raises:
        ValueError: On a day number outside 1..31 or an invalid day
    """
    if not isinstance(data, dict):
        raise TypeError(f"month must be a mapping, got {type(data).__name__}")

    month: Month = {}
    for key, value in data.items():
        day_num = int(key)
        if not 1 <= day_num <= 31:
            raise ValueError(f"invalid day number {day_num}")
        month[day_num] = Day.from_dict(value or {})
    return month


def year_to_dict(year: Year) -> dict[str, dict[str, dict[str, Any]]]:
    return {str(mon): month_to_dict(days) for mon, days in sorted(year.items())}


def year_from_dict(data: dict[Any, Any]) -> Year:
    """Parse a year from JSON, keys may be strings or ints.

    Raises:
        ValueError: On a month number outside 1..12 or an invalid month
    """
    if not isinstance(data, dict):
        raise TypeError(f"year must be a mapping, got {type(data).__name__}")

    year: Year = {}
    for key, value in data.items():
        mon = int(key)
        if not 1 <= mon <= 12:
            raise ValueError(f"invalid month number {mon}")
        year[mon] = month_from_dict(value or {})
    return year
