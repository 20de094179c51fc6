from __future__ import annotations

from typing import Protocol, runtime_checkable

from business_calendar.calendar.models import Year


@runtime_checkable
class Source(Protocol):
    """Provider of calendar data for a year.

    Implementations may return fewer than 12 months and fewer than all days of
    a month. Failures are signalled by raising, usually SourceUnavailableError.
    """

    def get_year(self, year: int) -> Year: ...
