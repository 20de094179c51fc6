from __future__ import annotations

from typing import Protocol, runtime_checkable

from business_calendar.calendar.models import Day, Month, Year


@runtime_checkable
class Store(Protocol):
    """Persistence contract of the calendar service.

    Writes replace the whole year. Reads return independent copies, callers
    may modify them freely. Implementations serialize their own writes, the
    last write of a year wins. Storage failures raise StoreError.
    """

    def put_year(self, year: int, data: Year) -> None: ...

    def find_year(self, year: int) -> Year | None: ...

    def find_month(self, year: int, month: int) -> Month | None: ...

    def find_day(self, year: int, month: int, day: int) -> Day | None: ...
