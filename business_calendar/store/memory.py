from __future__ import annotations

import threading

from business_calendar.calendar.models import Day, Month, Year, copy_month, copy_year


class MemoryStore:
    """Process-local store. Contents are lost on restart."""

    def __init__(self) -> None:
        self._years: dict[int, Year] = {}
        self._lock = threading.Lock()

    def put_year(self, year: int, data: Year) -> None:
        snapshot = copy_year(data)
        with self._lock:
            self._years[year] = snapshot

    def find_year(self, year: int) -> Year | None:
        with self._lock:
            data = self._years.get(year)
            return copy_year(data) if data is not None else None

    def find_month(self, year: int, month: int) -> Month | None:
        with self._lock:
            days = self._years.get(year, {}).get(month)
            return copy_month(days) if days is not None else None

    def find_day(self, year: int, month: int, day: int) -> Day | None:
        with self._lock:
            return self._years.get(year, {}).get(month, {}).get(day)
