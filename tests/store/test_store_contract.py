"""Contract tests run against every store engine."""

import threading

from business_calendar.calendar.models import Day, DayType, WeekDay
from business_calendar.store.base import Store

JAN = {
    1: Day(WeekDay.SATURDAY, False, DayType.HOLIDAY, "New Year"),
    2: Day(WeekDay.SUNDAY, False, DayType.HOLIDAY),
}
FEB = {1: Day(WeekDay.TUESDAY, True, DayType.NORMAL)}


class TestStoreContract:
    def test_implements_protocol(self, any_store):
        assert isinstance(any_store, Store)

    def test_not_found(self, any_store):
        assert any_store.find_year(2022) is None
        assert any_store.find_month(2022, 1) is None
        assert any_store.find_day(2022, 1, 1) is None

    def test_put_and_find(self, any_store):
        any_store.put_year(2022, {1: JAN, 2: FEB})

        assert any_store.find_year(2022) == {1: JAN, 2: FEB}
        assert any_store.find_month(2022, 2) == FEB
        assert any_store.find_day(2022, 1, 1) == JAN[1]
        assert any_store.find_month(2022, 3) is None
        assert any_store.find_day(2022, 1, 3) is None
        assert any_store.find_year(2023) is None

    def test_put_replaces_whole_year(self, any_store):
        any_store.put_year(2022, {1: JAN, 2: FEB})
        any_store.put_year(2022, {2: {5: Day(type=DayType.HOLIDAY)}})

        assert any_store.find_year(2022) == {2: {5: Day(type=DayType.HOLIDAY)}}
        assert any_store.find_month(2022, 1) is None

    def test_years_are_independent(self, any_store):
        any_store.put_year(2022, {1: JAN})
        any_store.put_year(2023, {2: FEB})

        assert any_store.find_year(2022) == {1: JAN}
        assert any_store.find_year(2023) == {2: FEB}

    def test_reads_return_copies(self, any_store):
        any_store.put_year(2022, {1: dict(JAN)})

        year = any_store.find_year(2022)
        year[1][3] = Day()
        year[5] = {}
        month = any_store.find_month(2022, 1)
        month.clear()

        assert any_store.find_year(2022) == {1: JAN}

    def test_write_does_not_keep_caller_reference(self, any_store):
        data = {1: dict(JAN)}
        any_store.put_year(2022, data)
        data[1].clear()
        data[2] = FEB

        assert any_store.find_year(2022) == {1: JAN}

    def test_concurrent_writes_last_one_wins(self, any_store):
        versions = [{1: {day: Day(working=True, desc=f"v{i}")}} for i, day in enumerate(range(1, 9), start=1)]
        threads = [threading.Thread(target=any_store.put_year, args=(2022, v)) for v in versions]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert any_store.find_year(2022) in versions
