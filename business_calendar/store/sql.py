"""SQLAlchemy-backed calendar store.

Each row holds one month of one year as JSON. A year is written in a single
transaction that first removes the previously stored months of that year, so
the stored record always matches the last build exactly.
"""

from __future__ import annotations

import json
import shutil
import sqlite3
import tempfile
import threading
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from loguru import logger
from sqlalchemy import create_engine, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from business_calendar.calendar.models import Day, Month, Year, month_from_dict, month_to_dict
from business_calendar.core.errors import StoreError
from business_calendar.store.models import Base, CalendarMonth

IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}


class SqlStore:
    def __init__(self, url: str) -> None:
        logger.info(f"[STORE] Initializing calendar database: {url}")

        engine_kwargs: dict = {"echo": False}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        if url in IN_MEMORY_URLS:
            # A single shared connection, otherwise every connection sees its own empty database.
            engine_kwargs["poolclass"] = StaticPool

        try:
            self.engine = create_engine(url, **engine_kwargs)
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise StoreError(f"cannot open calendar database {url}: {e}") from e

        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self._write_lock = threading.Lock()

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            logger.error(f"[STORE] Database session error, rolling back: {e}")
            session.rollback()
            raise StoreError(str(e)) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def put_year(self, year: int, data: Year) -> None:
        rows = [
            CalendarMonth(year=year, month=mon, days_json=json.dumps(month_to_dict(days), ensure_ascii=False))
            for mon, days in sorted(data.items())
        ]

        with self._write_lock, self._session() as session:
            session.execute(delete(CalendarMonth).where(CalendarMonth.year == year))
            session.add_all(rows)

        logger.debug(f"[STORE] Stored {len(rows)} month(s) of {year}")

    def find_year(self, year: int) -> Year | None:
        with self._session() as session:
            rows = session.execute(
                select(CalendarMonth).where(CalendarMonth.year == year).order_by(CalendarMonth.month)
            ).scalars().all()
            stored = [(row.month, row.days_json) for row in rows]

        result: Year = {}
        for mon, days_json in stored:
            days = self._decode_month(year, mon, days_json)
            if days is not None:
                result[mon] = days

        return result or None

    def find_month(self, year: int, month: int) -> Month | None:
        with self._session() as session:
            row = session.get(CalendarMonth, (year, month))
            days_json = row.days_json if row is not None else None

        if days_json is None:
            return None
        return self._decode_month(year, month, days_json)

    def find_day(self, year: int, month: int, day: int) -> Day | None:
        days = self.find_month(year, month)
        if days is None:
            return None
        return days.get(day)

    def backup(self, out: BinaryIO) -> None:
        """Write a consistent snapshot of the SQLite database file to out.

        Raises:
            StoreError: If the database is not SQLite or the snapshot fails
        """
        if self.engine.dialect.name != "sqlite":
            raise StoreError(f"backup is not supported for {self.engine.dialect.name}")

        with tempfile.TemporaryDirectory() as tmp_dir:
            snapshot_path = Path(tmp_dir) / "backup.db"
            raw = self.engine.raw_connection()
            try:
                target = sqlite3.connect(snapshot_path)
                try:
                    raw.driver_connection.backup(target)
                finally:
                    target.close()
            except sqlite3.Error as e:
                raise StoreError(f"cannot make backup: {e}") from e
            finally:
                raw.close()

            with snapshot_path.open("rb") as f:
                shutil.copyfileobj(f, out)

        logger.info("[STORE] Backup written")

    def close(self) -> None:
        self.engine.dispose()

    @staticmethod
    def _decode_month(year: int, month: int, days_json: str) -> Month | None:
        try:
            return month_from_dict(json.loads(days_json))
        except (TypeError, ValueError) as e:
            logger.warning(f"[STORE] Invalid month calendar at /{year}/{month}: {e}")
            return None
