"""Scheduled and on-demand calendar synchronization.

SyncScheduler owns one background thread that wakes up once a day at the
configured local time and rebuilds the current and the next year. The same
build-and-persist operation is available on demand through update_calendar,
which may be called concurrently with the loop from request handlers.

Lifecycle::

    idle --start()--> running --stop()--> shutting_down --loop exits--> stopped
    idle --stop()--> stopped

The loop waits only on its stop event, using the delay to the next trigger as
the timeout. stop() never interrupts a sync that is already running: it waits
for the loop to exit until the deadline and raises ShutdownTimeoutError if the
deadline passes first.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from enum import StrEnum

from loguru import logger

from business_calendar.calendar.aggregator import Aggregator, SourceFailure
from business_calendar.core.errors import (
    CalendarError,
    PersistenceError,
    SchedulerError,
    ShutdownTimeoutError,
)
from business_calendar.store.base import Store


class SchedulerState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


@dataclass
class SyncResult:
    """Outcome of one update_calendar call."""

    year: int
    written: bool
    failures: list[SourceFailure] = field(default_factory=list)


class SyncScheduler:
    def __init__(
        self,
        aggregator: Aggregator,
        store: Store,
        update_at: time | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Create a scheduler.

        Args:
            aggregator: Builds year records from the configured sources
            store: Where built years are written
            update_at: Local time of day of the daily sync. None disables start()
            clock: Returns the current local naive datetime
        """
        self.aggregator = aggregator
        self.store = store
        self.update_at = update_at
        self._clock = clock

        self._lock = threading.Lock()
        self._state = SchedulerState.IDLE
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._busy = threading.Event()

    @property
    def state(self) -> SchedulerState:
        with self._lock:
            return self._state

    @property
    def busy(self) -> bool:
        """True while the loop is running a scheduled update."""
        return self._busy.is_set()

    # ── synchronization ──────────────────────────────────────────────────

    def update_calendar(self, year: int) -> SyncResult:
        """Build a year from all sources and persist it.

        An empty build (every source failed or returned nothing) is not
        written and is not an error.

        Raises:
            PersistenceError: If the store rejects the write
        """
        report = self.aggregator.build_year_report(year)
        if report.empty:
            logger.info(f"[SYNC] Nothing to update for {year}")
            return SyncResult(year=year, written=False, failures=report.failures)

        try:
            self.store.put_year(year, report.data)
        except Exception as e:
            logger.error(f"[SYNC] Cannot store year {year}: {e}")
            raise PersistenceError(f"cannot store year {year}: {e}") from e

        logger.info(f"[SYNC] Stored calendar for {year} ({len(report.data)} month(s), {len(report.failures)} failed source(s))")
        return SyncResult(year=year, written=True, failures=report.failures)

    def update_current_years(self) -> None:
        """Update the current and the next year. Failures are logged, not raised."""
        current = self._clock().year
        for year in (current, current + 1):
            try:
                self.update_calendar(year)
            except CalendarError as e:
                logger.warning(f"[SYNC] Cannot update {year}: {e}")

    # ── timing ───────────────────────────────────────────────────────────

    def next_run_at(self, now: datetime | None = None, previous: datetime | None = None) -> datetime:
        """Next trigger moment: today at update_at, or tomorrow if that has passed.

        Args:
            now: Current local time (defaults to the clock)
            previous: Trigger moment of the run that just happened. The next
                run is never scheduled at or before it.

        Raises:
            SchedulerError: If no daily trigger time is configured
        """
        if self.update_at is None:
            raise SchedulerError("daily sync time is not configured")

        now = now or self._clock()
        run_at = datetime.combine(now.date(), self.update_at)
        if run_at < now:
            run_at += timedelta(days=1)
        if previous is not None and run_at <= previous:
            run_at = datetime.combine(previous.date() + timedelta(days=1), self.update_at)
        return run_at

    def next_run_delay(self, now: datetime | None = None) -> float:
        """Seconds until the next daily trigger."""
        now = now or self._clock()
        return (self.next_run_at(now) - now).total_seconds()

    # ── lifecycle ────────────────────────────────────────────────────────

    def start(self) -> None:
        """Start the daily update loop in a background thread.

        Raises:
            SchedulerError: If no trigger time is configured or the scheduler
                was already started
        """
        if self.update_at is None:
            raise SchedulerError("cannot start scheduler: daily sync time is not configured")

        with self._lock:
            if self._state != SchedulerState.IDLE:
                raise SchedulerError(f"cannot start scheduler in state {self._state}")
            self._state = SchedulerState.RUNNING
            self._thread = threading.Thread(target=self._run, name="calendar-sync", daemon=True)
            self._thread.start()

        logger.info(f"[SCHEDULER] Started daily calendar sync at {self.update_at.isoformat()}")

    def stop(self, timeout: float | None = None) -> None:
        """Stop the loop and wait for it to exit.

        Stopping an idle scheduler only marks it stopped; stopping a stopped
        scheduler does nothing.

        Args:
            timeout: Seconds to wait for in-flight work. None waits forever.

        Raises:
            ShutdownTimeoutError: If the loop is still busy after the deadline
        """
        with self._lock:
            if self._state == SchedulerState.STOPPED:
                return
            if self._state == SchedulerState.IDLE:
                self._state = SchedulerState.STOPPED
                logger.debug("[SCHEDULER] Stopped before start")
                return
            if self._state == SchedulerState.RUNNING:
                self._state = SchedulerState.SHUTTING_DOWN
            thread = self._thread

        logger.info("[SCHEDULER] Shutting down...")
        self._stop_event.set()

        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                logger.error(f"[SCHEDULER] In-flight sync did not finish within {timeout}s")
                raise ShutdownTimeoutError(f"scheduler did not stop within {timeout}s")

        logger.info("[SCHEDULER] Stopped")

    def _run(self) -> None:
        previous: datetime | None = None
        try:
            while True:
                run_at = self.next_run_at(previous=previous)
                delay = max((run_at - self._clock()).total_seconds(), 0.0)
                logger.debug(f"[SCHEDULER] Next sync at {run_at.isoformat()} (in {delay:.1f}s)")

                if self._stop_event.wait(timeout=delay):
                    break

                previous = run_at
                self._busy.set()
                try:
                    logger.info("[SCHEDULER] Running scheduled calendar sync")
                    self.update_current_years()
                except Exception:
                    logger.exception("[SCHEDULER] Unexpected error in scheduled sync")
                finally:
                    self._busy.clear()
        finally:
            with self._lock:
                self._state = SchedulerState.STOPPED
            logger.debug("[SCHEDULER] Loop exited")
