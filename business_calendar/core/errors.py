"""Error types for the calendar service.

Source failures are absorbed by the aggregator, persistence failures escape to
the caller, lifecycle failures go to whoever started or stopped the scheduler.
An empty build result is not an error: it is signalled by an empty year.
"""


class CalendarError(Exception):
    """Base exception for all calendar service errors."""


class SourceUnavailableError(CalendarError):
    """Raised when a single source cannot provide data (network, parse, malformed data)."""


class StoreError(CalendarError):
    """Raised by a store when the underlying storage fails."""


class PersistenceError(CalendarError):
    """Raised when a built calendar cannot be written to the store."""


class SchedulerError(CalendarError):
    """Raised on an invalid scheduler lifecycle call."""


class ShutdownTimeoutError(SchedulerError):
    """Raised when in-flight work does not finish before the shutdown deadline.

    The work itself is not interrupted, it is left to finish or fail on its own.
    """
