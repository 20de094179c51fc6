"""Logging setup.

Modules log through loguru's ``logger`` and start each message with a
bracketed component tag ([SYNC], [SCHEDULER], [STORE], [API], ...). Syncs run
in the scheduler thread, the startup sync thread and the request threadpool
at the same time, so every line carries the thread name.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from business_calendar.core.settings import Settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<magenta>{thread.name: <22}</magenta> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{line} | {message}"


def setup_logger(settings: Settings, level: str | None = None) -> None:
    """Replace loguru's default sink with the service's console and file sinks.

    Args:
        settings: Service settings; log level, log file, rotation and retention
            are taken from here
        level: Overrides the level from settings (e.g. DEBUG for --debug)
    """
    level = level or settings.effective_log_level
    logger.remove()

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # diagnose=False: tracebacks would otherwise dump local values such as the admin password.
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            compression="zip",
            backtrace=True,
            diagnose=False,
        )

    logger.debug(f"[LOG] Logger initialized: level={level}, file={settings.log_file or '-'}")
