"""Aggregation of calendar sources into one year record.

Sources are consulted strictly in configured order and each result is merged
on top of everything collected before it, so later sources override earlier
ones field by field. A failing source is logged and skipped; if every source
fails the result is an empty year.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from loguru import logger

from business_calendar.calendar.merge import merge
from business_calendar.calendar.models import Year
from business_calendar.sources.base import Source


@dataclass
class SourceFailure:
    """A source that could not provide data during one build."""

    index: int
    source: str
    error: str

    def __str__(self) -> str:
        return f"source {self.index} ({self.source}): {self.error}"


@dataclass
class BuildReport:
    """Result of one build: the merged year and the sources that failed."""

    year: int
    data: Year
    failures: list[SourceFailure] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.data


class Aggregator:
    def __init__(self, sources: Sequence[Source]) -> None:
        self.sources: tuple[Source, ...] = tuple(sources)

    def build_year(self, year: int) -> Year:
        """Build the merged calendar for a year. Never raises on source errors."""
        return self.build_year_report(year).data

    def build_year_report(self, year: int) -> BuildReport:
        """Build the merged calendar for a year and report failed sources.

        Args:
            year: Calendar year to build

        Returns:
            BuildReport whose data is empty when every source failed
        """
        acc: Year = {}
        failures: list[SourceFailure] = []

        for i, src in enumerate(self.sources):
            src_name = type(src).__name__
            try:
                data = src.get_year(year)
            except Exception as e:
                logger.warning(f"[AGGREGATOR] Skipping source {i} ({src_name}) for {year}: {e!r}")
                failures.append(SourceFailure(index=i, source=src_name, error=str(e) or type(e).__name__))
                continue

            logger.debug(f"[AGGREGATOR] Source {i} ({src_name}) returned {len(data or {})} month(s) for {year}")
            acc = merge(acc, data or {})

        if not acc:
            logger.warning(f"[AGGREGATOR] No data collected for {year} from {len(self.sources)} source(s)")

        return BuildReport(year=year, data=acc, failures=failures)
