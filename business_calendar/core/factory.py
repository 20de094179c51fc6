"""Assembly of stores, sources and the scheduler from settings."""

from __future__ import annotations

from loguru import logger

from business_calendar.calendar.aggregator import Aggregator
from business_calendar.calendar.processor import SyncScheduler
from business_calendar.core.settings import Settings
from business_calendar.sources.base import Source
from business_calendar.sources.generic import GenericSource
from business_calendar.sources.mirror import MirrorSource
from business_calendar.sources.override import OverrideSource
from business_calendar.store.base import Store
from business_calendar.store.memory import MemoryStore
from business_calendar.store.sql import SqlStore


def build_store(settings: Settings) -> Store:
    if settings.store_engine == "memory":
        logger.warning("[STORE] Using in-memory store, calendars will be lost on restart")
        return MemoryStore()
    return SqlStore(settings.store_url)


def build_sources(settings: Settings) -> list[Source]:
    """Build the ordered source list: generic baseline, external parser, local overrides.

    Raises:
        ValueError: If the mirror parser is selected without a URL
    """
    sources: list[Source] = [GenericSource(weekend=settings.weekend)]

    if settings.source_parser == "mirror":
        if not settings.source_mirror_url:
            raise ValueError("source_mirror_url is required for the mirror parser")
        sources.append(
            MirrorSource(
                settings.source_mirror_url,
                timeout=settings.source_mirror_timeout,
                user_agent=settings.source_user_agent,
            )
        )

    if settings.source_override:
        sources.append(OverrideSource(settings.source_override))

    logger.info(f"[SOURCES] Configured sources: {', '.join(repr(s) for s in sources)}")
    return sources


def build_scheduler(settings: Settings, store: Store) -> SyncScheduler:
    return SyncScheduler(
        aggregator=Aggregator(build_sources(settings)),
        store=store,
        update_at=settings.update_at,
    )
