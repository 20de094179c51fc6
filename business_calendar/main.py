from __future__ import annotations

import threading
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from business_calendar.api.admin import router as admin_router
from business_calendar.api.calendar import router as calendar_router
from business_calendar.calendar.processor import SyncScheduler
from business_calendar.core.errors import CalendarError, ShutdownTimeoutError, StoreError
from business_calendar.core.factory import build_scheduler, build_store
from business_calendar.core.settings import Settings
from business_calendar.core.settings import settings as default_settings
from business_calendar.store.base import Store

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, no-transform, must-revalidate, private, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


def sync_on_start(scheduler: SyncScheduler, years: list[int]) -> None:
    """Synchronize the given years once. Failures are logged, not raised."""
    for year in years:
        try:
            scheduler.update_calendar(year)
        except CalendarError as e:
            logger.warning(f"[STARTUP] Sync on start, year {year}: {e}")
    logger.info(f"[STARTUP] Sync on start finished for {years}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run sync on start and the daily scheduler for the lifetime of the app."""
    settings: Settings = app.state.settings
    scheduler: SyncScheduler = app.state.scheduler

    startup_sync: threading.Thread | None = None
    years = settings.startup_years()
    if years:
        startup_sync = threading.Thread(
            target=sync_on_start,
            args=(scheduler, years),
            name="calendar-sync-on-start",
            daemon=True,
        )
        startup_sync.start()
        logger.info(f"[STARTUP] Syncing {years} in background")

    if scheduler.update_at is not None:
        scheduler.start()
    else:
        logger.info("[SCHEDULER] Automatic daily sync is disabled")

    yield

    logger.info("[SHUTDOWN] Shutting down...")
    deadline = time.monotonic() + settings.shutdown_timeout

    try:
        scheduler.stop(timeout=settings.shutdown_timeout)
    except ShutdownTimeoutError as e:
        logger.error(f"[SHUTDOWN] Scheduler: {e}")

    if startup_sync is not None:
        startup_sync.join(max(deadline - time.monotonic(), 0.0))
        if startup_sync.is_alive():
            logger.error("[SHUTDOWN] Sync on start did not finish before the deadline")

    close = getattr(app.state.store, "close", None)
    if close is not None:
        close()
    logger.info("[SHUTDOWN] Stopped")


def create_app(
    settings: Settings | None = None,
    store: Store | None = None,
    scheduler: SyncScheduler | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Args:
        settings: Service settings (defaults to environment settings)
        store: Calendar store (built from settings when omitted)
        scheduler: Sync scheduler (built from settings when omitted)
    """
    settings = settings or default_settings
    store = store if store is not None else build_store(settings)
    scheduler = scheduler if scheduler is not None else build_scheduler(settings, store)

    app = FastAPI(title="Business Calendar", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.scheduler = scheduler

    app.include_router(calendar_router)
    app.include_router(admin_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"msg": str(exc.detail)}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(_request: Request, _exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"msg": "invalid request"})

    @app.exception_handler(StoreError)
    async def store_error(request: Request, exc: StoreError):
        logger.error(f"[API] Store failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"msg": f"store error: {exc}"})

    @app.middleware("http")
    async def admin_no_cache(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith("/api/admin"):
            response.headers.update(NO_CACHE_HEADERS)
        return response

    if settings.web_access_log:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            """Log all HTTP requests."""
            response = await call_next(request)
            logger.info(f"[API] {request.method} {request.url.path} -> {response.status_code}")
            return response

    @app.get("/ping")
    def ping():
        return Response(status_code=200)

    logger.info("FastAPI application initialized")
    return app
