"""Administrative endpoints: on-demand sync and database backup."""

from __future__ import annotations

import gzip
import io
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from business_calendar.api.dependencies import get_scheduler, get_store, require_admin
from business_calendar.api.schemas import ErrorResponse, SyncResponse
from business_calendar.calendar.processor import SyncScheduler
from business_calendar.core.errors import PersistenceError, StoreError
from business_calendar.store.base import Store

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


async def _requested_years(request: Request) -> list[str]:
    values = list(request.query_params.getlist("y"))
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        values.extend(str(v) for v in form.getlist("y"))
    return values


@router.post("/sync", response_model=SyncResponse)
async def sync(request: Request, scheduler: SyncScheduler = Depends(get_scheduler)) -> SyncResponse:
    """Rebuild and store the requested years (form or query field ``y``, repeatable)."""
    raw_years = await _requested_years(request)
    if not raw_years:
        raise HTTPException(status_code=400, detail="'y' param is required")
    logger.debug(f"[API] Requested years to sync: {raw_years}")

    years: list[int] = []
    for value in raw_years:
        try:
            years.append(int(value))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"invalid year '{value}': {e}") from e

    response = SyncResponse(years={}, failures={})
    for year in years:
        logger.info(f"[API] Syncing year {year}...")
        try:
            result = await run_in_threadpool(scheduler.update_calendar, year)
        except PersistenceError as e:
            response.years[year] = f"error: {e}"
            continue

        response.years[year] = "ok" if result.written else "no data"
        if result.failures:
            response.failures[year] = [str(f) for f in result.failures]

    logger.debug(f"[API] Sync result: {response.years}")
    return response


@router.get("/backup")
def backup(store: Store = Depends(get_store)) -> Response:
    """Download a gzip-compressed snapshot of the calendar database."""
    make_backup = getattr(store, "backup", None)
    if make_backup is None:
        raise HTTPException(status_code=500, detail="store does not support backup")

    buf = io.BytesIO()
    try:
        with gzip.GzipFile(fileobj=buf, mode="wb") as gz:
            make_backup(gz)
    except StoreError as e:
        logger.warning(f"[API] Cannot make backup: {e}")
        raise HTTPException(status_code=500, detail=f"cannot make backup: {e}") from e

    file_name = f"cal_{date.today().isoformat()}.db.gz"
    return Response(
        content=buf.getvalue(),
        media_type="application/gzip",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
