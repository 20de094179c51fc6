"""Read-only calendar endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from business_calendar.api.dependencies import get_store
from business_calendar.api.schemas import ErrorResponse
from business_calendar.calendar.models import month_to_dict, year_to_dict
from business_calendar.store.base import Store

router = APIRouter(
    prefix="/api/cal",
    tags=["calendar"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


def _parse_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def _year_param(value: str) -> int | None:
    y = _parse_int(value)
    if y is None or y <= 0:
        return None
    return y


def _month_param(value: str) -> int | None:
    m = _parse_int(value)
    if m is None or not 1 <= m <= 12:
        return None
    return m


def _day_param(value: str) -> int | None:
    d = _parse_int(value)
    if d is None or not 1 <= d <= 31:
        return None
    return d


@router.get("/{y}")
def get_year(y: str, store: Store = Depends(get_store)):
    year = _year_param(y)
    if year is None:
        raise HTTPException(status_code=400, detail="invalid year")

    data = store.find_year(year)
    if not data:
        raise HTTPException(status_code=404, detail="year not found")

    return year_to_dict(data)


@router.get("/{y}/{m}")
def get_month(y: str, m: str, store: Store = Depends(get_store)):
    year, month = _year_param(y), _month_param(m)
    if year is None or month is None:
        raise HTTPException(status_code=400, detail="invalid date")

    data = store.find_month(year, month)
    if data is None:
        raise HTTPException(status_code=404, detail="month not found")

    return month_to_dict(data)


@router.get("/{y}/{m}/{d}")
def get_day(y: str, m: str, d: str, store: Store = Depends(get_store)):
    year, month, day_num = _year_param(y), _month_param(m), _day_param(d)
    if year is None or month is None or day_num is None:
        raise HTTPException(status_code=400, detail="invalid date")

    day = store.find_day(year, month, day_num)
    if day is None:
        raise HTTPException(status_code=404, detail="date not found")

    return day.to_dict()
