from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every error response."""

    msg: str


class SyncResponse(BaseModel):
    """Result of an on-demand sync, per requested year."""

    years: dict[int, str] = Field(description='"ok", "no data" or "error: <reason>" for every requested year')
    failures: dict[int, list[str]] = Field(
        default_factory=dict,
        description="Sources that failed while building each year. The year may still have been stored.",
    )
