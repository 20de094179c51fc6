"""Source that copies the calendar published by another business calendar server."""

from __future__ import annotations

import httpx
from loguru import logger

from business_calendar.calendar.models import Year, year_from_dict
from business_calendar.core.errors import SourceUnavailableError

DEFAULT_USER_AGENT = "business-calendar"


class MirrorSource:
    """Thin client of ``GET /api/cal/{year}`` on a remote server.

    - 404 means the remote has no data for the year (empty result, not an error)
    - No retries
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": "application/json"}

    def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return self._client.get(url, headers=self._headers(), timeout=self.timeout)
        return httpx.get(url, headers=self._headers(), timeout=self.timeout)

    def get_year(self, year: int) -> Year:
        url = f"{self.base_url}/api/cal/{year}"
        logger.debug(f"[MIRROR] GET {url}")

        try:
            resp = self._get(url)
        except httpx.HTTPError as e:
            raise SourceUnavailableError(f"mirror request to {url} failed: {e}") from e

        if resp.status_code == httpx.codes.NOT_FOUND:
            logger.info(f"[MIRROR] Remote has no calendar for {year}")
            return {}

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SourceUnavailableError(f"mirror {url} returned {resp.status_code}") from e

        try:
            return year_from_dict(resp.json())
        except (TypeError, ValueError) as e:
            raise SourceUnavailableError(f"mirror {url} returned malformed calendar: {e}") from e

    def __repr__(self) -> str:
        return f"MirrorSource(base_url={self.base_url!r})"
