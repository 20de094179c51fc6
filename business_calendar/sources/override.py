"""Local corrections read from a YAML file.

File layout, keyed by year, month and day number::

    2022:
      11:
        4: {type: normal, working: true}
        7: {type: holiday, desc: "Revolution Day"}

Fields follow the JSON representation (weekDay, working, type, desc). An
omitted ``working`` means a day off, because the merge always takes
``working`` from the more authoritative source.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from loguru import logger

from business_calendar.calendar.models import Year, year_from_dict
from business_calendar.core.errors import SourceUnavailableError


class OverrideSource:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def get_year(self, year: int) -> Year:
        # The file may be edited while the server runs, so it is read on every call.
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise SourceUnavailableError(f"cannot read overrides yaml {self.path}: {e}") from e
        logger.debug(f"[OVERRIDE] Read override yaml {self.path} ({len(raw)} bytes)")

        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as e:
            raise SourceUnavailableError(f"cannot parse overrides yaml {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise SourceUnavailableError(f"overrides yaml {self.path} must map years to months")

        year_data = data.get(year)
        if year_data is None:
            year_data = data.get(str(year))
        if not year_data:
            return {}

        try:
            return year_from_dict(year_data)
        except (TypeError, ValueError) as e:
            raise SourceUnavailableError(f"invalid overrides for {year} in {self.path}: {e}") from e

    def __repr__(self) -> str:
        return f"OverrideSource(path={str(self.path)!r})"
