"""Field-level merge of calendar records.

The overlay always decides whether a day is working, even when it does not
repeat the other fields. Week day, type and description are taken from the
overlay only when it sets them, so a source that marks a day as a holiday
without naming the week day keeps the week day known from earlier sources.
No consistency between type and working is enforced.
"""

from __future__ import annotations

from dataclasses import replace

from business_calendar.calendar.models import Day, Year, copy_year


def merge_day(base: Day, overlay: Day) -> Day:
    return replace(
        base,
        working=overlay.working,
        week_day=overlay.week_day or base.week_day,
        type=overlay.type or base.type,
        desc=overlay.desc or base.desc,
    )


def merge(base: Year, overlay: Year) -> Year:
    """Merge overlay on top of base and return a new year.

    Args:
        base: Data collected so far
        overlay: More authoritative data, possibly partial

    Returns:
        A year holding the union of months and days of both inputs.
        Neither input is modified.
    """
    result = copy_year(base)

    for mon, days in overlay.items():
        res_days = result.setdefault(mon, {})
        for day_num, day in days.items():
            known = res_days.get(day_num)
            res_days[day_num] = day if known is None else merge_day(known, day)

    return result
