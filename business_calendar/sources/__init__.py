"""Calendar data sources.

A source is anything with a ``get_year(year)`` method returning a (possibly
partial) year record, see :class:`business_calendar.sources.base.Source`.
"""
