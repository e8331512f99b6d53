from __future__ import annotations

import datetime as _dt

# Same strftime codes the axis formatters use; the interpreter starts in the
# C locale, so month names come out in English.
MONTH_YEAR_FORMAT = "%b %Y"
DAY_MONTH_FORMAT = "%m/%d"


def format_month_year(day: _dt.date) -> str:
    """Month heading such as ``Jan 2024``."""
    return day.strftime(MONTH_YEAR_FORMAT)


def format_day_month(day: _dt.date) -> str:
    """Day marker label such as ``01/15``."""
    return day.strftime(DAY_MONTH_FORMAT)
