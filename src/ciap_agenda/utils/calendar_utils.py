"""
Calendar grid helpers for the month and week projections.

Weeks start on Sunday. The month grid always has 42 cells (six rows) so
the layout does not jump between months.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Dict, List

from ciap_agenda.utils.datetime_utils import to_agenda_tz

MONTH_GRID_CELLS = 42


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return to_agenda_tz(value).date()
    return value


def month_days(value) -> List[Dict]:
    """Grid cells for the month containing ``value``, padded with the
    trailing days of the previous month and leading days of the next."""
    day = _as_date(value)
    first = day.replace(day=1)
    days_in_month = calendar.monthrange(first.year, first.month)[1]

    # date.weekday(): Monday=0 .. Sunday=6; shift so Sunday is column 0
    leading = (first.weekday() + 1) % 7

    cells = []
    for offset in range(leading, 0, -1):
        cells.append({"date": first - timedelta(days=offset), "current_month": False})
    for i in range(days_in_month):
        cells.append({"date": first + timedelta(days=i), "current_month": True})

    last = first + timedelta(days=days_in_month - 1)
    remaining = MONTH_GRID_CELLS - len(cells)
    for i in range(1, remaining + 1):
        cells.append({"date": last + timedelta(days=i), "current_month": False})
    return cells


def week_days(value) -> List[date]:
    """The Sunday-to-Saturday week containing ``value``."""
    day = _as_date(value)
    start_of_week = day - timedelta(days=(day.weekday() + 1) % 7)
    return [start_of_week + timedelta(days=i) for i in range(7)]


def is_same_day(a, b) -> bool:
    return _as_date(a) == _as_date(b)
