"""
Agenda Datetime Utilities

This module provides datetime parsing and formatting utilities:
- now_in_agenda_tz: Current time in the agenda timezone
- ensure_aware: Attach the agenda timezone to naive datetimes
- parse_date_string: Parse ISO-ish strings returned by the LLM
- format_date / format_time: pt-BR renderings used in shared summaries
- to_millis: Epoch milliseconds, the resolution reminders are computed at
"""

from datetime import date, datetime, timedelta
from typing import Optional

import pytz

from ciap_agenda.constants import AGENDA_TIMEZONE

_EPOCH = pytz.utc.localize(datetime(1970, 1, 1))

PT_BR_MONTHS = [
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
]


def now_in_agenda_tz() -> datetime:
    """Default clock for the scheduler and Smart-Add reference date."""
    return datetime.now(AGENDA_TIMEZONE)


def ensure_aware(dt: datetime) -> datetime:
    """
    Return a timezone-aware datetime.

    Naive values are taken to be wall-clock time in the agenda timezone.
    """
    if dt.tzinfo is None:
        return AGENDA_TIMEZONE.localize(dt)
    return dt


def to_agenda_tz(dt: datetime) -> datetime:
    return ensure_aware(dt).astimezone(AGENDA_TIMEZONE)


def parse_date_string(date_str: str) -> Optional[datetime]:
    """
    Parse a date string into a timezone-aware datetime.
    Supports full ISO datetimes (with or without offset, "Z" suffix) and
    simple YYYY-MM-DD dates.

    Args:
        date_str: Date string in ISO format

    Returns:
        datetime object, or None when the string cannot be parsed
    """
    if not date_str or not isinstance(date_str, str):
        return None

    value = date_str.strip()
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"

        # Simple date format (YYYY-MM-DD) -> midnight in agenda timezone
        if len(value) == 10 and value.count("-") == 2:
            day = datetime.strptime(value, "%Y-%m-%d")
            return AGENDA_TIMEZONE.localize(day)

        return ensure_aware(datetime.fromisoformat(value))
    except (ValueError, TypeError):
        return None


def to_millis(dt: datetime) -> int:
    return (ensure_aware(dt) - _EPOCH) // timedelta(milliseconds=1)


def format_time(dt: datetime) -> str:
    """HH:MM in the agenda timezone."""
    return to_agenda_tz(dt).strftime("%H:%M")


def format_date(value) -> str:
    """Long pt-BR date, e.g. '05 de março de 2026'."""
    if isinstance(value, datetime):
        value = to_agenda_tz(value).date()
    if not isinstance(value, date):
        return ""
    return f"{value.day:02d} de {PT_BR_MONTHS[value.month - 1]} de {value.year}"
