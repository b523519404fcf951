from __future__ import annotations

from datetime import date, datetime
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str], *, default: date) -> date:
    """Parse a query-string date, falling back to ``default`` when blank or malformed."""
    if not value:
        return default
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        return default


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch it.
    """
    return date.today()


def now_local() -> datetime:
    return datetime.now()
