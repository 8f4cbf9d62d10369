from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional

from ..core.constants import MONTH_NAMES
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_iso_datetime(value: str, *, on_date: Optional[date] = None) -> datetime:
    """Parse an ISO timestamp, or a bare HH:MM combined with ``on_date``."""
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"Invalid timestamp: {value!r}")
    v = (value or "").strip()
    if on_date is not None and len(v) in (4, 5) and ":" in v:
        try:
            return datetime.combine(on_date, datetime.strptime(v, "%H:%M").time())
        except ValueError:
            raise ValidationError(f"Invalid time: {value!r} (expected HH:MM)")
    try:
        parsed = datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}")
    # Stored as naive local time.
    return parsed.replace(tzinfo=None)


def parse_month(value: Optional[str], *, today: Optional[date] = None) -> tuple[int, int]:
    """Parse ``YYYY-MM`` into ``(year, month)``; empty means the current month."""
    if not value:
        today = today or date.today()
        return today.year, today.month
    try:
        year_s, month_s = str(value).split("-")[:2]
        year, month = int(year_s), int(month_s)
    except ValueError:
        raise ValidationError(f"Invalid month: {value!r} (expected YYYY-MM)")
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {value!r} (expected YYYY-MM)")
    return year, month


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


def salary_period(month: int, year: int) -> str:
    return f"{month_name(month)} {year}"


def now_local() -> datetime:
    return datetime.now()
