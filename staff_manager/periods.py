# -*- coding: utf-8 -*-
from __future__ import annotations

from calendar import monthrange
from datetime import date

from .errors import ValidationError

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def parse_period(qs: str | None, today: date | None = None) -> tuple[int, int]:
    """'YYYY-MM' -> (year, month); empty means the current month."""
    today = today or date.today()
    if not qs:
        return today.year, today.month
    try:
        y_s, m_s = str(qs).strip().split("-")
        if len(y_s) != 4:
            raise ValueError(qs)
        y, m = int(y_s), int(m_s)
    except ValueError:
        raise ValidationError(f"period must look like YYYY-MM, got {qs!r}", code="bad_period") from None
    if not 1 <= m <= 12:
        raise ValidationError(f"month must be 1..12, got {m}", code="bad_period")
    return y, m


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Inclusive [first, last] day of the month."""
    days = monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, days)


def previous_period(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def period_label(year: int, month: int) -> str:
    return f"{MONTHS[month - 1]} {year}"


def parse_day(value: str | None, field: str = "date") -> date:
    if not value:
        raise ValidationError(f"{field} is required", code=f"no_{field}")
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError(f"{field} must be YYYY-MM-DD, got {value!r}", code=f"bad_{field}") from None
