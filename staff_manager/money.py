# -*- coding: utf-8 -*-
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from .errors import ValidationError


D = lambda v: Decimal(str(v)) if v is not None else Decimal("0")

PAISA = Decimal("0.01")


def parse_amount(value, field: str = "amount", positive: bool | None = True) -> Decimal:
    """
    Form/JSON value -> Decimal.

    positive=True rejects <= 0, positive=False rejects < 0, None accepts any sign.
    More than two decimal places is rejected, columns are Numeric(12, 2).
    """
    if value in (None, ""):
        raise ValidationError(f"{field} is required", code=f"no_{field}")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number", code=f"bad_{field}") from None
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number", code=f"bad_{field}")
    if amount.as_tuple().exponent < -2:
        raise ValidationError(f"{field} must have at most 2 decimal places", code=f"bad_{field}")
    if positive and amount <= 0:
        raise ValidationError(f"{field} must be greater than zero", code=f"bad_{field}")
    if positive is False and amount < 0:
        raise ValidationError(f"{field} must not be negative", code=f"bad_{field}")
    return amount


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    parts = []
    while len(head) > 2:
        parts.insert(0, head[-2:])
        head = head[:-2]
    if head:
        parts.insert(0, head)
    return ",".join(parts + [tail])


def fmt_inr(v, symbol: str = "₹") -> str:
    """Indian grouping, no decimals for whole amounts: fmt_inr(1234567.5) == '₹12,34,567.50'."""
    x = D(v).quantize(PAISA, rounding=ROUND_HALF_UP)
    sign = "-" if x < 0 else ""
    x = abs(x)
    whole, frac = divmod(x, 1)
    text = _group_indian(str(int(whole)))
    if frac:
        text += f".{int(frac * 100):02d}"
    return f"{sign}{symbol}{text}"


def fmt_pdf(v) -> str:
    """PDF core fonts have no rupee glyph."""
    return fmt_inr(v, symbol="Rs. ")
