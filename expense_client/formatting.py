from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from expense_client.services.conversion import to_decimal

CENT = Decimal("0.01")


def format_amount(amount: Any) -> str:
    """``1234.5`` -> ``"1,234.50"``; unparsable input is returned as text."""
    value = to_decimal(amount)
    if value is None:
        return str(amount)
    with localcontext() as ctx:
        # quantize needs every integer digit plus two decimals
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return f"{value.quantize(CENT, rounding=ROUND_HALF_UP):,.2f}"


def format_currency(amount: Any, currency_name: str | None = None) -> str:
    if currency_name:
        return f"{currency_name} {format_amount(amount)}"
    value = to_decimal(amount)
    if value is None:
        return str(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}${format_amount(abs(value))}"


def format_date(value: date | datetime | None) -> str:
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"
