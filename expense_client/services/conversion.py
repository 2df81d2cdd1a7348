from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from expense_client.schemas.currency import RateDirection

ZERO = Decimal(0)

# Rates at or above this are read as "units per 1 USD" when a currency has no
# explicit rate direction.
INVERSE_RATE_THRESHOLD = Decimal(10)


def to_decimal(value: Any) -> Decimal | None:
    """Parse a str/int/float/Decimal amount; ``None`` when it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


def infer_direction(rate: Decimal) -> RateDirection:
    if rate >= INVERSE_RATE_THRESHOLD:
        return RateDirection.UNITS_PER_USD
    return RateDirection.USD_PER_UNIT


def to_reference_unit(
    amount: Any, rate: Any, direction: RateDirection | None = None
) -> Decimal:
    """Convert ``amount`` to USD.

    Without an explicit ``direction`` the rate's magnitude decides: ``rate >= 10``
    divides, anything smaller multiplies. Unusable amounts or rates (unparsable,
    non-finite, zero, negative) contribute zero.
    """
    value = to_decimal(amount)
    parsed_rate = to_decimal(rate)
    if value is None or parsed_rate is None or parsed_rate <= 0:
        return ZERO
    if direction is None:
        direction = infer_direction(parsed_rate)
    if direction is RateDirection.UNITS_PER_USD:
        return value / parsed_rate
    return value * parsed_rate
