from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator, PlainSerializer
from pydantic_core import PydanticCustomError

from expense_client.schemas.base import CamelModel


class RateDirection(str, enum.Enum):
    """How ``usdExchangeRate`` is to be read for a currency."""

    USD_PER_UNIT = "usdPerUnit"
    UNITS_PER_USD = "unitsPerUSD"


def _lenient_direction(value: Any) -> Any:
    if value is None or isinstance(value, RateDirection):
        return value
    try:
        return RateDirection(value)
    except ValueError:
        return None


def _check_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise PydanticCustomError("name_required", "Name is required")
    if len(value) > 50:
        raise PydanticCustomError("name_too_long", "Name is too long")
    return value


def _check_rate(value: Decimal) -> Decimal:
    if not value.is_finite() or value <= 0:
        raise PydanticCustomError("rate_positive", "Exchange rate must be positive")
    return value


CurrencyName = Annotated[str, AfterValidator(_check_name)]
ExchangeRate = Annotated[
    Decimal,
    AfterValidator(_check_rate),
    PlainSerializer(float, return_type=float, when_used="json"),
]
LenientDirection = Annotated[RateDirection | None, BeforeValidator(_lenient_direction)]


class CurrencyRef(CamelModel):
    id: int | None = None
    name: str
    # kept raw; unparsable rates count as zero in aggregation
    usd_exchange_rate: str | int | float | None = None
    rate_direction: LenientDirection = None


class Currency(CurrencyRef):
    id: int
    user_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CurrencyCreate(CamelModel):
    name: CurrencyName
    usd_exchange_rate: ExchangeRate
    rate_direction: RateDirection | None = None


class CurrencyUpdate(CamelModel):
    name: CurrencyName | None = None
    usd_exchange_rate: ExchangeRate | None = None
    rate_direction: RateDirection | None = None
