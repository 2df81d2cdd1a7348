from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator, Field, PlainSerializer
from pydantic_core import PydanticCustomError

from expense_client.schemas.base import CamelModel
from expense_client.schemas.category import CategoryRef
from expense_client.schemas.currency import CurrencyRef


def _check_amount(value: Decimal) -> Decimal:
    if not value.is_finite() or value <= 0:
        raise PydanticCustomError("amount_positive", "Amount must be positive")
    return value


def _check_category(value: int) -> int:
    if value <= 0:
        raise PydanticCustomError("category_required", "Please select a category")
    return value


def _check_currency(value: int) -> int:
    if value <= 0:
        raise PydanticCustomError("currency_required", "Please select a currency")
    return value


PositiveAmount = Annotated[
    Decimal,
    AfterValidator(_check_amount),
    PlainSerializer(float, return_type=float, when_used="json"),
]
CategoryId = Annotated[int, AfterValidator(_check_category)]
CurrencyId = Annotated[int, AfterValidator(_check_currency)]

UNKNOWN_CURRENCY = "Unknown"


def _category_or_placeholder(value: Any) -> Any:
    # groups whose category was deleted arrive as "category": null
    return {} if value is None else value


def _currency_or_placeholder(value: Any) -> Any:
    return {"name": UNKNOWN_CURRENCY} if value is None else value


class Expense(CamelModel):
    id: int
    amount: Decimal
    description: str | None = None
    date: datetime | None = None
    category_id: int | None = None
    currency_id: int | None = None
    user_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    category: CategoryRef | None = None
    currency: CurrencyRef | None = None


class ExpenseCreate(CamelModel):
    amount: PositiveAmount
    description: str | None = None
    date: datetime | None = None
    category_id: CategoryId
    currency_id: CurrencyId


class ExpenseUpdate(CamelModel):
    amount: PositiveAmount | None = None
    description: str | None = None
    date: datetime | None = None
    category_id: CategoryId | None = None
    currency_id: CurrencyId | None = None


class CurrencyTotal(CamelModel):
    currency: Annotated[CurrencyRef, BeforeValidator(_currency_or_placeholder)]
    # kept raw, see CurrencyRef.usd_exchange_rate
    total_amount: str | int | float | None = None
    count: int | None = None


class CategoryTotal(CamelModel):
    category: Annotated[CategoryRef, BeforeValidator(_category_or_placeholder)] = Field(
        default_factory=CategoryRef
    )
    total_count: int = 0
    by_currency: list[CurrencyTotal] = []


class ExpenseSummary(CamelModel):
    total_count: int = 0
    totals_by_currency: list[CurrencyTotal] = []
    total_by_category: list[CategoryTotal] = []


class Pagination(CamelModel):
    page: int = 1
    limit: int = 10
    total: int = 0
    total_pages: int = 0


class ExpenseFilters(CamelModel):
    model_config = {"frozen": True}

    category_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)

    def date_params(self) -> dict[str, str]:
        params = {}
        if self.start_date is not None:
            params["startDate"] = self.start_date.isoformat()
        if self.end_date is not None:
            params["endDate"] = self.end_date.isoformat()
        return params

    def to_params(self) -> dict[str, str]:
        """Query parameters for ``GET /api/expenses``; unset filters are omitted."""
        params = {}
        if self.category_id:
            params["categoryId"] = str(self.category_id)
        params.update(self.date_params())
        params["page"] = str(self.page)
        params["limit"] = str(self.limit)
        return params
