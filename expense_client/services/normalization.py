"""Boundary adapter between backend response shapes and the client's schemas.

The backend is inconsistent about envelopes: a list may arrive bare, under its
resource key (``{"categories": [...]}``) or nested once more under ``data``.
Each ``unwrap_*`` function accepts any of those and returns the canonical
shape; anything unrecognised becomes an empty result instead of an error.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from expense_client.schemas.category import Category
from expense_client.schemas.currency import Currency
from expense_client.schemas.envelope import ApiResponse
from expense_client.schemas.expense import CurrencyTotal, Expense, ExpenseSummary, Pagination
from expense_client.services.conversion import to_decimal

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_MAX_DEPTH = 4


def _payload(source: Any) -> Any:
    if isinstance(source, ApiResponse):
        return source.data
    return source


def unwrap_list(source: Any, key: str, allow_bare: bool = True) -> list[Any]:
    """Find the list stored under ``key`` (or ``data``) at any envelope depth.

    With ``allow_bare=False`` a list only counts when it sits under ``key``.
    """
    payload = _payload(source)
    keyed = False
    for _ in range(_MAX_DEPTH):
        if isinstance(payload, list):
            return payload if allow_bare or keyed else []
        if not isinstance(payload, dict):
            break
        if key in payload:
            payload = payload[key]
            keyed = True
        elif "data" in payload:
            payload = payload["data"]
        else:
            break
    return []


def unwrap_object(source: Any, key: str) -> dict[str, Any] | None:
    """Find the object stored under ``key``; a dict without it is taken as the object itself."""
    payload = _payload(source)
    for _ in range(_MAX_DEPTH):
        if not isinstance(payload, dict):
            return None
        if isinstance(payload.get(key), dict):
            payload = payload[key]
        elif isinstance(payload.get("data"), dict):
            payload = payload["data"]
        else:
            return payload
    return None


def _parse_all(items: list[Any], model: type[ModelT]) -> list[ModelT]:
    parsed = []
    for item in items:
        try:
            parsed.append(model.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed %s record: %s", model.__name__, exc.errors())
    return parsed


def normalize_expense(item: Any) -> Any:
    """Coerce ``amount`` (string or number) to ``Decimal``; other keys untouched."""
    if not isinstance(item, dict):
        return item
    amount = to_decimal(item.get("amount"))
    return {**item, "amount": amount}


def unwrap_categories(source: Any) -> list[Category]:
    return _parse_all(unwrap_list(source, "categories"), Category)


def unwrap_currencies(source: Any) -> list[Currency]:
    return _parse_all(unwrap_list(source, "currencies"), Currency)


def unwrap_expenses(source: Any) -> list[Expense]:
    items = [normalize_expense(e) for e in unwrap_list(source, "expenses")]
    return _parse_all(items, Expense)


def unwrap_currency_totals(source: Any) -> list[CurrencyTotal]:
    return _parse_all(unwrap_list(source, "totalsByCurrency", allow_bare=False), CurrencyTotal)


def unwrap_summary(source: Any) -> ExpenseSummary | None:
    payload = unwrap_object(source, "summary")
    if payload is None:
        return None
    try:
        return ExpenseSummary.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Malformed expense summary: %s", exc.errors())
        return None


def unwrap_pagination(source: Any) -> Pagination | None:
    if isinstance(source, ApiResponse) and source.pagination is not None:
        return source.pagination
    payload = unwrap_object(source, "pagination")
    if payload is None or "totalPages" not in payload:
        return None
    try:
        return Pagination.model_validate(payload)
    except ValidationError:
        return None


def unwrap_item(source: Any, key: str, model: type[ModelT]) -> ModelT | None:
    """Single record responses, e.g. ``{"category": {...}}`` or the bare object."""
    payload = unwrap_object(source, key)
    if payload is None:
        return None
    if key == "expense":
        payload = normalize_expense(payload)
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Malformed %s record: %s", model.__name__, exc.errors())
        return None
