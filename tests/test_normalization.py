from __future__ import annotations

from decimal import Decimal

import pytest

from expense_client.schemas.envelope import ApiResponse
from expense_client.services.normalization import (
    unwrap_categories,
    unwrap_currencies,
    unwrap_currency_totals,
    unwrap_expenses,
    unwrap_pagination,
    unwrap_summary,
)

EXPENSES = [
    {"id": 1, "amount": "12.50", "categoryId": 2, "currencyId": 3, "date": "2025-01-05T00:00:00.000Z"},
    {"id": 2, "amount": 7, "categoryId": 2, "currencyId": 3, "date": "2025-01-06T00:00:00.000Z"},
]


@pytest.mark.parametrize(
    "payload",
    [
        EXPENSES,
        {"expenses": EXPENSES},
        {"data": EXPENSES},
        {"data": {"expenses": EXPENSES}},
        ApiResponse(data={"expenses": EXPENSES, "totalsByCurrency": []}),
        ApiResponse(data=EXPENSES),
    ],
)
def test_expense_shapes_flatten_to_the_same_list(payload):
    expenses = unwrap_expenses(payload)
    assert [e.id for e in expenses] == [1, 2]
    assert [e.amount for e in expenses] == [Decimal("12.5"), Decimal("7")]


def test_amount_string_and_number_normalize_identically():
    from_string = unwrap_expenses([{"id": 1, "amount": "12.50"}])[0]
    from_number = unwrap_expenses([{"id": 1, "amount": 12.5}])[0]
    assert from_string.amount == from_number.amount == Decimal("12.5")
    assert isinstance(from_number.amount, Decimal)


@pytest.mark.parametrize("payload", [None, "oops", 42, {"unexpected": True}, {"expenses": "nope"}])
def test_unexpected_shapes_become_empty(payload):
    assert unwrap_expenses(payload) == []
    assert unwrap_categories(payload) == []
    assert unwrap_currencies(payload) == []


def test_malformed_records_are_skipped():
    expenses = unwrap_expenses([{"id": 1, "amount": "abc"}, {"amount": "3"}, {"id": 3, "amount": "3"}])
    assert [e.id for e in expenses] == [3]


def test_categories_read_expense_count():
    payload = {"categories": [{"id": 1, "name": "Food", "color": "#22C55E", "_count": {"expenses": 3}}]}
    [category] = unwrap_categories(ApiResponse(data=payload))
    assert category.name == "Food"
    assert category.expense_count == 3


def test_currencies_as_bare_list_or_keyed():
    items = [{"id": 1, "name": "EUR", "usdExchangeRate": "1.08"}]
    assert unwrap_currencies(items) == unwrap_currencies({"currencies": items})
    [currency] = unwrap_currencies(items)
    assert currency.usd_exchange_rate == "1.08"
    assert currency.rate_direction is None


def test_unknown_rate_direction_is_ignored():
    [currency] = unwrap_currencies([{"id": 1, "name": "X", "usdExchangeRate": "2", "rateDirection": "sideways"}])
    assert currency.rate_direction is None


def test_summary_nested_or_flat():
    summary = {"totalCount": 2, "totalsByCurrency": [], "totalByCategory": []}
    for payload in (summary, {"summary": summary}, {"data": {"summary": summary}}):
        assert unwrap_summary(ApiResponse(data=payload)).total_count == 2
    assert unwrap_summary(ApiResponse(data=None)) is None
    assert unwrap_summary(ApiResponse(data=[1, 2])) is None


def test_currency_totals_only_from_keyed_list():
    data = {"expenses": EXPENSES, "totalsByCurrency": [{"currency": {"name": "USD"}, "totalAmount": "3"}]}
    assert len(unwrap_currency_totals(ApiResponse(data=data))) == 1
    assert unwrap_currency_totals(ApiResponse(data=EXPENSES)) == []


def test_pagination_from_envelope_or_data():
    pagination = {"page": 2, "limit": 10, "total": 25, "totalPages": 3}
    from_envelope = unwrap_pagination(ApiResponse.model_validate({"success": True, "data": [], "pagination": pagination}))
    from_data = unwrap_pagination(ApiResponse(data={"expenses": [], "pagination": pagination}))
    assert from_envelope == from_data
    assert from_envelope.total_pages == 3
    assert unwrap_pagination(ApiResponse(data=[])) is None


def test_summary_with_deleted_category_or_currency():
    usd = {"currency": {"name": "USD", "usdExchangeRate": "1"}, "totalAmount": "30", "count": 3}
    orphan = {"currency": None, "totalAmount": "8", "count": 1}
    response = ApiResponse(
        data={
            "summary": {
                "totalCount": 5,
                "totalsByCurrency": [usd, orphan],
                "totalByCategory": [
                    {"category": None, "totalCount": 3, "byCurrency": [usd]},
                    {"category": {"id": 4, "name": "Food"}, "totalCount": 1, "byCurrency": [orphan]},
                ],
            }
        }
    )
    summary = unwrap_summary(response)
    assert summary is not None
    assert [c.category.name for c in summary.total_by_category] == ["Uncategorized", "Food"]
    assert summary.total_by_category[0].category.id is None
    assert [t.currency.name for t in summary.totals_by_currency] == ["USD", "Unknown"]
