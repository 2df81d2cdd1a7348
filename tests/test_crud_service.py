from __future__ import annotations

from decimal import Decimal

from expense_client.schemas.expense import ExpenseCreate
from expense_client.services.crud_service import category_actions, currency_actions, expense_actions


async def test_create_notifies_and_reloads(client, backend, notifier, auth_token, seeded):
    reloads = []

    async def reload() -> None:
        reloads.append(True)

    actions = expense_actions(client, notifier, on_changed=reload)
    ok = await actions.save(
        ExpenseCreate(
            amount=Decimal("12"),
            category_id=seeded["food"]["id"],
            currency_id=seeded["usd"]["id"],
        )
    )

    assert ok is True
    assert reloads == [True]
    assert notifier.history[-1].title == "Success"
    assert notifier.history[-1].description == "Expense created successfully"
    assert len(backend.expenses) == 5


async def test_update_and_delete(client, backend, notifier, auth_token, seeded):
    actions = category_actions(client, notifier)
    food_id = seeded["food"]["id"]

    assert await actions.save({"name": "Groceries"}, item_id=food_id) is True
    assert backend.categories[food_id]["name"] == "Groceries"
    assert await actions.delete(food_id) is True

    assert [n.description for n in notifier.history] == [
        "Category updated successfully",
        "Category deleted successfully",
    ]


async def test_validation_failure_is_reported_without_request(client, backend, notifier, auth_token):
    reloads = []

    async def reload() -> None:
        reloads.append(True)

    actions = currency_actions(client, notifier, on_changed=reload)
    ok = await actions.save({"name": "EUR", "usd_exchange_rate": -1})

    assert ok is False
    assert reloads == []
    assert backend.requests == []
    assert notifier.history[-1].variant == "destructive"
    assert "Exchange rate must be positive" in notifier.history[-1].description


async def test_backend_failure_is_reported(client, backend, notifier, auth_token):
    actions = category_actions(client, notifier)
    assert await actions.delete(12345) is False
    assert notifier.history[-1].title == "Error"
    assert notifier.history[-1].description == "Category not found"
