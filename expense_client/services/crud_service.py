from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from expense_client.api.categories import CategoriesApi
from expense_client.api.client import ApiClient
from expense_client.api.currencies import CurrenciesApi
from expense_client.api.errors import ApiError, get_error_message
from expense_client.api.expenses import ExpensesApi
from expense_client.api.resource import ResourceApi
from expense_client.services.notifications import Notifier

logger = logging.getLogger(__name__)

OnChanged = Callable[[], Awaitable[Any]]


class CrudActions:
    """Create/update/delete for one resource, reported as notifications.

    Failures (client-side validation or backend errors) are caught here and
    turned into an error notification; the method then returns ``False``.
    After a successful mutation ``on_changed`` is awaited so the view reloads.
    """

    def __init__(
        self,
        api: ResourceApi,
        noun: str,
        notifier: Notifier,
        on_changed: OnChanged | None = None,
    ) -> None:
        self.api = api
        self.noun = noun
        self.notifier = notifier
        self.on_changed = on_changed

    async def _run(self, action: str, call: Awaitable[Any]) -> bool:
        try:
            await call
        except (ApiError, ValidationError) as exc:
            message = get_error_message(exc)
            logger.info("Failed to %s %s: %s", action, self.noun.lower(), message)
            self.notifier.error(message)
            return False
        self.notifier.success(f"{self.noun} {action}d successfully")
        if self.on_changed is not None:
            await self.on_changed()
        return True

    async def save(self, data: BaseModel | dict[str, Any], item_id: int | None = None) -> bool:
        """Create when ``item_id`` is ``None``, update otherwise."""
        if item_id is None:
            return await self._run("create", self.api.create(data))
        return await self._run("update", self.api.update(item_id, data))

    async def delete(self, item_id: int) -> bool:
        return await self._run("delete", self.api.delete(item_id))


def expense_actions(client: ApiClient, notifier: Notifier, on_changed: OnChanged | None = None) -> CrudActions:
    return CrudActions(ExpensesApi(client), "Expense", notifier, on_changed)


def category_actions(client: ApiClient, notifier: Notifier, on_changed: OnChanged | None = None) -> CrudActions:
    return CrudActions(CategoriesApi(client), "Category", notifier, on_changed)


def currency_actions(client: ApiClient, notifier: Notifier, on_changed: OnChanged | None = None) -> CrudActions:
    return CrudActions(CurrenciesApi(client), "Currency", notifier, on_changed)
