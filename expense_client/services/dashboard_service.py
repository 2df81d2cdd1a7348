from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from expense_client.api.categories import CategoriesApi
from expense_client.api.client import ApiClient
from expense_client.api.currencies import CurrenciesApi
from expense_client.api.errors import get_error_message
from expense_client.api.expenses import ExpensesApi
from expense_client.schemas.category import Category
from expense_client.schemas.currency import Currency
from expense_client.schemas.expense import (
    CurrencyTotal,
    Expense,
    ExpenseFilters,
    ExpenseSummary,
    Pagination,
)
from expense_client.services.filter_state import FilterStateManager
from expense_client.services.normalization import (
    unwrap_categories,
    unwrap_currencies,
    unwrap_currency_totals,
    unwrap_expenses,
    unwrap_pagination,
    unwrap_summary,
)
from expense_client.services.notifications import Notifier
from expense_client.services.summary_service import SummaryView, build_summary_view

logger = logging.getLogger(__name__)


@dataclass
class DashboardState:
    summary: ExpenseSummary | None = None
    expenses: list[Expense] = field(default_factory=list)
    expense_totals: list[CurrencyTotal] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    currencies: list[Currency] = field(default_factory=list)
    pagination: Pagination | None = None

    @property
    def summary_view(self) -> SummaryView:
        return build_summary_view(self.summary)


class DataFetchOrchestrator:
    """Loads everything a view needs for one filter state.

    The summary, the expense page, the category list and the currency list are
    requested concurrently; ``loading`` stays true until all of them settle.
    Parts that fail keep their previous value and the failure is reported
    through ``error`` and the notifier. A load that has been superseded by a
    newer one by the time it settles is discarded.
    """

    def __init__(
        self,
        client: ApiClient,
        notifier: Notifier | None = None,
        failure_title: str = "Failed to load dashboard data",
    ) -> None:
        self.expenses_api = ExpensesApi(client)
        self.categories_api = CategoriesApi(client)
        self.currencies_api = CurrenciesApi(client)
        self.notifier = notifier or Notifier()
        self.failure_title = failure_title
        self.state = DashboardState()
        self.loading = False
        self.error: str | None = None
        self._latest = 0

    async def load(self, filters: ExpenseFilters | None = None) -> DashboardState:
        filters = filters or ExpenseFilters()
        self._latest += 1
        sequence = self._latest
        self.loading = True
        try:
            results = await asyncio.gather(
                self.expenses_api.summary(filters.start_date, filters.end_date),
                self.expenses_api.list(filters),
                self.categories_api.list(),
                self.currencies_api.list(),
                return_exceptions=True,
            )
        finally:
            if sequence == self._latest:
                self.loading = False

        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result

        if sequence != self._latest:
            logger.debug("Discarding load #%d, superseded by #%d", sequence, self._latest)
            return self.state

        summary_res, expenses_res, categories_res, currencies_res = results
        if not isinstance(summary_res, Exception):
            self.state.summary = unwrap_summary(summary_res)
        if not isinstance(expenses_res, Exception):
            self.state.expenses = unwrap_expenses(expenses_res)
            self.state.expense_totals = unwrap_currency_totals(expenses_res)
            self.state.pagination = unwrap_pagination(expenses_res)
        if not isinstance(categories_res, Exception):
            self.state.categories = unwrap_categories(categories_res)
        if not isinstance(currencies_res, Exception):
            self.state.currencies = unwrap_currencies(currencies_res)

        failures = [r for r in results if isinstance(r, Exception)]
        if failures:
            for failure in failures:
                logger.warning("Load #%d: %s", sequence, failure)
            self.error = get_error_message(failures[0])
            self.notifier.publish(self.failure_title, self.error, variant="destructive")
        else:
            self.error = None
        return self.state


class ExpenseListController:
    """Filter state wired to an orchestrator: every filter change reloads the view."""

    def __init__(self, orchestrator: DataFetchOrchestrator, limit: int | None = None) -> None:
        self.orchestrator = orchestrator
        self.filters = FilterStateManager(self._reload, limit=limit)

    @property
    def state(self) -> DashboardState:
        return self.orchestrator.state

    async def _reload(self, filters: ExpenseFilters) -> DashboardState:
        state = await self.orchestrator.load(filters)
        self.filters.pagination = state.pagination
        return state

    async def refresh(self) -> DashboardState:
        return await self._reload(self.filters.filters)
