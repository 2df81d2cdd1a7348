from __future__ import annotations

from datetime import datetime

from expense_client.api.resource import ResourceApi
from expense_client.schemas.envelope import ApiResponse
from expense_client.schemas.expense import ExpenseCreate, ExpenseFilters, ExpenseUpdate


class ExpensesApi(ResourceApi):
    path = "/api/expenses"
    create_schema = ExpenseCreate
    update_schema = ExpenseUpdate

    async def list(self, filters: ExpenseFilters | None = None) -> ApiResponse:
        params = (filters or ExpenseFilters()).to_params()
        return await self.client.get(self.path, params=params)

    async def summary(
        self, start_date: datetime | None = None, end_date: datetime | None = None
    ) -> ApiResponse:
        params = ExpenseFilters(start_date=start_date, end_date=end_date).date_params()
        return await self.client.get(f"{self.path}/summary", params=params)
