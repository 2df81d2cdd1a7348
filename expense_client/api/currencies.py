from __future__ import annotations

from expense_client.api.resource import ResourceApi
from expense_client.schemas.currency import CurrencyCreate, CurrencyUpdate


class CurrenciesApi(ResourceApi):
    path = "/api/currencies"
    create_schema = CurrencyCreate
    update_schema = CurrencyUpdate
