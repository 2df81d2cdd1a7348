from __future__ import annotations

from expense_client.api.resource import ResourceApi
from expense_client.schemas.category import CategoryCreate, CategoryUpdate


class CategoriesApi(ResourceApi):
    path = "/api/categories"
    create_schema = CategoryCreate
    update_schema = CategoryUpdate
