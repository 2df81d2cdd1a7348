from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, model_validator
from pydantic_core import PydanticCustomError

from expense_client.schemas.base import CamelModel

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
DEFAULT_COLOR = "#888888"
UNCATEGORIZED = "Uncategorized"


def _require_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise PydanticCustomError("name_required", "Name is required")
    return value


def _check_color(value: str) -> str | None:
    if value == "":
        return None
    if not HEX_COLOR.match(value):
        raise PydanticCustomError("color_format", "Invalid color format")
    return value


CategoryName = Annotated[str, AfterValidator(_require_name)]
HexColor = Annotated[str, AfterValidator(_check_color)]


class CategoryRef(CamelModel):
    id: int | None = None
    name: str = UNCATEGORIZED
    color: str | None = None


class Category(CategoryRef):
    id: int
    name: str
    description: str | None = None
    user_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    expense_count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _read_count(cls, data: Any) -> Any:
        # linked expenses arrive as {"_count": {"expenses": n}}
        if isinstance(data, dict) and isinstance(data.get("_count"), dict):
            data = dict(data)
            data.setdefault("expenseCount", data["_count"].get("expenses", 0))
        return data


class CategoryCreate(CamelModel):
    name: CategoryName
    description: str | None = None
    color: HexColor | None = None


class CategoryUpdate(CamelModel):
    name: CategoryName | None = None
    description: str | None = None
    color: HexColor | None = None
