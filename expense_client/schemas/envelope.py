from __future__ import annotations

from typing import Any

from expense_client.schemas.base import CamelModel
from expense_client.schemas.expense import Pagination


class FieldError(CamelModel):
    field: str = ""
    message: str = ""


class ApiResponse(CamelModel):
    """The ``{success, data, message, errors}`` wrapper of every backend response."""

    success: bool = True
    data: Any = None
    message: str | None = None
    errors: list[FieldError] | None = None
    pagination: Pagination | None = None
