from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire schemas: camelCase JSON keys, snake_case attributes."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "ignore",
    }

    def to_payload(self) -> dict:
        """Serialize for a request body, omitting unset and ``None`` fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
