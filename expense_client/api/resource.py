from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from expense_client.api.client import ApiClient
from expense_client.schemas.base import CamelModel
from expense_client.schemas.envelope import ApiResponse


class ResourceApi:
    """CRUD endpoints of one ``/api/<resource>`` collection.

    Payloads are validated against ``create_schema``/``update_schema`` before
    any request is sent, so invalid input never reaches the network.
    """

    path: str = ""
    create_schema: type[CamelModel]
    update_schema: type[CamelModel]

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def _validate(self, schema: type[CamelModel], data: BaseModel | dict[str, Any]) -> CamelModel:
        if isinstance(data, schema):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        return schema.model_validate(data)

    async def list(self) -> ApiResponse:
        return await self.client.get(self.path)

    async def get(self, item_id: int) -> ApiResponse:
        return await self.client.get(f"{self.path}/{item_id}")

    async def create(self, data: BaseModel | dict[str, Any]) -> ApiResponse:
        body = self._validate(self.create_schema, data)
        return await self.client.post(self.path, json=body.to_payload())

    async def update(self, item_id: int, data: BaseModel | dict[str, Any]) -> ApiResponse:
        body = self._validate(self.update_schema, data)
        return await self.client.put(f"{self.path}/{item_id}", json=body.to_payload())

    async def delete(self, item_id: int) -> ApiResponse:
        return await self.client.delete(f"{self.path}/{item_id}")
