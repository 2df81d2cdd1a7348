from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from expense_client.api.errors import ApiError
from expense_client.config import settings
from expense_client.schemas.envelope import ApiResponse
from expense_client.services.session_service import SessionManager

logger = logging.getLogger(__name__)

NETWORK_MESSAGE = "Unable to reach the server. Please check your connection."


class ApiClient:
    """Envelope-aware HTTP client for the Expense Tracker backend.

    Every request carries the session's bearer token. Responses are unwrapped
    into :class:`ApiResponse`; a non-2xx status or ``success: false`` raises
    :class:`ApiError`. A 401 additionally ends the session, whichever call
    triggered it.
    """

    def __init__(
        self,
        session: SessionManager,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        self.session = session
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.API_URL,
            transport=transport,
            timeout=timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        token = self.session.get()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> ApiResponse:
        try:
            response = await self._http.request(
                method, path, params=params, json=json, headers=self._headers()
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(NETWORK_MESSAGE, None, kind="network") from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code == 401:
            self.session.clear(reason="unauthorized")

        if response.is_error:
            logger.info("%s %s -> %d", method, path, response.status_code)
            raise ApiError.from_body(body, response.status_code, kind="http")

        if isinstance(body, dict) and body.get("success") is False:
            error = ApiError.from_body(body, response.status_code, kind="logical")
            if error.message is None and not error.errors:
                error = ApiError("Request failed", response.status_code, kind="logical")
            raise error

        if isinstance(body, dict):
            try:
                return ApiResponse.model_validate(body)
            except ValidationError:
                logger.warning("Malformed envelope from %s %s", method, path)
                return ApiResponse(success=True, data=body.get("data"))
        # Bare payloads (no envelope) are passed through as data
        return ApiResponse(success=True, data=body)

    async def get(self, path: str, params: dict[str, str] | None = None) -> ApiResponse:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: dict[str, Any] | None = None) -> ApiResponse:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: dict[str, Any] | None = None) -> ApiResponse:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> ApiResponse:
        return await self.request("DELETE", path)
