from __future__ import annotations

from expense_client.api.client import ApiClient
from expense_client.schemas.envelope import ApiResponse
from expense_client.schemas.user import (
    GoogleOAuthCredentials,
    LoginCredentials,
    SignupCredentials,
)


class AuthApi:
    prefix = "/api/auth"

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def signup(self, credentials: SignupCredentials) -> ApiResponse:
        return await self.client.post(f"{self.prefix}/signup", json=credentials.to_payload())

    async def signin(self, credentials: LoginCredentials) -> ApiResponse:
        return await self.client.post(f"{self.prefix}/signin", json=credentials.to_payload())

    async def google(self, credentials: GoogleOAuthCredentials) -> ApiResponse:
        return await self.client.post(f"{self.prefix}/google", json=credentials.to_payload())

    async def profile(self) -> ApiResponse:
        return await self.client.get(f"{self.prefix}/profile")
