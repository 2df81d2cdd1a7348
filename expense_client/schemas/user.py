from __future__ import annotations

from datetime import datetime

from pydantic import Field

from expense_client.schemas.base import CamelModel


class User(CamelModel):
    id: int
    email: str
    name: str | None = None
    image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LoginCredentials(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignupCredentials(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)


class GoogleOAuthCredentials(CamelModel):
    email: str
    name: str | None = None
    provider: str = "google"
    provider_account_id: str
    image: str | None = None


class AuthSession(CamelModel):
    token: str
    user: User
