from __future__ import annotations

import logging

from jose import JWTError, jwt

from expense_client.api.auth import AuthApi
from expense_client.api.client import ApiClient
from expense_client.api.errors import ApiError
from expense_client.schemas.user import (
    AuthSession,
    GoogleOAuthCredentials,
    LoginCredentials,
    SignupCredentials,
    User,
)
from expense_client.services.normalization import unwrap_item, unwrap_object
from expense_client.services.session_service import SessionManager

logger = logging.getLogger(__name__)


class AuthError(Exception):
    pass


def google_credentials_from_id_token(id_token: str) -> GoogleOAuthCredentials:
    """Build the ``/api/auth/google`` payload from a Google ID token.

    The token's claims are read without verifying the signature; the backend
    is the one that trusts or rejects the sign-in.
    """
    try:
        claims = jwt.get_unverified_claims(id_token)
    except JWTError as exc:
        raise AuthError("Invalid Google credential") from exc
    if not claims.get("email") or not claims.get("sub"):
        raise AuthError("Missing email or subject in Google token")
    return GoogleOAuthCredentials(
        email=claims["email"],
        name=claims.get("name"),
        provider="google",
        provider_account_id=str(claims["sub"]),
        image=claims.get("picture"),
    )


class AuthService:
    """Current user and the login/logout flows around the session token."""

    def __init__(self, client: ApiClient, session: SessionManager | None = None) -> None:
        self.api = AuthApi(client)
        self.session = session or client.session
        self.user: User | None = None
        self.is_loading = False
        self.session.subscribe(self._on_session_ended)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _on_session_ended(self, reason: str) -> None:
        self.user = None

    def _start_session(self, payload: object) -> User:
        data = unwrap_object(payload, "data")
        try:
            auth = AuthSession.model_validate(data)
        except ValueError as exc:
            raise AuthError("Login failed") from exc
        self.session.set(auth.token)
        self.user = auth.user
        logger.info("Signed in as %s", auth.user.email)
        return auth.user

    async def restore(self) -> User | None:
        """Load the profile for a persisted token; a rejected token is discarded."""
        if self.session.get() is None:
            return None
        self.is_loading = True
        try:
            response = await self.api.profile()
            self.user = unwrap_item(response, "user", User)
            if self.user is None:
                self.session.clear(reason="invalid profile")
        except ApiError as exc:
            logger.info("Could not restore session: %s", exc)
            self.session.clear(reason="profile request failed")
            self.user = None
        finally:
            self.is_loading = False
        return self.user

    async def login(self, email: str, password: str) -> User:
        response = await self.api.signin(LoginCredentials(email=email, password=password))
        return self._start_session(response)

    async def signup(self, email: str, password: str, name: str) -> User:
        await self.api.signup(SignupCredentials(email=email, password=password, name=name))
        return await self.login(email, password)

    async def google_login(self, id_token: str) -> User:
        credentials = google_credentials_from_id_token(id_token)
        response = await self.api.google(credentials)
        return self._start_session(response)

    def logout(self) -> None:
        self.session.clear(reason="logout")
        self.user = None

    def close(self) -> None:
        """Stop following the session; the stored token is left alone."""
        self.session.unsubscribe(self._on_session_ended)
