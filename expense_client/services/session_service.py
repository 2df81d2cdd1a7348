from __future__ import annotations

import logging
from collections.abc import Callable

from expense_client.services.storage_service import LocalStorage

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"

SessionEndedCallback = Callable[[str], None]


class SessionManager:
    """Single owner of the persisted auth token.

    Everything that needs the token goes through ``get``/``set``/``clear``;
    code that must react to a logout or an expired session subscribes here.
    """

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage
        self._subscribers: list[SessionEndedCallback] = []

    def get(self) -> str | None:
        return self._storage.get_item(TOKEN_KEY)

    def set(self, token: str) -> None:
        self._storage.set_item(TOKEN_KEY, token)

    def clear(self, reason: str = "logout") -> None:
        had_token = self.get() is not None
        self._storage.remove_item(TOKEN_KEY)
        if not had_token:
            return
        logger.info("Session ended (%s)", reason)
        for callback in list(self._subscribers):
            callback(reason)

    def subscribe(self, callback: SessionEndedCallback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: SessionEndedCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    @property
    def is_active(self) -> bool:
        return self.get() is not None
