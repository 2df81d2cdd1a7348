from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

logger = logging.getLogger(__name__)

Variant = Literal["default", "destructive"]


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: Variant = "default"
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class Notifier:
    """Transient user-facing messages ("toasts")."""

    def __init__(self, history_size: int = 50) -> None:
        self.history: list[Notification] = []
        self._history_size = history_size
        self._subscribers: list[Callable[[Notification], None]] = []

    def subscribe(self, callback: Callable[[Notification], None]) -> None:
        self._subscribers.append(callback)

    def publish(self, title: str, description: str, variant: Variant = "default") -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        if variant == "destructive":
            logger.warning("%s: %s", title, description)
        else:
            logger.info("%s: %s", title, description)
        self.history.append(notification)
        overflow = len(self.history) - self._history_size
        if overflow > 0:
            del self.history[:overflow]
        for callback in list(self._subscribers):
            callback(notification)
        return notification

    def success(self, description: str) -> Notification:
        return self.publish("Success", description)

    def error(self, description: str) -> Notification:
        return self.publish("Error", description, variant="destructive")
