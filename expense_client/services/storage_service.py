from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from expense_client.database import get_session_factory
from expense_client.models.storage_item import StorageItem


class LocalStorage:
    """Persistent string key/value store backing the client session."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory or get_session_factory()

    def get_item(self, key: str) -> str | None:
        with self._session_factory() as db:
            item = db.execute(
                select(StorageItem).where(StorageItem.key == key)
            ).scalar_one_or_none()
            return None if item is None else item.value

    def set_item(self, key: str, value: str) -> None:
        with self._session_factory() as db:
            item = db.get(StorageItem, key)
            if item is None:
                db.add(StorageItem(key=key, value=value))
            else:
                item.value = value
            db.commit()

    def remove_item(self, key: str) -> None:
        with self._session_factory() as db:
            item = db.get(StorageItem, key)
            if item is not None:
                db.delete(item)
                db.commit()
