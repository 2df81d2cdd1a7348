from __future__ import annotations

from expense_client.models.storage_item import StorageItem

__all__ = [
    "StorageItem",
]
