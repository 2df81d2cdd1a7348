from __future__ import annotations

import calendar
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Any

from expense_client.config import settings
from expense_client.schemas.expense import ExpenseFilters, Pagination

logger = logging.getLogger(__name__)

QUICK_RANGES = ("today", "week", "month", "year")

OnChange = Callable[[ExpenseFilters], Awaitable[Any]]


def _months_back(moment: datetime, months: int) -> datetime:
    month_index = moment.year * 12 + moment.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def quick_range(name: str, now: datetime | None = None) -> tuple[datetime, datetime]:
    """``[start, end]`` of a preset range ending at ``now``."""
    now = now or datetime.now().astimezone()
    if name == "today":
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elif name == "week":
        start = now - timedelta(days=7)
    elif name == "month":
        start = _months_back(now, 1)
    elif name == "year":
        start = _months_back(now, 12)
    else:
        raise ValueError(f"Unknown quick range '{name}'. Available: {', '.join(QUICK_RANGES)}")
    return start, now


class FilterStateManager:
    """Owns the expense list filters and triggers a reload on every change.

    Changing the category or the date range sends the list back to page 1.
    Each change that actually alters the filters awaits ``on_change`` exactly
    once; setting a value to what it already is does nothing.
    """

    def __init__(self, on_change: OnChange | None = None, limit: int | None = None) -> None:
        self.filters = ExpenseFilters(limit=limit or settings.DEFAULT_PAGE_SIZE)
        self.pagination: Pagination | None = None
        self._on_change = on_change
        self._batching = False

    @property
    def has_filters(self) -> bool:
        f = self.filters
        return f.category_id is not None or f.start_date is not None or f.end_date is not None

    async def _transition(self, **changes: Any) -> bool:
        updated = self.filters.model_copy(update=changes)
        if updated == self.filters:
            return False
        self.filters = updated
        logger.debug("Filters changed: %s", changes)
        if self._on_change is not None and not self._batching:
            await self._on_change(updated)
        return True

    @asynccontextmanager
    async def batch(self) -> AsyncIterator[None]:
        """Group several changes into one transition with a single ``on_change``."""
        before = self.filters
        self._batching = True
        try:
            yield
        finally:
            self._batching = False
        if self.filters != before and self._on_change is not None:
            await self._on_change(self.filters)

    async def set_category(self, category_id: int | None) -> bool:
        return await self._transition(category_id=category_id or None, page=1)

    async def set_start_date(self, start_date: datetime | None) -> bool:
        return await self._transition(start_date=start_date, page=1)

    async def set_end_date(self, end_date: datetime | None) -> bool:
        return await self._transition(end_date=end_date, page=1)

    async def set_date_range(self, start_date: datetime | None, end_date: datetime | None) -> bool:
        return await self._transition(start_date=start_date, end_date=end_date, page=1)

    async def apply_quick_range(self, name: str, now: datetime | None = None) -> bool:
        start, end = quick_range(name, now)
        return await self.set_date_range(start, end)

    async def clear(self) -> bool:
        return await self._transition(category_id=None, start_date=None, end_date=None, page=1)

    async def set_page(self, page: int) -> bool:
        page = max(1, page)
        if self.pagination is not None and self.pagination.total_pages > 0:
            page = min(page, self.pagination.total_pages)
        return await self._transition(page=page)

    async def next_page(self) -> bool:
        return await self.set_page(self.filters.page + 1)

    async def previous_page(self) -> bool:
        return await self.set_page(self.filters.page - 1)
