"""Pager — lazy, cursor-driven iteration over a paginated list operation.

Invariants:
    - One executor call per page; limit=<page_size> on every page, cursor echoed verbatim
    - Items yielded in service order, no reordering or deduplication
    - At most one page buffered; the next page is fetched only when the buffer is empty
    - A missing or null next_cursor ends the stream (EXHAUSTED)
    - A failed page moves the pager to FAILED and re-raises; afterwards next() is None

State machine:
    START → FETCHING → HAS_MORE → FETCHING → ... → EXHAUSTED
                     ↘ FAILED

Design Decisions:
    - Explicit session object with next(), plus async iteration: callers can pull one
      item at a time or `async for` over everything
    - Not safe for concurrent consumers; share the client, not the pager
"""

import logging
from collections import deque
from collections.abc import Callable
from enum import Enum
from typing import Any, Generic, TypeVar

from orb_billing.core.errors import UsageError
from orb_billing.core.operation import Operation
from orb_billing.schemas.common import Page

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 500


class PagerState(str, Enum):
    START = "start"
    FETCHING = "fetching"
    HAS_MORE = "has_more"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


def check_page_size(page_size: int) -> int:
    if isinstance(page_size, bool) or not isinstance(page_size, int):
        raise UsageError(f"page_size must be an integer, got {page_size!r}", field="page_size")
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise UsageError(
            f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}",
            field="page_size",
        )
    return page_size


class Pager(Generic[T]):
    """Streams the items of a paginated operation.

    transform: optional per-item hook; returning None drops the item.
    """

    def __init__(
        self,
        executor,
        operation: Operation,
        item_type: Any,
        page_size: int = DEFAULT_PAGE_SIZE,
        transform: Callable[[Any], T | None] | None = None,
    ):
        self._executor = executor
        self._operation = operation
        self._page_type = Page[item_type]
        self._page_size = check_page_size(page_size)
        self._transform = transform
        self._buffer: deque = deque()
        self._cursor: str | None = None
        self.state = PagerState.START
        self.pages_fetched = 0

    def __aiter__(self) -> "Pager[T]":
        return self

    async def __anext__(self) -> T:
        item = await self.next()
        if item is None:
            raise StopAsyncIteration
        return item

    async def next(self) -> T | None:
        """Next item, or None once the list is exhausted (or after a failure)."""
        while True:
            while self._buffer:
                item = self._apply(self._buffer.popleft())
                if item is not None:
                    return item
            if self.state in (PagerState.EXHAUSTED, PagerState.FAILED):
                return None
            await self._fetch_page()

    async def collect(self, limit: int | None = None) -> list[T]:
        """Drain the pager into a list, stopping after `limit` items if given."""
        items: list[T] = []
        while limit is None or len(items) < limit:
            item = await self.next()
            if item is None:
                break
            items.append(item)
        return items

    async def _fetch_page(self) -> None:
        self.state = PagerState.FETCHING
        operation = self._operation.with_query(
            ("limit", self._page_size), ("cursor", self._cursor),
        )
        try:
            page = await self._executor.execute(operation, self._page_type)
        except Exception:
            self.state = PagerState.FAILED
            raise
        self.pages_fetched += 1
        self._buffer.extend(page.data)
        metadata = page.pagination_metadata
        self._cursor = metadata.next_cursor if metadata is not None else None
        self.state = PagerState.EXHAUSTED if self._cursor is None else PagerState.HAS_MORE
        logger.debug(
            f"Fetched page {self.pages_fetched} of {self._operation.describe()} "
            f"({len(page.data)} items, state={self.state.value})",
        )

    def _apply(self, item: Any) -> T | None:
        if self._transform is None:
            return item
        try:
            return self._transform(item)
        except Exception:
            self.state = PagerState.FAILED
            self._buffer.clear()
            raise
