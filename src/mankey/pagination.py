"""Offset/limit windows over result lists, and chunked bulk requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Sequence

logger = logging.getLogger(__name__)


@dataclass
class PaginatedWindow:
    """One page of a larger result list."""

    items: list = field(default_factory=list)
    offset: int = 0
    limit: int = 0
    total: int = 0

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total

    @property
    def next_offset(self) -> int | None:
        return self.offset + self.limit if self.has_more else None

    def pagination(self) -> dict:
        """The pagination block included in tool results."""
        return {
            "offset": self.offset,
            "limit": self.limit,
            "total": self.total,
            "hasMore": self.has_more,
            "nextOffset": self.next_offset,
        }


def paginate(full_list: Sequence, offset: int = 0, limit: int = 100) -> PaginatedWindow:
    """Slice ``full_list[offset:offset + limit]``.

    A negative offset is treated as 0. A limit of 0 returns no items but
    still reports the total, so callers can probe the size cheaply.
    """
    offset = max(0, int(offset))
    limit = max(0, int(limit))
    return PaginatedWindow(
        items=list(full_list[offset:offset + limit]),
        offset=offset,
        limit=limit,
        total=len(full_list),
    )


def chunks(items: Sequence, size: int) -> list[list]:
    """Split ``items`` into consecutive groups of at most ``size``."""
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


async def chunk_and_send(
    ids: Sequence,
    chunk_size: int,
    send: Callable[[list], Awaitable[list[Any] | None]],
) -> list[Any]:
    """Call ``send`` once per chunk of ``ids``, one after another.

    Chunks are awaited sequentially; AnkiConnect gives no guarantees about
    concurrent requests. Results are concatenated in input order. Empty
    input issues no calls.
    """
    results: list[Any] = []
    groups = chunks(ids, chunk_size)
    for index, group in enumerate(groups, 1):
        logger.debug("Sending chunk %d/%d (%d items)", index, len(groups), len(group))
        results.extend(await send(group) or [])
    return results
