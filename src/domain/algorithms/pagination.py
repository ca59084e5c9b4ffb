from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

from src.domain.models.pagination import PageRequest, PageResult, RemotePage

T = TypeVar("T")


def total_pages_for(total: int, limit: int) -> int:
    return max(1, math.ceil(max(0, total) / limit))


def clamp_page(page: int, total_pages: int) -> int:
    return max(1, min(int(page), int(total_pages)))


def reconcile_local(items: Sequence[T], request: PageRequest) -> PageResult[T]:
    """Slice a complete eligible set into the requested (clamped) page."""

    total = len(items)
    total_pages = total_pages_for(total, request.limit)
    current = clamp_page(request.page, total_pages)
    start = (current - 1) * request.limit
    return PageResult(
        items=tuple(items[start : start + request.limit]),
        total=total,
        total_pages=total_pages,
        current_page=current,
    )


def reconcile_remote(remote: RemotePage[T], request: PageRequest) -> PageResult[T]:
    """Trust the backend's totals, clamping the requested page.

    Missing metadata is filled in from what the page itself shows. The
    backend's own `current_page` is not used: `request.page` is what the
    items were fetched for.
    """

    items = tuple(remote.items)
    total = remote.total if remote.total is not None else len(items)
    total = max(0, int(total))

    total_pages = remote.total_pages
    if total_pages is None or total_pages < 1:
        total_pages = total_pages_for(total, request.limit)

    current = clamp_page(request.page, total_pages)

    if total == 0:
        items = ()
    return PageResult(
        items=items[: request.limit],
        total=total,
        total_pages=int(total_pages),
        current_page=current,
    )
