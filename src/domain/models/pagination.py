from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from src.domain.exceptions import InvalidInput

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PageRequest:
    """A caller's page/limit request.

    `page` is untrusted and only clamped later; `limit` must be positive.
    """

    page: int = 1
    limit: int = 20

    def __post_init__(self) -> None:
        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise InvalidInput(f"Invalid limit: {self.limit!r}")
        if self.limit < 1:
            raise InvalidInput(f"Limit must be >= 1, got {self.limit}")
        if isinstance(self.page, bool) or not isinstance(self.page, int):
            raise InvalidInput(f"Invalid page: {self.page!r}")


@dataclass(frozen=True, slots=True)
class RemotePage(Generic[T]):
    """One page as reported by the backend. Metadata may be missing."""

    items: tuple[T, ...]
    total: int | None = None
    total_pages: int | None = None
    current_page: int | None = None


@dataclass(frozen=True, slots=True)
class PageResult(Generic[T]):
    items: tuple[T, ...]
    total: int
    total_pages: int
    current_page: int

    @staticmethod
    def empty() -> "PageResult[T]":
        return PageResult(items=(), total=0, total_pages=1, current_page=1)
