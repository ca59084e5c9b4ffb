from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from src.domain.models import FilterSpec, PageRequest, RemotePage

T = TypeVar("T")


class IRecordSource(ABC, Generic[T]):
    """Port for one family of transaction records (tickets, trips, day-ends)."""

    @abstractmethod
    async def fetch_page(
        self, filters: FilterSpec, page: PageRequest
    ) -> RemotePage[T]:
        """Fetch one server-filtered page, including the bus filter."""

    @abstractmethod
    async def fetch_all(self, filters: FilterSpec) -> tuple[T, ...]:
        """Fetch every record matching `filters`, with no page bound."""
