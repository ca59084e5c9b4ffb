from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from src.adapters.backend.parsers import (
    filter_params,
    parse_day_end,
    parse_ticket,
    parse_trip,
)
from src.adapters.backend_api import BackendClient, page_meta, unwrap_list
from src.app.ports.output import IRecordSource
from src.domain.models import DayEnd, FilterSpec, PageRequest, RemotePage, Ticket, Trip

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class HttpRecordSource(IRecordSource[T]):
    """Record listing endpoint (`/tickets`, `/trips`, `/day-end`).

    The backend filters by a single bus id at most; `fetch_all` walks every
    page so callers can filter by a set of buses themselves.
    """

    path: str
    parse: Callable[[Mapping[str, Any]], T | None]
    client: BackendClient = field(default_factory=BackendClient)

    def _parse_rows(self, rows: Iterable[Mapping[str, Any]]) -> tuple[T, ...]:
        out: list[T] = []
        dropped = 0
        for row in rows:
            item = self.parse(row)
            if item is None:
                dropped += 1
                continue
            out.append(item)
        if dropped:
            logger.warning("Dropped %d unparseable row(s) from %s", dropped, self.path)
        return tuple(out)

    async def fetch_page(
        self, filters: FilterSpec, page: PageRequest
    ) -> RemotePage[T]:
        params: dict[str, Any] = dict(filter_params(filters))
        params["page"] = page.page
        params["limit"] = page.limit

        body = await self.client.get(self.path, params=params)
        total, total_pages, current_page = page_meta(body)
        return RemotePage(
            items=self._parse_rows(unwrap_list(body)),
            total=total,
            total_pages=total_pages,
            current_page=current_page,
        )

    async def fetch_all(self, filters: FilterSpec) -> tuple[T, ...]:
        rows = await self.client.get_all_pages(self.path, params=filter_params(filters))
        return self._parse_rows(rows)


def http_ticket_source(client: BackendClient) -> HttpRecordSource[Ticket]:
    return HttpRecordSource(path="/tickets", parse=parse_ticket, client=client)


def http_trip_source(client: BackendClient) -> HttpRecordSource[Trip]:
    return HttpRecordSource(path="/trips", parse=parse_trip, client=client)


def http_day_end_source(client: BackendClient) -> HttpRecordSource[DayEnd]:
    return HttpRecordSource(path="/day-end", parse=parse_day_end, client=client)
