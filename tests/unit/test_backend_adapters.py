from __future__ import annotations

import asyncio
import json
from datetime import date

import httpx
import pytest

from src.adapters.backend.http_bus_directory import HttpBusDirectory
from src.adapters.backend.http_record_source import (
    http_day_end_source,
    http_ticket_source,
)
from src.adapters.backend.http_route_catalog import HttpRouteCatalog
from src.adapters.backend.http_route_section_store import HttpRouteSectionStore
from src.adapters.backend_api import (
    BackendClient,
    BackendRequestError,
    BackendRuntimeConfig,
    page_meta,
)
from src.domain.models import (
    FilterSpec,
    PageRequest,
    ResolvedRef,
    RouteSection,
    UnresolvedRef,
)


def _client(handler, **config) -> BackendClient:
    cfg = BackendRuntimeConfig(base_url="http://backend.test/api", **config)
    return BackendClient(config=cfg, transport=httpx.MockTransport(handler))


def test_runtime_config_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BACKEND_API_URL", "https://fleet.example/api")
    monkeypatch.setenv("BACKEND_API_TOKEN", "tok")
    monkeypatch.setenv("BACKEND_HEADERS", "X-Tenant: lk ; broken ;X-Env:dev")
    monkeypatch.setenv("BACKEND_PAGE_SIZE", "50")
    monkeypatch.delenv("BACKEND_TIMEOUT_S", raising=False)

    cfg = BackendRuntimeConfig.from_env()

    assert cfg.base_url == "https://fleet.example/api"
    assert cfg.page_size == 50
    assert cfg.timeout_s == 10.0
    headers = cfg.headers()
    assert headers["Authorization"] == "Bearer tok"
    assert headers["X-Tenant"] == "lk"
    assert headers["X-Env"] == "dev"


def test_client_without_config_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BACKEND_API_URL", "https://fleet.example/api")
    monkeypatch.setenv("BACKEND_MAX_PAGES", "7")

    client = BackendClient()

    assert client.config.base_url == "https://fleet.example/api"
    assert client.config.max_pages == 7
    assert client.page_size == client.config.page_size


def test_page_meta_prefers_total_count_over_page_count() -> None:
    body = {"data": [], "count": 2, "totalCount": 37, "totalPages": 2}

    assert page_meta(body) == (37, 2, None)
    assert page_meta([1, 2]) == (None, None, None)


def test_error_message_comes_from_backend_envelope() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"success": False, "message": "Forbidden"})

    with pytest.raises(BackendRequestError) as excinfo:
        asyncio.run(_client(handler).get("/buses/owner/o1"))
    assert str(excinfo.value) == "Forbidden"
    assert excinfo.value.status == 403


def test_transport_failure_is_a_backend_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendRequestError) as excinfo:
        asyncio.run(_client(handler).get("/tickets"))
    assert excinfo.value.status is None


def test_bus_directory_parses_owner_buses_and_sends_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "success": True,
                "data": [
                    {"_id": "b1", "busNumber": "NB-1", "routeId": "rt1"},
                    {"_id": "b2", "route": {"_id": "rt2", "routeName": "Kandy"}},
                    {"busNumber": "no id"},
                ],
            },
        )

    directory = HttpBusDirectory(client=_client(handler, token="secret"))
    buses = asyncio.run(directory.list_owner_buses("o1"))

    assert [b.id for b in buses] == ["b1", "b2"]
    assert buses[0].route == UnresolvedRef("rt1")
    assert isinstance(buses[1].route, ResolvedRef)
    assert buses[1].route.id == "rt2"
    assert seen[0].url.path == "/api/buses/owner/o1"
    assert seen[0].headers["Authorization"] == "Bearer secret"


def test_fetch_all_walks_every_page_without_bus_param() -> None:
    rows = [{"_id": f"t{i}", "busId": "b1", "paymentMethod": "cash"} for i in range(5)]
    seen: list[httpx.QueryParams] = []

    def handler(request: httpx.Request) -> httpx.Response:
        params = request.url.params
        seen.append(params)
        page, limit = int(params["page"]), int(params["limit"])
        start = (page - 1) * limit
        return httpx.Response(
            200,
            json={
                "data": rows[start : start + limit],
                "count": len(rows[start : start + limit]),
                "totalCount": len(rows),
                "totalPages": 3,
                "currentPage": page,
            },
        )

    source = http_ticket_source(_client(handler, page_size=2))
    tickets = asyncio.run(
        source.fetch_all(FilterSpec(payment_method="cash", start_date=date(2025, 1, 1)))
    )

    assert [t.id for t in tickets] == ["t0", "t1", "t2", "t3", "t4"]
    assert [p["page"] for p in seen] == ["1", "2", "3"]
    assert all("busId" not in p for p in seen)
    assert seen[0]["paymentMethod"] == "cash"
    assert seen[0]["startDate"] == "2025-01-01"


def test_fetch_all_without_metadata_stops_on_short_page() -> None:
    pages = {1: [{"_id": "a"}, {"_id": "b"}], 2: [{"_id": "c"}]}
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        calls.append(page)
        return httpx.Response(200, json=pages.get(page, []))

    source = http_day_end_source(_client(handler, page_size=2))
    day_ends = asyncio.run(source.fetch_all(FilterSpec()))

    assert [d.id for d in day_ends] == ["a", "b", "c"]
    assert calls == [1, 2]


def test_fetch_all_respects_max_pages() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"_id": "x"}, {"_id": "y"}])

    source = http_ticket_source(_client(handler, page_size=2, max_pages=3))

    with pytest.raises(BackendRequestError):
        asyncio.run(source.fetch_all(FilterSpec()))


def test_fetch_page_pushes_bus_filter_and_reads_metadata() -> None:
    seen: list[httpx.QueryParams] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.params)
        return httpx.Response(
            200,
            json={
                "data": [
                    {
                        "_id": "t9",
                        "busId": {"_id": "b1", "busNumber": "NB-1"},
                        "fromStop": {"stopId": "s1", "stopName": "Fort"},
                        "tripNumber": "3",
                        "dateTime": "2025-01-03T08:15:00Z",
                    }
                ],
                "count": 1,
                "totalCount": 21,
                "totalPages": 3,
                "currentPage": 3,
            },
        )

    source = http_ticket_source(_client(handler))
    remote = asyncio.run(
        source.fetch_page(FilterSpec(bus_id="b1"), PageRequest(page=3, limit=10))
    )

    assert seen[0]["busId"] == "b1"
    assert (seen[0]["page"], seen[0]["limit"]) == ("3", "10")
    assert (remote.total, remote.total_pages, remote.current_page) == (21, 3, 3)
    (ticket,) = remote.items
    assert ticket.bus == ResolvedRef(id="b1")
    assert ticket.from_stop_id == "s1"
    assert ticket.trip_number == 3
    assert ticket.date_time is not None and ticket.date_time.hour == 8


def test_route_catalog_maps_404_to_missing_route() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Route not found"})

    catalog = HttpRouteCatalog(client=_client(handler))

    assert asyncio.run(catalog.get_route("nope")) is None


def test_route_catalog_reads_stops_and_active_fares() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/stops/route/rt1":
            return httpx.Response(
                200,
                json={
                    "data": [
                        {
                            "_id": "s1",
                            "stopCode": "FT",
                            "stopName": "Fort",
                            "sectionNumber": 1,
                        },
                        {"_id": "s2", "stopName": "No section"},
                    ]
                },
            )
        assert request.url.path == "/api/sections"
        assert request.url.params["category"] == "normal"
        return httpx.Response(
            200,
            json={
                "data": [
                    {"sectionNumber": 1, "category": "normal", "fare": 30},
                    {
                        "sectionNumber": 2,
                        "category": "normal",
                        "fare": 45,
                        "isActive": False,
                    },
                ],
                "totalPages": 1,
            },
        )

    catalog = HttpRouteCatalog(client=_client(handler))
    stops = asyncio.run(catalog.list_stops("rt1"))
    fares = asyncio.run(catalog.list_fares("normal"))

    assert [(s.id, s.code, s.section_number) for s in stops] == [("s1", "FT", 1)]
    assert [(f.section_number, f.base_fare) for f in fares] == [(1, 30.0)]


def test_route_section_store_create_and_update_payloads() -> None:
    bodies: list[tuple[str, str, dict]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        bodies.append((request.method, request.url.path, payload))
        return httpx.Response(
            201 if request.method == "POST" else 200,
            json={
                "data": {
                    "_id": "rs1",
                    "routeId": {"_id": "rt1"},
                    "stopId": "s1",
                    "category": "normal",
                    "fare": payload["fare"],
                    "order": payload["order"],
                }
            },
        )

    store = HttpRouteSectionStore(client=_client(handler))
    created = asyncio.run(
        store.create(
            RouteSection(
                id=None,
                route_id="rt1",
                stop_id="s1",
                category="normal",
                fare=30.0,
                order=1,
            )
        )
    )
    updated = asyncio.run(
        store.update("rs1", category="luxury", fare=60.0, order=2)
    )

    assert created.id == "rs1" and created.route_id == "rt1"
    assert updated.fare == 60.0 and updated.order == 2
    assert bodies[0][:2] == ("POST", "/api/route-sections")
    assert bodies[0][2]["routeId"] == "rt1" and bodies[0][2]["isActive"] is True
    assert bodies[1] == (
        "PUT",
        "/api/route-sections/rs1",
        {"category": "luxury", "fare": 60.0, "order": 2},
    )
