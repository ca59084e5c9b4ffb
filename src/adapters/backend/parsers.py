from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from src.domain.models import (
    Bus,
    DayEnd,
    FareEntry,
    FilterSpec,
    Route,
    RouteSection,
    Stop,
    Ticket,
    Trip,
    parse_foreign_ref,
    ref_id,
)


def _str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _id(row: Mapping[str, Any]) -> str | None:
    return _str(row.get("_id", row.get("id")))


def _float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    text = _str(value)
    if text is None:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _date(value: Any) -> date | None:
    dt = _datetime(value)
    if dt is not None:
        return dt.date()
    return None


def _first(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None


def _stop_id(value: Any) -> str | None:
    # Ticket stops arrive as {stopId, stopName, sectionNumber} or a bare id.
    if isinstance(value, Mapping):
        return _str(_first(value, "stopId", "_id", "id"))
    return _str(value)


def parse_bus(row: Mapping[str, Any]) -> Bus | None:
    bus_id = _id(row)
    if bus_id is None:
        return None
    owner = parse_foreign_ref(_first(row, "owner", "ownerId"))
    return Bus(
        id=bus_id,
        owner_id=ref_id(owner),
        route=parse_foreign_ref(_first(row, "routeId", "route")),
        bus_number=_str(row.get("busNumber")),
        registration_number=_str(row.get("registrationNumber")),
    )


def parse_ticket(row: Mapping[str, Any]) -> Ticket | None:
    ticket_id = _id(row)
    if ticket_id is None:
        return None
    return Ticket(
        id=ticket_id,
        bus=parse_foreign_ref(_first(row, "busId", "bus")),
        ticket_id=_str(row.get("ticketId")),
        route_id=ref_id(parse_foreign_ref(_first(row, "routeId", "route"))),
        date_time=_datetime(_first(row, "dateTime", "createdAt")),
        payment_method=_str(row.get("paymentMethod")),
        trip_number=_int(row.get("tripNumber")),
        from_stop_id=_stop_id(_first(row, "fromStop", "fromStopId")),
        to_stop_id=_stop_id(_first(row, "toStop", "toStopId")),
        fare_paid=_float(row.get("farePaid")),
        total_passengers=_int(row.get("totalPassengers")),
    )


def parse_trip(row: Mapping[str, Any]) -> Trip | None:
    trip_id = _id(row)
    if trip_id is None:
        return None
    return Trip(
        id=trip_id,
        bus=parse_foreign_ref(_first(row, "bus", "busId")),
        trip_number=_str(row.get("tripNumber")),
        route=parse_foreign_ref(_first(row, "route", "routeId")),
        departure_time=_datetime(_first(row, "departureTime", "startTime")),
        arrival_time=_datetime(_first(row, "arrivalTime", "endTime")),
        status=_str(row.get("status")),
    )


def parse_day_end(row: Mapping[str, Any]) -> DayEnd | None:
    day_end_id = _id(row)
    if day_end_id is None:
        return None
    return DayEnd(
        id=day_end_id,
        bus=parse_foreign_ref(_first(row, "busId", "bus")),
        date=_date(row.get("date")),
        total_revenue=_float(row.get("totalRevenue")),
        total_expenses=_float(row.get("totalExpenses")),
        profit=_float(row.get("profit")),
        status=_str(row.get("status")),
    )


def parse_route(row: Mapping[str, Any]) -> Route | None:
    route_id = _id(row)
    if route_id is None:
        return None
    return Route(
        id=route_id,
        name=_str(_first(row, "routeName", "name")),
        number=_str(_first(row, "routeNumber", "code")),
        is_active=bool(row.get("isActive", True)),
    )


def parse_stop(row: Mapping[str, Any]) -> Stop | None:
    stop_id = _id(row)
    section = _int(row.get("sectionNumber"))
    if stop_id is None or section is None:
        return None
    return Stop(
        id=stop_id,
        code=_str(row.get("stopCode")) or "",
        name=_str(row.get("stopName")) or stop_id,
        section_number=section,
        is_active=bool(row.get("isActive", True)),
    )


def parse_fare_entry(row: Mapping[str, Any]) -> FareEntry | None:
    section = _int(row.get("sectionNumber"))
    fare = _float(row.get("fare"))
    category = _str(row.get("category"))
    if section is None or fare is None or category is None:
        return None
    if row.get("isActive") is False:
        return None
    return FareEntry(section_number=section, category=category, base_fare=fare)


def parse_route_section(row: Mapping[str, Any]) -> RouteSection | None:
    route_id = ref_id(parse_foreign_ref(row.get("routeId")))
    stop_id = ref_id(parse_foreign_ref(row.get("stopId")))
    fare = _float(row.get("fare"))
    if route_id is None or stop_id is None or fare is None:
        return None
    return RouteSection(
        id=_id(row),
        route_id=route_id,
        stop_id=stop_id,
        category=_str(row.get("category")) or "",
        fare=fare,
        order=_int(row.get("order")) or 0,
        is_active=bool(row.get("isActive", True)),
    )


def filter_params(filters: FilterSpec) -> dict[str, str]:
    """Query parameters the backend understands for record listings."""

    params: dict[str, str] = {}
    if filters.bus_id:
        params["busId"] = filters.bus_id
    if filters.start_date:
        params["startDate"] = filters.start_date.isoformat()
    if filters.end_date:
        params["endDate"] = filters.end_date.isoformat()
    if filters.payment_method:
        params["paymentMethod"] = filters.payment_method
    if filters.trip_number:
        params["tripNumber"] = filters.trip_number
    if filters.from_stop_id:
        params["fromStopId"] = filters.from_stop_id
    if filters.to_stop_id:
        params["toStopId"] = filters.to_stop_id
    if filters.status:
        params["status"] = filters.status
    return params
