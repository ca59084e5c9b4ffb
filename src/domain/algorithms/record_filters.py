from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime
from typing import TypeVar

from src.domain.models.filters import FilterSpec
from src.domain.models.records import DayEnd, Ticket, Trip
from src.domain.models.refs import ref_id

T = TypeVar("T")

RecordPredicate = Callable[[T, FilterSpec], bool]


def _day(value: datetime | date | None) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    return value


def _eq(wanted: str | None, actual: object) -> bool:
    if wanted is None:
        return True
    if actual is None:
        return False
    return str(actual).strip().lower() == wanted.strip().lower()


def _bus_ok(spec: FilterSpec, bus_key: str | None) -> bool:
    return spec.bus_id is None or bus_key == spec.bus_id


def ticket_matches(ticket: Ticket, spec: FilterSpec) -> bool:
    return (
        _bus_ok(spec, ref_id(ticket.bus))
        and spec.covers_date(_day(ticket.date_time))
        and _eq(spec.payment_method, ticket.payment_method)
        and _eq(spec.trip_number, ticket.trip_number)
        and _eq(spec.from_stop_id, ticket.from_stop_id)
        and _eq(spec.to_stop_id, ticket.to_stop_id)
    )


def trip_matches(trip: Trip, spec: FilterSpec) -> bool:
    return (
        _bus_ok(spec, ref_id(trip.bus))
        and spec.covers_date(_day(trip.departure_time))
        and _eq(spec.trip_number, trip.trip_number)
        and _eq(spec.status, trip.status)
    )


def day_end_matches(day_end: DayEnd, spec: FilterSpec) -> bool:
    return (
        _bus_ok(spec, ref_id(day_end.bus))
        and spec.covers_date(day_end.date)
        and _eq(spec.status, day_end.status)
    )


def apply_filters(
    records: Iterable[T], spec: FilterSpec, predicate: RecordPredicate
) -> list[T]:
    return [r for r in records if predicate(r, spec)]
