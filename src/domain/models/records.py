from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from .refs import ForeignRef


@dataclass(frozen=True, slots=True)
class Ticket:
    id: str
    bus: ForeignRef | None
    ticket_id: str | None = None
    route_id: str | None = None
    date_time: datetime | None = None
    payment_method: str | None = None  # cash | card | online
    trip_number: int | None = None
    from_stop_id: str | None = None
    to_stop_id: str | None = None
    fare_paid: float | None = None
    total_passengers: int | None = None


@dataclass(frozen=True, slots=True)
class Trip:
    id: str
    bus: ForeignRef | None
    trip_number: str | None = None
    route: ForeignRef | None = None
    departure_time: datetime | None = None
    arrival_time: datetime | None = None
    status: str | None = None  # scheduled | in-progress | completed | cancelled


@dataclass(frozen=True, slots=True)
class DayEnd:
    """Day-end settlement submitted for one bus and service date."""

    id: str
    bus: ForeignRef | None
    date: date | None = None
    total_revenue: float | None = None
    total_expenses: float | None = None
    profit: float | None = None
    status: str | None = None  # pending | approved | rejected
