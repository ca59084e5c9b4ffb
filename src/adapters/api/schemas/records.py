from __future__ import annotations

import datetime as dt

from pydantic import BaseModel


class TicketSchema(BaseModel):
    id: str
    bus_id: str | None = None
    ticket_id: str | None = None
    route_id: str | None = None
    date_time: dt.datetime | None = None
    payment_method: str | None = None
    trip_number: int | None = None
    from_stop_id: str | None = None
    to_stop_id: str | None = None
    fare_paid: float | None = None
    total_passengers: int | None = None


class TripSchema(BaseModel):
    id: str
    bus_id: str | None = None
    trip_number: str | None = None
    route_id: str | None = None
    departure_time: dt.datetime | None = None
    arrival_time: dt.datetime | None = None
    status: str | None = None


class DayEndSchema(BaseModel):
    id: str
    bus_id: str | None = None
    date: dt.date | None = None
    total_revenue: float | None = None
    total_expenses: float | None = None
    profit: float | None = None
    status: str | None = None


class TicketsPageSchema(BaseModel):
    items: list[TicketSchema]
    total: int
    total_pages: int
    current_page: int


class TripsPageSchema(BaseModel):
    items: list[TripSchema]
    total: int
    total_pages: int
    current_page: int


class DayEndsPageSchema(BaseModel):
    items: list[DayEndSchema]
    total: int
    total_pages: int
    current_page: int


class OwnerScopeSchema(BaseModel):
    owner_id: str
    ids: list[str]
