from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .refs import ForeignRef


class SectionCategory(str, Enum):
    NORMAL = "normal"
    LUXURY = "luxury"
    SEMI_LUXURY = "semi_luxury"
    HIGH_LUXURY = "high_luxury"
    SISU_SARIYA = "sisu_sariya"


@dataclass(frozen=True, slots=True)
class Bus:
    id: str
    owner_id: str | None = None
    route: ForeignRef | None = None
    bus_number: str | None = None
    registration_number: str | None = None


@dataclass(frozen=True, slots=True)
class Route:
    id: str
    name: str | None = None
    number: str | None = None
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class Stop:
    id: str
    code: str
    name: str
    section_number: int
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class FareEntry:
    """Base fare for one (section number, category) pair of the fare table."""

    section_number: int
    category: str
    base_fare: float


@dataclass(frozen=True, slots=True)
class RouteSection:
    """Priced stop of a route for one category. Unique per (route_id, stop_id)."""

    id: str | None
    route_id: str
    stop_id: str
    category: str
    fare: float
    order: int
    is_active: bool = True
