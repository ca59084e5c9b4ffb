from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """Immutable query for scoped record listings. Every field is optional."""

    bus_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    payment_method: str | None = None
    trip_number: str | None = None
    from_stop_id: str | None = None
    to_stop_id: str | None = None
    status: str | None = None

    def without_bus(self) -> "FilterSpec":
        return replace(self, bus_id=None)

    def covers_date(self, value: date | None) -> bool:
        if self.start_date is None and self.end_date is None:
            return True
        if value is None:
            return False
        if self.start_date is not None and value < self.start_date:
            return False
        if self.end_date is not None and value > self.end_date:
            return False
        return True
