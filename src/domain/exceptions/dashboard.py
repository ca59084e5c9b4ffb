from __future__ import annotations


class DashboardError(Exception):
    """Base exception for scoped aggregation and fare generation failures."""


class InvalidInput(DashboardError, ValueError):
    """Raised when a caller passes an argument the core cannot act on."""


class ResolutionError(DashboardError):
    """Raised when an owner's bus set cannot be determined.

    Distinct from an empty scope: callers must not render it as "no data".
    """


class FetchError(DashboardError):
    """Raised when the records backend call fails."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class SectionMismatch(DashboardError):
    """No fare entry exists for a stop's (section number, category)."""

    def __init__(self, *, stop_id: str, section_number: int, category: str) -> None:
        super().__init__(
            f"No fare for section {section_number} ({category}) at stop {stop_id}"
        )
        self.stop_id = stop_id
        self.section_number = section_number
        self.category = category


class GenerationSystemicError(DashboardError):
    """Route or stop list unavailable; aborts a route-section generation run."""


class SupersededRequest(DashboardError):
    """A newer request on the same channel started before this one finished."""
