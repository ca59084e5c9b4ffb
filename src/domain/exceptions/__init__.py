from .dashboard import (
    DashboardError,
    FetchError,
    GenerationSystemicError,
    InvalidInput,
    ResolutionError,
    SectionMismatch,
    SupersededRequest,
)

__all__ = [
    "DashboardError",
    "FetchError",
    "GenerationSystemicError",
    "InvalidInput",
    "ResolutionError",
    "SectionMismatch",
    "SupersededRequest",
]
