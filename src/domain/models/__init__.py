from .filters import FilterSpec
from .fleet import Bus, FareEntry, Route, RouteSection, SectionCategory, Stop
from .generation import GenerationReport, GenerationState, StopError
from .pagination import PageRequest, PageResult, RemotePage
from .records import DayEnd, Ticket, Trip
from .refs import ForeignRef, ResolvedRef, UnresolvedRef, parse_foreign_ref, ref_id

__all__ = [
    "Bus",
    "DayEnd",
    "FareEntry",
    "FilterSpec",
    "ForeignRef",
    "GenerationReport",
    "GenerationState",
    "PageRequest",
    "PageResult",
    "RemotePage",
    "ResolvedRef",
    "Route",
    "RouteSection",
    "SectionCategory",
    "Stop",
    "StopError",
    "Ticket",
    "Trip",
    "UnresolvedRef",
    "parse_foreign_ref",
    "ref_id",
]
