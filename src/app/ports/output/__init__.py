from .bus_directory import IBusDirectory
from .record_source import IRecordSource
from .route_catalog import IRouteCatalog
from .route_section_store import IRouteSectionStore

__all__ = [
    "IBusDirectory",
    "IRecordSource",
    "IRouteCatalog",
    "IRouteSectionStore",
]
