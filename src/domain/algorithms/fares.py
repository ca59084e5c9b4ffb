from __future__ import annotations

from collections.abc import Iterable

from src.domain.exceptions import SectionMismatch
from src.domain.models.fleet import FareEntry, Stop


def index_fare_table(
    entries: Iterable[FareEntry], *, category: str
) -> dict[int, FareEntry]:
    """Index fare entries of one category by section number.

    The first entry wins when the table lists a section twice.
    """

    table: dict[int, FareEntry] = {}
    for entry in entries:
        if entry.category != category:
            continue
        table.setdefault(int(entry.section_number), entry)
    return table


def fare_for_stop(
    table: dict[int, FareEntry], stop: Stop, *, category: str, multiplier: float
) -> float:
    entry = table.get(int(stop.section_number))
    if entry is None:
        raise SectionMismatch(
            stop_id=stop.id, section_number=stop.section_number, category=category
        )
    return entry.base_fare * multiplier
