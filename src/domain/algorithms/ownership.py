from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from src.domain.models.refs import ForeignRef, ResolvedRef, ref_id

logger = logging.getLogger(__name__)

T = TypeVar("T")


def belongs_to(ref: ForeignRef | None, resource_ids: Collection[str]) -> bool:
    """True when the reference points at one of `resource_ids`.

    Raw ids and expanded objects compare on the same key; an expanded
    object without an identifier never matches.
    """

    key = ref_id(ref)
    if key is None:
        return False
    return key in resource_ids


def is_malformed(ref: ForeignRef | None) -> bool:
    return ref is None or (isinstance(ref, ResolvedRef) and ref.id is None)


@dataclass(frozen=True, slots=True)
class OwnershipFilterResult(Generic[T]):
    kept: tuple[T, ...]
    flagged: tuple[T, ...]


def filter_owned(
    records: Iterable[T],
    resource_ids: Collection[str],
    *,
    extract_ref: Callable[[T], ForeignRef | None],
) -> OwnershipFilterResult[T]:
    """Keep records whose foreign reference is owned; flag unreadable ones."""

    kept: list[T] = []
    flagged: list[T] = []
    for record in records:
        ref = extract_ref(record)
        if is_malformed(ref):
            flagged.append(record)
            continue
        if belongs_to(ref, resource_ids):
            kept.append(record)

    if flagged:
        logger.warning(
            "Excluded %d record(s) with an unreadable bus reference", len(flagged)
        )
    return OwnershipFilterResult(kept=tuple(kept), flagged=tuple(flagged))
