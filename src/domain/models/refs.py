from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class UnresolvedRef:
    """Foreign reference sent as a bare identifier string."""

    id: str


@dataclass(frozen=True, slots=True)
class ResolvedRef:
    """Foreign reference the backend expanded into the referenced object.

    `id` is None when the expanded object carries no identifier field.
    """

    id: str | None
    payload: Mapping[str, Any] = field(
        default_factory=dict, compare=False, hash=False, repr=False
    )


ForeignRef = UnresolvedRef | ResolvedRef


def parse_foreign_ref(raw: Any) -> ForeignRef | None:
    """Wrap a wire value (id string or expanded object) into a ForeignRef."""

    if isinstance(raw, str):
        return UnresolvedRef(id=raw)
    if isinstance(raw, Mapping):
        ident = raw.get("_id", raw.get("id"))
        if ident is None or (isinstance(ident, str) and not ident.strip()):
            return ResolvedRef(id=None, payload=dict(raw))
        return ResolvedRef(id=str(ident), payload=dict(raw))
    return None


def ref_id(ref: ForeignRef | None) -> str | None:
    if ref is None:
        return None
    return ref.id
