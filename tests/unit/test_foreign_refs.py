from __future__ import annotations

import pytest

from src.domain.algorithms.ownership import belongs_to, filter_owned
from src.domain.models import ResolvedRef, Ticket, UnresolvedRef, parse_foreign_ref


def test_parse_foreign_ref_raw_string() -> None:
    ref = parse_foreign_ref("bus-1")
    assert ref == UnresolvedRef(id="bus-1")


def test_parse_foreign_ref_expanded_object_keeps_payload() -> None:
    ref = parse_foreign_ref({"_id": "bus-1", "busNumber": "WP-1234"})
    assert isinstance(ref, ResolvedRef)
    assert ref.id == "bus-1"
    assert ref.payload["busNumber"] == "WP-1234"


@pytest.mark.parametrize("raw", [{"busNumber": "WP-1234"}, {"_id": ""}, {"_id": None}])
def test_parse_foreign_ref_expanded_object_without_id(raw: dict) -> None:
    ref = parse_foreign_ref(raw)
    assert isinstance(ref, ResolvedRef)
    assert ref.id is None


def test_parse_foreign_ref_missing_value() -> None:
    assert parse_foreign_ref(None) is None
    assert parse_foreign_ref(42) is None


@pytest.mark.parametrize(
    ("bus_id", "expected"), [("R1", True), ("R2", True), ("R3", False)]
)
def test_belongs_to_is_representation_invariant(bus_id: str, expected: bool) -> None:
    owned = frozenset({"R1", "R2"})

    raw = parse_foreign_ref(bus_id)
    expanded = parse_foreign_ref({"_id": bus_id, "registrationNumber": "X"})

    assert belongs_to(raw, owned) is expected
    assert belongs_to(expanded, owned) is expected


def test_belongs_to_never_matches_expanded_object_without_id() -> None:
    assert belongs_to(ResolvedRef(id=None), frozenset({"R1"})) is False
    assert belongs_to(None, frozenset({"R1"})) is False


def test_filter_owned_excludes_and_flags_unreadable_references() -> None:
    tickets = [
        Ticket(id="t1", bus=UnresolvedRef("R1")),
        Ticket(id="t2", bus=ResolvedRef(id="R1")),
        Ticket(id="t3", bus=ResolvedRef(id=None)),
        Ticket(id="t4", bus=None),
        Ticket(id="t5", bus=UnresolvedRef("R9")),
    ]

    result = filter_owned(tickets, frozenset({"R1"}), extract_ref=lambda t: t.bus)

    assert [t.id for t in result.kept] == ["t1", "t2"]
    assert [t.id for t in result.flagged] == ["t3", "t4"]
