from __future__ import annotations

import math

import pytest

from src.domain.algorithms.pagination import (
    clamp_page,
    reconcile_local,
    reconcile_remote,
    total_pages_for,
)
from src.domain.exceptions import InvalidInput
from src.domain.models import PageRequest, RemotePage


@pytest.mark.parametrize("limit", [1, 2, 3, 7, 20, 100])
@pytest.mark.parametrize("total", [0, 1, 2, 19, 20, 21, 42, 99, 100, 101])
def test_total_pages_formula(total: int, limit: int) -> None:
    assert total_pages_for(total, limit) == max(1, math.ceil(total / limit))


@pytest.mark.parametrize(
    ("page", "expected"), [(-3, 1), (0, 1), (1, 1), (2, 2), (3, 3), (4, 3), (99, 3)]
)
def test_clamp_page(page: int, expected: int) -> None:
    assert clamp_page(page, 3) == expected


def test_reconcile_local_clamps_requested_page_past_the_end() -> None:
    records = list(range(42))

    result = reconcile_local(records, PageRequest(page=5, limit=20))

    assert result.total == 42
    assert result.total_pages == 3
    assert result.current_page == 3
    assert result.items == (40, 41)


def test_reconcile_local_clamps_page_below_one() -> None:
    result = reconcile_local(list(range(5)), PageRequest(page=0, limit=2))

    assert result.current_page == 1
    assert result.items == (0, 1)


def test_reconcile_local_empty_set() -> None:
    result = reconcile_local([], PageRequest(page=4, limit=10))

    assert result.items == ()
    assert result.total == 0
    assert result.total_pages == 1
    assert result.current_page == 1


@pytest.mark.parametrize("limit", [1, 3, 10])
@pytest.mark.parametrize("page", [1, 2, 5])
def test_reconcile_local_item_count_invariant(page: int, limit: int) -> None:
    total = 11
    result = reconcile_local(list(range(total)), PageRequest(page=page, limit=limit))

    expected = min(limit, total - (result.current_page - 1) * limit)
    assert len(result.items) == expected


def test_reconcile_remote_trusts_metadata_and_clamps_page() -> None:
    remote = RemotePage(items=("a", "b"), total=42, total_pages=3, current_page=7)

    result = reconcile_remote(remote, PageRequest(page=7, limit=20))

    assert result.total == 42
    assert result.total_pages == 3
    assert result.current_page == 3


def test_reconcile_remote_fills_missing_metadata() -> None:
    remote = RemotePage(items=("a", "b", "c"))

    result = reconcile_remote(remote, PageRequest(page=1, limit=2))

    assert result.total == 3
    assert result.total_pages == 2
    assert result.current_page == 1
    assert result.items == ("a", "b")


def test_reconcile_remote_zero_total_has_no_items() -> None:
    remote = RemotePage(items=("stray",), total=0, total_pages=0, current_page=1)

    result = reconcile_remote(remote, PageRequest(page=1, limit=20))

    assert result.items == ()
    assert result.total_pages == 1


@pytest.mark.parametrize("limit", [0, -1])
def test_page_request_rejects_non_positive_limit(limit: int) -> None:
    with pytest.raises(InvalidInput):
        PageRequest(page=1, limit=limit)


def test_page_request_accepts_out_of_range_page() -> None:
    # Pages are clamped later, not rejected.
    assert PageRequest(page=-2, limit=5).page == -2


def test_reconcile_remote_reports_the_requested_page_not_the_backend_echo() -> None:
    remote = RemotePage(items=("c", "d"), total=6, total_pages=3, current_page=1)

    result = reconcile_remote(remote, PageRequest(page=2, limit=2))

    assert result.current_page == 2
    assert result.items == ("c", "d")
