from __future__ import annotations

import os

import httpx
import pytest

from src.adapters.backend_api import BackendRuntimeConfig


def _backend_reachable(base_url: str) -> bool:
    try:
        resp = httpx.get(base_url.rstrip("/") + "/health", timeout=1.5)
    except httpx.HTTPError:
        return False
    return resp.status_code < 500


@pytest.fixture(scope="session")
def backend_config() -> BackendRuntimeConfig:
    """Live backend settings; skips unless BACKEND_API_URL points somewhere."""

    if not os.getenv("BACKEND_API_URL"):
        pytest.skip("BACKEND_API_URL not set; skipping integration tests")

    cfg = BackendRuntimeConfig.from_env()
    if not _backend_reachable(cfg.base_url):
        msg = f"Backend not reachable at {cfg.base_url}"

        # CI starts the backend, so an unreachable one is a failure there.
        if os.getenv("CI") or os.getenv("REQUIRE_BACKEND"):
            pytest.fail(msg, pytrace=False)

        pytest.skip(f"{msg}; skipping integration tests")
    return cfg


@pytest.fixture(scope="session")
def owner_id() -> str:
    value = os.getenv("FLEETSCOPE_TEST_OWNER_ID")
    if not value:
        pytest.skip("FLEETSCOPE_TEST_OWNER_ID not set")
    return value
