from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


def _parse_headers(raw: str | None) -> dict[str, str]:
    """Parse 'Key:Value;Key2:Value2' into a header dict."""

    headers: dict[str, str] = {}
    for part in (raw or "").split(";"):
        part = part.strip()
        if not part or ":" not in part:
            continue
        k, v = part.split(":", 1)
        k = k.strip()
        if k:
            headers[k] = v.strip()
    return headers


@dataclass(frozen=True, slots=True)
class BackendRuntimeConfig:
    """Connection settings for the operator's REST backend.

    Env vars:
      - BACKEND_API_URL (default http://localhost:5001/api)
      - BACKEND_API_TOKEN: bearer token sent as Authorization
      - BACKEND_HEADERS: extra headers, as 'Key:Value;Key2:Value2'
      - BACKEND_TIMEOUT_S (default 10)
      - BACKEND_PAGE_SIZE: page size used when walking every page (default 200)
      - BACKEND_MAX_PAGES: upper bound on a page walk (default 1000)
    """

    base_url: str = "http://localhost:5001/api"
    token: str | None = None
    headers_raw: str | None = None
    timeout_s: float = 10.0
    page_size: int = 200
    max_pages: int = 1000

    @staticmethod
    def from_env() -> "BackendRuntimeConfig":
        token = os.getenv("BACKEND_API_TOKEN")
        if token is not None:
            token = token.strip() or None

        return BackendRuntimeConfig(
            base_url=(os.getenv("BACKEND_API_URL") or "").strip()
            or "http://localhost:5001/api",
            token=token,
            headers_raw=os.getenv("BACKEND_HEADERS"),
            timeout_s=_env_float("BACKEND_TIMEOUT_S", 10.0),
            page_size=max(1, _env_int("BACKEND_PAGE_SIZE", 200)),
            max_pages=max(1, _env_int("BACKEND_MAX_PAGES", 1000)),
        )

    def headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        headers.update(_parse_headers(self.headers_raw))
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


class BackendRequestError(Exception):
    """A backend call failed (transport error, non-2xx status or bad body)."""

    def __init__(
        self, message: str, *, status: int | None = None, payload: Any = None
    ) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload


def _error_message(resp: httpx.Response) -> tuple[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping) and body.get("message"):
        return str(body["message"]), body
    return f"HTTP {resp.status_code}", body


@dataclass(slots=True)
class BackendClient:
    """Thin JSON client over the backend. One httpx client per call."""

    config: BackendRuntimeConfig = field(default_factory=BackendRuntimeConfig.from_env)
    transport: httpx.AsyncBaseTransport | None = None

    @property
    def page_size(self) -> int:
        return self.config.page_size

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        cfg = self.config

        try:
            async with httpx.AsyncClient(
                base_url=cfg.base_url,
                timeout=cfg.timeout_s,
                headers=cfg.headers(),
                transport=self.transport,
            ) as client:
                resp = await client.request(
                    method, path, params=dict(params or {}), json=json
                )
        except httpx.HTTPError as exc:
            raise BackendRequestError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code >= 400:
            message, body = _error_message(resp)
            raise BackendRequestError(message, status=resp.status_code, payload=body)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise BackendRequestError(
                f"{method} {path} returned invalid JSON", status=resp.status_code
            ) from exc

    async def get(self, path: str, *, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, *, json: Any) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, *, json: Any) -> Any:
        return await self.request("PUT", path, json=json)

    async def get_all_pages(
        self, path: str, *, params: Mapping[str, Any] | None = None
    ) -> list[Mapping[str, Any]]:
        """Walk every page of a paginated listing and return all rows.

        Stops on the reported last page, or, without page metadata, on the
        first page that is not exactly full.
        """

        cfg = self.config

        rows: list[Mapping[str, Any]] = []
        page = 1
        while True:
            body = await self.get(
                path,
                params={**dict(params or {}), "page": page, "limit": cfg.page_size},
            )
            batch = unwrap_list(body)
            rows.extend(batch)

            _, total_pages, _ = page_meta(body)
            if not batch:
                break
            if total_pages is not None:
                if page >= total_pages:
                    break
            elif len(batch) != cfg.page_size:
                break

            page += 1
            if page > cfg.max_pages:
                raise BackendRequestError(
                    f"GET {path} exceeded {cfg.max_pages} pages"
                )
        return rows


def unwrap_data(body: Any) -> Any:
    """Return the payload of the backend's {'data': ...} envelope."""

    if isinstance(body, Mapping) and "data" in body:
        return body["data"]
    return body


def unwrap_list(body: Any) -> list[Mapping[str, Any]]:
    data = unwrap_data(body)
    if data is None:
        return []
    if not isinstance(data, list):
        raise BackendRequestError("Expected a list in the backend response")
    return [row for row in data if isinstance(row, Mapping)]


def _opt_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def page_meta(body: Any) -> tuple[int | None, int | None, int | None]:
    """(total, total_pages, current_page) from a paginated envelope.

    `totalCount` is preferred over `total` and `count`, which some
    endpoints use for the size of the current page only.
    """

    if not isinstance(body, Mapping):
        return None, None, None

    total = None
    for key in ("totalCount", "total", "count"):
        total = _opt_int(body.get(key))
        if total is not None:
            break
    return total, _opt_int(body.get("totalPages")), _opt_int(body.get("currentPage"))
