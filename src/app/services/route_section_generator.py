from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from src.app.ports.output import IRouteCatalog, IRouteSectionStore
from src.domain.algorithms.fares import fare_for_stop, index_fare_table
from src.domain.exceptions import (
    GenerationSystemicError,
    InvalidInput,
    SectionMismatch,
)
from src.domain.models import (
    GenerationReport,
    GenerationState,
    RouteSection,
    Stop,
    StopError,
)
from src.domain.models.generation import SECTION_MISMATCH, WRITE_FAILED

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Run:
    route_id: str
    category: str
    fare_multiplier: float
    overwrite_existing: bool
    state: GenerationState = GenerationState.IDLE
    generated: int = 0
    skipped: int = 0
    errors: list[StopError] = field(default_factory=list)

    def advance(self, state: GenerationState) -> None:
        logger.debug(
            "Route %s generation: %s -> %s",
            self.route_id,
            self.state.value,
            state.value,
        )
        self.state = state

    def report(self, failure: str | None = None) -> GenerationReport:
        return GenerationReport(
            generated=self.generated,
            skipped=self.skipped,
            errors=tuple(self.errors),
            state=self.state,
            failure=failure,
        )


@dataclass(slots=True)
class RouteSectionFareGenerator:
    """Derives priced route sections from a route's stops and the fare table.

    - Stops are matched in ascending section-number order; a stop whose
      section has no fare for the category is reported and skipped.
    - Existing (route, stop) sections are left alone unless
      `overwrite_existing` is set.
    - Runs for the same route are serialised.
    """

    route_catalog: IRouteCatalog
    section_store: IRouteSectionStore

    _route_locks: dict[str, asyncio.Lock] = field(
        default_factory=dict, init=False, repr=False
    )
    _route_users: dict[str, int] = field(default_factory=dict, init=False, repr=False)

    def in_flight(self, route_id: str) -> bool:
        lock = self._route_locks.get(route_id)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def _route_lock(self, route_id: str) -> AsyncIterator[None]:
        # Entries live only while some run holds or waits for the lock.
        lock = self._route_locks.get(route_id)
        if lock is None:
            lock = self._route_locks[route_id] = asyncio.Lock()
        self._route_users[route_id] = self._route_users.get(route_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._route_users[route_id] -= 1
            if not self._route_users[route_id]:
                del self._route_users[route_id]
                del self._route_locks[route_id]

    async def generate(
        self,
        route_id: str,
        category: str,
        fare_multiplier: float = 1.0,
        overwrite_existing: bool = False,
    ) -> GenerationReport:
        if not isinstance(route_id, str) or not route_id.strip():
            raise InvalidInput("Route id is required")
        if not isinstance(category, str) or not category.strip():
            raise InvalidInput("Fare category is required")
        if isinstance(fare_multiplier, bool) or not isinstance(
            fare_multiplier, (int, float)
        ):
            raise InvalidInput(f"Invalid fare multiplier: {fare_multiplier!r}")
        if not fare_multiplier > 0:
            raise InvalidInput(f"Fare multiplier must be > 0, got {fare_multiplier}")

        run = _Run(
            route_id=route_id.strip(),
            category=category.strip(),
            fare_multiplier=float(fare_multiplier),
            overwrite_existing=bool(overwrite_existing),
        )

        async with self._route_lock(run.route_id):
            try:
                priced = await self._match(run)
                existing = await self._existing_sections(run)
            except GenerationSystemicError as exc:
                run.advance(GenerationState.FAILED)
                logger.warning("Route %s generation failed: %s", run.route_id, exc)
                return run.report(failure=str(exc))

            await self._write(run, priced, existing)

        if not run.errors:
            run.advance(GenerationState.COMPLETE)
        elif run.generated + run.skipped > 0:
            run.advance(GenerationState.PARTIAL)
        else:
            run.advance(GenerationState.FAILED)

        logger.info(
            "Route %s (%s): generated=%d skipped=%d errors=%d",
            run.route_id,
            run.category,
            run.generated,
            run.skipped,
            len(run.errors),
        )
        return run.report()

    async def _match(self, run: _Run) -> list[tuple[Stop, float]]:
        run.advance(GenerationState.VALIDATING)
        try:
            route = await self.route_catalog.get_route(run.route_id)
        except Exception as exc:
            raise GenerationSystemicError(f"Route lookup failed: {exc}") from exc
        if route is None:
            raise GenerationSystemicError(f"Route {run.route_id} not found")

        run.advance(GenerationState.MATCHING)
        try:
            stops = await self.route_catalog.list_stops(run.route_id)
            fares = await self.route_catalog.list_fares(run.category)
        except Exception as exc:
            raise GenerationSystemicError(f"Stop or fare lookup failed: {exc}") from exc

        table = index_fare_table(fares, category=run.category)
        ordered = sorted(stops, key=lambda s: (s.section_number, s.code, s.id))

        priced: list[tuple[Stop, float]] = []
        for stop in ordered:
            try:
                fare = fare_for_stop(
                    table, stop, category=run.category, multiplier=run.fare_multiplier
                )
            except SectionMismatch as exc:
                run.errors.append(
                    StopError(stop_id=stop.id, reason=SECTION_MISMATCH, detail=str(exc))
                )
                continue
            priced.append((stop, fare))
        return priced

    async def _existing_sections(self, run: _Run) -> dict[str, RouteSection]:
        try:
            sections = await self.section_store.list_for_route(run.route_id)
        except Exception as exc:
            raise GenerationSystemicError(
                f"Existing route sections unavailable: {exc}"
            ) from exc
        return {s.stop_id: s for s in sections}

    async def _write(
        self,
        run: _Run,
        priced: list[tuple[Stop, float]],
        existing: dict[str, RouteSection],
    ) -> None:
        run.advance(GenerationState.WRITING)
        for order, (stop, fare) in enumerate(priced, start=1):
            current = existing.get(stop.id)
            if current is not None and not run.overwrite_existing:
                run.skipped += 1
                continue

            try:
                if current is None:
                    created = await self.section_store.create(
                        RouteSection(
                            id=None,
                            route_id=run.route_id,
                            stop_id=stop.id,
                            category=run.category,
                            fare=fare,
                            order=order,
                        )
                    )
                    existing[stop.id] = created
                elif current.id is None:
                    raise RuntimeError("existing route section has no id")
                else:
                    await self.section_store.update(
                        current.id, category=run.category, fare=fare, order=order
                    )
            except Exception as exc:
                run.errors.append(
                    StopError(stop_id=stop.id, reason=WRITE_FAILED, detail=str(exc))
                )
                continue
            run.generated += 1
