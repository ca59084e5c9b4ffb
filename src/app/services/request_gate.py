from __future__ import annotations

import itertools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")


@dataclass(slots=True)
class LatestRequestGate:
    """Last-request-wins bookkeeping for overlapping scoped fetches.

    Each request on a channel (e.g. "tickets") takes a sequence number;
    only the holder of the newest number may apply its result.
    """

    _latest: dict[str, int] = field(default_factory=dict, init=False, repr=False)
    _counter: itertools.count = field(
        default_factory=lambda: itertools.count(1), init=False, repr=False
    )

    def begin(self, channel: str) -> int:
        seq = next(self._counter)
        self._latest[channel] = seq
        return seq

    def is_current(self, channel: str, seq: int) -> bool:
        return self._latest.get(channel) == seq

    async def run(
        self, channel: str, request: Callable[[], Awaitable[R]]
    ) -> R | None:
        """Run `request`; return None if a newer request superseded it."""

        seq = self.begin(channel)
        try:
            result = await request()
        except Exception:
            if not self.is_current(channel, seq):
                logger.debug(
                    "Dropping error of superseded %s request %d", channel, seq
                )
                return None
            raise

        if not self.is_current(channel, seq):
            logger.debug("Discarding stale %s response %d", channel, seq)
            return None
        return result
