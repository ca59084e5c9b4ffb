from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class GenerationState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    MATCHING = "matching"
    WRITING = "writing"
    COMPLETE = "complete"
    PARTIAL = "partial"
    FAILED = "failed"


SECTION_MISMATCH = "sectionMismatch"
WRITE_FAILED = "writeFailed"


@dataclass(frozen=True, slots=True)
class StopError:
    stop_id: str
    reason: str
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class GenerationReport:
    generated: int = 0
    skipped: int = 0
    errors: tuple[StopError, ...] = field(default_factory=tuple)
    state: GenerationState = GenerationState.COMPLETE
    failure: str | None = None
