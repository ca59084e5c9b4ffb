from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class GenerateSectionsRequestSchema(BaseModel):
    category: str = Field(..., min_length=1)
    fare_multiplier: float = Field(1.0, gt=0.0)
    overwrite_existing: bool = False


class StopErrorSchema(BaseModel):
    stop_id: str
    reason: str
    detail: str | None = None


class GenerationReportSchema(BaseModel):
    route_id: str
    state: Literal["complete", "partial", "failed"]
    generated: int
    skipped: int
    errors: list[StopErrorSchema] = []
    failure: str | None = None


class RouteSectionSchema(BaseModel):
    id: str | None = None
    route_id: str
    stop_id: str
    category: str
    fare: float
    order: int
    is_active: bool = True


class OwnerRouteSectionsSchema(BaseModel):
    owner_id: str
    items: list[RouteSectionSchema]
