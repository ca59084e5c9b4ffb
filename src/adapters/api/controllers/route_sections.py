from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from src.adapters.api.dependencies import get_route_section_generator
from src.adapters.api.schemas.route_sections import (
    GenerateSectionsRequestSchema,
    GenerationReportSchema,
    StopErrorSchema,
)
from src.app.services.route_section_generator import RouteSectionFareGenerator
from src.domain.models import GenerationState

router = APIRouter(tags=["route-sections"])


@router.post(
    "/routes/{route_id}/sections/generate", response_model=GenerationReportSchema
)
async def generate_route_sections(
    route_id: str,
    req: GenerateSectionsRequestSchema,
    response: Response,
    generator: RouteSectionFareGenerator = Depends(get_route_section_generator),
) -> GenerationReportSchema:
    report = await generator.generate(
        route_id,
        req.category,
        fare_multiplier=req.fare_multiplier,
        overwrite_existing=req.overwrite_existing,
    )

    # Nothing could be written: let the dashboard show an error state.
    if report.state is GenerationState.FAILED:
        response.status_code = 422

    return GenerationReportSchema(
        route_id=route_id,
        state=report.state.value,
        generated=report.generated,
        skipped=report.skipped,
        errors=[
            StopErrorSchema(stop_id=e.stop_id, reason=e.reason, detail=e.detail)
            for e in report.errors
        ],
        failure=report.failure,
    )
