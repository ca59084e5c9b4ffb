from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.owners import router as owners_router
from src.adapters.api.controllers.route_sections import router as sections_router
from src.domain.exceptions import (
    FetchError,
    GenerationSystemicError,
    InvalidInput,
    ResolutionError,
    SupersededRequest,
)

app = FastAPI(title="Fleetscope")
app.include_router(owners_router)
app.include_router(sections_router)


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
    return JSONResponse(
        status_code=400, content={"detail": str(exc), "kind": "invalid_input"}
    )


@app.exception_handler(ResolutionError)
async def resolution_error_handler(
    request: Request, exc: ResolutionError
) -> JSONResponse:
    # Not an empty result: the owner's bus set could not be determined.
    logging.getLogger("uvicorn.error").warning(
        "Ownership resolution failed: %s", exc, extra={"path": str(request.url.path)}
    )
    return JSONResponse(
        status_code=502, content={"detail": str(exc), "kind": "resolution_error"}
    )


@app.exception_handler(FetchError)
async def fetch_error_handler(request: Request, exc: FetchError) -> JSONResponse:
    logging.getLogger("uvicorn.error").warning(
        "Record fetch failed: %s", exc, extra={"path": str(request.url.path)}
    )
    return JSONResponse(
        status_code=502,
        content={
            "detail": str(exc),
            "kind": "fetch_error",
            "upstream_status": exc.status,
        },
    )


@app.exception_handler(SupersededRequest)
async def superseded_handler(request: Request, exc: SupersededRequest) -> JSONResponse:
    # The dashboard drops this response; a newer one for the same view is pending.
    return JSONResponse(
        status_code=409, content={"detail": str(exc), "kind": "superseded"}
    )


@app.exception_handler(GenerationSystemicError)
async def generation_error_handler(
    request: Request, exc: GenerationSystemicError
) -> JSONResponse:
    return JSONResponse(
        status_code=422, content={"detail": str(exc), "kind": "generation_failed"}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Ensure API errors are JSON so the dashboard can display them.

    Starlette's default 500 handler may return plain text/HTML, which the
    dashboard parses as JSON and displays as `{}`.
    """

    logging.getLogger("uvicorn.error").exception(
        "Unhandled exception", extra={"path": str(request.url.path)}
    )

    reveal = (os.getenv("FLEETSCOPE_REVEAL_ERRORS") or "").strip().lower() in {
        "1",
        "true",
        "yes",
        "on",
    }

    if reveal or isinstance(exc, (RuntimeError, ValueError)):
        detail = str(exc) or exc.__class__.__name__
    else:
        detail = "Internal Server Error"

    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
