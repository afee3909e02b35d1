from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.active_bikes import router as active_bikes_router
from src.adapters.api.controllers.fleet import router as fleet_router
from src.adapters.api.controllers.tracking import router as tracking_router
from src.adapters.api.dependencies import get_tracking_registry
from src.domain.exceptions import GenerationError


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    # No ticker may outlive the process' event loop.
    await get_tracking_registry().close_all()


app = FastAPI(title="Bike Tracker", lifespan=lifespan)
app.include_router(fleet_router)
app.include_router(active_bikes_router)
app.include_router(tracking_router)


@app.exception_handler(GenerationError)
async def generation_error_handler(
    request: Request, exc: GenerationError
) -> JSONResponse:
    logging.getLogger("uvicorn.error").error(
        "Fleet generation failed: %s", exc, extra={"path": str(request.url.path)}
    )
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Ensure API errors are JSON so the dashboard can display them.

    Starlette's default 500 handler may return plain text/HTML, which the
    dashboard parses as JSON and displays as `{}`.
    """

    logging.getLogger("uvicorn.error").exception(
        "Unhandled exception", extra={"path": str(request.url.path)}
    )

    reveal = (os.getenv("BIKESHARE_REVEAL_ERRORS") or "").strip().lower() in {
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
