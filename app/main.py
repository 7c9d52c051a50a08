"""FastAPI application factory with lifespan context manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.logging_config import configure_logging
from app.routers import health, webhooks


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and report configuration problems before serving."""
    configure_logging(
        json_logs=not settings.debug,
        log_level=settings.log_level,
        service=settings.app_name,
    )
    logger = structlog.get_logger()

    problems = settings.config_warnings()
    if problems and settings.strict_config:
        raise RuntimeError("Refusing to start: " + "; ".join(problems))
    for problem in problems:
        logger.warning("config_warning", problem=problem)

    logger.info(
        "relay_started",
        port=settings.port,
        webhook_path="/webhook",
        health_path="/health",
        api_endpoint_configured=settings.api_endpoint_configured,
    )
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health.router)
app.include_router(webhooks.router)
