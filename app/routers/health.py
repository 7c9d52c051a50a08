"""Liveness endpoints: a JSON health check and a plain-text banner."""

from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.schemas.health import HealthResponse

router = APIRouter(tags=["health"])

BANNER = "GitHub PR relay is running!"


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report that the process is alive. Always 200; no dependencies are checked."""
    return HealthResponse(status="healthy", timestamp=datetime.now(UTC))


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return BANNER
