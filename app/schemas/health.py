"""Pydantic response models for the health check endpoint."""

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""

    status: str
    timestamp: datetime
