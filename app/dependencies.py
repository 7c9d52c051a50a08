"""Centralized FastAPI dependencies for use with Depends().

Each delivery gets its own GitHub and downstream ``httpx.AsyncClient``; the
only state shared between requests is the frozen ``Settings`` object.
"""

from collections.abc import AsyncIterator
from typing import Annotated

import httpx
from fastapi import Depends

from app.config import Settings, settings
from app.services.forwarder import Forwarder, HttpForwarder


def get_settings() -> Settings:
    """Return the settings loaded at import time."""
    return settings


async def get_github_client(
    config: Annotated[Settings, Depends(get_settings)],
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield an httpx client rooted at the GitHub API with the upstream timeout."""
    async with httpx.AsyncClient(
        base_url=config.github_api_url,
        timeout=config.github_timeout,
    ) as client:
        yield client


async def get_forwarder(
    config: Annotated[Settings, Depends(get_settings)],
) -> AsyncIterator[Forwarder]:
    """Yield an ``HttpForwarder`` bound to the configured analysis endpoint."""
    async with httpx.AsyncClient(timeout=config.forward_timeout) as client:
        yield HttpForwarder(client, config.api_endpoint, timeout=config.forward_timeout)


__all__ = [
    "get_forwarder",
    "get_github_client",
    "get_settings",
]
