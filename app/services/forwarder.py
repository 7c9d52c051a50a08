"""Delivery of assembled payloads to the downstream analysis API.

Production code uses ``HttpForwarder``, a single-attempt JSON POST with a
bounded timeout. Tests use ``InMemoryForwarder`` which records payloads for
assertion without a running analysis service. Neither retries: GitHub's own
webhook redelivery is the retry mechanism.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import httpx

from app.config import is_endpoint_configured
from app.schemas.webhooks import OutboundPayload

DEFAULT_TIMEOUT = 30.0


class ForwardFailure(str, Enum):
    """Why a forward attempt failed."""

    UNCONFIGURED = "unconfigured"
    UNREACHABLE = "unreachable"
    TIMEOUT = "timeout"
    STATUS = "status"


class ForwardError(Exception):
    """The analysis API did not accept the payload."""

    def __init__(
        self,
        kind: ForwardFailure,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class ForwardResult:
    """Status and body of a successful (2xx) downstream response."""

    status_code: int
    body: str


class Forwarder(Protocol):
    """Protocol for sending an outbound payload downstream."""

    async def forward(
        self, payload: OutboundPayload, *, delivery_id: str | None = None
    ) -> ForwardResult:
        """Send *payload* once and return the downstream response.

        Raises:
            ForwardError: If the payload was not accepted.
        """
        ...


class HttpForwarder:
    """POST payloads as JSON to the configured analysis endpoint."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = client
        self._endpoint = endpoint
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def timeout(self) -> float:
        return self._timeout

    async def forward(
        self, payload: OutboundPayload, *, delivery_id: str | None = None
    ) -> ForwardResult:
        """Make a single POST attempt and classify any failure."""
        if not is_endpoint_configured(self._endpoint):
            raise ForwardError(ForwardFailure.UNCONFIGURED, "API endpoint is not configured")

        headers = {"Content-Type": "application/json"}
        if delivery_id:
            headers["X-GitHub-Delivery"] = delivery_id

        try:
            resp = await self._client.post(
                self._endpoint,
                json=payload.model_dump(mode="json"),
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            raise ForwardError(
                ForwardFailure.TIMEOUT,
                f"no response from {self._endpoint} within {self._timeout}s",
            ) from exc
        except httpx.TransportError as exc:
            raise ForwardError(
                ForwardFailure.UNREACHABLE,
                f"could not reach {self._endpoint}: {exc}",
            ) from exc

        if not resp.is_success:
            raise ForwardError(
                ForwardFailure.STATUS,
                f"{self._endpoint} answered {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )
        return ForwardResult(status_code=resp.status_code, body=resp.text)


class InMemoryForwarder:
    """Test double that records forwarded payloads for assertions."""

    def __init__(self, error: ForwardError | None = None) -> None:
        self.payloads: list[OutboundPayload] = []
        self.delivery_ids: list[str | None] = []
        self.error = error

    async def forward(
        self, payload: OutboundPayload, *, delivery_id: str | None = None
    ) -> ForwardResult:
        """Record the payload, then raise the primed error if there is one."""
        self.payloads.append(payload)
        self.delivery_ids.append(delivery_id)
        if self.error is not None:
            raise self.error
        return ForwardResult(status_code=200, body='{"success": true}')
