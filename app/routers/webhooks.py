"""GitHub webhook router: verify, filter, fetch, assemble and forward pull requests."""

import json
from typing import Annotated

import httpx
import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import ValidationError

from app.config import Settings
from app.dependencies import get_forwarder, get_github_client, get_settings
from app.schemas.webhooks import PullRequestWebhookPayload
from app.services.assembler import build_outbound_payload
from app.services.forwarder import ForwardError, Forwarder
from app.services.github_client import FetchError, fetch_contents, list_changed_files
from app.services.signature import verify_signature

logger = structlog.get_logger()

router = APIRouter(tags=["webhooks"])

PULL_REQUEST_EVENT = "pull_request"
TRIGGER_ACTIONS = frozenset({"opened", "reopened", "synchronize"})


async def verify_github_signature(
    request: Request,
    config: Annotated[Settings, Depends(get_settings)],
    x_hub_signature_256: Annotated[str | None, Header()] = None,
) -> bytes:
    """Verify GitHub webhook HMAC-SHA256 signature.

    Returns the raw body bytes on success so the route handler can parse
    the payload without reading the body stream a second time.

    Raises:
        HTTPException: 401 if the signature is missing or does not match.
    """
    body = await request.body()
    if not verify_signature(body, x_hub_signature_256, config.github_webhook_secret):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid signature",
        )
    return body


def _ignored(reason: str) -> dict:
    return {"status": "ignored", "reason": reason}


@router.post("/webhook")
async def github_webhook(
    raw_body: Annotated[bytes, Depends(verify_github_signature)],
    config: Annotated[Settings, Depends(get_settings)],
    github: Annotated[httpx.AsyncClient, Depends(get_github_client)],
    forwarder: Annotated[Forwarder, Depends(get_forwarder)],
    x_github_event: Annotated[str | None, Header()] = None,
    x_github_delivery: Annotated[str | None, Header()] = None,
) -> dict:
    """Relay an opened, reopened or synchronized pull request to the analysis API.

    Other events and actions are acknowledged with 200 and dropped. Failing
    to list the changed files or to forward the payload yields a 500; GitHub
    redelivery is the only retry.
    """
    with structlog.contextvars.bound_contextvars(
        delivery_id=x_github_delivery,
        github_event=x_github_event,
    ):
        try:
            data = json.loads(raw_body)
        except ValueError:
            logger.warning("webhook_malformed_json")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Malformed JSON body",
            ) from None
        if not isinstance(data, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Malformed JSON body",
            )

        if x_github_event != PULL_REQUEST_EVENT:
            logger.info("webhook_event_ignored")
            return _ignored("event ignored")

        action = data.get("action")
        if action not in TRIGGER_ACTIONS:
            logger.info("webhook_action_ignored", action=action)
            return _ignored("action ignored")

        try:
            event = PullRequestWebhookPayload.model_validate(data)
        except ValidationError as exc:
            logger.warning("webhook_invalid_payload", errors=exc.error_count())
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid pull_request payload",
            ) from None

        pr = event.pull_request
        owner = event.repository.owner.login or event.repository.owner.name or ""
        repo = event.repository.name
        log = logger.bind(
            repository=event.repository.full_name,
            pr_number=pr.number,
            action=action,
        )
        log.info("webhook_processing")

        try:
            files = await list_changed_files(
                github,
                owner,
                repo,
                pr.number,
                config.github_token,
                max_pages=config.github_max_file_pages,
            )
        except FetchError as exc:
            log.error(
                "pr_files_fetch_failed",
                status_code=exc.status_code,
                error=exc.message,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error processing webhook",
            ) from None

        contents = await fetch_contents(
            github,
            owner,
            repo,
            files,
            pr.head.sha,
            config.github_token,
            concurrency=config.github_fetch_concurrency,
        )
        payload = build_outbound_payload(event, files, contents)

        try:
            result = await forwarder.forward(payload, delivery_id=x_github_delivery)
        except ForwardError as exc:
            log.error(
                "forward_failed",
                kind=exc.kind.value,
                error=exc.message,
                status_code=exc.status_code,
                body=exc.body,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error processing webhook",
            ) from None

        missing = sum(1 for c in contents if c is None)
        log.info(
            "webhook_processed",
            files=len(files),
            files_without_content=missing,
            downstream_status=result.status_code,
        )
        return {
            "status": "processed",
            "pr_number": pr.number,
            "files": len(files),
            "downstream_status": result.status_code,
        }
