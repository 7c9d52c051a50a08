"""Stand-in analysis API for exercising the relay locally.

Run it next to the relay and point ``API_ENDPOINT`` at it::

    python -m app.dev_api
    API_ENDPOINT=http://localhost:4000/analyze python -m app

Every received payload is summarised in the log and acknowledged with a
small JSON receipt.
"""

from datetime import UTC, datetime

import structlog
import uvicorn
from fastapi import FastAPI

from app.config import settings
from app.logging_config import configure_logging
from app.schemas.webhooks import OutboundPayload

logger = structlog.get_logger()

PREVIEW_CHARS = 200

app = FastAPI(title="dev-api")


def _preview(content: str | None) -> str | None:
    if content is None:
        return None
    if len(content) > PREVIEW_CHARS:
        return content[:PREVIEW_CHARS] + "..."
    return content


@app.post("/analyze")
async def analyze(payload: OutboundPayload) -> dict:
    """Log what the relay sent and acknowledge it."""
    pr = payload.pull_request
    logger.info(
        "pr_data_received",
        repository=payload.repository.full_name,
        pr_number=pr.number,
        title=pr.title,
        author=pr.author,
        action=payload.action,
        files=len(payload.files),
    )
    for index, file in enumerate(payload.files, start=1):
        logger.info(
            "pr_file_received",
            index=index,
            filename=file.filename,
            status=file.status,
            additions=file.additions,
            deletions=file.deletions,
            content_length=len(file.content or ""),
            preview=_preview(file.content),
        )

    return {
        "success": True,
        "message": "PR data received and processed",
        "received_at": datetime.now(UTC).isoformat(),
        "pr_number": pr.number,
        "files_analyzed": len(payload.files),
    }


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "service": "dev-api"}


def main() -> None:
    configure_logging(json_logs=False, service="dev-api")
    port = settings.dev_api_port
    logger.info("dev_api_started", endpoint=f"http://localhost:{port}/analyze")
    uvicorn.run(app, host="127.0.0.1", port=port, log_config=None)


if __name__ == "__main__":
    main()
