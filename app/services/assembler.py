"""Build the outbound analysis payload from a webhook event and fetched files.

Pure functions only: no I/O, and the output depends solely on the inputs.
"""

from app.schemas.webhooks import (
    ChangedFile,
    OutboundPayload,
    OutboundPullRequest,
    OutboundRepository,
    PullRequestWebhookPayload,
)


def build_changed_file(file: dict, content: str | None) -> ChangedFile:
    """Normalize one entry of the pull request files listing."""
    return ChangedFile(
        filename=file["filename"],
        status=file.get("status", "modified"),
        additions=file.get("additions", 0),
        deletions=file.get("deletions", 0),
        changes=file.get("changes", 0),
        patch=file.get("patch"),
        content=content,
    )


def build_outbound_payload(
    event: PullRequestWebhookPayload,
    files: list[dict],
    contents: list[str | None],
) -> OutboundPayload:
    """Combine repository, pull request and per-file data into one payload.

    *contents* must be aligned with *files*; the output keeps the listing order.

    Raises:
        ValueError: If *files* and *contents* differ in length.
    """
    if len(files) != len(contents):
        raise ValueError(f"got {len(contents)} contents for {len(files)} files")

    repo = event.repository
    pr = event.pull_request
    return OutboundPayload(
        repository=OutboundRepository(
            owner=repo.owner.login or repo.owner.name or "",
            name=repo.name,
            full_name=repo.full_name,
        ),
        pull_request=OutboundPullRequest(
            number=pr.number,
            title=pr.title,
            description=pr.body,
            author=pr.user.login,
            source_branch=pr.head.ref,
            target_branch=pr.base.ref,
            url=pr.html_url,
            created_at=pr.created_at,
            updated_at=pr.updated_at,
        ),
        files=[build_changed_file(f, c) for f, c in zip(files, contents)],
        action=event.action,
    )
