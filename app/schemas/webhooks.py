"""Pydantic models for inbound pull_request webhooks and the outbound analysis payload."""

from pydantic import BaseModel, Field


class GitHubUser(BaseModel):
    """A GitHub account referenced by a pull request."""

    login: str


class RepositoryOwner(BaseModel):
    """Owner of the repository (user or organization)."""

    login: str | None = None
    name: str | None = None


class Repository(BaseModel):
    """Repository metadata from the webhook payload."""

    name: str
    full_name: str
    owner: RepositoryOwner


class BranchRef(BaseModel):
    """Head or base side of a pull request."""

    ref: str
    sha: str


class PullRequest(BaseModel):
    """The subset of pull request fields forwarded downstream."""

    number: int
    title: str
    body: str | None = None
    user: GitHubUser
    head: BranchRef
    base: BranchRef
    html_url: str
    created_at: str
    updated_at: str


class PullRequestWebhookPayload(BaseModel):
    """GitHub pull_request webhook event payload.

    Reference: https://docs.github.com/en/webhooks/webhook-events-and-payloads#pull_request
    """

    action: str
    pull_request: PullRequest
    repository: Repository


class ChangedFile(BaseModel):
    """One file touched by the pull request, with its content at the head commit."""

    filename: str
    status: str
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: str | None = None
    content: str | None = None


class OutboundRepository(BaseModel):
    owner: str
    name: str
    full_name: str


class OutboundPullRequest(BaseModel):
    number: int
    title: str
    description: str | None = None
    author: str
    source_branch: str
    target_branch: str
    url: str
    created_at: str
    updated_at: str


class OutboundPayload(BaseModel):
    """Normalized document POSTed to the analysis API."""

    repository: OutboundRepository
    pull_request: OutboundPullRequest
    files: list[ChangedFile] = Field(default_factory=list)
    action: str
