"""GitHub REST API client for pull request file listings and file content.

Every function takes an ``httpx.AsyncClient`` whose ``base_url`` points at the
GitHub API root, so callers control connection pooling, timeouts and (in
tests) the transport.
"""

import asyncio
import base64
import binascii
from urllib.parse import quote

import httpx
import structlog

logger = structlog.get_logger()

_GITHUB_HEADERS_BASE = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}


class FetchError(Exception):
    """Listing the changed files of a pull request failed."""

    def __init__(self, status_code: int | None, message: str) -> None:
        super().__init__(f"GitHub request failed ({status_code}): {message}")
        self.status_code = status_code
        self.message = message


def _auth_headers(token: str) -> dict[str, str]:
    """Build GitHub API headers with Bearer auth when a token is configured."""
    if not token:
        return dict(_GITHUB_HEADERS_BASE)
    return {**_GITHUB_HEADERS_BASE, "Authorization": f"Bearer {token}"}


def _error_message(resp: httpx.Response) -> str:
    """Prefer GitHub's JSON ``message`` field, fall back to the raw body."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return resp.text


async def list_changed_files(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    pr_number: int,
    token: str,
    *,
    per_page: int = 100,
    max_pages: int = 30,
) -> list[dict]:
    """List every file changed by a pull request, following pagination.

    GitHub stops listing at 3000 files, which is 30 pages of 100. If the
    ``next`` link is still present after ``max_pages`` pages the result is
    truncated and a warning is logged.

    Returns:
        The raw file objects in GitHub's order (filename, status, counts, patch).

    Raises:
        FetchError: On a non-2xx response or a transport failure.
    """
    url: str | None = f"/repos/{owner}/{repo}/pulls/{pr_number}/files"
    params: dict | None = {"per_page": per_page}
    files: list[dict] = []
    pages = 0

    while url is not None and pages < max_pages:
        try:
            resp = await client.get(url, params=params, headers=_auth_headers(token))
        except httpx.HTTPError as exc:
            raise FetchError(None, str(exc) or type(exc).__name__) from exc
        if not resp.is_success:
            raise FetchError(resp.status_code, _error_message(resp))

        try:
            page = resp.json()
        except ValueError as exc:
            raise FetchError(resp.status_code, "response body is not JSON") from exc
        if not isinstance(page, list):
            raise FetchError(resp.status_code, "expected a list of files")

        files.extend(page)
        pages += 1
        url = resp.links.get("next", {}).get("url")
        # The next link already carries per_page and page in its query string.
        params = None

    if url is not None:
        logger.warning(
            "changed_files_truncated",
            owner=owner,
            repo=repo,
            pr_number=pr_number,
            files=len(files),
            pages=pages,
        )
    return files


async def fetch_file_content(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    path: str,
    ref: str,
    token: str,
) -> str | None:
    """Fetch a file's decoded text content at the given commit.

    Args:
        client: Shared httpx async client (for connection pooling).
        owner: Repository owner (user or organisation).
        repo: Repository name.
        path: File path within the repository.
        ref: Git ref -- typically the pull request head SHA.
        token: GitHub personal access token or installation token.

    Returns:
        The UTF-8 text, or None when the content cannot be obtained: any
        error status (404 for removed files, 403 when rate limited), a
        transport failure, a file over GitHub's 1 MB inline limit, or
        binary content. Failures are logged, never raised.
    """
    url = f"/repos/{owner}/{repo}/contents/{quote(path)}"
    try:
        resp = await client.get(url, params={"ref": ref}, headers=_auth_headers(token))
    except httpx.HTTPError as exc:
        logger.warning("file_content_fetch_failed", path=path, error=str(exc) or type(exc).__name__)
        return None
    if not resp.is_success:
        logger.warning(
            "file_content_fetch_failed",
            path=path,
            status_code=resp.status_code,
            error=_error_message(resp),
        )
        return None

    try:
        data = resp.json()
    except ValueError:
        logger.warning("file_content_unavailable", path=path, reason="not_json")
        return None
    if not isinstance(data, dict) or data.get("encoding") != "base64":
        logger.warning("file_content_unavailable", path=path, reason="not_inline_base64")
        return None
    try:
        return base64.b64decode(data.get("content") or "").decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        logger.warning("file_content_unavailable", path=path, reason="not_utf8_text")
        return None


async def fetch_contents(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    files: list[dict],
    ref: str,
    token: str,
    *,
    concurrency: int = 10,
) -> list[str | None]:
    """Fetch the content of every listed file concurrently.

    At most ``concurrency`` requests are in flight at once. The returned list
    is aligned with *files*, whatever order the requests complete in.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _fetch(path: str) -> str | None:
        async with semaphore:
            return await fetch_file_content(client, owner, repo, path, ref, token)

    return list(await asyncio.gather(*(_fetch(f["filename"]) for f in files)))
