"""Shared test fixtures: settings override, fake GitHub API and FastAPI test client."""

import base64
from collections.abc import AsyncGenerator, AsyncIterator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.dependencies import get_forwarder, get_github_client, get_settings
from app.main import app
from app.services.forwarder import InMemoryForwarder

WEBHOOK_SECRET = "test-secret"
GITHUB_TOKEN = "ghp_test"
API_ENDPOINT = "http://analysis.test/analyze"
GITHUB_API_URL = "https://api.github.test"


class FakeGitHub:
    """In-memory stand-in for the two GitHub REST routes the relay reads.

    ``files`` is the pull request files listing; ``contents`` maps a path to
    its text. Paths missing from ``contents`` answer 404, and ``list_status``
    makes the listing itself fail.
    """

    def __init__(self) -> None:
        self.files: list[dict] = []
        self.contents: dict[str, str] = {}
        self.list_status: int = 200
        self.requests: list[httpx.Request] = []

    def add_file(self, filename: str, content: str | None, **fields: object) -> None:
        entry = {
            "filename": filename,
            "status": "modified",
            "additions": 1,
            "deletions": 0,
            "changes": 1,
            "patch": f"@@ -0,0 +1 @@\n+{filename}",
        }
        entry.update(fields)
        self.files.append(entry)
        if content is not None:
            self.contents[filename] = content

    def content_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if "/contents/" in r.url.path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/files"):
            if self.list_status != 200:
                return httpx.Response(self.list_status, json={"message": "Bad credentials"})
            return httpx.Response(200, json=self.files)
        if "/contents/" in path:
            filename = path.split("/contents/", 1)[1]
            if filename not in self.contents:
                return httpx.Response(404, json={"message": "Not Found"})
            encoded = base64.b64encode(self.contents[filename].encode("utf-8")).decode()
            return httpx.Response(
                200,
                json={"type": "file", "encoding": "base64", "content": encoded},
            )
        return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture
def anyio_backend() -> str:
    """Run anyio-marked tests on asyncio, the event loop the app targets."""
    return "asyncio"


@pytest.fixture
def test_settings() -> Settings:
    """Settings with every relay option configured."""
    return Settings(
        github_webhook_secret=WEBHOOK_SECRET,
        github_token=GITHUB_TOKEN,
        github_api_url=GITHUB_API_URL,
        api_endpoint=API_ENDPOINT,
    )


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Create an empty fake GitHub API for test inspection."""
    return FakeGitHub()


@pytest.fixture
def forwarder() -> InMemoryForwarder:
    """Create a fresh in-memory forwarder for test inspection."""
    return InMemoryForwarder()


@pytest.fixture
async def client(
    test_settings: Settings,
    fake_github: FakeGitHub,
    forwarder: InMemoryForwarder,
) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient with dependencies overridden.

    GitHub reads go to ``fake_github`` through a mock transport and
    forwarded payloads are captured by ``forwarder``.
    """

    async def _override_github_client() -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(
            base_url=GITHUB_API_URL,
            transport=httpx.MockTransport(fake_github.handler),
        ) as github:
            yield github

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_github_client] = _override_github_client
    app.dependency_overrides[get_forwarder] = lambda: forwarder
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
