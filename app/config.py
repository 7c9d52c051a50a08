"""Application configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

API_ENDPOINT_PLACEHOLDER = "https://your-api.com/analyze"


def is_endpoint_configured(endpoint: str) -> bool:
    """True when *endpoint* is set to something other than the placeholder."""
    return bool(endpoint) and endpoint != API_ENDPOINT_PLACEHOLDER


class Settings(BaseSettings):
    """Immutable relay settings, read once at startup from the environment or ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    app_name: str = "pr-relay"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    strict_config: bool = False

    # Inbound webhook authentication
    github_webhook_secret: str = ""

    # Upstream GitHub reads
    github_token: str = ""
    github_api_url: str = "https://api.github.com"
    github_timeout: float = Field(default=10.0, gt=0)
    github_fetch_concurrency: int = Field(default=10, ge=1)
    github_max_file_pages: int = Field(default=30, ge=1)

    # Downstream analysis API
    api_endpoint: str = API_ENDPOINT_PLACEHOLDER
    forward_timeout: float = Field(default=30.0, gt=0)

    # Local stand-in for the analysis API (python -m app.dev_api)
    dev_api_port: int = 4000

    @property
    def api_endpoint_configured(self) -> bool:
        """True when ``api_endpoint`` is set to something other than the placeholder."""
        return is_endpoint_configured(self.api_endpoint)

    def config_warnings(self) -> list[str]:
        """Describe settings that will make deliveries fail at runtime."""
        warnings: list[str] = []
        if not self.github_webhook_secret:
            warnings.append("GITHUB_WEBHOOK_SECRET not set: every delivery will fail verification")
        if not self.github_token:
            warnings.append("GITHUB_TOKEN not set: GitHub API reads are unauthenticated")
        if not self.api_endpoint_configured:
            warnings.append("API_ENDPOINT not configured: payloads cannot be forwarded")
        return warnings


settings = Settings()
