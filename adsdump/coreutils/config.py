"""
Run configuration

Process-wide, read-only settings assembled once at start-up from CLI flags
with environment fallbacks, then injected into the executor, paginator,
sink and orchestrator.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .env import env_get
from .errors import ConfigError

DEFAULT_BASE_URL = "https://graph.facebook.com"
DEFAULT_API_VERSION = "v19.0"
DEFAULT_TIMEOUT = 30
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_BASE = 1.0

TOKEN_ENV_VAR = "FB_ACCESS_TOKEN"


def mask_token(token: str) -> str:
    """Render a token for diagnostics: first/last 10 characters only"""
    if len(token) <= 20:
        return "***"
    return f"{token[:10]}...{token[-10:]}"


@dataclass
class Config:
    """Settings for one dump run"""

    access_token: str = field(repr=False)
    output_dir: Optional[str] = None
    max_pages: int = 0  # 0 = unlimited
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_base: float = DEFAULT_BACKOFF_BASE
    insights_since: Optional[date] = None
    insights_until: Optional[date] = None

    def __post_init__(self):
        if not self.access_token:
            raise ConfigError(
                f"An access token is required (pass --token or set {TOKEN_ENV_VAR})"
            )
        if self.max_pages < 0:
            raise ConfigError(f"max_pages must be >= 0, got {self.max_pages}")
        if self.max_retries < 0:
            raise ConfigError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if (self.insights_since is None) != (self.insights_until is None):
            raise ConfigError("insights_since and insights_until must be set together")
        if self.insights_since and self.insights_since > self.insights_until:
            raise ConfigError(
                f"insights_since ({self.insights_since}) is after "
                f"insights_until ({self.insights_until})"
            )
        self.base_url = self.base_url.rstrip("/")
        self.api_version = self.api_version.strip("/")

    @property
    def masked_token(self) -> str:
        return mask_token(self.access_token)

    @classmethod
    def from_env(cls, access_token: Optional[str] = None, **overrides) -> "Config":
        """
        Build a Config, falling back to environment variables

        Args:
            access_token: Explicit token; FB_ACCESS_TOKEN is used when empty
            **overrides: Any other Config field

        Returns:
            Config: Validated configuration

        Raises:
            ConfigError: When no token is available or a value is invalid
        """
        token = access_token or env_get(TOKEN_ENV_VAR)
        overrides.setdefault("api_version", env_get("FB_API_VERSION", DEFAULT_API_VERSION))
        overrides.setdefault("base_url", env_get("FB_GRAPH_BASE_URL", DEFAULT_BASE_URL))
        return cls(access_token=token or "", **overrides)
