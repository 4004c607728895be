"""Configuration management for the Yodlee client.

Loads cobrand credentials from .env and optional base URL overrides from
config/environments.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError
from dotenv import load_dotenv

from yodlee_api.exceptions import InvalidArgumentError
from yodlee_api.models.session import SessionSeed

SANDBOX_URL = "https://yisandbox.yodleeinteractive.com/services/srest/private-{sandboxuser}/v1.0/"
LIVE_URL = "https://rest.developer.yodlee.com/services/srest/restserver/v1.0/"


class Environment(BaseModel):
    """Base URL templates for the sandbox and live services."""
    sandbox_url: str = SANDBOX_URL  # {sandboxuser} is replaced by the cobrand login
    live_url: str = LIVE_URL


class Settings(BaseModel):
    """Client settings loaded from environment variables."""
    username: str = Field(default="", description="Cobrand login")
    password: str = Field(default="", description="Cobrand password")
    sandbox: bool = Field(default=False, description="Use the sandbox service")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    seed: SessionSeed = Field(default_factory=SessionSeed, description="Pre-issued session tokens")


class ClientConfig(BaseModel):
    """Full client configuration."""
    settings: Settings
    environment: Environment = Field(default_factory=Environment)

    @property
    def sandbox(self) -> bool:
        return self.settings.sandbox

    @property
    def base_url(self) -> str:
        """Base URL for every request; sandbox URLs are keyed by cobrand login."""
        if self.settings.sandbox:
            return self.environment.sandbox_url.replace("{sandboxuser}", self.settings.username)
        return self.environment.live_url


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where config/ or .env lives)."""
    current = Path(__file__).resolve().parent
    for parent in [current, *current.parents]:
        if (parent / "config" / "environments.yaml").exists() or (parent / ".env").exists():
            return parent
    # Fallback: cwd
    return Path.cwd()


def _load_environment(project_root: Path) -> Environment:
    """Load base URL overrides from environments.yaml, if present."""
    env_path = project_root / "config" / "environments.yaml"
    if not env_path.exists():
        return Environment()

    with open(env_path) as f:
        data = yaml.safe_load(f) or {}

    return Environment(**{k: v for k, v in data.items() if k in Environment.model_fields})


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Supports both YODLEE_* and the camelCase form field names from .env.

    Raises:
        InvalidArgumentError: If a value (e.g. a token expiry) cannot be parsed.
    """
    try:
        return Settings(
            username=_env("YODLEE_COBRAND_LOGIN", "cobrandLogin"),
            password=_env("YODLEE_COBRAND_PASSWORD", "cobrandPassword"),
            sandbox=_env("YODLEE_SANDBOX", default="false").lower() in ("true", "1", "yes"),
            timeout=_env("YODLEE_TIMEOUT", default="30"),
            seed=SessionSeed(
                cob_session_token=_env("YODLEE_COB_SESSION_TOKEN", "cobSessionToken") or None,
                user_session_token=_env("YODLEE_USER_SESSION_TOKEN", "userSessionToken") or None,
                cob_session_expires=_env("YODLEE_COB_SESSION_EXPIRES", "cobSessionExpires") or None,
                user_session_expires=_env("YODLEE_USER_SESSION_EXPIRES", "userSessionExpires") or None,
            ),
        )
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise InvalidArgumentError(f"Invalid configuration value for {field}: {error['msg']}", field=field) from e


@lru_cache(maxsize=1)
def get_config() -> ClientConfig:
    """Load and cache the full client configuration."""
    project_root = _find_project_root()

    # Load .env from project root if it exists
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    settings = _load_settings()
    environment = _load_environment(project_root)

    return ClientConfig(settings=settings, environment=environment)
