"""Configuration loading from YAML and environment.

Secrets (passwords, tokens) are taken from environment variables or from
files (Docker secrets). Never put real credentials in config files
committed to the repo.
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from bbprs.adapters import (
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT_SECONDS,
    BitbucketCloudService,
    ConfigError,
    PullRequestService,
)


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        try:
            return Path(file_path).read_text().strip()
        except OSError as e:
            raise ConfigError(f"cannot read secret file {file_path}: {e}") from e
    return None


# Injected by load_config so secret lookups can read env/file
_current_env: dict[str, str] = {}


class BitbucketConfig(BaseSettings):
    """Bitbucket Cloud repository and credentials."""

    model_config = SettingsConfigDict(env_prefix="BITBUCKET_", extra="ignore")

    api_url: str = Field(default=DEFAULT_API_URL, description="API base URL")
    owner: str = Field(default="", description="Workspace (owner) of the repository")
    repo_slug: str = Field(default="", description="Repository slug")
    auth: Literal["basic", "bearer", "none"] = Field(default="none", description="basic, bearer or none")
    username: str | None = Field(default=None, description="Username for basic auth")
    password: str | None = Field(default=None, description="App password; use env or secret file")
    token: str | None = Field(default=None, description="Access token; use env or secret file")
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0, description="HTTP timeout per request")
    follow_pages: bool = Field(default=False, description="Walk every page instead of the first only")
    pagelen: int | None = Field(default=None, ge=1, le=50, description="Page size sent to the API")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    bitbucket: BitbucketConfig = Field(default_factory=BitbucketConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def bitbucket_password_resolved(self) -> str | None:
        """Resolve Bitbucket password from config, env or Docker secret
        file."""
        p = self.bitbucket.password
        if p and not p.startswith("${"):
            return p
        return _read_secret("BITBUCKET_PASSWORD", "BITBUCKET_PASSWORD_FILE")

    @property
    def bitbucket_token_resolved(self) -> str | None:
        """Resolve Bitbucket access token from config, env or Docker secret
        file."""
        t = self.bitbucket.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("BITBUCKET_TOKEN", "BITBUCKET_TOKEN_FILE")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def _section(raw: dict[str, Any], name: str, path: Path) -> dict[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: '{name}' must be a mapping, got {type(section).__name__}")
    return section


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Secrets: BITBUCKET_PASSWORD or BITBUCKET_PASSWORD_FILE, BITBUCKET_TOKEN
    or BITBUCKET_TOKEN_FILE.
    """
    global _current_env
    import os

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping, got {type(raw).__name__}")
    raw = _substitute_env(raw)

    bitbucket = BitbucketConfig(**_section(raw, "bitbucket", path))
    logging = LoggingConfig(**_section(raw, "logging", path))
    return AppConfig(bitbucket=bitbucket, logging=logging)


def build_service(config: AppConfig) -> PullRequestService:
    """Build the discovery service described by config.

    Raises:
        ConfigError: If the repository is not set, credentials for the
            chosen auth mode are missing, or the API URL is malformed.
    """
    bb = config.bitbucket
    options: dict[str, Any] = {
        "timeout": bb.timeout_seconds,
        "follow_pages": bb.follow_pages,
        "pagelen": bb.pagelen,
    }
    if bb.auth == "basic":
        password = config.bitbucket_password_resolved
        if not bb.username or not password:
            raise ConfigError("basic auth requires bitbucket.username and a password (BITBUCKET_PASSWORD)")
        return BitbucketCloudService.with_basic_auth(
            bb.username, password, bb.api_url, bb.owner, bb.repo_slug, **options
        )
    if bb.auth == "bearer":
        token = config.bitbucket_token_resolved
        if not token:
            raise ConfigError("bearer auth requires a token (BITBUCKET_TOKEN)")
        return BitbucketCloudService.with_bearer_token(token, bb.api_url, bb.owner, bb.repo_slug, **options)
    return BitbucketCloudService.with_no_auth(bb.api_url, bb.owner, bb.repo_slug, **options)
