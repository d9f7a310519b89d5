"""Configuration loading and validation for mdbinder."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from mdbinder.core.errors import ConfigError

DEFAULT_CONFIG_PATH = "~/.mdbinder/config.yaml"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# Environment variable -> top-level config key
_ENV_OVERRIDES = {
    "MDBINDER_GIT_DIR": "git_dir",
    "MDBINDER_OUTPUT_DIR": "output_dir",
    "MDBINDER_PROJECT_ID": "project_id",
}


class BitbucketConfig(BaseModel):
    """Bitbucket Server holding the project's repositories."""

    base_url: str = Field(description="Server URL, e.g. http://bitbucket.local:7990")
    user: str | None = Field(default=None, description="User for basic auth and cloning")
    password: str | None = Field(default=None, description="Password or HTTP access token")
    branch: str = Field(default="master", description="Branch to clone")
    page_limit: int = Field(default=100, gt=0, description="Repos per listing page")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid base_url: {v!r}. Expected http:// or https://.")
        return v.rstrip("/")


class BinderConfig(BaseModel):
    """Top-level mdbinder configuration."""

    git_dir: str = Field(description="Directory holding one checkout per repository")
    output_dir: str = Field(description="Directory the book is assembled in")
    project_id: str = Field(default="", description="Project the repositories belong to")
    bitbucket: BitbucketConfig | None = Field(
        default=None,
        description="List and clone repositories from Bitbucket; local checkouts otherwise",
    )
    markdown_suffixes: list[str] = Field(
        default_factory=lambda: [".md", ".markdown"],
        description="Files whose links are rewritten",
    )
    readme_template: str | None = Field(default=None, description="Book README template file")
    summary_template: str | None = Field(default=None, description="SUMMARY template file")
    strict: bool = Field(default=False, description="Warn about unresolved links")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("markdown_suffixes")
    @classmethod
    def validate_suffixes(cls, v: list[str]) -> list[str]:
        """Suffixes must look like '.md'."""
        for suffix in v:
            if not suffix.startswith(".") or len(suffix) < 2:
                raise ValueError(f"Invalid markdown suffix: {suffix!r}. Expected e.g. '.md'.")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept standard logging level names, any case."""
        if v.upper() not in _LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {v!r}. Expected one of {sorted(_LOG_LEVELS)}.")
        return v.upper()

    def repo_path(self, slug: str) -> str:
        """Local checkout path of a repository."""
        return str(Path(self.git_dir).expanduser() / slug)


def load_config(path: str | None = None) -> BinderConfig:
    """Load and validate configuration from a YAML file.

    Environment variable overrides:
        MDBINDER_GIT_DIR: overrides git_dir
        MDBINDER_OUTPUT_DIR: overrides output_dir
        MDBINDER_PROJECT_ID: overrides project_id
        MDBINDER_GIT_USER: overrides bitbucket.user
        MDBINDER_GIT_PASSWORD: overrides bitbucket.password

    Args:
        path: Path to config file. Defaults to ~/.mdbinder/config.yaml.

    Returns:
        Validated BinderConfig.

    Raises:
        ConfigError: If config file is missing, unreadable, or invalid.
    """
    config_path = Path(path or DEFAULT_CONFIG_PATH).expanduser()

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        raw = config_path.read_text()
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a YAML mapping")

    # Apply environment variable overrides
    for env_name, key in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data[key] = value

    if isinstance(data.get("bitbucket"), dict):
        env_user = os.environ.get("MDBINDER_GIT_USER")
        if env_user:
            data["bitbucket"]["user"] = env_user

        env_password = os.environ.get("MDBINDER_GIT_PASSWORD")
        if env_password:
            data["bitbucket"]["password"] = env_password

    try:
        return BinderConfig(**data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
