"""Settings for the label sync CLI.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Command-line flags take precedence over anything loaded here. To avoid
collisions with other tools that read `GITHUB_TOKEN`, the token uses a
dedicated variable: `GHLABEL_GITHUB_TOKEN`.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ghlabel.github.client import DEFAULT_BASE_URL

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class GhLabelSettings(BaseSettings):
    """Settings for a label sync run.

    Environment variables:
    - GHLABEL_GITHUB_TOKEN  (optional if `--token` is given)
    - GITHUB_BASE_URL       (optional)
    - LOG_LEVEL             (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `GhLabelSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias="GHLABEL_GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    github_base_url: str = Field(
        default=DEFAULT_BASE_URL,
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")
        return level

    @field_validator("github_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/") or DEFAULT_BASE_URL
