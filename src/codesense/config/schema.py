"""
Pydantic configuration schema for CodeSense.

This module defines all configuration models with validation.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Provider Configuration
# =============================================================================


class ProviderConfig(BaseModel):
    """Model backend configuration."""

    model_config = ConfigDict(extra="allow")

    model: str = "gemini/gemini-1.5-flash"
    api_key: str | None = None
    api_key_env: str = "GEMINI_API_KEY"
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    top_p: float = Field(default=0.95, ge=0.0, le=1.0)
    top_k: int = Field(default=40, ge=1)
    max_tokens: int = Field(default=4096, ge=1)
    timeout: float = Field(
        default=60.0,
        gt=0,
        le=600,
        description="Deadline per model call in seconds",
    )
    extra_params: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Exchange Limits Configuration
# =============================================================================


class LimitsConfig(BaseModel):
    """Bounds applied to prompts and tool rounds."""

    model_config = ConfigDict(extra="allow")

    max_files_per_round: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum file paths resolved per tool round",
    )
    max_file_chars: int = Field(
        default=25000,
        ge=100,
        description="Maximum characters of a fetched file passed to the model",
    )
    max_history_pairs: int = Field(
        default=10,
        ge=0,
        description="Recent requester/model pairs kept in chat prompts",
    )
    summary_entries: int = Field(default=50, ge=0)
    chat_entries: int = Field(default=30, ge=0)
    chat_key_files: int = Field(default=5, ge=0)
    max_languages: int = Field(default=5, ge=0)
    fetch_timeout: float = Field(
        default=20.0,
        gt=0,
        le=300,
        description="Deadline per file fetch in seconds",
    )


# =============================================================================
# GitHub Data Source Configuration
# =============================================================================


class GitHubConfig(BaseModel):
    """GitHub REST data source configuration."""

    model_config = ConfigDict(extra="allow")

    api_url: str = "https://api.github.com"
    token: str | None = None
    token_env: str = "GITHUB_TOKEN"
    timeout: float = Field(default=20.0, gt=0, le=300)
    max_file_size: int = Field(
        default=1024 * 1024,
        ge=1,
        description="Largest file in bytes the data source will return",
    )
    contributors_per_page: int = Field(default=20, ge=1, le=100)


# =============================================================================
# Root Configuration Model
# =============================================================================


class Config(BaseModel):
    """
    Root configuration model for CodeSense.

    Configuration can be loaded from YAML files and environment variables,
    merged in order of priority.
    """

    model_config = ConfigDict(extra="allow")

    providers: ProviderConfig = Field(default_factory=ProviderConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
