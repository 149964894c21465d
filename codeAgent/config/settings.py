"""Environment-bound configuration objects.

This module provides Pydantic BaseSettings-based configuration loading from .env files.
All settings classes automatically load from environment variables with support for
multiple alias names (e.g., AGENT_API_KEY and OPENROUTER_API_KEY both work).

Example:
    from codeAgent.config.settings import get_settings

    settings = get_settings()  # Cached singleton
    api_key = settings.models.api_key
    budget = settings.governance.subtask_max_iterations
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()


class ModelRoutingSettings(BaseSettings):
    """Model identifiers for each tier plus the shared endpoint credentials.

    Tiers map onto the cost/capability tradeoff of the completion endpoint:
    - MODEL_SMALL: cheap helper calls (branch names)
    - MODEL_MEDIUM: sub-tasks and planners
    - MODEL_LARGE: root runs and expert consultation
    - MODEL_SEARCH: search-capable model used by the web_search tool

    All tiers share one OpenAI-compatible endpoint (OpenRouter by default).
    """

    small: str = Field(
        default="google/gemini-2.5-flash-preview-05-20",
        validation_alias=AliasChoices("MODEL_SMALL", "AG_CHAT_SMALL_MODEL"),
    )
    medium: str = Field(
        default="google/gemini-2.5-flash-preview-05-20",
        validation_alias=AliasChoices("MODEL_MEDIUM", "AG_CHAT_MEDIUM_MODEL"),
    )
    large: str = Field(
        default="openai/o4-mini",
        validation_alias=AliasChoices("MODEL_LARGE", "AG_CHAT_LARGE_MODEL"),
    )
    search: str = Field(
        default="perplexity/sonar",
        validation_alias=AliasChoices("MODEL_SEARCH", "AG_CHAT_SEARCH_MODEL"),
    )

    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AGENT_API_KEY", "AG_CHAT_API_KEY", "OPENROUTER_API_KEY"),
    )
    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        validation_alias=AliasChoices("AGENT_BASE_URL", "AG_CHAT_ENDPOINT"),
    )
    temperature: float = Field(default=0.2, ge=0.0, le=2.0, alias="MODEL_TEMPERATURE")
    app_title: str = Field(default="codeAgent", alias="AGENT_APP_TITLE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class GovernanceSettings(BaseSettings):
    """Runtime governance and control settings.

    Controls agent behavior limits and policies:
    - *_max_iterations: iteration budgets per call site (assistant turns)
    - max_delegation_depth: how deep delegate_subtask may nest
    - confirm_timeout_seconds / confirm_on_timeout: run_command confirmation policy
      (a timeout proceeds as confirmed unless confirm_on_timeout is False)
    - auto_approve_commands: skip the confirmation prompt entirely
    """

    root_max_iterations: int = Field(default=25, ge=1, le=500, alias="ROOT_MAX_ITERATIONS")
    subtask_max_iterations: int = Field(default=10, ge=1, le=500, alias="SUBTASK_MAX_ITERATIONS")
    planner_max_iterations: int = Field(default=25, ge=1, le=500, alias="PLANNER_MAX_ITERATIONS")
    max_delegation_depth: int = Field(default=2, ge=0, le=10, alias="MAX_DELEGATION_DEPTH")

    confirm_timeout_seconds: float = Field(default=10.0, gt=0, alias="CONFIRM_TIMEOUT_SECONDS")
    confirm_on_timeout: bool = Field(default=True, alias="CONFIRM_ON_TIMEOUT")
    auto_approve_commands: bool = Field(default=False, alias="AUTO_APPROVE_COMMANDS")
    command_timeout_seconds: int = Field(default=300, ge=1, alias="COMMAND_TIMEOUT_SECONDS")

    chat_recursion_limit: int = Field(default=500, ge=10, alias="CHAT_RECURSION_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class WebSettings(BaseSettings):
    """Page fetching configuration.

    - jina_api_key: credential for the rendering reader (read_page with use_browser)
    - fetch_timeout_seconds: HTTP timeout for both retrieval modes
    - max_page_chars: pages are truncated to this many characters
    """

    jina_api_key: Optional[str] = Field(default=None, alias="JINA_API_KEY")
    jina_reader_url: str = Field(default="https://r.jina.ai/", alias="JINA_READER_URL")
    fetch_timeout_seconds: float = Field(default=30.0, gt=0, alias="FETCH_TIMEOUT_SECONDS")
    max_page_chars: int = Field(default=50_000, ge=1_000, alias="MAX_PAGE_CHARS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    log_dir: str = Field(default="logs", alias="LOG_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_prompt_max_length: int = Field(default=500, ge=100, le=5000, alias="LOG_PROMPT_MAX_LENGTH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class Settings(BaseSettings):
    """Root application settings loaded from .env file.

    Hierarchical structure containing four nested settings groups:
    - models: Model tiers and endpoint credentials (ModelRoutingSettings)
    - governance: Budgets, delegation depth, confirmation policy (GovernanceSettings)
    - web: Page fetching (WebSettings)
    - observability: Logging (ObservabilitySettings)

    Use get_settings() to obtain a cached instance; tests construct Settings() directly.
    """

    environment: str = Field(default="dev", alias="APP_ENV")
    models: ModelRoutingSettings = Field(default_factory=ModelRoutingSettings)
    governance: GovernanceSettings = Field(default_factory=GovernanceSettings)
    web: WebSettings = Field(default_factory=WebSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Returns:
        Settings: Cached application settings instance
    """
    return Settings()
