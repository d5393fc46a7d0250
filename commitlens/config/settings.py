"""Application settings using Pydantic Settings for environment variable management."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env.local",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # OpenAI Configuration
    openai_api_key: str | None = Field(
        default=None, description="OpenAI API key for the analysis agents"
    )
    review_model: str = Field(
        default="openai:gpt-4.1-mini", description="Model used to review diffs"
    )
    conversation_model: str = Field(
        default="openai:gpt-4.1-mini",
        description="Model used for thread replies and fix generation",
    )
    max_retries: int = Field(
        default=2, description="Maximum number of retries for API calls"
    )

    # Version control
    vcs_backend: Literal["git", "github"] = Field(
        default="git",
        description="Where revisions come from: a local git checkout or the GitHub API",
    )
    workspace_root: Path = Field(
        default=Path("."), description="Workspace searched for repositories and files"
    )

    # GitHub Configuration
    # Note: GitHub Actions doesn't allow env var names starting with GITHUB_
    # so the GH_* / WEBHOOK_SECRET variants are used
    github_token: str | None = Field(
        default=None,
        validation_alias="GH_TOKEN",
        description="GitHub personal access token",
    )
    github_repository: str | None = Field(
        default=None,
        validation_alias="GH_REPOSITORY",
        description="Watched repository in 'owner/repo' format",
    )
    github_branch: str = Field(
        default="main",
        validation_alias="GH_BRANCH",
        description="Branch whose head revision is tracked",
    )
    github_webhook_secret: str | None = Field(
        default=None,
        validation_alias="WEBHOOK_SECRET",
        description="GitHub webhook secret for signature verification",
    )

    # Repository watching
    discovery_max_attempts: int = Field(
        default=5, description="How many times to look for a repository on startup"
    )
    discovery_retry_delay: float = Field(
        default=0.5, description="Seconds between repository discovery attempts"
    )
    refresh_debounce_seconds: float = Field(
        default=0.3, description="Window in which refresh bursts collapse into one"
    )

    # Review Configuration
    bot_name: str = Field(
        default="CommitLens", description="Author name used on review threads"
    )
    fix_context_lines: int = Field(
        default=5, description="Lines of context around a suggestion sent for fixes"
    )
    max_reply_length: int = Field(
        default=2000, description="Maximum length of a conversation reply"
    )

    # Observability
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for observability"
    )

    # Application Settings
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Application environment"
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    def missing_production_settings(self) -> list[str]:
        """List required environment variables that are not set."""
        missing = []
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        if self.vcs_backend == "github":
            if not self.github_token:
                missing.append("GH_TOKEN")
            if not self.github_repository:
                missing.append("GH_REPOSITORY")
            if not self.github_webhook_secret:
                missing.append("WEBHOOK_SECRET")
        return missing


# Global settings instance
settings = Settings()

# Validate required secrets in production to avoid silent failures
if settings.is_production and (missing := settings.missing_production_settings()):
    raise RuntimeError(
        "Missing required environment variables for production: " + ", ".join(missing)
    )
