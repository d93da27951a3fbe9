"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file without clobbering variables set by the platform
load_dotenv(override=False)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = True

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # GitHub OAuth application
    github_client_id: str = Field(default="")
    github_client_secret: str = Field(default="")
    github_oauth_scopes: list[str] = Field(default_factory=lambda: ["repo", "workflow"])
    github_authorize_url: str = "https://github.com/login/oauth/authorize"
    github_token_url: str = "https://github.com/login/oauth/access_token"
    github_api_url: str = "https://api.github.com"

    # Fastly OAuth application
    fastly_client_id: str = Field(default="")
    fastly_client_secret: str = Field(default="")
    fastly_oauth_scopes: list[str] = Field(default_factory=lambda: ["global"])
    fastly_authorize_url: str = "https://accounts.fastly.com/oauth/authorize"
    fastly_token_url: str = "https://accounts.fastly.com/oauth/token"
    fastly_api_url: str = "https://api.fastly.com"

    # Session carrier
    session_cookie_name: str = "__Secure-QD-Session"

    # Provisioning
    manifest_path: str = "fastly.toml"
    deploy_spec_path: str = "quick-deploy.toml"
    service_domain_suffix: str = "edgecompute.app"
    deploy_secret_name: str = "FASTLY_API_TOKEN"
    deploy_workflow: str = "deploy"
    require_template: bool = True
    commit_message: str = "Service provisioning via deploy.edgecompute.app"

    # Outbound HTTP
    user_agent: str = "Quick Deploy"
    http_timeout_seconds: float = 30.0

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"
    log_directory: str | None = None
    log_file_name: str = "quick-deploy.log"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
