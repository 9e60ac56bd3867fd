"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI Configuration
    openai_api_key: str = Field(..., description="OpenAI API key")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI base URL (supports OpenRouter, Ollama)",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Default model name, overridable per request",
    )
    openai_timeout: int = Field(default=60, description="Request timeout in seconds")
    openai_max_retries: int = Field(
        default=0, description="Transport-level retry attempts"
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/chats.db",
        description="Database URL of the chat history store",
    )
    warehouse_database_url: str | None = Field(
        default=None,
        description="Database URL of the vendor warehouse (unset disables inserts)",
    )

    # Persona (personalization) Configuration
    persona_api_url: str | None = Field(
        default=None, description="Base URL of the persona context API"
    )
    persona_api_key: str | None = Field(
        default=None, description="API key of the persona context API"
    )

    # Outbound call Configuration
    outbound_call_url: str | None = Field(
        default=None, description="Endpoint that places outbound vendor calls"
    )
    outbound_call_api_key: str | None = Field(
        default=None, description="API key of the outbound call endpoint"
    )
    http_timeout: float = Field(
        default=30.0, description="Timeout in seconds for outgoing HTTP calls"
    )

    # Agent Configuration
    agent_max_iterations: int = Field(
        default=8, ge=1, description="Maximum completions requested per turn"
    )
    agent_temperature: float = Field(
        default=0.2, ge=0, le=2, description="Sampling temperature"
    )
    context_max_tokens: int = Field(
        default=2000, description="Token budget requested from the persona API"
    )

    # Application Configuration
    app_host: str = Field(default="0.0.0.0", description="Application host")
    app_port: int = Field(default=3000, description="Application port")
    app_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    app_reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )

    # CORS Configuration
    cors_allowed_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "https://preview--nego-bot-buddy.lovable.app",
            "https://nego-bot-buddy.lovable.app",
        ],
        description="Origins allowed to call the API from a browser",
    )
    cors_allowed_origin_regex: str | None = Field(
        default=r"https://.*\.ngrok\.app",
        description="Additional origin pattern allowed by CORS",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()  # type: ignore[call-arg]
