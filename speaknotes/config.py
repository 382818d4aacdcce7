"""
Application settings.

Read from environment variables (and an optional .env file) into one
object that is handed to ``create_app`` at startup.
"""
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SpeakNotes service settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="SpeakNotes AI", description="Application title")

    # ==================== Security ====================
    api_key: Optional[str] = Field(
        default=None,
        description="Shared secret expected in the x-api-key header; unset disables the check",
    )

    # ==================== Server ====================
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, ge=1, le=65535, description="Bind port")
    cors_origins: List[str] = Field(default=["*"], description="Allowed CORS origins")

    # ==================== Rate limiting ====================
    rate_limit_enabled: bool = Field(default=True, description="Enable rate limiting")
    rate_limit: str = Field(default="100/minute", description="Default per-client limit")

    # ==================== Logging ====================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def auth_enabled(self) -> bool:
        return bool(self.api_key)
