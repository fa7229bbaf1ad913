"""Configuration management for ringgate."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="RINGGATE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_profile: Literal["default", "cli"] = Field(default="default", description="Log output profile")

    # Scheduler Configuration
    misfire_grace_seconds: int = Field(
        default=30,
        ge=1,
        description="How late a pending call cancellation may still run",
    )

    # Plugin Configuration
    plugins: list[str] = Field(default_factory=list, description="Dotted import paths of plugin modules")
    use_memory_plugin: bool = Field(default=True, description="Register the in-process collaborators")
    memory_directory: dict[str, str] = Field(
        default_factory=dict,
        description="uin -> uid entries served by the in-process identity resolver",
    )


def get_settings() -> Settings:
    """Get application settings.

    Returns:
        Settings instance loaded from the environment and ``.env``
    """
    return Settings()
