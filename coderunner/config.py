"""Centralized configuration management using Pydantic Settings.

This module provides typed configuration for the code runner,
loaded from environment variables with sensible defaults.

Usage:
    from coderunner.config import get_settings
    settings = get_settings()
    assignments = settings.workspace.assignments_dir
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkspaceSettings(BaseSettings):
    """Where uploaded submissions are extracted."""

    model_config = SettingsConfigDict(env_prefix="WORKSPACE_", extra="ignore")

    assignments_dir: Path = Field(
        default=Path("assignments"),
        description="Directory holding one extraction root per submission",
    )
    sniff_bytes: int = Field(default=512, description="Header bytes read for format detection")


class RunnerSettings(BaseSettings):
    """Command execution configuration."""

    model_config = SettingsConfigDict(env_prefix="RUNNER_", extra="ignore")

    shell: str = Field(default="/bin/sh", description="Shell used to run compile/run commands")


class LanguageSettings(BaseSettings):
    """Language advertised to the client."""

    model_config = SettingsConfigDict(extra="ignore")

    supported_language: str = Field(default="", alias="supported_language")


class ClientSettings(BaseSettings):
    """Static client configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    directory: Path = Field(default=Path("client"), alias="client_dir")


class ServerSettings(BaseSettings):
    """Listener configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, description="Bind port")


class CorsSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    origins_raw: str = Field(
        default="*",
        validation_alias="CORS_ORIGINS",
    )

    @property
    def origins(self) -> list[str]:
        """Parse comma-separated origins into list."""
        return [o.strip() for o in self.origins_raw.split(",") if o.strip()]

    @property
    def allow_credentials(self) -> bool:
        """Credentials not allowed with wildcard origins."""
        return self.origins != ["*"]


class DebugSettings(BaseSettings):
    """Debug flags configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    request: bool = Field(default=False, alias="request_debug")

    @field_validator("*", mode="before")
    @classmethod
    def parse_bool(cls, v):
        if isinstance(v, str):
            return v.lower() in ("1", "true", "yes")
        return bool(v)


class Settings:
    """Main application settings combining all configuration sections.

    Each subsetting is loaded independently with its own prefix.
    """

    def __init__(self) -> None:
        self.workspace = WorkspaceSettings()
        self.runner = RunnerSettings()
        self.language = LanguageSettings()
        self.client = ClientSettings()
        self.server = ServerSettings()
        self.cors = CorsSettings()
        self.debug = DebugSettings()


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings instance (singleton pattern)."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear cached settings (useful for testing)."""
    get_settings.cache_clear()
