"""
Core Configuration Management
Broker Relay

Environment-based settings for the relay: broker credentials, upstream hosts,
the security master location and the HTTP listener.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal
from functools import lru_cache
from pathlib import Path


class DhanSettings(BaseSettings):
    """Dhan broker settings."""

    model_config = SettingsConfigDict(env_prefix="DHAN_", frozen=True)

    api_token: str = Field(default="", description="Dhan access token")
    client_id: str = Field(default="", description="Dhan client ID")
    base_url: str = Field(default="https://api.dhan.co", description="Dhan REST host")

    @property
    def is_configured(self) -> bool:
        """Check if Dhan is properly configured."""
        return bool(self.api_token and self.client_id)


class FlattradeSettings(BaseSettings):
    """Flattrade broker settings (auth only)."""

    model_config = SettingsConfigDict(env_prefix="FLATTRADE_", frozen=True)

    client_id: str = Field(default="", description="Flattrade client ID")
    api_key: str = Field(default="", description="Flattrade API key")
    api_secret: str = Field(default="", description="Flattrade API secret")
    auth_url: str = Field(default="https://authapi.flattrade.in", description="Flattrade auth host")

    @property
    def is_configured(self) -> bool:
        """Check if Flattrade API keys are configured."""
        return bool(self.api_key and self.api_secret)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        description="Console log format"
    )

    # File logging
    file_enabled: bool = Field(default=True, description="Enable file logging")
    file_path: str = Field(default="logs/broker_relay.json", description="Log file path")
    error_file_path: str = Field(default="logs/error.log", description="Error log file path")
    file_rotation: str = Field(default="100 MB", description="Log rotation size")
    file_retention: str = Field(default="10 days", description="Log retention period")


class Settings(BaseSettings):
    """
    Main application settings.

    Built once at start-up and handed to the application factory; the
    instance is frozen so nothing can mutate it per request.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application
    PROJECT_NAME: str = Field(default="Broker Relay", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment"
    )

    # Listener
    HOST: str = Field(default="0.0.0.0", description="Listen host")
    PORT: int = Field(default=3000, description="Listen port")

    # Front end origin, used for CORS and as the postMessage target
    FRONTEND_ORIGIN: str = Field(default="http://localhost:5173", description="Front end origin")

    # Security master
    SCRIP_MASTER_PATH: Path = Field(
        default=Path("./api-scrip-master.csv"),
        description="Dhan security master CSV"
    )

    # Upstream HTTP
    HTTP_TIMEOUT: float = Field(default=30.0, description="Upstream request timeout in seconds")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOG_FILE_ENABLED: bool = Field(default=True, description="Enable file logging")

    # Dhan credentials
    DHAN_API_TOKEN: str = Field(default="", description="Dhan access token")
    DHAN_CLIENT_ID: str = Field(default="", description="Dhan client ID")
    DHAN_BASE_URL: str = Field(default="https://api.dhan.co", description="Dhan REST host")

    # Flattrade credentials
    FLATTRADE_CLIENT_ID: str = Field(default="", description="Flattrade client ID")
    FLATTRADE_API_KEY: str = Field(default="", description="Flattrade API key")
    FLATTRADE_API_SECRET: str = Field(default="", description="Flattrade API secret")
    FLATTRADE_AUTH_URL: str = Field(default="https://authapi.flattrade.in", description="Flattrade auth host")

    @property
    def dhan(self) -> DhanSettings:
        """Get Dhan settings."""
        return DhanSettings(
            api_token=self.DHAN_API_TOKEN,
            client_id=self.DHAN_CLIENT_ID,
            base_url=self.DHAN_BASE_URL,
        )

    @property
    def flattrade(self) -> FlattradeSettings:
        """Get Flattrade settings."""
        return FlattradeSettings(
            client_id=self.FLATTRADE_CLIENT_ID,
            api_key=self.FLATTRADE_API_KEY,
            api_secret=self.FLATTRADE_API_SECRET,
            auth_url=self.FLATTRADE_AUTH_URL,
        )

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(
            level=self.LOG_LEVEL,
            file_enabled=self.LOG_FILE_ENABLED,
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
