"""
FeedLoader Configuration System
==============================

Configuration management with environment variables and Pydantic models.
Environment variables (prefix ``FEEDLOADER_``, nested with ``__``) override
Field defaults.
"""

from pathlib import Path
from typing import Optional
from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from ..utils.exceptions import ConfigurationError, ErrorCode


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class HttpSettings(BaseModel):
    """HTTP transport configuration."""
    timeout: float = Field(default=30, ge=1, le=300, description="Request timeout in seconds")
    user_agent: str = Field(default="FeedLoader/1.0", description="User-Agent header sent with every request")
    accept: str = Field(
        default="application/rss+xml, application/atom+xml, application/xml, text/xml",
        description="Accept header sent with every request",
    )
    max_connections: int = Field(default=10, ge=1, le=100, description="Connection pool size per host")

    @field_validator('user_agent')
    @classmethod
    def validate_user_agent(cls, v):
        """Reject blank user agents."""
        v = v.strip()
        if not v:
            raise ValueError("user_agent cannot be empty")
        return v


class CacheSettings(BaseModel):
    """Offline feed cache configuration."""
    enabled: bool = Field(default=True, description="Keep a local copy of every fetched feed")
    directory: str = Field(default="data/feed_cache", description="Directory holding cached feed documents")
    file_suffix: str = Field(default=".xml", description="Suffix of cache files")


class ParserSettings(BaseModel):
    """Feed parser capacity configuration."""
    max_items: Optional[int] = Field(default=None, ge=1, description="Maximum items kept per feed (None keeps all)")
    max_description_length: int = Field(default=4096, ge=64, le=100000, description="Longer descriptions are truncated")


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    file_path: Optional[str] = Field(default="logs/feedloader.log", description="Log file path")
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Max log file size in MB")
    backup_count: int = Field(default=5, ge=1, le=20, description="Number of log backup files")
    structured_logging: bool = Field(default=False, description="Use structured JSON logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class FeedLoaderSettings(BaseSettings):
    """Main application settings."""

    http: HttpSettings = Field(default_factory=HttpSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    parser: ParserSettings = Field(default_factory=ParserSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    app_name: str = Field(default="FeedLoader", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "FEEDLOADER_",
        "extra": "ignore",
    }

    def validate_configuration(self) -> None:
        """Validate complete configuration."""
        errors = []

        if self.cache.enabled:
            try:
                Path(self.cache.directory).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Invalid cache directory: {e}")

        if self.logging.file_path:
            try:
                Path(self.logging.file_path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Invalid log file path: {e}")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                error_code=ErrorCode.CONFIG_INVALID
            )

    def get_effective_log_level(self) -> str:
        """Get effective log level considering debug mode."""
        if self.debug:
            return "DEBUG"
        return self.logging.level.value


def load_settings() -> FeedLoaderSettings:
    """Load settings from environment variables and defaults.

    Returns:
        Loaded and validated settings

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        settings = FeedLoaderSettings()
        settings.validate_configuration()
        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID
        ) from e


_settings: Optional[FeedLoaderSettings] = None


def get_settings(reload: bool = False) -> FeedLoaderSettings:
    """Get global settings instance.

    Args:
        reload: Force reload of settings

    Returns:
        Global settings instance
    """
    global _settings

    if _settings is None or reload:
        _settings = load_settings()

    return _settings
