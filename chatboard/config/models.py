"""
Pydantic-based configuration models for the ChatBoard server.

Each concern has its own BaseSettings model with an environment prefix, and
AppConfig aggregates them. Values come from the environment (or a .env file)
and are validated once at startup.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class ServerConfig(BaseSettings):
    """Server network configuration."""

    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(default=3000, description="Server port")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1 <= v <= 65535:
            logger.error("Invalid server port", port=v, valid_range="1-65535")
            raise ValueError("Port must be between 1 and 65535")
        return v

    model_config = {"env_prefix": "SERVER_", "case_sensitive": False, "extra": "ignore"}


class DatabaseConfig(BaseSettings):
    """Database configuration."""

    url: str = Field(default="sqlite+aiosqlite:///./chat.db", description="Async SQLAlchemy database URL")
    echo: bool = Field(default=False, description="Echo SQL statements to the log")

    @field_validator("url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate the URL names an async driver."""
        if not v:
            raise ValueError("Database URL cannot be empty")
        if v.startswith("sqlite://"):
            # Upgrade plain sqlite URLs to the async driver
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if not v.startswith("sqlite+aiosqlite://"):
            logger.error("Database URL validation failed - unsupported driver", url_preview=v[:50])
            raise ValueError("Database URL must use the sqlite+aiosqlite driver")
        return v

    model_config = {"env_prefix": "DATABASE_", "case_sensitive": False, "extra": "ignore"}


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    environment: str = Field(default="development", description="Logging environment")
    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="auto", description="Log format: auto, console, json or keyvalue")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate logging environment."""
        valid_environments = ["development", "unit_test", "production"]
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of {valid_environments}, got '{v}'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}, got '{v}'")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["auto", "console", "json", "keyvalue"]
        if v not in valid_formats:
            raise ValueError(f"Log format must be one of {valid_formats}, got '{v}'")
        return v

    model_config = {"env_prefix": "LOGGING_", "case_sensitive": False, "extra": "ignore"}


class ChatConfig(BaseSettings):
    """Chat and realtime configuration."""

    rate_limit_window_ms: int = Field(default=1000, description="Message rate limit window in milliseconds")
    rate_limit_max_messages: int = Field(default=5, description="Messages admitted per identity per window")
    history_limit: int = Field(default=50, description="Messages sent to a newly authenticated session")
    max_content_length: int = Field(default=500, description="Maximum chat message / board field length")
    max_frame_size: int = Field(default=10 * 1024, description="Maximum inbound WebSocket frame size in bytes")

    @field_validator("rate_limit_window_ms", "rate_limit_max_messages", "history_limit", "max_content_length")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate limits are positive."""
        if v < 1:
            raise ValueError("Chat limits must be at least 1")
        return v

    model_config = {"env_prefix": "CHAT_", "case_sensitive": False, "extra": "ignore"}


class AuthConfig(BaseSettings):
    """Account and password hashing configuration."""

    min_password_length: int = Field(default=4, description="Minimum password length")
    argon2_time_cost: int = Field(default=3, description="Argon2 time cost (1-10)")
    argon2_memory_cost: int = Field(default=65536, description="Argon2 memory cost in KiB")
    argon2_parallelism: int = Field(default=1, description="Argon2 parallelism (1-16)")

    model_config = {"env_prefix": "AUTH_", "case_sensitive": False, "extra": "ignore"}


class CORSConfig(BaseSettings):
    """Cross-origin resource sharing configuration."""

    allow_origins: str = Field(default="*", description="Comma separated origins, '*' for any")

    @property
    def origins(self) -> list[str]:
        """Return allowed origins as a list."""
        return [origin.strip() for origin in self.allow_origins.split(",") if origin.strip()]

    model_config = {"env_prefix": "CORS_", "case_sensitive": False, "extra": "ignore"}


class AppConfig(BaseSettings):
    """
    Composite application configuration.

    This is the main configuration class that aggregates all other configs.
    Access via get_config().
    """

    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    cors: CORSConfig = Field(default_factory=CORSConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "case_sensitive": False, "extra": "ignore"}

    def summary(self) -> dict[str, Any]:
        """Return non-sensitive settings for startup logging."""
        return {
            "host": self.server.host,
            "port": self.server.port,
            "database_url": self.database.url,
            "environment": self.logging.environment,
            "rate_limit_window_ms": self.chat.rate_limit_window_ms,
            "rate_limit_max_messages": self.chat.rate_limit_max_messages,
        }
