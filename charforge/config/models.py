"""
Pydantic-based configuration models for CharForge.

Each concern has its own BaseSettings class and environment prefix;
AppConfig composes them and reads an optional ``.env`` file.
"""

import json
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


def _parse_env_list(candidate: Any) -> list[str]:
    """Parse a string from the environment as JSON list or CSV."""
    if candidate is None:
        return []
    if isinstance(candidate, list | tuple):
        return [str(item).strip() for item in candidate if str(item).strip()]
    s = str(candidate).strip()
    if not s:
        return []
    try:
        loaded = json.loads(s)
        if isinstance(loaded, list):
            return [str(item).strip() for item in loaded if str(item).strip()]
    except json.JSONDecodeError:
        pass
    return [item.strip() for item in s.split(",") if item.strip()]


class ServerConfig(BaseSettings):
    """Server network configuration."""

    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(..., description="Server port (required)")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1024 <= v <= 65535:
            logger.error("Invalid server port", port=v, valid_range="1024-65535")
            raise ValueError("Port must be between 1024 and 65535")
        return v

    model_config = {"env_prefix": "SERVER_", "case_sensitive": False, "extra": "ignore"}


class DatabaseConfig(BaseSettings):
    """Database configuration."""

    url: str = Field(..., description="Database URL (required)")

    # Connection pool configuration (SQLAlchemy, ignored for SQLite)
    pool_size: int = Field(default=5, description="Number of connections to maintain in pool")
    max_overflow: int = Field(default=10, description="Additional connections that can be created beyond pool_size")
    pool_timeout: int = Field(default=30, description="Seconds to wait for connection from pool")

    @field_validator("url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format - PostgreSQL or SQLite."""
        if not v:
            logger.error("Database URL validation failed - empty URL")
            raise ValueError("Database URL cannot be empty")
        if not v.startswith(("postgresql", "sqlite")):
            logger.error(
                "Database URL validation failed - invalid protocol",
                url_preview=v[:50],
                expected_protocols=["postgresql", "sqlite"],
            )
            raise ValueError("Database URL must start with 'postgresql' or 'sqlite'")
        return v

    @field_validator("pool_size", "max_overflow", "pool_timeout")
    @classmethod
    def validate_pool_config(cls, v: int) -> int:
        """Validate pool configuration values are positive."""
        if v < 1:
            raise ValueError("Pool configuration values must be at least 1")
        return v

    model_config = {"env_prefix": "DATABASE_", "case_sensitive": False, "extra": "ignore"}


class SecurityConfig(BaseSettings):
    """Security-sensitive configuration: JWT signing secrets and token lifetime."""

    jwt_secret: str = Field(..., description="Secret used to sign access tokens (required)")
    jwt_lifetime_seconds: int = Field(default=3600, description="Access token lifetime in seconds")
    reset_token_secret: str | None = Field(default=None, description="Password reset token secret")
    verification_token_secret: str | None = Field(default=None, description="Email verification token secret")

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Reject secrets too short to sign tokens safely."""
        if len(v) < 16:
            logger.error("JWT secret validation failed - too short", secret_length=len(v), minimum_length=16)
            raise ValueError("JWT secret must be at least 16 characters")
        return v

    @field_validator("jwt_lifetime_seconds")
    @classmethod
    def validate_lifetime(cls, v: int) -> int:
        """Validate token lifetime is positive."""
        if v < 60:
            raise ValueError("JWT lifetime must be at least 60 seconds")
        return v

    model_config = {"env_prefix": "CHARFORGE_", "case_sensitive": False, "extra": "ignore"}


class CatalogConfig(BaseSettings):
    """Rules reference catalog (dnd5eapi.co) client configuration."""

    base_url: str = Field(default="https://www.dnd5eapi.co", description="Catalog base URL")
    timeout_seconds: float = Field(default=10.0, description="Per-request timeout in seconds")
    max_concurrency: int = Field(default=8, description="Maximum simultaneous catalog requests")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate the catalog URL is http(s) and strip any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Catalog base URL must start with 'http://' or 'https://'")
        return v.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("Catalog timeout must be positive")
        return v

    @field_validator("max_concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        """Validate concurrency is at least one."""
        if v < 1:
            raise ValueError("Catalog concurrency must be at least 1")
        return v

    model_config = {"env_prefix": "CATALOG_", "case_sensitive": False, "extra": "ignore"}


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    environment: str = Field(..., description="Logging environment (required)")
    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="human", description="Log format")
    log_base: str = Field(default="logs", description="Base log directory")
    rotation_max_size: str = Field(default="10MB", description="Log rotation max size")
    rotation_backup_count: int = Field(default=5, description="Number of backup log files")
    disable_logging: bool = Field(default=False, description="Disable file logging")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate logging environment."""
        valid_environments = ["local", "unit_test", "e2e_test", "production"]
        if v not in valid_environments:
            logger.error("Invalid logging environment", environment=v, valid_environments=valid_environments)
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
        valid_formats = ["json", "human"]
        if v not in valid_formats:
            raise ValueError(f"Log format must be one of {valid_formats}, got '{v}'")
        return v

    model_config = {"env_prefix": "LOGGING_", "case_sensitive": False, "extra": "ignore"}

    def to_legacy_dict(self) -> dict:
        """Convert to the nested dict consumed by setup_enhanced_logging."""
        return {
            "environment": self.environment,
            "level": self.level,
            "format": self.format,
            "log_base": self.log_base,
            "rotation": {
                "max_size": self.rotation_max_size,
                "backup_count": self.rotation_backup_count,
            },
            "disable_logging": self.disable_logging,
        }


class CORSConfig(BaseSettings):
    """Cross-origin resource sharing configuration."""

    allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins permitted to access the CharForge API",
    )
    allow_credentials: bool = Field(default=True, description="Whether credentialed requests are accepted")
    allow_methods: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        description="HTTP methods permitted by CORS responses",
    )
    allow_headers: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["Content-Type", "Authorization", "X-Requested-With", "X-Correlation-ID"],
        description="Request headers permitted by CORS responses",
    )
    max_age: int = Field(default=600, description="Seconds browsers may cache CORS preflight responses")

    @field_validator("allow_origins", "allow_methods", "allow_headers", mode="before")
    @classmethod
    def parse_list(cls, v: Any) -> list[str]:
        """Accept JSON arrays or comma-separated strings."""
        return _parse_env_list(v)

    model_config = {"env_prefix": "CORS_", "case_sensitive": False, "extra": "ignore"}


class AppConfig(BaseSettings):
    """
    Composite application configuration.

    Aggregates all other configs. Access via the get_config() function.
    """

    server: ServerConfig = Field(default_factory=ServerConfig)  # type: ignore[arg-type]
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)  # type: ignore[arg-type]
    security: SecurityConfig = Field(default_factory=SecurityConfig)  # type: ignore[arg-type]
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)  # type: ignore[arg-type]
    cors: CORSConfig = Field(default_factory=CORSConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "case_sensitive": False, "extra": "ignore"}

    def to_legacy_dict(self) -> dict:
        """
        Convert to a flat dict with a nested "logging" section.

        The logging setup consumes this shape; secrets are deliberately absent.
        """
        return {
            "host": self.server.host,
            "port": self.server.port,
            "database_url": self.database.url,
            "catalog_base_url": self.catalog.base_url,
            "logging": self.logging.to_legacy_dict(),
            "cors_origins": self.cors.allow_origins,
        }
