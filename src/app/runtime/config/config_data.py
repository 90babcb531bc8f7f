"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field

MIB = 1024 * 1024

# Default secret shipped in config.yaml for local development; refused in production.
DEVELOPMENT_SIGNING_SECRET = "dev-signing-secret-change-me"


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class JWTConfig(BaseModel):
    """Bearer token validation configuration."""

    signing_secret: str | None = Field(
        default=None, description="Shared secret used to sign and verify HS tokens"
    )
    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="JWT algorithms allowed for token validation",
    )
    issuer: str = Field(
        default="bookshelf-api", description="Issuer name used when generating tokens"
    )
    audiences: list[str] = Field(
        default_factory=lambda: ["api://bookshelf"],
        description="JWT audiences that this API accepts",
    )
    clock_skew: int = Field(default=60, description="Clock skew tolerance in seconds")
    access_token_ttl_seconds: int = Field(
        default=3600, description="Lifetime of generated access tokens"
    )


class AttachmentConfig(BaseModel):
    """Storage settings for uploaded book files."""

    directory: str = Field(
        default="uploads/books", description="Directory holding attachment files"
    )
    max_size_bytes: int = Field(
        default=100 * MIB, gt=0, description="Largest accepted upload in bytes"
    )
    accepted_mime_types: list[str] = Field(
        default_factory=lambda: ["application/pdf"],
        description="Declared content types accepted for upload",
    )
    accepted_extensions: list[str] = Field(
        default_factory=lambda: [".pdf"],
        description="Original file suffixes kept on stored files",
    )
    default_extension: str = Field(
        default=".pdf", description="Suffix used when the original one is not accepted"
    )
    chunk_size: int = Field(
        default=64 * 1024, gt=0, description="Read size used when streaming files"
    )


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str = Field(default="", description="Log file path, empty disables the file sink")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./data/bookshelf.db",
        description="Database connection URL",
    )
    echo: bool = Field(default=False, description="Echo SQL statements")
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def password(self) -> str | None:
        """Resolve the database password from a secrets file or environment variable."""
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if not password:
                raise ValueError(f"Environment variable {self.password_env_var} not set")
            return password
        return None

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with the resolved password."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        resolved_password = self.password
        if resolved_password is None:
            return self.url

        if base_url.password and base_url.password != resolved_password:
            logger.warning(
                "Database password in URL differs from the configured secret; using the secret."
            )
        return base_url.set(password=resolved_password).render_as_string(
            hide_password=False
        )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT validation configuration"
    )
    attachments: AttachmentConfig = Field(
        default_factory=AttachmentConfig, description="Book attachment storage"
    )
