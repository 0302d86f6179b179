"""
Configuration models for gql_hooks.

This module defines the configuration data models with validation and defaults.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from ..models import OperationContext, RequestPolicy


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    file_path: Optional[Path] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10 * 1024 * 1024, ge=1024, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, ge=0, description="Number of backup log files")
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_file: bool = Field(default=False, description="Enable file logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )

    # Component-specific log levels
    component_levels: Dict[str, LogLevel] = Field(
        default_factory=dict, description="Per-component log levels"
    )

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value


class ClientConfig(BaseModel):
    """Configuration for the HTTP execution client."""

    model_config = ConfigDict(extra="forbid")

    url: HttpUrl = Field(description="GraphQL endpoint URL")
    headers: Dict[str, str] = Field(default_factory=dict, description="Default request headers")
    fetch_options: Dict[str, Any] = Field(
        default_factory=dict, description="Extra keyword arguments for every HTTP request"
    )
    request_policy: RequestPolicy = Field(
        default=RequestPolicy.CACHE_FIRST, description="Default request policy"
    )
    prefer_get_method: bool = Field(default=False, description="Send queries with HTTP GET")
    suspense: bool = Field(default=False, description="Integrate with suspense")
    timeout: float = Field(default=30.0, ge=1.0, description="Request timeout in seconds")

    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    def to_context(self) -> OperationContext:
        """Client-level default context described by this configuration."""
        fetch_options = dict(self.fetch_options)
        if self.headers:
            fetch_options["headers"] = {**fetch_options.get("headers", {}), **self.headers}
        return OperationContext(
            url=str(self.url),
            fetch_options=fetch_options or None,
            request_policy=self.request_policy,
            prefer_get_method=self.prefer_get_method,
            suspense=self.suspense,
        )
