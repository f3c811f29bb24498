"""
Director client config - Configuration models.

Pydantic models for type-safe configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from director_client.config.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_DOWNLOAD_CHUNK_SIZE,
    DEFAULT_LOG_DIR,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_TASK_MAX_WAIT,
    DEFAULT_TASK_POLL_INTERVAL,
    LOG_LEVELS,
)


class DirectorConfig(BaseModel):
    """Connection and polling settings for one director."""

    url: str = Field(..., description="Director base URL, e.g. https://10.0.0.6:25555")
    ca_cert: Path | None = Field(default=None, description="CA bundle used to verify the director")
    verify_tls: bool = Field(default=True, description="Verify the director TLS certificate")

    username: str | None = Field(default=None, description="Basic auth username")
    password: str | None = Field(default=None, description="Basic auth password")
    token: str | None = Field(default=None, description="Bearer token (takes precedence over basic auth)")

    connect_timeout: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT, gt=0, le=300, description="Connect timeout in seconds"
    )
    read_timeout: float = Field(
        default=DEFAULT_READ_TIMEOUT, gt=0, le=3600, description="Read timeout in seconds"
    )
    task_poll_interval: float = Field(
        default=DEFAULT_TASK_POLL_INTERVAL, gt=0, le=60, description="Delay between task polls"
    )
    task_max_wait: float = Field(
        default=DEFAULT_TASK_MAX_WAIT, gt=0, description="Upper bound for waiting on one task"
    )
    download_chunk_size: int = Field(
        default=DEFAULT_DOWNLOAD_CHUNK_SIZE, ge=1024, description="Streaming chunk size in bytes"
    )
    context_id: str | None = Field(default=None, description="Correlation id sent with every request")

    @field_validator("url")
    @classmethod
    def _normalize_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"director url must start with http:// or https://, got: {value!r}")
        return value.rstrip("/")

    @property
    def timeout(self) -> tuple[float, float]:
        """(connect, read) tuple in the form requests expects."""
        return (self.connect_timeout, self.read_timeout)

    @property
    def verify(self) -> bool | str:
        """Value for requests' ``verify`` argument."""
        if not self.verify_tls:
            return False
        if self.ca_cert:
            return str(self.ca_cert)
        return True


class LogSettings(BaseModel):
    """
    Log sinks used by ``setup_logger``.

    ``rotation`` and ``retention`` are handed to loguru as-is
    (e.g. "10 MB", "1 week").
    """

    log_dir: Path = Field(
        default=Path(DEFAULT_LOG_DIR), validate_default=True, description="Directory for the log file"
    )
    file_name: str = Field(default="director_client.log", min_length=1)
    file_level: str = Field(default="DEBUG", description="Minimum level written to the file")
    console_level: str = Field(default="WARNING", description="Minimum level written to stderr")
    console_enabled: bool = Field(default=False, description="Log to stderr without verbose")
    json_logs: bool = Field(default=False, description="One JSON object per line in the file")
    include_caller: bool = Field(default=True, description="Add module:function:line to file records")
    rotation: str = "10 MB"
    retention: str = "1 week"
    compression: Literal["gz", "zip"] | None = "gz"

    @field_validator("log_dir")
    @classmethod
    def _expand_log_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("file_level", "console_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}, expected one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("compression", mode="before")
    @classmethod
    def _none_compression(cls, value):
        if isinstance(value, str) and value.strip().lower() in ("", "none"):
            return None
        return value

    @property
    def log_path(self) -> Path:
        return self.log_dir / self.file_name
