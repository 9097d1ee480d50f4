"""
Configuration schemas using Pydantic for validation.

Every section has defaults, so an empty document yields a usable config.
"""

import codecs
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_VALID_LEVELS = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class PoolConfig(BaseModel):
    """Sizing of the shared drain pool."""

    workers_per_cpu: int = Field(
        default=2, ge=1, description="Worker threads per available CPU"
    )
    max_workers: int | None = Field(
        default=None,
        ge=2,
        description="Explicit worker count; overrides workers_per_cpu when set",
    )
    thread_name_prefix: str = Field(
        default="procinfra-drain", description="Prefix for drain thread names"
    )

    model_config = ConfigDict(extra="forbid")


class ShellConfig(BaseModel):
    """How child command lines are built on POSIX hosts."""

    path: str = Field(default="/bin/sh", description="Shell used for pipe support")
    profile: str | None = Field(
        default="~/.bash_profile",
        description="Profile exported as BASH_ENV; null disables it",
    )

    model_config = ConfigDict(extra="forbid")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str | bool = Field(default="info", description="Log level or false")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: Any) -> Any:
        """Validate log level is a recognized level."""
        if isinstance(v, str) and v.upper() not in _VALID_LEVELS:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(_VALID_LEVELS)}"
            )
        return v

    model_config = ConfigDict(extra="forbid")


class ProcessConfig(BaseModel):
    """Root configuration for procinfra."""

    encoding: str | None = Field(
        default=None,
        description="Codec for child output; None uses the locale's preferred encoding",
    )
    errors: str = Field(default="replace", description="Codec error handler")
    pool: PoolConfig = Field(default_factory=PoolConfig)
    shell: ShellConfig = Field(default_factory=ShellConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str | None) -> str | None:
        """Reject codecs Python does not know about."""
        if v is not None:
            try:
                codecs.lookup(v)
            except LookupError as e:
                raise ValueError(f"Unknown encoding '{v}'") from e
        return v

    @field_validator("errors")
    @classmethod
    def validate_errors(cls, v: str) -> str:
        """Reject unregistered codec error handlers."""
        try:
            codecs.lookup_error(v)
        except LookupError as e:
            raise ValueError(f"Unknown error handler '{v}'") from e
        return v

    model_config = ConfigDict(extra="forbid")
