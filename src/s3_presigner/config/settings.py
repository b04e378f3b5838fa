from __future__ import annotations

from typing import Final

from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from s3_presigner.domain.constants import DEFAULT_EXPIRY_SECONDS
from s3_presigner.domain.constants import DEFAULT_HOST_SUFFIX
from s3_presigner.domain.constants import MAX_EXPIRY_SECONDS

_LOG_LEVELS: Final[frozenset[str]] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class _SettingsBase(BaseSettings):
    """Common settings configuration."""

    model_config = SettingsConfigDict(
            env_prefix="S3_PRESIGNER_",
            env_file=".env",
            env_file_encoding="utf-8",
            case_sensitive=False,
            extra="ignore",
    )


class PresignSettings(_SettingsBase):
    """Presigned URL settings."""

    host_suffix: str = Field(default=DEFAULT_HOST_SUFFIX, min_length=1, max_length=255)
    default_expiry_seconds: int = Field(default=DEFAULT_EXPIRY_SECONDS, ge=1, le=MAX_EXPIRY_SECONDS)
    max_expiry_seconds: int = Field(default=MAX_EXPIRY_SECONDS, ge=1, le=MAX_EXPIRY_SECONDS)


class LoggingSettings(_SettingsBase):
    """Python logging settings."""

    log_level: str = Field(default="INFO", min_length=1, max_length=50)


class Settings(PresignSettings, LoggingSettings):
    """
    Application settings.

    Values are loaded from environment variables prefixed with ``S3_PRESIGNER_``.

    :param host_suffix: Service host appended to bucket names (e.g. ``s3.eu-west-1.amazonaws.com``).
    :param default_expiry_seconds: URL lifetime used when a caller does not pass one.
    :param max_expiry_seconds: Largest accepted URL lifetime.
    :param log_level: Root Python logging level.
    :raises ValueError: If environment values are invalid.
    """

    @field_validator("host_suffix")
    @classmethod
    def _validate_host_suffix(cls, v: str) -> str:
        val: str = v.strip().lower()
        if not val:
            raise ValueError("Value must be non-empty.")
        if "://" in val or "/" in val:
            raise ValueError("host_suffix must be a bare host name without scheme or path.")
        return val

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        val: str = v.strip().upper()
        if val not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {sorted(_LOG_LEVELS)}.")
        return val

    @model_validator(mode="after")
    def _validate_expiry_consistency(self) -> "Settings":
        if self.default_expiry_seconds > self.max_expiry_seconds:
            raise ValueError("default_expiry_seconds must not exceed max_expiry_seconds.")
        return self
