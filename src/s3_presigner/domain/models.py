from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from s3_presigner.domain.constants import DEFAULT_EXPIRY_SECONDS
from s3_presigner.domain.constants import MAX_EXPIRY_SECONDS

_REGION_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
_BUCKET_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$")
_IPV4_RE: Final[re.Pattern[str]] = re.compile(r"^\d{1,3}(\.\d{1,3}){3}$")


class HttpMethod(str, Enum):
    """
    HTTP method a presigned URL is issued for.

    :cvar GET: Download an object.
    :cvar PUT: Upload an object.
    :cvar HEAD: Read object metadata.
    :cvar DELETE: Delete an object.
    :cvar POST: POST request.
    :cvar PATCH: PATCH request.
    :cvar OPTIONS: OPTIONS request.
    """

    GET = "GET"
    PUT = "PUT"
    HEAD = "HEAD"
    DELETE = "DELETE"
    POST = "POST"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"


class SigningRequest(BaseModel):
    """
    Input of a single presign operation.

    The secret key is excluded from ``repr`` so the model can be logged safely.

    :param access_key_id: Access key id placed into ``X-Amz-Credential``.
    :param secret_key: Secret access key used to derive the signing key.
    :param region: Lowercase region code (e.g. ``us-east-1``).
    :param bucket: DNS-compatible bucket name.
    :param object_key: Object key, may contain ``/``. A leading ``/`` is dropped.
    :param http_method: HTTP method the URL is valid for.
    :param expiry_seconds: URL lifetime in seconds (1..604800).
    :raises ValueError: If any field is invalid.
    """

    model_config = ConfigDict(frozen=True)

    access_key_id: str = Field(min_length=1, max_length=300)
    secret_key: str = Field(min_length=1, max_length=500, repr=False)
    region: str = Field(min_length=1, max_length=64)
    bucket: str = Field(min_length=3, max_length=63)
    object_key: str = Field(min_length=1, max_length=1024)
    http_method: HttpMethod = Field(default=HttpMethod.GET)
    expiry_seconds: int = Field(default=DEFAULT_EXPIRY_SECONDS, ge=1, le=MAX_EXPIRY_SECONDS)

    @field_validator("access_key_id", "secret_key")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        val: str = v.strip()
        if not val:
            raise ValueError("Value must be non-empty.")
        return val

    @field_validator("region")
    @classmethod
    def _validate_region(cls, v: str) -> str:
        region: str = v.strip()
        if not _REGION_RE.fullmatch(region):
            raise ValueError("region must be a lowercase region code such as 'us-east-1'.")
        return region

    @field_validator("bucket")
    @classmethod
    def _validate_bucket(cls, v: str) -> str:
        bucket: str = v.strip()
        if not _BUCKET_RE.fullmatch(bucket):
            raise ValueError("bucket must be a DNS-compatible bucket name.")
        if ".." in bucket or ".-" in bucket or "-." in bucket:
            raise ValueError("bucket must not contain empty or dash-edged labels.")
        if _IPV4_RE.fullmatch(bucket):
            raise ValueError("bucket must not be formatted as an IP address.")
        return bucket

    @field_validator("object_key")
    @classmethod
    def _validate_object_key(cls, v: str) -> str:
        key: str = v.lstrip("/")
        if not key:
            raise ValueError("object_key must be non-empty.")
        return key

    @field_validator("http_method", mode="before")
    @classmethod
    def _normalize_http_method(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v


@dataclass(frozen=True, slots=True)
class TimestampPair:
    """
    Both timestamp representations of one instant.

    :param full_timestamp: ``YYYYMMDDTHHMMSSZ``, used for ``X-Amz-Date``.
    :param short_date: ``YYYYMMDD``, used in the credential scope.
    """

    full_timestamp: str
    short_date: str


@dataclass(frozen=True, slots=True)
class PresignResult:
    """
    Outcome of a presign operation that does not raise.

    Exactly one of ``url`` and ``error_kind`` is set.

    :param url: Presigned URL on success.
    :param error_kind: Error tag on failure (``clock``, ``encoding``, ``crypto``, ``invalid_request``).
    :param error_message: Human readable failure description.
    """

    url: str | None = None
    error_kind: str | None = None
    error_message: str | None = None

    def __post_init__(self) -> None:
        if (self.url is None) == (self.error_kind is None):
            raise ValueError("Exactly one of url and error_kind must be set.")

    @property
    def ok(self) -> bool:
        return self.url is not None

    @classmethod
    def success(cls, url: str) -> "PresignResult":
        return cls(url=url)

    @classmethod
    def failure(cls, kind: str, message: str) -> "PresignResult":
        return cls(error_kind=kind, error_message=message)
