from __future__ import annotations

from typing import Final

ALGORITHM: Final[str] = "AWS4-HMAC-SHA256"
KEY_PREFIX: Final[str] = "AWS4"
SERVICE_NAME: Final[str] = "s3"
TERMINATION_STRING: Final[str] = "aws4_request"
UNSIGNED_PAYLOAD: Final[str] = "UNSIGNED_PAYLOAD"
SIGNED_HEADERS: Final[str] = "host"

URL_SCHEME: Final[str] = "https://"
DEFAULT_HOST_SUFFIX: Final[str] = "s3.amazonaws.com"

DEFAULT_EXPIRY_SECONDS: Final[int] = 24 * 60 * 60
MAX_EXPIRY_SECONDS: Final[int] = 7 * 24 * 60 * 60

AMZ_DATE_FORMAT: Final[str] = "%Y%m%dT%H%M%SZ"

PARAM_ALGORITHM: Final[str] = "X-Amz-Algorithm"
PARAM_CONTENT_SHA256: Final[str] = "X-Amz-Content-Sha256"
PARAM_CREDENTIAL: Final[str] = "X-Amz-Credential"
PARAM_DATE: Final[str] = "X-Amz-Date"
PARAM_EXPIRES: Final[str] = "X-Amz-Expires"
PARAM_SIGNED_HEADERS: Final[str] = "X-Amz-SignedHeaders"
PARAM_SIGNATURE: Final[str] = "X-Amz-Signature"

PROTOCOL_PARAMS: Final[frozenset[str]] = frozenset(
        {
            PARAM_ALGORITHM,
            PARAM_CONTENT_SHA256,
            PARAM_CREDENTIAL,
            PARAM_DATE,
            PARAM_EXPIRES,
            PARAM_SIGNED_HEADERS,
            PARAM_SIGNATURE,
        }
)
