from __future__ import annotations

import hmac
import logging
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Final
from urllib.parse import SplitResult
from urllib.parse import parse_qsl
from urllib.parse import urlsplit

from s3_presigner.domain.canonical import canonical_query_string
from s3_presigner.domain.canonical import canonical_request
from s3_presigner.domain.constants import ALGORITHM
from s3_presigner.domain.constants import AMZ_DATE_FORMAT
from s3_presigner.domain.constants import MAX_EXPIRY_SECONDS
from s3_presigner.domain.constants import PARAM_ALGORITHM
from s3_presigner.domain.constants import PARAM_CREDENTIAL
from s3_presigner.domain.constants import PARAM_DATE
from s3_presigner.domain.constants import PARAM_EXPIRES
from s3_presigner.domain.constants import PARAM_SIGNATURE
from s3_presigner.domain.constants import PARAM_SIGNED_HEADERS
from s3_presigner.domain.constants import SERVICE_NAME
from s3_presigner.domain.constants import SIGNED_HEADERS
from s3_presigner.domain.constants import TERMINATION_STRING
from s3_presigner.domain.errors import PresignError
from s3_presigner.domain.signing import compute_signature
from s3_presigner.domain.signing import credential_scope
from s3_presigner.domain.signing import derive_signing_key
from s3_presigner.domain.signing import string_to_sign
from s3_presigner.infra.clock import Clock
from s3_presigner.infra.clock import SystemClock
from s3_presigner.infra.clock import read_clock
from s3_presigner.utils.logging import LOGGER_NAME

logger: Final[logging.Logger] = logging.getLogger(f"{LOGGER_NAME}.verify")

_HEX_DIGITS: Final[str] = "0123456789abcdef"


def _reject(reason: str) -> bool:
    logger.info(f"Presigned URL rejected reason={reason}")
    return False


def verify_presigned_url(
        url: str,
        secret_key: str,
        method: str = "GET",
        clock: Clock | None = None,
) -> bool:
    """
    Check a presigned URL the way the storage service would.

    The signature is recomputed from the URL's own host, path and query parameters.

    :param url: Presigned URL.
    :param secret_key: Secret access key matching the URL's access key id.
    :param method: HTTP method the URL is used with.
    :param clock: Clock used for the expiry check (system clock by default).
    :return: True if the signature matches and the URL has not expired.
    :raises ClockFormattingError: If the clock read fails.
    """
    try:
        parts: SplitResult = urlsplit(url)
    except ValueError:
        return _reject("url")
    if parts.scheme != "https" or not parts.hostname:
        return _reject("scheme")

    pairs: list[tuple[str, str]] = parse_qsl(parts.query, keep_blank_values=True)
    params: dict[str, str] = dict(pairs)
    if len(params) != len(pairs):
        return _reject("duplicate_parameter")

    provided_signature: str | None = params.pop(PARAM_SIGNATURE, None)
    if not provided_signature:
        return _reject("missing_signature")
    if len(provided_signature) != 64 or provided_signature.strip(_HEX_DIGITS):
        return _reject("signature_format")
    if params.get(PARAM_ALGORITHM) != ALGORITHM:
        return _reject("algorithm")
    if params.get(PARAM_SIGNED_HEADERS) != SIGNED_HEADERS:
        return _reject("signed_headers")

    credential: list[str] = params.get(PARAM_CREDENTIAL, "").split("/")
    if len(credential) != 5 or credential[3] != SERVICE_NAME or credential[4] != TERMINATION_STRING:
        return _reject("credential")
    short_date: str = credential[1]
    region: str = credential[2]

    amz_date: str = params.get(PARAM_DATE, "")
    try:
        signed_at: datetime = datetime.strptime(amz_date, AMZ_DATE_FORMAT).replace(tzinfo=timezone.utc)
        expires: int = int(params.get(PARAM_EXPIRES, ""))
    except ValueError:
        return _reject("date_or_expires")
    if amz_date[:8] != short_date:
        return _reject("scope_date")
    if not 1 <= expires <= MAX_EXPIRY_SECONDS:
        return _reject("expires_range")

    now: datetime = read_clock(clock or SystemClock())
    if now < signed_at:
        return _reject("not_yet_valid")
    if now > signed_at + timedelta(seconds=expires):
        return _reject("expired")

    try:
        query: str = canonical_query_string(params)
        scope: str = credential_scope(short_date, region)
        request_text: str = canonical_request(method.upper(), parts.path or "/", query, parts.netloc)
        signing_key: bytes = derive_signing_key(secret_key, short_date, region)
        expected: str = compute_signature(signing_key, string_to_sign(amz_date, scope, request_text))
    except PresignError as e:
        return _reject(e.kind)

    if not hmac.compare_digest(expected, provided_signature):
        return _reject("signature")
    return True
