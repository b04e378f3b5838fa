from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from typing import Final
from typing import Mapping

from pydantic import ValidationError

from s3_presigner.domain.canonical import canonical_query_string
from s3_presigner.domain.canonical import canonical_request
from s3_presigner.domain.canonical import canonical_uri
from s3_presigner.domain.constants import ALGORITHM
from s3_presigner.domain.constants import DEFAULT_EXPIRY_SECONDS
from s3_presigner.domain.constants import DEFAULT_HOST_SUFFIX
from s3_presigner.domain.constants import MAX_EXPIRY_SECONDS
from s3_presigner.domain.constants import PARAM_ALGORITHM
from s3_presigner.domain.constants import PARAM_CONTENT_SHA256
from s3_presigner.domain.constants import PARAM_CREDENTIAL
from s3_presigner.domain.constants import PARAM_DATE
from s3_presigner.domain.constants import PARAM_EXPIRES
from s3_presigner.domain.constants import PARAM_SIGNATURE
from s3_presigner.domain.constants import PARAM_SIGNED_HEADERS
from s3_presigner.domain.constants import PROTOCOL_PARAMS
from s3_presigner.domain.constants import SIGNED_HEADERS
from s3_presigner.domain.constants import UNSIGNED_PAYLOAD
from s3_presigner.domain.constants import URL_SCHEME
from s3_presigner.domain.errors import InvalidSigningRequestError
from s3_presigner.domain.errors import PresignError
from s3_presigner.domain.models import HttpMethod
from s3_presigner.domain.models import PresignResult
from s3_presigner.domain.models import SigningRequest
from s3_presigner.domain.models import TimestampPair
from s3_presigner.domain.signing import compute_signature
from s3_presigner.domain.signing import credential_scope
from s3_presigner.domain.signing import derive_signing_key
from s3_presigner.domain.signing import string_to_sign
from s3_presigner.infra.clock import Clock
from s3_presigner.infra.clock import SystemClock
from s3_presigner.infra.clock import current_timestamps
from s3_presigner.utils.logging import LOGGER_NAME

logger: Final[logging.Logger] = logging.getLogger(f"{LOGGER_NAME}.presign")


@dataclass(frozen=True, slots=True)
class S3PresignConfig:
    """
    S3 presign configuration.

    :param host_suffix: Service host appended to the bucket name (e.g. s3.amazonaws.com).
    :param default_expiry_seconds: Lifetime used by the convenience methods when none is given.
    :param max_expiry_seconds: Largest accepted ``X-Amz-Expires`` value.
    """

    host_suffix: str = DEFAULT_HOST_SUFFIX
    default_expiry_seconds: int = DEFAULT_EXPIRY_SECONDS
    max_expiry_seconds: int = MAX_EXPIRY_SECONDS


class S3Presigner:
    """
    AWS Signature V4 presigner for single S3 objects.

    Uses query-string authentication with only the ``host`` header signed.
    Instances hold no per-call state and can be shared between threads.
    """

    def __init__(self, cfg: S3PresignConfig | None = None, clock: Clock | None = None) -> None:
        self._cfg: S3PresignConfig = cfg or S3PresignConfig()
        host_suffix: str = self._cfg.host_suffix.strip()
        if not host_suffix or "/" in host_suffix or "://" in host_suffix:
            raise ValueError("host_suffix must be a bare host name such as 's3.amazonaws.com'.")
        if not 1 <= self._cfg.max_expiry_seconds <= MAX_EXPIRY_SECONDS:
            raise ValueError(f"max_expiry_seconds must be in [1, {MAX_EXPIRY_SECONDS}].")
        if not 1 <= self._cfg.default_expiry_seconds <= self._cfg.max_expiry_seconds:
            raise ValueError("default_expiry_seconds must be in [1, max_expiry_seconds].")
        self._host_suffix: str = host_suffix
        self._clock: Clock = clock or SystemClock()

    def presign_get_object(
            self,
            access_key_id: str,
            secret_key: str,
            region: str,
            bucket: str,
            key: str,
            expires_seconds: int | None = None,
    ) -> str:
        return self.presign(
                SigningRequest(
                        access_key_id=access_key_id,
                        secret_key=secret_key,
                        region=region,
                        bucket=bucket,
                        object_key=key,
                        http_method=HttpMethod.GET,
                        expiry_seconds=self._cfg.default_expiry_seconds if expires_seconds is None else expires_seconds,
                )
        )

    def presign_put_object(
            self,
            access_key_id: str,
            secret_key: str,
            region: str,
            bucket: str,
            key: str,
            expires_seconds: int | None = None,
    ) -> str:
        return self.presign(
                SigningRequest(
                        access_key_id=access_key_id,
                        secret_key=secret_key,
                        region=region,
                        bucket=bucket,
                        object_key=key,
                        http_method=HttpMethod.PUT,
                        expiry_seconds=self._cfg.default_expiry_seconds if expires_seconds is None else expires_seconds,
                )
        )

    def presign(self, request: SigningRequest, query_params: Mapping[str, str] | None = None) -> str:
        """
        Build a presigned URL.

        :param request: Validated signing request.
        :param query_params: Extra query parameters to sign (e.g. ``response-content-disposition``).
        :return: Presigned URL.
        :raises InvalidSigningRequestError: If expiry exceeds the configured ceiling or
            extra parameters collide with protocol parameters.
        :raises PresignError: If clock, encoding or crypto steps fail.
        """
        if request.expiry_seconds > self._cfg.max_expiry_seconds:
            raise InvalidSigningRequestError(
                    f"expiry_seconds={request.expiry_seconds} "
                    f"exceeds max_expiry_seconds={self._cfg.max_expiry_seconds}."
            )
        extra: dict[str, str] = dict(query_params or {})
        clashing: list[str] = sorted(k for k in extra if k in PROTOCOL_PARAMS)
        if clashing:
            raise InvalidSigningRequestError(f"Query parameters override protocol parameters: {clashing}.")

        stamps: TimestampPair = current_timestamps(self._clock)
        url: str = self._presign_url(request, stamps, extra)
        logger.debug(
                f"Presigned URL generated bucket={request.bucket} key={request.object_key} "
                f"method={request.http_method.value} expires={request.expiry_seconds} date={stamps.full_timestamp}"
        )
        return url

    def try_presign(
            self,
            request: SigningRequest | Mapping[str, Any],
            query_params: Mapping[str, str] | None = None,
    ) -> PresignResult:
        """
        Build a presigned URL without raising on signing failures.

        :param request: SigningRequest or a mapping of its fields.
        :param query_params: Extra query parameters to sign.
        :return: PresignResult with either ``url`` or an error tag.
        """
        try:
            req: SigningRequest = (
                request if isinstance(request, SigningRequest) else SigningRequest.model_validate(request)
            )
            return PresignResult.success(self.presign(req, query_params))
        except ValidationError as e:
            message: str = "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors(include_input=False)
            )
            logger.warning(f"Presign rejected error=invalid_request: {message}")
            return PresignResult.failure(InvalidSigningRequestError.kind, message)
        except (InvalidSigningRequestError, PresignError) as e:
            logger.warning(f"Presign failed error={e.kind}: {e}")
            return PresignResult.failure(e.kind, str(e))

    def _host(self, bucket: str) -> str:
        return f"{bucket}.{self._host_suffix}"

    def _presign_url(self, request: SigningRequest, stamps: TimestampPair, extra: dict[str, str]) -> str:
        host: str = self._host(request.bucket)
        scope: str = credential_scope(stamps.short_date, request.region)

        presign_params: dict[str, str] = {
            PARAM_ALGORITHM: ALGORITHM,
            PARAM_CONTENT_SHA256: UNSIGNED_PAYLOAD,
            PARAM_CREDENTIAL: f"{request.access_key_id}/{scope}",
            PARAM_DATE: stamps.full_timestamp,
            PARAM_EXPIRES: str(request.expiry_seconds),
            PARAM_SIGNED_HEADERS: SIGNED_HEADERS,
        }
        merged_qp: dict[str, str] = dict(extra)
        merged_qp.update(presign_params)

        uri: str = canonical_uri(request.object_key)
        canonical_query: str = canonical_query_string(merged_qp)
        request_text: str = canonical_request(request.http_method.value, uri, canonical_query, host)

        signing_key: bytes = derive_signing_key(request.secret_key, stamps.short_date, request.region)
        signature: str = compute_signature(signing_key, string_to_sign(stamps.full_timestamp, scope, request_text))

        return f"{URL_SCHEME}{host}{uri}?{canonical_query}&{PARAM_SIGNATURE}={signature}"
