from __future__ import annotations

import hashlib
import hmac

from s3_presigner.domain.constants import ALGORITHM
from s3_presigner.domain.constants import KEY_PREFIX
from s3_presigner.domain.constants import SERVICE_NAME
from s3_presigner.domain.constants import TERMINATION_STRING
from s3_presigner.domain.errors import CryptoPrimitiveError


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _hmac_sha256(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def credential_scope(short_date: str, region: str, service: str = SERVICE_NAME) -> str:
    return f"{short_date}/{region}/{service}/{TERMINATION_STRING}"


def derive_signing_key(secret_key: str, short_date: str, region: str, service: str = SERVICE_NAME) -> bytes:
    """
    Derive the scoped signing key via the four-step HMAC chain.

    Every step is keyed with the raw digest of the previous one.

    :param secret_key: Secret access key.
    :param short_date: ``YYYYMMDD`` date of the credential scope.
    :param region: Region code.
    :param service: Service name.
    :return: 32-byte signing key.
    :raises CryptoPrimitiveError: If the primitive rejects the input.
    """
    try:
        k_date: bytes = _hmac_sha256((KEY_PREFIX + secret_key).encode("utf-8"), short_date)
        k_region: bytes = _hmac_sha256(k_date, region)
        k_service: bytes = _hmac_sha256(k_region, service)
        return _hmac_sha256(k_service, TERMINATION_STRING)
    except (TypeError, ValueError) as e:
        raise CryptoPrimitiveError(f"Signing key derivation failed: {type(e).__name__}.") from e


def string_to_sign(full_timestamp: str, scope: str, canonical_request: str) -> str:
    """
    Build the string to sign.

    :param full_timestamp: ``YYYYMMDDTHHMMSSZ`` timestamp.
    :param scope: Credential scope.
    :param canonical_request: Canonical request text.
    :return: String to sign.
    :raises CryptoPrimitiveError: If the canonical request cannot be hashed.
    """
    try:
        digest: str = _sha256_hex(canonical_request.encode("utf-8"))
    except (TypeError, ValueError) as e:
        raise CryptoPrimitiveError(f"Canonical request hashing failed: {type(e).__name__}.") from e
    return f"{ALGORITHM}\n{full_timestamp}\n{scope}\n{digest}"


def compute_signature(signing_key: bytes, to_sign: str) -> str:
    """
    Sign a string with the derived key.

    :param signing_key: Key from :func:`derive_signing_key`.
    :param to_sign: String to sign.
    :return: Lowercase hex signature.
    :raises CryptoPrimitiveError: If the primitive rejects the input.
    """
    try:
        return hmac.new(signing_key, to_sign.encode("utf-8"), hashlib.sha256).hexdigest()
    except (TypeError, ValueError) as e:
        raise CryptoPrimitiveError(f"Signature computation failed: {type(e).__name__}.") from e
