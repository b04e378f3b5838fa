from __future__ import annotations

from typing import Mapping
from urllib.parse import quote

from s3_presigner.domain.constants import SIGNED_HEADERS
from s3_presigner.domain.constants import UNSIGNED_PAYLOAD
from s3_presigner.domain.errors import EncodingError


def _aws_quote(val: str) -> str:
    """
    Percent-encode a query key or value.

    Unreserved characters stay literal; an encoded slash is decoded back to ``/``.

    :param val: Raw text.
    :return: Encoded text.
    :raises EncodingError: If the value is not text or cannot be encoded as UTF-8.
    """
    if not isinstance(val, str):
        raise EncodingError(f"Query parameter must be a string, got {type(val).__name__}.")
    try:
        encoded: str = quote(val, safe="-_.~", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Query parameter cannot be percent-encoded: {e.reason}.") from e
    return encoded.replace("%2F", "/")


def _aws_quote_path(path: str) -> str:
    try:
        return quote(path, safe="/-_.~", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Object key cannot be percent-encoded: {e.reason}.") from e


def canonical_uri(object_key: str) -> str:
    """
    Build the canonical URI for an object.

    :param object_key: Object key, may contain ``/``.
    :return: ``/`` followed by the encoded key.
    :raises EncodingError: If the key cannot be encoded.
    """
    return "/" + _aws_quote_path(object_key.lstrip("/"))


def canonical_query_string(params: Mapping[str, str]) -> str:
    """
    Build a canonical query string from an unordered parameter mapping.

    Pairs are sorted by encoded key (then encoded value) in byte order and joined with ``&``.

    :param params: Parameter name to value mapping.
    :return: Canonical query string, ``""`` for an empty mapping.
    :raises EncodingError: If any key or value cannot be encoded.
    """
    encoded: list[tuple[str, str]] = [(_aws_quote(k), _aws_quote(v)) for (k, v) in params.items()]
    encoded.sort()
    return "&".join(f"{k}={v}" for (k, v) in encoded)


def canonical_request(method: str, uri: str, query: str, host: str) -> str:
    """
    Build the canonical request for a query-signed, host-only request.

    :param method: Upper-case HTTP method.
    :param uri: Canonical URI (already encoded).
    :param query: Canonical query string, without ``X-Amz-Signature``.
    :param host: Full virtual host, e.g. ``bucket.s3.amazonaws.com``.
    :return: Canonical request text.
    """
    return (
        f"{method}\n"
        f"{uri}\n"
        f"{query}\n"
        f"host:{host}\n"
        "\n"
        f"{SIGNED_HEADERS}\n"
        f"{UNSIGNED_PAYLOAD}"
    )
