from __future__ import annotations

from typing import ClassVar


class PresignError(RuntimeError):
    """
    Base error for a failed signing operation.

    Any subclass aborts the whole operation; no partial URL is ever produced.

    :cvar kind: Short tag used by result-style APIs.
    """

    kind: ClassVar[str] = "presign"


class ClockFormattingError(PresignError):
    """
    The current instant could not be read or formatted as a SigV4 timestamp.
    """

    kind: ClassVar[str] = "clock"


class EncodingError(PresignError):
    """
    Percent-encoding of a query parameter or path failed.
    """

    kind: ClassVar[str] = "encoding"


class CryptoPrimitiveError(PresignError):
    """
    HMAC or hash primitive rejected its input.
    """

    kind: ClassVar[str] = "crypto"


class InvalidSigningRequestError(ValueError):
    """
    Signing request violates presigner limits (e.g. expiry above the configured ceiling).
    """

    kind: ClassVar[str] = "invalid_request"
