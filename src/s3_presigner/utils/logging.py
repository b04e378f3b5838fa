from __future__ import annotations

import logging
import re
from typing import Final

_REDACT_RE: Final[re.Pattern[str]] = re.compile(r"(X-Amz-(?:Signature|Credential)=)[^&\s]+")


class _RedactSignatureFilter(logging.Filter):
    """
    Mask signature and credential values of presigned URLs in log messages.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        msg: str = record.getMessage()
        redacted: str = _REDACT_RE.sub(r"\1***", msg)
        if redacted != msg:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(level: str) -> None:
    """
    Настроить логирование приложения.

    :param level: Уровень логирования (например, ``INFO``).
    :return: None
    """
    root: logging.Logger = logging.getLogger()
    lvl: str = level.upper()

    if root.handlers:
        root.setLevel(lvl)
        for h in root.handlers:
            if not any(isinstance(f, _RedactSignatureFilter) for f in h.filters):
                h.addFilter(_RedactSignatureFilter())
        return

    formatter: logging.Formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    handler: logging.StreamHandler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(_RedactSignatureFilter())

    root.setLevel(lvl)
    root.addHandler(handler)


LOGGER_NAME: Final[str] = "s3_presigner"
