from __future__ import annotations

import logging

from s3_presigner.config.settings import Settings
from s3_presigner.infra.clock import Clock
from s3_presigner.infra.s3_presign import S3PresignConfig
from s3_presigner.infra.s3_presign import S3Presigner
from s3_presigner.utils.logging import LOGGER_NAME
from s3_presigner.utils.logging import configure_logging


def create_presigner(settings: Settings, clock: Clock | None = None) -> S3Presigner:
    """
    Create a presigner from application settings.

    Also configures logging with the settings' level.

    :param settings: The application settings object.
    :param clock: Optional clock override (system clock by default).
    :return: Configured S3Presigner.
    :raises ValueError: If configuration is invalid.
    """
    configure_logging(settings.log_level)
    presigner: S3Presigner = S3Presigner(
            S3PresignConfig(
                    host_suffix=settings.host_suffix,
                    default_expiry_seconds=settings.default_expiry_seconds,
                    max_expiry_seconds=settings.max_expiry_seconds,
            ),
            clock=clock,
    )
    logging.getLogger(LOGGER_NAME).info(
            f"Presigner ready host_suffix={settings.host_suffix} max_expiry_seconds={settings.max_expiry_seconds}"
    )
    return presigner
