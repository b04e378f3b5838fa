from __future__ import annotations

import re
from datetime import datetime
from datetime import timezone
from typing import Final
from typing import Protocol

from s3_presigner.domain.constants import AMZ_DATE_FORMAT
from s3_presigner.domain.errors import ClockFormattingError
from s3_presigner.domain.models import TimestampPair

_AMZ_DATE_RE: Final[re.Pattern[str]] = re.compile(r"^\d{8}T\d{6}Z$")


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """UTC wall clock."""

    def now(self) -> datetime:
        try:
            return datetime.now(timezone.utc)
        except (OSError, OverflowError, ValueError) as e:
            raise ClockFormattingError(f"System clock is unavailable: {e}") from e


class FixedClock:
    """
    Clock frozen at a given instant.

    :param instant: Timezone-aware instant returned by every ``now()`` call.
    """

    def __init__(self, instant: datetime) -> None:
        self._instant: datetime = instant

    def now(self) -> datetime:
        return self._instant


def format_timestamps(instant: datetime) -> TimestampPair:
    """
    Format one instant as the SigV4 timestamp pair.

    :param instant: Timezone-aware instant.
    :return: TimestampPair derived from the same instant.
    :raises ClockFormattingError: If the instant is naive or cannot be formatted.
    """
    if not isinstance(instant, datetime):
        raise ClockFormattingError(f"Clock returned {type(instant).__name__}, expected datetime.")
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise ClockFormattingError("Clock returned a naive datetime; a timezone-aware instant is required.")

    try:
        utc: datetime = instant.astimezone(timezone.utc)
        full_timestamp: str = utc.strftime(AMZ_DATE_FORMAT)
    except (OverflowError, ValueError) as e:
        raise ClockFormattingError(f"Timestamp formatting failed: {e}") from e

    if not _AMZ_DATE_RE.fullmatch(full_timestamp):
        raise ClockFormattingError(f"Timestamp {full_timestamp!r} does not match {AMZ_DATE_FORMAT}.")

    # Short date is sliced from the full timestamp so both always describe the same instant.
    return TimestampPair(full_timestamp=full_timestamp, short_date=full_timestamp[:8])


def current_timestamps(clock: Clock) -> TimestampPair:
    """
    Read the clock once and format the result.

    :param clock: Clock to read.
    :return: TimestampPair.
    :raises ClockFormattingError: If the clock read or formatting fails.
    """
    return format_timestamps(read_clock(clock))


def read_clock(clock: Clock) -> datetime:
    """
    Read the clock, mapping any failure to ClockFormattingError.

    :param clock: Clock to read.
    :return: Instant returned by the clock.
    :raises ClockFormattingError: If the clock raises.
    """
    try:
        return clock.now()
    except ClockFormattingError:
        raise
    except Exception as e:
        raise ClockFormattingError(f"Clock read failed: {type(e).__name__}: {e}") from e
