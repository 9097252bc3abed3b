"""
Timestamp grammar and normalization for combat log lines.

Three historical stamp layouts are recognized, tried in order:

- modern:  ``9/18/2025 20:23:42.758-4``  (two spaces before the payload)
- classic: ``9/18 20:23:42.758``         (two spaces before the payload)
- ISO:     ``2025-09-18T20:23:42.758``   (one or more spaces)

Instants are integer milliseconds on an axis that is only meaningful
within a single parse call.
"""

import re
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional, Pattern, Tuple


class TimestampFormat(Enum):
    """Recognized timestamp layouts."""

    MODERN = "modern"
    CLASSIC = "classic"
    ISO = "iso"


# (format, pattern) in match order; group 1 is the stamp, group 2 the payload
TIMESTAMP_PATTERNS: List[Tuple[TimestampFormat, Pattern]] = [
    (
        TimestampFormat.MODERN,
        re.compile(
            r"^(\d{1,2}/\d{1,2}/\d{4} \d{1,2}:\d{2}:\d{2}\.\d{2,4}(?:[-+]\d{1,2})?)  (?! )(.+)$"
        ),
    ),
    (
        TimestampFormat.CLASSIC,
        re.compile(r"^(\d{1,2}/\d{1,2} \d{1,2}:\d{2}:\d{2}\.\d{2,4})  (?! )(.+)$"),
    ),
    (
        TimestampFormat.ISO,
        re.compile(
            r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d{1,6})?(?:Z|[-+]\d{2}:?\d{2})?)\s+(.+)$"
        ),
    ),
]

# Loose prefix check used by the validator and raw-log filters
TIMESTAMP_PREFIX = re.compile(r"^\s*(\d{1,2}/\d{1,2}[/ ]|\d{4}-\d{2}-\d{2}T)")

_MODERN_PARTS = re.compile(
    r"^(\d{1,2})/(\d{1,2})/(\d{4}) (\d{1,2}):(\d{2}):(\d{2})\.(\d{2,4})"
)
_CLASSIC_PARTS = re.compile(r"^(\d{1,2})/(\d{1,2}) (\d{1,2}):(\d{2}):(\d{2})\.(\d{2,4})$")
_ISO_PARTS = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,6}))?"
    r"(Z|([-+])(\d{2}):?(\d{2}))?$"
)

EPOCH = datetime(1970, 1, 1)

# Synthetic date for classic stamps; only the time of day is meaningful
CLASSIC_ANCHOR = datetime(2000, 1, 1)

DAY_MS = 24 * 60 * 60 * 1000

# A classic stamp this far behind the previous one means midnight passed
ROLLOVER_THRESHOLD_MS = DAY_MS // 2


def match_timestamp(line: str) -> Optional[Tuple[TimestampFormat, str, str]]:
    """
    Split a line into its timestamp and payload.

    Args:
        line: Raw combat log line

    Returns:
        (format, timestamp, payload) for the first matching pattern, or None
    """
    for fmt, pattern in TIMESTAMP_PATTERNS:
        match = pattern.match(line)
        if match:
            return fmt, match.group(1), match.group(2)
    return None


def detect_format(timestamp: str) -> Optional[TimestampFormat]:
    """Identify the layout of a bare timestamp string."""
    if _MODERN_PARTS.match(timestamp):
        return TimestampFormat.MODERN
    if _CLASSIC_PARTS.match(timestamp):
        return TimestampFormat.CLASSIC
    if _ISO_PARTS.match(timestamp):
        return TimestampFormat.ISO
    return None


def _micros(fraction: Optional[str]) -> int:
    if not fraction:
        return 0
    return int(fraction.ljust(6, "0")[:6])


def _to_ms(moment: datetime) -> int:
    return (moment - EPOCH) // timedelta(milliseconds=1)


class TimestampNormalizer:
    """
    Converts raw timestamps into a monotonic millisecond axis.

    One instance is scoped to one parse call. Classic stamps carry no
    date, so they are anchored to CLASSIC_ANCHOR and a day is added each
    time the clock wraps past midnight.
    """

    def __init__(self):
        self._day_offset = 0
        self._last_classic_ms: Optional[int] = None

    def to_instant(self, timestamp: str) -> Optional[int]:
        """
        Parse a raw timestamp into an instant in milliseconds.

        Args:
            timestamp: Timestamp exactly as it appeared in the log

        Returns:
            Instant in milliseconds, or None when the stamp is not valid
        """
        try:
            fmt = detect_format(timestamp)
            if fmt is TimestampFormat.MODERN:
                return self._parse_modern(timestamp)
            if fmt is TimestampFormat.CLASSIC:
                return self._parse_classic(timestamp)
            if fmt is TimestampFormat.ISO:
                return self._parse_iso(timestamp)
        except (ValueError, OverflowError):
            return None
        return None

    def _parse_modern(self, timestamp: str) -> int:
        # The trailing UTC offset is dropped; every line in a file shares it
        month, day, year, hour, minute, second, fraction = _MODERN_PARTS.match(timestamp).groups()
        moment = datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), _micros(fraction),
        )
        return _to_ms(moment)

    def _parse_classic(self, timestamp: str) -> int:
        _, _, hour, minute, second, fraction = _CLASSIC_PARTS.match(timestamp).groups()
        time_of_day = timedelta(
            hours=int(hour),
            minutes=int(minute),
            seconds=int(second),
            microseconds=_micros(fraction),
        )
        if time_of_day >= timedelta(days=1):
            raise ValueError(f"time of day out of range: {timestamp}")

        instant = _to_ms(CLASSIC_ANCHOR + time_of_day) + self._day_offset * DAY_MS
        if (
            self._last_classic_ms is not None
            and self._last_classic_ms - instant > ROLLOVER_THRESHOLD_MS
        ):
            self._day_offset += 1
            instant += DAY_MS
        self._last_classic_ms = instant
        return instant

    def _parse_iso(self, timestamp: str) -> int:
        parts = _ISO_PARTS.match(timestamp).groups()
        year, month, day, hour, minute, second, fraction, zone, sign, tz_h, tz_m = parts
        moment = datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), _micros(fraction),
        )
        if zone and zone != "Z":
            offset = timedelta(hours=int(tz_h), minutes=int(tz_m))
            moment = moment - offset if sign == "+" else moment + offset
        return _to_ms(moment)
