"""Timestamp normalization for the Datadog APIs.

Callers may pass Unix seconds, Unix milliseconds or ISO-8601 strings. Each
Datadog endpoint wants one specific unit, so tools normalize every value to
the unit of the client they call.

The seconds/milliseconds decision for numbers is a magnitude heuristic:
anything below ``SECONDS_THRESHOLD`` is read as seconds, anything at or above
as milliseconds. Values close to the threshold are inherently ambiguous. The
constant is kept as-is because callers depend on this exact boundary.
"""

import math
import re
from datetime import datetime, timezone
from typing import Literal, Union

from dateutil.parser import isoparse

from .errors import InvalidTimestamp

SECONDS_THRESHOLD = 10_000_000_000

TimeUnit = Literal["s", "ms"]
TimestampInput = Union[int, float, str]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
# Leading digits followed by a date or time separator: a malformed date, not an epoch
_DATE_LIKE = re.compile(r"\s*[+-]?\d+[-:T]")


def _from_epoch(value: float, unit: TimeUnit) -> int:
    if abs(value) < SECONDS_THRESHOLD:
        return math.floor(value) if unit == "s" else math.floor(value * 1000)
    return math.floor(value / 1000) if unit == "s" else math.floor(value)


def _parse_iso(value: str) -> Union[datetime, None]:
    text = value.strip()
    if not text or text.lstrip("+-").isdigit():
        return None
    if text.endswith("z"):
        text = text[:-1] + "Z"
    try:
        parsed = isoparse(text)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_timestamp(value: TimestampInput, unit: TimeUnit = "s") -> int:
    """Return ``value`` as an integer Unix timestamp in ``unit``.

    Raises ``InvalidTimestamp`` when the value is neither a numeric epoch nor
    an ISO-8601 string. Fractional values are floored.
    """
    if unit not in ("s", "ms"):
        raise ValueError(f"Unsupported time unit: {unit}")

    if isinstance(value, bool):
        raise InvalidTimestamp(f"Invalid timestamp format: {value}")

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise InvalidTimestamp(f"Invalid timestamp format: {value}")
        return _from_epoch(value, unit)

    if isinstance(value, str):
        parsed = _parse_iso(value)
        if parsed is not None:
            millis = math.floor(parsed.timestamp() * 1000)
            return millis // 1000 if unit == "s" else millis

        match = _LEADING_INT.match(value)
        if match and not _DATE_LIKE.match(value):
            return _from_epoch(int(match.group(1)), unit)

    raise InvalidTimestamp(f"Invalid timestamp format: {value}")


def to_iso(value: int, unit: TimeUnit = "ms") -> str:
    """Render an epoch value as an ISO-8601 UTC string with millisecond precision."""
    seconds = value / 1000 if unit == "ms" else value
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
