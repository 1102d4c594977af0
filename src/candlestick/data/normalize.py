"""Normalization of raw OHLC points into a canonical, time-ordered series."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from candlestick.types import NormalizedPoint, RawPoint

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Largest instant a browser Date can hold, about 275,760 years either side
MAX_INSTANT_MS = 8_640_000_000_000_000

_MS_PER_DAY = 86_400_000

_EXTENDED_RE = re.compile(
    r"^([+-]\d{6}|\d{4})-(\d{2})-(\d{2})"
    r"(?:T(\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,9}))?)?)?Z?$"
)


def _days_from_civil(year: int, month: int, day: int) -> int:
    # Proleptic Gregorian, valid far outside datetime's 1..9999 range
    year -= month <= 2
    era = year // 400
    yoe = year - era * 400
    doy = (153 * (month + (-3 if month > 2 else 9)) + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146_097 + doe - 719_468


def _civil_from_days(days: int) -> tuple[int, int, int]:
    days += 719_468
    era = days // 146_097
    doe = days - era * 146_097
    yoe = (doe - doe // 1460 + doe // 36_524 - doe // 146_096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + (3 if mp < 10 else -9)
    year = yoe + era * 400 + (month <= 2)
    return year, month, day


def _days_in_month(year: int, month: int) -> int:
    if month == 12:
        return 31
    return _days_from_civil(year, month + 1, 1) - _days_from_civil(year, month, 1)


def _parse_extended(value: str) -> int | None:
    match = _EXTENDED_RE.match(value)
    if match is None:
        return None
    year_s, month_s, day_s, hour_s, minute_s, second_s, frac_s = match.groups()
    year, month, day = int(year_s), int(month_s), int(day_s)
    hour, minute, second = int(hour_s or 0), int(minute_s or 0), int(second_s or 0)
    if not 1 <= month <= 12 or not 1 <= day <= _days_in_month(year, month):
        return None
    if hour > 23 or minute > 59 or second > 59:
        return None
    millis = int((frac_s or "0").ljust(3, "0")[:3])
    ms = (
        _days_from_civil(year, month, day) * _MS_PER_DAY
        + ((hour * 60 + minute) * 60 + second) * 1000
        + millis
    )
    if abs(ms) > MAX_INSTANT_MS:
        return None
    return ms


def parse_instant(value: str) -> int | None:
    """Parse a date string to epoch milliseconds.

    Accepted formats, identical on every supported interpreter:

    - ISO-8601 as read by ``datetime.fromisoformat`` on Python 3.11+, e.g.
      ``2024-01-05``, ``2024-01-05T10:30``, ``2024-01-05 10:30:00.250``,
      ``2024-01-05T10:30:00+02:00`` and ``2024-01-05T10:30:00Z``.
    - Extended years written by :func:`format_instant`, e.g.
      ``+012345-06-01T00:00:00.000Z`` or ``-000120-01-01T00:00:00.000Z``,
      within ``MAX_INSTANT_MS`` of the epoch.

    Naive values are treated as UTC. Sub-millisecond digits are truncated.

    :param value: Date string to parse.
    :returns: Milliseconds since the epoch, or None if unparseable.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return _parse_extended(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    delta = dt - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def format_instant(ms: int | float) -> str:
    """Format epoch milliseconds as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Years outside 0000-9999 use a signed six-digit year
    (``+YYYYYY``/``-YYYYYY``), matching ``Date.prototype.toISOString``.
    Fractional milliseconds are truncated toward zero.

    :param ms: Milliseconds since the epoch.
    :returns: UTC timestamp string.
    :raises OverflowError: If ``ms`` lies beyond ``MAX_INSTANT_MS``.
    """
    ms = int(ms)
    if abs(ms) > MAX_INSTANT_MS:
        raise OverflowError(f"instant {ms} ms is out of range")
    days, rem = divmod(ms, _MS_PER_DAY)
    year, month, day = _civil_from_days(days)
    seconds, millis = divmod(rem, 1000)
    minutes, second = divmod(seconds, 60)
    hour, minute = divmod(minutes, 60)
    year_s = f"{year:04d}" if 0 <= year <= 9999 else f"{year:+07d}"
    return (
        f"{year_s}-{month:02d}-{day:02d}"
        f"T{hour:02d}:{minute:02d}:{second:02d}.{millis:03d}Z"
    )


def _to_raw(item: RawPoint | Mapping[str, Any]) -> RawPoint | None:
    if isinstance(item, RawPoint):
        return item
    try:
        return RawPoint.model_validate(item)
    except ValidationError as e:
        logger.debug("Dropping malformed point %r: %s", item, e)
        return None


def normalize(points: Iterable[RawPoint | Mapping[str, Any]]) -> list[NormalizedPoint]:
    """Parse, filter and sort raw points.

    Points whose date cannot be parsed are dropped. The sort is stable, so
    points sharing an instant keep their input order. Normalizing an already
    normalized series returns an equal series.

    :param points: Raw points, normalized points or plain mappings.
    :returns: Points sorted ascending by ``date_time``.
    """
    result: list[NormalizedPoint] = []
    dropped = 0
    for item in points:
        raw = _to_raw(item)
        if raw is None:
            dropped += 1
            continue
        instant = parse_instant(raw.date)
        if instant is None:
            dropped += 1
            continue
        result.append(
            NormalizedPoint(
                date=raw.date,
                open=raw.open,
                high=raw.high,
                low=raw.low,
                close=raw.close,
                date_time=instant,
            )
        )
    if dropped:
        logger.debug("Dropped %d unparseable points", dropped)
    result.sort(key=lambda p: p.date_time)
    return result


__all__ = ["MAX_INSTANT_MS", "parse_instant", "format_instant", "normalize"]
