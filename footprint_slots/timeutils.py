"""Time parsing and formatting utilities."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from zoneinfo import ZoneInfo

_CLOCK_RE = re.compile(r"T(\d{2}):(\d{2})")


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Asia/Shanghai".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"无效时区：{tz_name!r}。例如可用：Asia/Shanghai") from exc


def epoch_ms_from_dt(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds.

    Args:
        dt: Datetime. If naive, will be treated as UTC.

    Returns:
        Epoch milliseconds.
    """

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def parse_day(text: str) -> date:
    """Parse "YYYY-MM-DD".

    Raises:
        ValueError: If cannot parse.
    """

    try:
        return date.fromisoformat(text.strip())
    except ValueError as exc:
        raise ValueError(f"无法解析日期：{text!r}。建议格式：2025-01-01") from exc


def day_bounds_ms(day: date, tz_name: str) -> tuple[int, int]:
    """Epoch-ms range [day 00:00, next day 00:00) in tz."""

    tz = tzinfo_from_name(tz_name)
    start_dt = datetime.combine(day, time.min).replace(tzinfo=tz)
    end_dt = datetime.combine(day + timedelta(days=1), time.min).replace(tzinfo=tz)
    return epoch_ms_from_dt(start_dt), epoch_ms_from_dt(end_dt)


def extract_time(ts: str) -> tuple[int, int] | None:
    """Pick the wall-clock (hour, minute) embedded in a timestamp.

    Only the "Thh:mm" part is looked at, so the local time written in the
    string is used as-is, without any timezone conversion.

    Returns:
        (hour, minute), or None if the string has no valid clock time.
    """

    m = _CLOCK_RE.search(ts)
    if m is None:
        return None
    hour = int(m.group(1))
    minute = int(m.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour, minute


def timestamp_epoch_ms(ts: str) -> int | None:
    """Parse a full ISO timestamp to epoch ms, None if it cannot be parsed.

    Naive timestamps are treated as UTC so that naive and aware samples of the
    same day can still be ordered against each other.
    """

    try:
        dt = datetime.fromisoformat(ts.strip())
    except ValueError:
        return None
    return epoch_ms_from_dt(dt)
