# logic_time.py
"""
Timestamp handling for entries.

The Journal API serialises `created_at` without a zone designator
("2026-01-14T16:00:00"). We assume those values are UTC and only project
them into DISPLAY_TIMEZONE for display; the stored string is never rewritten.
"""

import re
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from dateutil import parser

from journal_config import DISPLAY_TIMEZONE
from logging_config import get_logger

logger = get_logger(__name__)

_ZONE_SUFFIX_RE = re.compile(r"(?:[zZ]|[+-]\d{2}(?::?\d{2})?)$")


def assume_utc_if_unzoned(raw: str) -> str:
    """
    Append a UTC designator to a timestamp that carries no zone information.

    Strings that already end in "Z" or an explicit offset ("+05:30", "-0800")
    are returned unchanged. Date-only strings get no designator.
    """
    value = raw.strip()
    if "T" not in value and " " not in value:
        return value
    if _ZONE_SUFFIX_RE.search(value):
        return value
    return value + "Z"


def resolve_instant(raw: Optional[str], now: Optional[datetime] = None) -> datetime:
    """
    Turn an API timestamp into an aware datetime.

    Missing values resolve to `now` (defaults to the client clock in UTC).
    Unparseable values are logged and also resolve to `now`.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if not raw:
        return now
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)

    value = assume_utc_if_unzoned(str(raw))
    try:
        parsed = parser.isoparse(value)
    except ValueError:
        logger.warning("Unparseable timestamp, using current time", extra={"raw": raw})
        return now

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_display_zone(instant: datetime, tz_name: str = DISPLAY_TIMEZONE) -> datetime:
    return instant.astimezone(ZoneInfo(tz_name))


def format_date_display(raw: Optional[str], tz_name: str = DISPLAY_TIMEZONE) -> str:
    """'14 Jan' style date in the display zone."""
    local = to_display_zone(resolve_instant(raw), tz_name)
    return f"{local.day:02d} {local.strftime('%b')}"


def format_time_display(raw: Optional[str], tz_name: str = DISPLAY_TIMEZONE) -> str:
    """'9:30 PM' style time in the display zone."""
    local = to_display_zone(resolve_instant(raw), tz_name)
    hour = local.hour % 12 or 12
    return f"{hour}:{local.minute:02d} {'AM' if local.hour < 12 else 'PM'}"
