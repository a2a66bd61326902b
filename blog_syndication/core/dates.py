"""Post date parsing with a fixed list of accepted formats."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

# Tried in order; month-first wins for ambiguous slash dates.
DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y",
    "%d/%m/%Y",
)


def parse_post_date(value: Any) -> datetime | None:
    """Parse a front matter date into a naive datetime.

    YAML already turns unquoted ISO dates into date/datetime objects, so
    those are accepted directly. Offset-aware datetimes are converted to
    UTC before the offset is dropped.

    Returns:
        The parsed datetime, or None if the value is missing or matches
        none of the accepted formats.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    return None
