"""Coarse human-relative labels for sheet timestamps ("today", "2 weeks ago")."""

from datetime import datetime, timedelta, timezone
from typing import Optional

MS_PER_DAY = 24 * 60 * 60 * 1000

# Google Sheets renders timestamps as M/D/YYYY H:MM:SS in US locales.
_SHEETS_FORMATS = ("%m/%d/%Y %H:%M:%S", "%m/%d/%Y %H:%M", "%m/%d/%Y")


def parse_timestamp(text: str) -> Optional[datetime]:
    """Parse an ISO-8601 or Sheets-style timestamp into an aware datetime.

    Naive values are read as local time. Returns None when the text cannot
    be parsed.
    """
    candidate = text.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"

    parsed: Optional[datetime] = None
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        for fmt in _SHEETS_FORMATS:
            try:
                parsed = datetime.strptime(candidate, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    try:
        if parsed.tzinfo is None:
            parsed = parsed.astimezone()
        return parsed.astimezone(timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def time_ago(timestamp_text: Optional[str], now: Optional[datetime] = None) -> Optional[str]:
    """Describe how long ago ``timestamp_text`` was.

    Args:
        timestamp_text: Raw timestamp cell value.
        now: Reference instant (aware). Defaults to the current UTC time.

    Returns:
        "today", "yesterday", "<n> days ago", "1 week ago", "2 weeks ago",
        "3+ weeks ago", or "recently" for timestamps in the future.
        None for blank or unparseable input.
    """
    if not timestamp_text or not timestamp_text.strip():
        return None

    last_updated = parse_timestamp(timestamp_text)
    if last_updated is None:
        return None

    reference = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.astimezone()
    if last_updated > reference:
        # Clock skew between the sheet editor and this host
        return "recently"

    elapsed_ms = (reference - last_updated) / timedelta(milliseconds=1)
    days = int(elapsed_ms // MS_PER_DAY)

    if days == 0:
        return "today"
    if days == 1:
        return "yesterday"
    if days < 7:
        return f"{days} days ago"

    weeks = days // 7
    if weeks == 1:
        return "1 week ago"
    if weeks == 2:
        return "2 weeks ago"
    return "3+ weeks ago"
