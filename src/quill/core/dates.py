"""Date and time display helpers."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

DEFAULT_TZ = "America/Chicago"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit if n == 1 else unit + 's'}"


def format_datetime(ts: datetime, tz: str = DEFAULT_TZ) -> str:
    """Date and time in the display timezone, e.g. "04/22/2025, 08:24 AM"."""
    return ts.astimezone(ZoneInfo(tz)).strftime("%m/%d/%Y, %I:%M %p")


def format_time(ts: datetime, tz: str = DEFAULT_TZ) -> str:
    """Time only, e.g. "08:24 AM"."""
    return ts.astimezone(ZoneInfo(tz)).strftime("%I:%M %p")


def format_updated_at(
    ts: datetime | None,
    now: datetime | None = None,
    prefix: str = "Updated",
    tz: str = DEFAULT_TZ,
) -> str:
    """
    Relative description of an update time.

    "Updated just now", "Updated 5 minutes ago", ... up to a week, then
    "Updated on Apr 22, 08:24 AM".
    """
    if ts is None:
        return ""

    now = now or datetime.now(timezone.utc)
    minutes = int((now - ts).total_seconds() // 60)
    hours = minutes // 60
    days = hours // 24

    if minutes < 1:
        return f"{prefix} just now"
    if minutes < 60:
        return f"{prefix} {_plural(minutes, 'minute')} ago"
    if hours < 24:
        return f"{prefix} {_plural(hours, 'hour')} ago"
    if days < 7:
        return f"{prefix} {_plural(days, 'day')} ago"

    local = ts.astimezone(ZoneInfo(tz))
    return f"{prefix} on {local.strftime('%b')} {local.day}, {local.strftime('%I:%M %p')}"
