"""
Covenant Bot - Time Formatting Utils
====================================

Clock helpers and human-readable time formatting for embeds.

Features:
- Millisecond epoch clock shared by ids, mutes and request expiry
- Compact duration strings (e.g., "2d 3h 15m")
- ISO-8601 parsing for stored warning and marriage dates
"""

import time
from datetime import datetime, timezone
from typing import Optional

from src.core.constants import MS_PER_SECOND, SECONDS_PER_DAY


# =============================================================================
# Clock
# =============================================================================

def now_ms() -> int:
    """Current time as integer milliseconds since the epoch."""
    return int(time.time() * MS_PER_SECOND)


def iso_from_ms(ms: int) -> str:
    """ISO-8601 UTC string for a millisecond timestamp."""
    dt = datetime.fromtimestamp(ms / MS_PER_SECOND, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO-8601 date, None if missing or malformed."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# =============================================================================
# Formatting
# =============================================================================

def format_duration(total_minutes: int) -> str:
    """
    Format minutes into a compact duration string.

    Examples:
        45 -> "45m", 125 -> "2h 5m", 1500 -> "1d 1h", 0 -> "0m"
    """
    if not total_minutes or total_minutes < 0:
        return "0m"

    days, remaining = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remaining, 60)

    parts: list[str] = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    # Keep minutes as the fallback component
    if minutes > 0 or (days == 0 and hours == 0):
        parts.append(f"{minutes}m")

    return " ".join(parts)


def format_timestamp(value: Optional[str], style: str = "f") -> str:
    """Render a stored ISO date as a Discord timestamp tag."""
    dt = parse_iso(value)
    if dt is None:
        return "Unknown"
    return f"<t:{int(dt.timestamp())}:{style}>"


def format_ms_timestamp(ms: int, style: str = "R") -> str:
    """Render a millisecond timestamp as a Discord timestamp tag."""
    return f"<t:{ms // MS_PER_SECOND}:{style}>"


def days_since(value: Optional[str], now: Optional[int] = None) -> int:
    """Whole days elapsed since a stored ISO date, floored at 0."""
    dt = parse_iso(value)
    if dt is None:
        return 0
    current = now if now is not None else now_ms()
    elapsed = current / MS_PER_SECOND - dt.timestamp()
    return max(0, int(elapsed // SECONDS_PER_DAY))


__all__ = [
    "now_ms",
    "iso_from_ms",
    "parse_iso",
    "format_duration",
    "format_timestamp",
    "format_ms_timestamp",
    "days_since",
]
