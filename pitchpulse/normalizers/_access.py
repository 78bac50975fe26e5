"""Null-safe accessors over decoded provider JSON."""

import re
from datetime import timezone
from typing import Any, Optional

from pitchpulse.utils.display import parse_provider_datetime

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def dig(obj: Any, *path, default=None) -> Any:
    """Walk nested dicts/lists; any missing step yields `default`."""
    current = obj
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return default
            current = current[key]
        else:
            if not isinstance(current, dict):
                return default
            current = current.get(key)
        if current is None:
            return default
    return current


def as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def as_str(value: Any) -> Optional[str]:
    """Strings pass through, numbers are stringified, anything else is None."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def safe_int(value: Any) -> Optional[int]:
    """Safely convert to int, return None if invalid."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def leading_int(value: Any) -> int:
    """Leading integer of a provider value ("58%" -> 58, "12" -> 12), else 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else 0
    return 0


def safe_float(value: Any) -> Optional[float]:
    """Safely convert to float ("1.8" -> 1.8), return None if invalid."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def fixture_sort_key(item: dict) -> float:
    """Sort key for fixtures, most recent first when used with reverse=True."""
    ts = dig(item, "fixture", "timestamp")
    if isinstance(ts, (int, float)) and not isinstance(ts, bool):
        return float(ts)
    parsed = parse_provider_datetime(dig(item, "fixture", "date"))
    if parsed is None:
        return float("-inf")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def played_goals(item: dict) -> Optional[tuple[int, int]]:
    """(home, away) goals when the fixture has a recorded score, else None."""
    home = safe_int(dig(item, "goals", "home"))
    away = safe_int(dig(item, "goals", "away"))
    if home is None or away is None:
        return None
    return home, away

