"""Display formatting shared by the catalog and the normalizers."""

from datetime import datetime
from typing import Optional


def parse_provider_datetime(value) -> Optional[datetime]:
    """Parse an ISO-8601 provider timestamp ("2024-05-01T19:00:00+00:00" or "...Z")."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_display_date(value) -> str:
    """DD.MM.YYYY in the fixture's own offset, "" when unparseable."""
    parsed = parse_provider_datetime(value)
    if parsed is None:
        return ""
    return parsed.strftime("%d.%m.%Y")


def format_clock(elapsed, status: str) -> str:
    """Elapsed minutes as "67'" when known, else the status short code."""
    if isinstance(elapsed, int) and not isinstance(elapsed, bool):
        return f"{elapsed}'"
    return status or ""


def format_event_time(elapsed, extra) -> str:
    """Event minute with stoppage time, e.g. "45+2'"."""
    base = str(elapsed) if elapsed is not None else "?"
    if extra:
        return f"{base}+{extra}'"
    return f"{base}'"
