from __future__ import annotations

from datetime import date, datetime
from typing import Optional

BUDDHIST_ERA_OFFSET = 543


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_buddhist_date(value: str) -> Optional[date]:
    """Parse a DD/MM/YYYY Buddhist-era string into a Gregorian date.

    Returns None instead of raising for empty or malformed input.
    """
    if not value:
        return None
    parts = str(value).strip().split("/")
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(p) for p in parts)
        return date(year - BUDDHIST_ERA_OFFSET, month, day)
    except ValueError:
        return None


def format_buddhist_date(value: date) -> str:
    return f"{value.day:02d}/{value.month:02d}/{value.year + BUDDHIST_ERA_OFFSET}"


def current_buddhist_date(now: datetime | None = None) -> str:
    return format_buddhist_date((now or now_local()).date())


def buddhist_sort_key(value: str) -> str:
    """YYYYMMDD key so lexical and chronological order coincide.

    Unparsable dates map to "" and therefore sort below every real date.
    """
    parsed = parse_buddhist_date(value)
    if parsed is None:
        return ""
    return f"{parsed.year + BUDDHIST_ERA_OFFSET:04d}{parsed.month:02d}{parsed.day:02d}"


def compact_buddhist_date(value: str) -> str:
    """DD/MM/YYYY -> DDMMYYYY, used inside deterministic record ids."""
    return str(value).replace("/", "")


def buddhist_to_iso(value: str) -> str:
    parsed = parse_buddhist_date(value)
    return parsed.isoformat() if parsed else ""


def iso_to_buddhist(value: str) -> str:
    if not value:
        return ""
    try:
        parsed = datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        return value
    return format_buddhist_date(parsed)


def buddhist_month_year(value: str) -> Optional[tuple[int, int]]:
    """(month, Buddhist year) of a DD/MM/YYYY string, or None."""
    parsed = parse_buddhist_date(value)
    if parsed is None:
        return None
    return parsed.month, parsed.year + BUDDHIST_ERA_OFFSET
