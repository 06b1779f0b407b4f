"""Shared, total parsing helpers used by every mapper."""

import hashlib
import logging
import math
from collections.abc import Callable, Iterable
from datetime import UTC, date, datetime
from typing import Any, TypeVar

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_datetime(value: Any, now: datetime | None = None) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Date-only input means midnight UTC. Naive timestamps are taken as UTC.
    Anything unparseable falls back to ``now`` (the current instant by
    default).
    """
    try:
        if isinstance(value, datetime):
            return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)

        if isinstance(value, str) and value.strip():
            text = value.strip()
            if "T" not in text and len(text) == 10:
                day = date.fromisoformat(text)
                return datetime(day.year, day.month, day.day, tzinfo=UTC)
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            if parsed.tzinfo is None:
                return parsed.replace(tzinfo=UTC)
            # Offsets can push a timestamp past datetime.min/max
            return parsed.astimezone(UTC)
    except (ValueError, OverflowError):
        pass

    logger.debug("Unparseable timestamp %r, falling back to now", value)
    return now or datetime.now(UTC)


def parse_optional_datetime(value: Any) -> datetime | None:
    """Like parse_datetime, but missing input stays missing."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_datetime(value)


def to_epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def from_epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, UTC)


def optional_epoch_ms(value: datetime | None) -> int | None:
    return to_epoch_ms(value) if value is not None else None


def optional_from_epoch_ms(value: int | None) -> datetime | None:
    return from_epoch_ms(value) if value is not None else None


def as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    return default


def as_optional_str(value: Any) -> str | None:
    text = as_str(value).strip()
    return text or None


def as_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
    return default


def as_int(value: Any, default: int = 0) -> int:
    """Coerce to int; NaN, infinities and unparseable input give ``default``."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    number = as_float(value)
    return int(number) if number is not None else default


def as_float(value: Any) -> float | None:
    """Coerce to a finite float, or None."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def as_str_list(value: Any) -> list[str]:
    """Coerce a list (or comma separated string) into stripped, non-empty strings."""
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def clean_html(text: str) -> str:
    """Strip markup from remote text; plain text is returned untouched."""
    if not text or "<" not in text:
        return text
    soup = BeautifulSoup(text, "lxml")
    return soup.get_text(" ", strip=True)


def stable_id(*parts: str) -> str:
    """Deterministic id for records whose source does not provide one."""
    key = ":".join(parts)
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:32]


def normalize_many(
    raws: Iterable[Any],
    mapper: Callable[[Any], T | None],
    kind: str,
) -> list[T]:
    """Map raw records, dropping the ones the mapper cannot identify."""
    mapped: list[T] = []
    dropped = 0
    for raw in raws:
        item = mapper(raw)
        if item is None:
            dropped += 1
        else:
            mapped.append(item)
    if dropped:
        logger.warning("Dropped %d %s records without a usable id", dropped, kind)
    return mapped
