"""Models package - SQLModel tables for the local record store."""

from cyberpulse.models.records import (
    ArticleRecord,
    BreachRecord,
    CVERecord,
    EventRecord,
    now_ms,
)

__all__ = ["ArticleRecord", "BreachRecord", "CVERecord", "EventRecord", "now_ms"]
