"""SQLModel tables backing the local record store.

Timestamps are epoch milliseconds, list fields are JSON arrays, and every
table carries ``cached_at`` (insertion time) which is only used to order
retention.
"""

import time

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class ArticleRecord(SQLModel, table=True):
    """Cached news article."""

    __tablename__ = "news_articles"

    id: str = Field(primary_key=True, max_length=512)
    title: str
    summary: str = Field(default="")
    content: str | None = Field(default=None)
    url: str = Field(default="", max_length=2048)
    image_url: str | None = Field(default=None, max_length=2048)

    # Flattened source
    source_id: str = Field(default="")
    source_name: str = Field(default="")
    source_icon_url: str | None = Field(default=None)
    source_website: str = Field(default="")
    source_reliability: str = Field(default="COMMUNITY")

    author: str | None = Field(default=None)
    published_at: int = Field(index=True)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, default=[]))
    category: str = Field(default="GENERAL", index=True)

    # User state
    is_saved: bool = Field(default=False, index=True)
    is_read: bool = Field(default=False)

    cached_at: int = Field(default_factory=now_ms, index=True)


class BreachRecord(SQLModel, table=True):
    """Cached data breach."""

    __tablename__ = "data_breaches"

    id: str = Field(primary_key=True, max_length=255)
    name: str
    domain: str | None = Field(default=None)
    breach_date: int = Field(index=True)
    added_date: int
    modified_date: int | None = Field(default=None)
    pwn_count: int = Field(default=0)
    description: str = Field(default="")
    data_classes: list[str] = Field(default_factory=list, sa_column=Column(JSON, default=[]))
    is_verified: bool = Field(default=False)
    is_fabricated: bool = Field(default=False)
    is_sensitive: bool = Field(default=False)
    is_retired: bool = Field(default=False)
    is_spam_list: bool = Field(default=False)
    logo_path: str | None = Field(default=None)

    cached_at: int = Field(default_factory=now_ms, index=True)


class CVERecord(SQLModel, table=True):
    """Cached CVE entry."""

    __tablename__ = "cve_entries"

    id: str = Field(primary_key=True, max_length=32)
    description: str = Field(default="")
    published_date: int = Field(index=True)
    last_modified_date: int
    cvss_score: float | None = Field(default=None)
    severity: str = Field(default="NONE", index=True)
    attack_vector: str | None = Field(default=None)
    affected_products: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, default=[])
    )
    reference_urls: list[str] = Field(default_factory=list, sa_column=Column(JSON, default=[]))
    exploit_available: bool = Field(default=False)
    patch_available: bool = Field(default=False)

    cached_at: int = Field(default_factory=now_ms, index=True)


class EventRecord(SQLModel, table=True):
    """Cached cyber event."""

    __tablename__ = "cyber_events"

    id: str = Field(primary_key=True, max_length=255)
    name: str
    type: str = Field(default="CTF", index=True)
    description: str = Field(default="")
    url: str = Field(default="")
    image_url: str | None = Field(default=None)
    organizer: str = Field(default="Unknown")
    start_date: int = Field(index=True)
    end_date: int | None = Field(default=None)
    timezone: str = Field(default="UTC")
    is_online: bool = Field(default=True)
    location: str | None = Field(default=None)
    prizes: str | None = Field(default=None)
    registration_url: str | None = Field(default=None)
    registration_deadline: int | None = Field(default=None)

    # User state
    is_registered: bool = Field(default=False)
    has_reminder: bool = Field(default=False, index=True)

    cached_at: int = Field(default_factory=now_ms, index=True)
