"""Shared fixtures: a throwaway SQLite record store and fake remote sources."""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from cyberpulse.db.database import Database
from cyberpulse.models import ArticleRecord
from cyberpulse.store import ArticleStore, BreachStore, CVEStore, EventStore


class FakeRemote:
    """Stands in for an API client.

    Every method named in ``responses`` returns its canned value; a method
    named in ``errors`` raises instead. Calls are recorded in ``calls``.
    """

    def __init__(self, **responses: Any):
        self.responses = responses
        self.errors: dict[str, Exception] = {}
        self.calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_") or (name not in self.responses and name not in self.errors):
            raise AttributeError(name)

        async def call(*args: Any, **kwargs: Any) -> Any:
            self.calls.append((name, args, kwargs))
            if name in self.errors:
                raise self.errors[name]
            return self.responses[name]

        return call

    def called(self, name: str) -> list[tuple[tuple[Any, ...], dict[str, Any]]]:
        return [(args, kwargs) for called, args, kwargs in self.calls if called == name]

    async def close(self) -> None:
        pass


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'cyberpulse-test.db'}")
    await db.init_db()
    yield db
    await db.close()


@pytest.fixture
def article_store(database: Database) -> ArticleStore:
    return ArticleStore(database)


@pytest.fixture
def breach_store(database: Database) -> BreachStore:
    return BreachStore(database)


@pytest.fixture
def cve_store(database: Database) -> CVEStore:
    return CVEStore(database)


@pytest.fixture
def event_store(database: Database) -> EventStore:
    return EventStore(database)


def iso(moment: datetime) -> str:
    return moment.astimezone(UTC).isoformat().replace("+00:00", "Z")


@pytest.fixture
def raw_article() -> Callable[..., dict[str, Any]]:
    def make(
        article_id: str,
        title: str = "Ransomware gang hits hospital",
        published: datetime | None = None,
        **extra: Any,
    ) -> dict[str, Any]:
        published = published or datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        return {
            "id": article_id,
            "title": title,
            "description": "Attackers encrypted patient records.",
            "url": f"https://news.example.com/{article_id}",
            "urlToImage": None,
            "source": {"id": "bleepingcomputer", "name": "BleepingComputer"},
            "author": "Jane Doe",
            "publishedAt": iso(published),
            "tags": ["ransomware"],
            "category": "ransomware",
            **extra,
        }

    return make


@pytest.fixture
def article_record() -> Callable[..., ArticleRecord]:
    def make(
        article_id: str,
        title: str = "Cached story",
        published_at: int = 1_700_000_000_000,
        **extra: Any,
    ) -> ArticleRecord:
        fields: dict[str, Any] = {
            "summary": "From the cache",
            "url": f"https://news.example.com/{article_id}",
            "source_id": "community_blog",
            "source_name": "Community Blog",
            **extra,
        }
        return ArticleRecord(
            id=article_id,
            title=title,
            published_at=published_at,
            **fields,
        )

    return make


@pytest.fixture
def raw_breach() -> Callable[..., dict[str, Any]]:
    def make(name: str, days_ago: int = 5, **extra: Any) -> dict[str, Any]:
        breach_day = (datetime.now(UTC) - timedelta(days=days_ago)).date().isoformat()
        return {
            "Name": name,
            "Title": name.title(),
            "Domain": f"{name.lower()}.com",
            "BreachDate": breach_day,
            "AddedDate": iso(datetime.now(UTC)),
            "ModifiedDate": iso(datetime.now(UTC)),
            "PwnCount": 1000,
            "Description": "<p>Customer data was <b>exposed</b>.</p>",
            "DataClasses": ["Email addresses", "Passwords"],
            "IsVerified": True,
            "IsFabricated": False,
            "IsSensitive": False,
            "IsRetired": False,
            "IsSpamList": False,
            "LogoPath": None,
            **extra,
        }

    return make


@pytest.fixture
def raw_cve() -> Callable[..., dict[str, Any]]:
    def make(
        cve_id: str,
        score: float | None = 9.8,
        published: str = "2024-03-01T10:00:00.000",
        criteria: list[str] | None = None,
        reference_tags: list[str] | None = None,
        description: str = "Remote code execution in the widget parser.",
    ) -> dict[str, Any]:
        metrics = {}
        if score is not None:
            metrics = {
                "cvssMetricV31": [
                    {"cvssData": {"baseScore": score, "attackVector": "NETWORK"}}
                ]
            }
        return {
            "cve": {
                "id": cve_id,
                "published": published,
                "lastModified": published,
                "descriptions": [
                    {"lang": "es", "value": "Ejecucion remota de codigo."},
                    {"lang": "en", "value": description},
                ],
                "metrics": metrics,
                "configurations": [
                    {
                        "nodes": [
                            {
                                "cpeMatch": [
                                    {"criteria": c}
                                    for c in (
                                        criteria
                                        or ["cpe:2.3:a:apache:log4j:2.14.1:*:*:*:*:*:*:*"]
                                    )
                                ]
                            }
                        ]
                    }
                ],
                "references": [
                    {"url": f"https://example.com/{cve_id}", "tags": reference_tags or []}
                ],
            }
        }

    return make


@pytest.fixture
def raw_event() -> Callable[..., dict[str, Any]]:
    def make(event_id: int, days_ahead: int = 10, **extra: Any) -> dict[str, Any]:
        start = datetime.now(UTC) + timedelta(days=days_ahead)
        return {
            "id": event_id,
            "title": f"Example CTF {event_id}",
            "description": "Jeopardy style.",
            "url": f"https://ctf{event_id}.example.com",
            "ctftime_url": f"https://ctftime.org/event/{event_id}/",
            "logo": "",
            "organizers": [{"id": 1, "name": "Team Example"}],
            "start": iso(start),
            "finish": iso(start + timedelta(days=2)),
            "onsite": False,
            "location": "",
            **extra,
        }

    return make


@pytest.fixture
def fake_remote() -> type[FakeRemote]:
    return FakeRemote
