"""Explicit construction of the store, remote clients and repositories."""

import logging
from dataclasses import dataclass

from cyberpulse.config import Settings
from cyberpulse.db.database import Database
from cyberpulse.remote import (
    ApiClient,
    CtfTimeClient,
    GitHubSearchClient,
    HibpClient,
    NewsApiClient,
    NvdClient,
    RedditSearchClient,
)
from cyberpulse.repositories import (
    BreachRepository,
    CVERepository,
    EventRepository,
    NewsRepository,
)
from cyberpulse.services.search_service import OmniSearchService
from cyberpulse.store import ArticleStore, BreachStore, CVEStore, EventStore

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Everything one process needs, wired once and closed once."""

    database: Database
    clients: list[ApiClient]
    news: NewsRepository
    breaches: BreachRepository
    cves: CVERepository
    events: EventRepository
    search: OmniSearchService

    async def start(self) -> None:
        await self.database.init_db()

    async def close(self) -> None:
        for client in self.clients:
            await client.close()
        await self.database.close()
        logger.info("Closed %d API clients and the record store", len(self.clients))


def build_container(settings: Settings, database: Database | None = None) -> Container:
    """Wire repositories onto one shared database and one client per API."""
    database = database or Database(settings.database_url, echo=settings.debug)

    articles = ArticleStore(database)
    cve_store = CVEStore(database)

    news_client = NewsApiClient.from_settings(settings)
    hibp_client = HibpClient.from_settings(settings)
    nvd_client = NvdClient.from_settings(settings)
    ctftime_client = CtfTimeClient.from_settings(settings)
    github_client = GitHubSearchClient.from_settings(settings)
    reddit_client = RedditSearchClient.from_settings(settings)

    return Container(
        database=database,
        clients=[
            news_client,
            hibp_client,
            nvd_client,
            ctftime_client,
            github_client,
            reddit_client,
        ],
        news=NewsRepository(articles, news_client, retention_size=settings.cache_retention_size),
        breaches=BreachRepository(
            BreachStore(database), hibp_client, recent_days=settings.recent_breach_days
        ),
        cves=CVERepository(cve_store, nvd_client, retention_size=settings.cve_retention_size),
        events=EventRepository(EventStore(database), ctftime_client),
        search=OmniSearchService(
            articles,
            cve_store,
            github_client,
            reddit_client,
            branch_limit=settings.omni_search_branch_limit,
        ),
    )
