"""News repository: cached feed, search and saved articles."""

import logging
from collections.abc import AsyncGenerator, Sequence

from cyberpulse.core.errors import NotFoundError, ParseError, StoreError
from cyberpulse.core.result import Failure, Result, Success
from cyberpulse.models import ArticleRecord
from cyberpulse.normalization import (
    article_from_record,
    article_from_remote,
    article_to_record,
    normalize_many,
)
from cyberpulse.remote.news import NewsApiClient
from cyberpulse.repositories.base import SyncRepository
from cyberpulse.schemas.news import Article, CyberTag, NewsCategory
from cyberpulse.store.stores import ArticleStore

logger = logging.getLogger(__name__)


class NewsRepository(SyncRepository[Article, ArticleRecord]):
    """Stale-while-revalidate access to cybersecurity news."""

    kind = "article"
    user_flags = ("is_saved", "is_read")

    def __init__(
        self,
        store: ArticleStore,
        remote: NewsApiClient,
        retention_size: int = 50,
        page_size: int = 20,
    ):
        super().__init__(
            store,
            from_record=article_from_record,
            to_record=article_to_record,
            recency=lambda article: article.published_at,
            retention_size=retention_size,
        )
        self.remote = remote
        self.page_size = page_size

    def get_feed(
        self,
        category: NewsCategory | None = None,
        force_refresh: bool = False,
    ) -> AsyncGenerator[Result[list[Article]], None]:
        """Stream the latest articles, optionally for one category."""

        async def read_cache() -> list[Article]:
            if category is None:
                return await self.load()
            return await self.load(ArticleRecord.category == category.value)

        async def fetch() -> list[Article]:
            if category is None:
                raws = await self.remote.list_latest(page=1, limit=self.page_size)
            else:
                raws = await self.remote.list_by_category(
                    category.value, page=1, limit=self.page_size
                )
            return normalize_many(raws, article_from_remote, self.kind)

        return self.read_through(read_cache, fetch, force_refresh)

    async def search(self, query: str) -> Result[list[Article]]:
        """Local and remote keyword search, merged and newest first."""

        async def local() -> list[Article]:
            rows = await self.store.search(query)
            return [article_from_record(row) for row in rows]

        async def remote() -> list[Article]:
            raws = await self.remote.search(query, page=1, limit=self.page_size)
            return normalize_many(raws, article_from_remote, self.kind)

        return await self.merge_search(local(), remote())

    def get_by_tags(
        self, tags: Sequence[CyberTag]
    ) -> AsyncGenerator[Result[list[Article]], None]:
        """Cached articles carrying any of ``tags``, then a remote search on their names."""
        wanted = set(tags)

        async def read_cache() -> list[Article]:
            articles = await self.load()
            return [article for article in articles if wanted.intersection(article.tags)]

        async def fetch() -> list[Article]:
            query = " OR ".join(tag.display_name for tag in tags)
            raws = await self.remote.search(query, page=1, limit=self.page_size)
            return normalize_many(raws, article_from_remote, self.kind)

        return self.read_through(read_cache, fetch)

    async def get_by_id(self, article_id: str) -> Result[Article]:
        """Cached article, or fetched and cached when missing locally."""
        try:
            row = await self.store.get_by_id(article_id)
            if row is not None:
                return Success(article_from_record(row))
        except StoreError as e:
            return Failure(e)

        async def fetch_one() -> Article:
            raw = await self.remote.get_by_id(article_id)
            if raw is None:
                raise NotFoundError(self.kind, article_id)
            article = article_from_remote(raw)
            if article is None:
                raise ParseError(f"Article '{article_id}' has no usable id")
            saved = await self.save_fresh([article])
            return saved[0]

        return await self.capture(fetch_one())

    async def toggle_save(self, article_id: str) -> Result[bool]:
        return await self.toggle_flag(article_id, "is_saved")

    async def mark_as_read(self, article_id: str) -> Result[bool]:
        return await self.set_flag(article_id, "is_read", True)

    async def get_saved(self) -> Result[list[Article]]:
        return await self.capture(self.load(ArticleRecord.is_saved.is_(True)))

    async def refresh_and_cache(self, limit: int = 50) -> Result[int]:
        """Fetch up to ``limit`` latest articles, cache them, then apply retention.

        Returns the number of articles cached. Saved articles are never
        evicted and do not count towards the retention size.
        """

        async def refresh() -> int:
            raws = await self.remote.list_latest(page=1, limit=limit)
            articles = normalize_many(raws, article_from_remote, self.kind)[:limit]
            await self.save_fresh(articles)
            await self.evict_stale(ArticleRecord.is_saved.is_(False))
            return len(articles)

        return await self.capture(refresh())
