"""News API client."""

from typing import Any
from urllib.parse import quote

from cyberpulse.config import Settings
from cyberpulse.remote.base import ApiClient


class NewsApiClient(ApiClient):
    """Cybersecurity news aggregator API."""

    name = "news"

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "NewsApiClient":
        headers = {"X-Api-Key": settings.news_api_key} if settings.news_api_key else None
        return cls(
            settings.news_api_base_url,
            headers=headers,
            **{**cls.transport_options(settings), **kwargs},
        )

    async def list_latest(self, page: int = 1, limit: int = 20) -> list[dict[str, Any]]:
        payload = await self.get_json("news/latest", {"page": page, "limit": limit})
        return self.expect_list(payload, "articles")

    async def list_by_category(
        self, category: str, page: int = 1, limit: int = 20
    ) -> list[dict[str, Any]]:
        payload = await self.get_json(
            f"news/category/{quote(category.lower())}", {"page": page, "limit": limit}
        )
        return self.expect_list(payload, "articles")

    async def search(self, query: str, page: int = 1, limit: int = 20) -> list[dict[str, Any]]:
        payload = await self.get_json("news/search", {"q": query, "page": page, "limit": limit})
        return self.expect_list(payload, "articles")

    async def get_by_id(self, article_id: str) -> dict[str, Any] | None:
        payload = await self.get_json(f"news/{quote(article_id, safe='')}", allow_not_found=True)
        return None if payload is None else self.expect_dict(payload)
