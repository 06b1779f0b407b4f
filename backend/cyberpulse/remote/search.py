"""External search APIs used by omni-search (GitHub repositories, Reddit posts)."""

from typing import Any

from cyberpulse.config import Settings
from cyberpulse.remote.base import ApiClient


class GitHubSearchClient(ApiClient):
    name = "github"

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "GitHubSearchClient":
        return cls(
            settings.github_api_base_url,
            headers={"Accept": "application/vnd.github+json"},
            **{**cls.transport_options(settings), **kwargs},
        )

    async def search(
        self,
        query: str,
        sort: str = "stars",
        order: str = "desc",
        page_size: int = 3,
    ) -> list[dict[str, Any]]:
        """Repositories ranked by ``sort``; raw GitHub items."""
        payload = await self.get_json(
            "search/repositories",
            {"q": query, "sort": sort, "order": order, "per_page": page_size},
        )
        return self.expect_list(payload, "items")


class RedditSearchClient(ApiClient):
    name = "reddit"

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "RedditSearchClient":
        return cls(settings.reddit_base_url, **{**cls.transport_options(settings), **kwargs})

    async def search(
        self,
        query: str,
        limit: int = 3,
        sort: str = "relevance",
        type: str = "link",
    ) -> list[dict[str, Any]]:
        """Posts matching ``query``; the ``data`` object of each listing child."""
        payload = await self.get_json(
            "search.json", {"q": query, "limit": limit, "sort": sort, "type": type}
        )
        listing = payload.get("data") if isinstance(payload, dict) else None
        children = self.expect_list(listing, "children")
        return [child["data"] for child in children if isinstance(child.get("data"), dict)]
