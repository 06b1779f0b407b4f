"""Omni-search: one query fanned out to the local store, GitHub, Reddit and a glossary."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from cyberpulse.normalization import article_from_record, cve_from_record
from cyberpulse.normalization.common import as_dict, as_int, as_optional_str, as_str
from cyberpulse.remote.search import GitHubSearchClient, RedditSearchClient
from cyberpulse.schemas.search import (
    Definition,
    GitHubRepo,
    LocalNews,
    OmniSearchResult,
    RedditPost,
    Vulnerability,
)
from cyberpulse.store.stores import ArticleStore, CVEStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

NVD_DETAIL_URL = "https://nvd.nist.gov/vuln/detail/"
REDDIT_URL = "https://reddit.com"

# (keywords, definition); a definition matches when any keyword is in the query
GLOSSARY: tuple[tuple[tuple[str, ...], Definition], ...] = (
    (
        ("trojan",),
        Definition(
            term="Trojan",
            meaning="A type of malware that conceals its true content to fool a user "
            "into thinking it's a harmless file.",
        ),
    ),
    (
        ("ransomware",),
        Definition(
            term="Ransomware",
            meaning="Malware that employs encryption to hold a victim's information at ransom.",
        ),
    ),
    (
        ("phishing",),
        Definition(
            term="Phishing",
            meaning="A social engineering attack used to steal user data, including login "
            "credentials and credit card numbers.",
        ),
    ),
    (
        ("xss", "cross-site scripting"),
        Definition(
            term="XSS (Cross-Site Scripting)",
            meaning="A vulnerability that allows an attacker to compromise the interactions "
            "that users have with a vulnerable application.",
        ),
    ),
    (
        ("zero-day", "zero day", "0day"),
        Definition(
            term="Zero-Day",
            meaning="A flaw that is exploited before the vendor has released a fix for it.",
        ),
    ),
    (
        ("ddos",),
        Definition(
            term="DDoS (Distributed Denial of Service)",
            meaning="Flooding a service with traffic from many machines so legitimate "
            "users cannot reach it.",
        ),
    ),
    (
        ("sql injection", "sqli"),
        Definition(
            term="SQL Injection",
            meaning="Inserting crafted SQL into an application's queries to read or modify "
            "data it should not expose.",
        ),
    ),
)


def lookup_definitions(query: str) -> list[Definition]:
    """Glossary entries whose keywords occur in ``query`` (case-insensitive)."""
    lowered = query.lower()
    return [
        definition
        for keywords, definition in GLOSSARY
        if any(keyword in lowered for keyword in keywords)
    ]


def github_repo_from_item(item: dict[str, Any]) -> GitHubRepo:
    return GitHubRepo(
        name=as_str(item.get("full_name")) or as_str(item.get("name")),
        description=as_optional_str(item.get("description")),
        stars=as_int(item.get("stargazers_count")),
        language=as_optional_str(item.get("language")),
        url=as_str(item.get("html_url")),
    )


def reddit_post_from_item(item: dict[str, Any]) -> RedditPost:
    data = as_dict(item)
    return RedditPost(
        title=as_str(data.get("title")),
        subreddit=as_str(data.get("subreddit_name_prefixed")) or as_str(data.get("subreddit")),
        upvotes=as_int(data.get("ups")),
        url=REDDIT_URL + as_str(data.get("permalink")),
    )


class OmniSearchService:
    """Runs every branch concurrently and joins them into one bundle.

    A branch that raises contributes nothing; the others are unaffected.
    """

    def __init__(
        self,
        articles: ArticleStore,
        cves: CVEStore,
        github: GitHubSearchClient,
        reddit: RedditSearchClient,
        branch_limit: int = 3,
    ):
        self.articles = articles
        self.cves = cves
        self.github = github
        self.reddit = reddit
        self.branch_limit = branch_limit

    async def omni_search(self, query: str) -> OmniSearchResult:
        query = query.strip()
        if not query:
            return OmniSearchResult()

        local, github_repos, reddit_posts, definitions = await asyncio.gather(
            self._isolated("local", self._search_local(query), ([], [])),
            self._isolated("github", self._search_github(query), []),
            self._isolated("reddit", self._search_reddit(query), []),
            self._isolated("definitions", self._search_definitions(query), []),
        )
        local_results, vulnerabilities = local
        return OmniSearchResult(
            query=query,
            definitions=definitions,
            local_results=local_results,
            github_repos=github_repos,
            reddit_posts=reddit_posts,
            vulnerabilities=vulnerabilities,
        )

    async def _isolated(self, branch: str, operation: Awaitable[T], empty: T) -> T:
        try:
            return await operation
        except Exception as e:
            logger.warning("Omni-search branch %s failed: %s", branch, e)
            return empty

    async def _search_local(self, query: str) -> tuple[list[LocalNews], list[Vulnerability]]:
        article_rows, cve_rows = await asyncio.gather(
            self.articles.search(query),
            self.cves.search(query),
        )
        news = [LocalNews(article=article_from_record(row)) for row in article_rows]
        vulnerabilities = []
        for row in cve_rows:
            entry = cve_from_record(row)
            vulnerabilities.append(
                Vulnerability(
                    cve_id=entry.id,
                    description=entry.description,
                    score=entry.cvss_score,
                    url=NVD_DETAIL_URL + entry.id,
                )
            )
        return news, vulnerabilities

    async def _search_github(self, query: str) -> list[GitHubRepo]:
        items = await self.github.search(
            f"topic:cybersecurity {query}", page_size=self.branch_limit
        )
        return [github_repo_from_item(item) for item in items[: self.branch_limit]]

    async def _search_reddit(self, query: str) -> list[RedditPost]:
        items = await self.reddit.search(
            f"subreddit:netsec OR subreddit:cybersecurity {query}", limit=self.branch_limit
        )
        return [reddit_post_from_item(item) for item in items[: self.branch_limit]]

    async def _search_definitions(self, query: str) -> list[Definition]:
        return lookup_definitions(query)
