"""Omni-search result schemas."""

from pydantic import BaseModel, Field

from cyberpulse.schemas.news import Article


class Definition(BaseModel):
    """Glossary entry for a security term."""

    term: str
    meaning: str


class LocalNews(BaseModel):
    """Article found in the local store."""

    article: Article


class GitHubRepo(BaseModel):
    """Repository returned by code search."""

    name: str
    description: str | None = None
    stars: int = 0
    language: str | None = None
    url: str


class RedditPost(BaseModel):
    """Post returned by discussion search."""

    title: str
    subreddit: str
    upvotes: int = 0
    url: str


class Vulnerability(BaseModel):
    """CVE found in the local store."""

    cve_id: str
    description: str
    score: float | None = None
    url: str


class OmniSearchResult(BaseModel):
    """Unified bundle of every omni-search branch."""

    query: str = ""
    definitions: list[Definition] = Field(default_factory=list)
    local_results: list[LocalNews] = Field(default_factory=list)
    github_repos: list[GitHubRepo] = Field(default_factory=list)
    reddit_posts: list[RedditPost] = Field(default_factory=list)
    vulnerabilities: list[Vulnerability] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.definitions
            or self.local_results
            or self.github_repos
            or self.reddit_posts
            or self.vulnerabilities
        )
