"""Tests for the omni-search aggregator."""

import pytest

from cyberpulse.normalization import cve_from_remote, cve_to_record
from cyberpulse.services.search_service import OmniSearchService, lookup_definitions
from cyberpulse.store import ArticleStore, CVEStore


def github_item(name: str, stars: int = 100) -> dict:
    return {
        "full_name": f"octo/{name}",
        "description": f"{name} toolkit",
        "stargazers_count": stars,
        "language": "Python",
        "html_url": f"https://github.com/octo/{name}",
    }


def reddit_item(title: str) -> dict:
    return {
        "title": title,
        "subreddit_name_prefixed": "r/netsec",
        "ups": 42,
        "permalink": f"/r/netsec/comments/{title.lower()}/",
    }


@pytest.fixture
def service_factory(article_store: ArticleStore, cve_store: CVEStore, fake_remote):
    def make(github=None, reddit=None) -> OmniSearchService:
        return OmniSearchService(
            article_store,
            cve_store,
            github or fake_remote(search=[]),
            reddit or fake_remote(search=[]),
        )

    return make


class TestOmniSearch:
    async def test_blank_query_is_empty(self, service_factory, fake_remote) -> None:
        github = fake_remote(search=[github_item("a")])
        reddit = fake_remote(search=[reddit_item("b")])
        service = service_factory(github, reddit)

        result = await service.omni_search("   ")

        assert result.is_empty()
        assert github.calls == [] and reddit.calls == []

    async def test_all_branches(
        self, service_factory, fake_remote, article_store, article_record, cve_store, raw_cve
    ) -> None:
        await article_store.upsert(article_record("n1", title="Ransomware wave"))
        await cve_store.upsert(
            cve_to_record(cve_from_remote(raw_cve("CVE-2024-1000", description="ransomware loader flaw")))
        )
        github = fake_remote(search=[github_item("hunter", stars=900)])
        reddit = fake_remote(search=[reddit_item(f"post{i}") for i in range(5)])
        service = service_factory(github, reddit)

        result = await service.omni_search("ransomware")

        assert result.query == "ransomware"
        assert [d.term for d in result.definitions] == ["Ransomware"]
        assert [n.article.id for n in result.local_results] == ["n1"]
        assert result.vulnerabilities[0].cve_id == "CVE-2024-1000"
        assert result.vulnerabilities[0].url == "https://nvd.nist.gov/vuln/detail/CVE-2024-1000"
        assert result.github_repos[0].name == "octo/hunter"
        assert result.github_repos[0].stars == 900
        assert len(result.reddit_posts) == 3
        assert result.reddit_posts[0].url == "https://reddit.com/r/netsec/comments/post0/"

    async def test_branch_queries(self, service_factory, fake_remote) -> None:
        github = fake_remote(search=[])
        reddit = fake_remote(search=[])
        service = service_factory(github, reddit)

        await service.omni_search("log4j")

        (gh_args, gh_kwargs), = github.called("search")
        (rd_args, rd_kwargs), = reddit.called("search")
        assert gh_args == ("topic:cybersecurity log4j",)
        assert gh_kwargs["page_size"] == 3
        assert rd_args == ("subreddit:netsec OR subreddit:cybersecurity log4j",)
        assert rd_kwargs["limit"] == 3

    async def test_failing_branch_is_isolated(self, service_factory, fake_remote) -> None:
        github = fake_remote()
        github.errors["search"] = RuntimeError("rate limited")
        reddit = fake_remote(search=[reddit_item("exploit")])
        service = service_factory(github, reddit)

        result = await service.omni_search("phishing")

        assert result.github_repos == []
        assert [p.title for p in result.reddit_posts] == ["exploit"]
        assert [d.term for d in result.definitions] == ["Phishing"]


class TestDefinitions:
    @pytest.mark.parametrize(
        "query,terms",
        [
            ("new TROJAN strain", ["Trojan"]),
            ("stored xss in cms", ["XSS (Cross-Site Scripting)"]),
            ("zero-day ransomware", ["Ransomware", "Zero-Day"]),
            ("patch tuesday", []),
        ],
    )
    def test_lookup(self, query: str, terms: list[str]) -> None:
        assert [d.term for d in lookup_definitions(query)] == terms
