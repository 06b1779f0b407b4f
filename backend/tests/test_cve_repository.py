"""Tests for the CVE repository."""

from cyberpulse.core.errors import NetworkError, NotFoundError
from cyberpulse.core.result import Failure, Success
from cyberpulse.normalization import cve_from_remote, cve_to_record
from cyberpulse.repositories import CVERepository
from cyberpulse.schemas.cve import CVESeverity
from cyberpulse.store import CVEStore

LOG4J_CPE = "cpe:2.3:a:apache:log4j:2.14.1:*:*:*:*:*:*:*"


async def collect(stream) -> list:
    return [result async for result in stream]


async def seed(store: CVEStore, *raws) -> None:
    await store.upsert_many([cve_to_record(cve_from_remote(raw)) for raw in raws])


class TestGetById:
    async def test_malformed_id_is_not_found(self, cve_store: CVEStore, fake_remote) -> None:
        remote = fake_remote(get_by_id=None)
        repo = CVERepository(cve_store, remote)

        result = await repo.get_by_id("not-a-cve")

        assert isinstance(result, Failure) and isinstance(result.error, NotFoundError)
        assert remote.calls == []

    async def test_cache_hit_accepts_lowercase(self, cve_store: CVEStore, raw_cve, fake_remote) -> None:
        await seed(cve_store, raw_cve("CVE-2021-44228"))
        remote = fake_remote(get_by_id=None)
        repo = CVERepository(cve_store, remote)

        result = await repo.get_by_id("cve-2021-44228")

        assert isinstance(result, Success) and result.value.id == "CVE-2021-44228"
        assert remote.calls == []

    async def test_fetches_and_caches(self, cve_store: CVEStore, raw_cve, fake_remote) -> None:
        repo = CVERepository(cve_store, fake_remote(get_by_id=raw_cve("CVE-2024-3094", score=10.0)))

        result = await repo.get_by_id("CVE-2024-3094")

        assert isinstance(result, Success)
        assert result.value.severity == CVESeverity.CRITICAL
        assert await cve_store.get_by_id("CVE-2024-3094") is not None

    async def test_unknown_remote_id(self, cve_store: CVEStore, fake_remote) -> None:
        repo = CVERepository(cve_store, fake_remote(get_by_id=None))

        result = await repo.get_by_id("CVE-2099-0001")

        assert isinstance(result, Failure) and isinstance(result.error, NotFoundError)


class TestRecentCves:
    async def test_severity_filter(self, cve_store: CVEStore, raw_cve, fake_remote) -> None:
        await seed(cve_store, raw_cve("CVE-2024-0001", score=9.5), raw_cve("CVE-2024-0002", score=2.0))
        remote = fake_remote(
            search=[raw_cve("CVE-2024-0003", score=9.1), raw_cve("CVE-2024-0004", score=5.0)]
        )
        repo = CVERepository(cve_store, remote)

        results = await collect(repo.get_recent_cves(severity=CVESeverity.CRITICAL))

        assert [e.id for e in results[0].value] == ["CVE-2024-0001"]
        assert [e.id for e in results[1].value] == ["CVE-2024-0003"]
        (args, kwargs), = remote.called("search")
        assert kwargs["severity"] == "CRITICAL"

    async def test_newest_first_and_limited(self, cve_store: CVEStore, raw_cve, fake_remote) -> None:
        remote = fake_remote(
            search=[
                raw_cve("CVE-2024-0001", published="2024-01-01T00:00:00"),
                raw_cve("CVE-2024-0003", published="2024-03-01T00:00:00"),
                raw_cve("CVE-2024-0002", published="2024-02-01T00:00:00"),
            ]
        )
        repo = CVERepository(cve_store, remote)

        results = await collect(repo.get_recent_cves(limit=2))

        assert [e.id for e in results[-1].value] == ["CVE-2024-0003", "CVE-2024-0002"]

    async def test_failure_without_cache(self, cve_store: CVEStore, fake_remote) -> None:
        remote = fake_remote()
        remote.errors["search"] = NetworkError("rate limited", status_code=403)
        repo = CVERepository(cve_store, remote)

        results = await collect(repo.get_recent_cves())

        assert len(results) == 1
        assert isinstance(results[0], Failure)
        assert results[0].error.status_code == 403


class TestSearchAndProducts:
    async def test_search_merges_local_and_remote(self, cve_store: CVEStore, raw_cve, fake_remote) -> None:
        await seed(cve_store, raw_cve("CVE-2023-1111", description="Buffer overflow in parser"))
        remote = fake_remote(
            search=[raw_cve("CVE-2023-1111", description="Updated overflow text"), raw_cve("CVE-2023-2222")]
        )
        repo = CVERepository(cve_store, remote)

        result = await repo.search("overflow")

        assert isinstance(result, Success)
        by_id = {e.id: e for e in result.value}
        assert set(by_id) == {"CVE-2023-1111", "CVE-2023-2222"}
        assert by_id["CVE-2023-1111"].description == "Updated overflow text"

    async def test_product_name_is_local_only(self, cve_store: CVEStore, raw_cve, fake_remote) -> None:
        await seed(
            cve_store,
            raw_cve("CVE-2021-44228", criteria=[LOG4J_CPE]),
            raw_cve("CVE-2022-0001", criteria=["cpe:2.3:o:microsoft:windows_10:-:*:*:*:*:*:*:*"]),
        )
        remote = fake_remote(list_by_product=[])
        repo = CVERepository(cve_store, remote)

        result = await repo.get_by_product("Log4j")

        assert isinstance(result, Success)
        assert [e.id for e in result.value] == ["CVE-2021-44228"]
        assert remote.calls == []

    async def test_cpe_name_also_queries_remote(self, cve_store: CVEStore, raw_cve, fake_remote) -> None:
        await seed(cve_store, raw_cve("CVE-2021-44228", criteria=[LOG4J_CPE]))
        remote = fake_remote(list_by_product=[raw_cve("CVE-2021-45046", criteria=[LOG4J_CPE])])
        repo = CVERepository(cve_store, remote)

        result = await repo.get_by_product(LOG4J_CPE)

        assert isinstance(result, Success)
        assert {e.id for e in result.value} == {"CVE-2021-44228", "CVE-2021-45046"}

    async def test_critical_exploited(self, cve_store: CVEStore, raw_cve, fake_remote) -> None:
        await seed(
            cve_store,
            raw_cve("CVE-2024-0001", score=9.8, reference_tags=["Exploit"]),
            raw_cve("CVE-2024-0002", score=9.8),
            raw_cve("CVE-2024-0003", score=7.0, reference_tags=["Exploit"]),
        )
        repo = CVERepository(cve_store, fake_remote())

        result = await repo.get_critical_exploited()

        assert isinstance(result, Success)
        assert [e.id for e in result.value] == ["CVE-2024-0001"]


class TestPrune:
    async def test_keeps_most_recently_published(self, cve_store: CVEStore, raw_cve, fake_remote) -> None:
        await seed(
            cve_store,
            raw_cve("CVE-2024-0001", published="2024-01-01T00:00:00"),
            raw_cve("CVE-2024-0002", published="2024-02-01T00:00:00"),
            raw_cve("CVE-2024-0003", published="2024-03-01T00:00:00"),
        )
        repo = CVERepository(cve_store, fake_remote())

        assert await repo.prune(2) == Success(1)
        assert await cve_store.get_by_id("CVE-2024-0001") is None
        assert await repo.cached_count() == Success(2)
