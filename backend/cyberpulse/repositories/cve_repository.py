"""CVE repository backed by the NIST NVD."""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import String, cast

from cyberpulse.core.errors import NotFoundError, ParseError, StoreError
from cyberpulse.core.result import Failure, Result, Success
from cyberpulse.models import CVERecord
from cyberpulse.normalization import (
    cve_from_record,
    cve_from_remote,
    cve_to_record,
    normalize_many,
)
from cyberpulse.normalization.cve import normalize_cve_id
from cyberpulse.remote.nvd import NvdClient
from cyberpulse.repositories.base import SyncRepository
from cyberpulse.schemas.cve import CVEEntry, CVESeverity
from cyberpulse.store.stores import CVEStore

logger = logging.getLogger(__name__)


def _cpe_product(cpe_name: str) -> str:
    parts = cpe_name.split(":")
    return f"{parts[3]} {parts[4]}" if len(parts) >= 5 else cpe_name


class CVERepository(SyncRepository[CVEEntry, CVERecord]):
    """Vulnerability feed, lookups and product matching."""

    kind = "cve"

    def __init__(self, store: CVEStore, remote: NvdClient, retention_size: int = 500):
        super().__init__(
            store,
            from_record=cve_from_record,
            to_record=cve_to_record,
            recency=lambda entry: entry.published_date,
            retention_size=retention_size,
        )
        self.remote = remote

    def get_recent_cves(
        self,
        severity: CVESeverity | None = None,
        limit: int = 50,
        force_refresh: bool = False,
    ) -> AsyncGenerator[Result[list[CVEEntry]], None]:
        """Newest CVEs, optionally restricted to one severity band."""

        async def read_cache() -> list[CVEEntry]:
            if severity is None:
                return await self.load(limit=limit)
            return await self.load(CVERecord.severity == severity.value, limit=limit)

        async def fetch() -> list[CVEEntry]:
            # NVD has no NONE band to filter on
            band = severity.value if severity not in (None, CVESeverity.NONE) else None
            raws = await self.remote.search(severity=band, limit=limit)
            return normalize_many(raws, cve_from_remote, self.kind)

        def newest(entries: list[CVEEntry]) -> list[CVEEntry]:
            if severity is not None:
                entries = [entry for entry in entries if entry.severity == severity]
            return sorted(entries, key=self.recency, reverse=True)[:limit]

        return self.read_through(read_cache, fetch, force_refresh, view=newest)

    async def get_by_id(self, cve_id: str) -> Result[CVEEntry]:
        """Cached entry, or fetched from NVD and cached. Malformed ids are not found."""
        normalized = normalize_cve_id(cve_id)
        if normalized is None:
            return Failure(NotFoundError(self.kind, cve_id))
        try:
            row = await self.store.get_by_id(normalized)
            if row is not None:
                return Success(cve_from_record(row))
        except StoreError as e:
            return Failure(e)

        async def fetch_one() -> CVEEntry:
            raw = await self.remote.get_by_id(normalized)
            if raw is None:
                raise NotFoundError(self.kind, normalized)
            entry = cve_from_remote(raw)
            if entry is None:
                raise ParseError(f"NVD returned an unusable record for {normalized}")
            saved = await self.save_fresh([entry])
            return saved[0]

        return await self.capture(fetch_one())

    async def search(self, query: str, limit: int = 50) -> Result[list[CVEEntry]]:
        """Match ``query`` against CVE id and description, locally and on NVD."""

        async def local() -> list[CVEEntry]:
            rows = await self.store.search(query, limit=limit)
            return [cve_from_record(row) for row in rows]

        async def remote() -> list[CVEEntry]:
            raws = await self.remote.search(keyword=query, limit=limit)
            return normalize_many(raws, cve_from_remote, self.kind)

        return await self.merge_search(local(), remote())

    async def get_by_product(self, product: str, limit: int = 50) -> Result[list[CVEEntry]]:
        """CVEs affecting ``product``.

        A CPE name (``cpe:2.3:...``) is also looked up on NVD and merged with
        the local matches; any other string is matched locally only.
        """
        is_cpe = product.lower().startswith("cpe:")
        needle = (_cpe_product(product) if is_cpe else product).strip().lower()

        async def local() -> list[CVEEntry]:
            rows = await self.store.list_records(
                cast(CVERecord.affected_products, String).icontains(needle, autoescape=True)
            )
            entries = [cve_from_record(row) for row in rows]
            return [
                entry
                for entry in entries
                if any(needle in name.lower() for name in entry.affected_products)
            ]

        if not is_cpe:
            return await self.capture(local())

        async def remote() -> list[CVEEntry]:
            raws = await self.remote.list_by_product(product, limit=limit)
            return normalize_many(raws, cve_from_remote, self.kind)

        return await self.merge_search(local(), remote())

    async def get_critical_exploited(self) -> Result[list[CVEEntry]]:
        """Cached critical CVEs with a known exploit."""
        return await self.capture(
            self.load(
                CVERecord.severity == CVESeverity.CRITICAL.value,
                CVERecord.exploit_available.is_(True),
            )
        )

    async def prune(self, keep: int | None = None) -> Result[int]:
        """Keep only the ``keep`` most recently published CVEs; returns rows removed."""
        keep = self.retention_size if keep is None else keep
        return await self.capture(self.store.evict_beyond(keep, order_by="published_date"))
