"""CVE endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from cyberpulse.api.deps import get_cves, stream_results, unwrap
from cyberpulse.repositories import CVERepository
from cyberpulse.schemas.cve import CVEEntry, CVESeverity

router = APIRouter()


@router.get("")
async def stream_recent(
    severity: CVESeverity | None = None,
    limit: int = Query(default=50, ge=1, le=2000),
    force_refresh: bool = False,
    cves: CVERepository = Depends(get_cves),
) -> StreamingResponse:
    """Stream the most recent CVEs (SSE), optionally for one severity band."""
    return stream_results(
        cves.get_recent_cves(severity=severity, limit=limit, force_refresh=force_refresh)
    )


@router.get("/search", response_model=list[CVEEntry])
async def search_cves(
    q: str = Query(..., min_length=1),
    cves: CVERepository = Depends(get_cves),
) -> list[CVEEntry]:
    return unwrap(await cves.search(q))


@router.get("/product", response_model=list[CVEEntry])
async def by_product(
    name: str = Query(..., min_length=1, description="Product name or CPE 2.3 name"),
    cves: CVERepository = Depends(get_cves),
) -> list[CVEEntry]:
    return unwrap(await cves.get_by_product(name))


@router.get("/critical-exploited", response_model=list[CVEEntry])
async def critical_exploited(cves: CVERepository = Depends(get_cves)) -> list[CVEEntry]:
    return unwrap(await cves.get_critical_exploited())


@router.get("/count")
async def cached_count(cves: CVERepository = Depends(get_cves)) -> dict[str, int]:
    return {"count": unwrap(await cves.cached_count())}


@router.post("/prune")
async def prune(
    keep: int | None = Query(default=None, ge=0),
    cves: CVERepository = Depends(get_cves),
) -> dict[str, int]:
    return {"removed": unwrap(await cves.prune(keep))}


@router.get("/{cve_id}", response_model=CVEEntry)
async def get_cve(cve_id: str, cves: CVERepository = Depends(get_cves)) -> CVEEntry:
    return unwrap(await cves.get_by_id(cve_id))
