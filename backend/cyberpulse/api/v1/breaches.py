"""Data breach endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from cyberpulse.api.deps import get_breaches, stream_results, unwrap
from cyberpulse.repositories import BreachRepository
from cyberpulse.schemas.breach import Breach, PwnedCheckResult

router = APIRouter()


@router.get("")
async def stream_breaches(
    force_refresh: bool = False,
    breaches: BreachRepository = Depends(get_breaches),
) -> StreamingResponse:
    """Stream every known breach (SSE), newest breach date first."""
    return stream_results(breaches.get_all_breaches(force_refresh=force_refresh))


@router.get("/recent")
async def stream_recent(
    days: int | None = Query(default=None, ge=1, le=3650),
    force_refresh: bool = False,
    breaches: BreachRepository = Depends(get_breaches),
) -> StreamingResponse:
    return stream_results(breaches.get_recent_breaches(days=days, force_refresh=force_refresh))


@router.get("/search", response_model=list[Breach])
async def search_breaches(
    q: str = Query(..., min_length=1),
    breaches: BreachRepository = Depends(get_breaches),
) -> list[Breach]:
    return unwrap(await breaches.search(q))


@router.get("/check", response_model=PwnedCheckResult)
async def check_email(
    email: str = Query(..., min_length=3),
    breaches: BreachRepository = Depends(get_breaches),
) -> PwnedCheckResult:
    """Has this email address appeared in a known breach or paste?"""
    return unwrap(await breaches.check_email_pwned(email))


@router.get("/count")
async def cached_count(breaches: BreachRepository = Depends(get_breaches)) -> dict[str, int]:
    return {"count": unwrap(await breaches.cached_count())}


@router.get("/{name}", response_model=Breach)
async def get_breach(name: str, breaches: BreachRepository = Depends(get_breaches)) -> Breach:
    return unwrap(await breaches.get_breach_details(name))
