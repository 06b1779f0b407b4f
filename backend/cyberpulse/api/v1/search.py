"""Omni-search endpoint."""

from fastapi import APIRouter, Depends

from cyberpulse.api.deps import get_search
from cyberpulse.schemas.search import OmniSearchResult
from cyberpulse.services.search_service import OmniSearchService

router = APIRouter()


@router.get("", response_model=OmniSearchResult)
async def omni_search(
    q: str = "",
    search: OmniSearchService = Depends(get_search),
) -> OmniSearchResult:
    """
    Search news, CVEs, GitHub, Reddit and the glossary at once.

    Sources that fail simply contribute no results. A blank query returns
    an empty bundle.
    """
    return await search.omni_search(q)
