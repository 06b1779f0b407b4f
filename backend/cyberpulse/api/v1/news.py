"""News endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from cyberpulse.api.deps import get_news, stream_results, unwrap
from cyberpulse.repositories import NewsRepository
from cyberpulse.schemas.news import Article, CyberTag, NewsCategory

router = APIRouter()


@router.get("/feed")
async def stream_feed(
    category: NewsCategory | None = None,
    force_refresh: bool = False,
    news: NewsRepository = Depends(get_news),
) -> StreamingResponse:
    """
    Stream the news feed as Server-Sent Events.

    The first frame carries cached articles (skipped on force_refresh or an
    empty cache); the next one carries fresh articles and supersedes it.
    """
    return stream_results(news.get_feed(category=category, force_refresh=force_refresh))


@router.get("/tags")
async def stream_by_tags(
    tags: list[CyberTag] = Query(...),
    news: NewsRepository = Depends(get_news),
) -> StreamingResponse:
    """Stream articles carrying any of the given tags (SSE)."""
    return stream_results(news.get_by_tags(tags))


@router.get("/search", response_model=list[Article])
async def search_news(
    q: str = Query(..., min_length=1),
    news: NewsRepository = Depends(get_news),
) -> list[Article]:
    return unwrap(await news.search(q))


@router.get("/saved", response_model=list[Article])
async def list_saved(news: NewsRepository = Depends(get_news)) -> list[Article]:
    return unwrap(await news.get_saved())


@router.get("/count")
async def cached_count(news: NewsRepository = Depends(get_news)) -> dict[str, int]:
    return {"count": unwrap(await news.cached_count())}


@router.post("/refresh")
async def refresh(
    limit: int = Query(default=50, ge=1, le=100),
    news: NewsRepository = Depends(get_news),
) -> dict[str, int]:
    """Fetch the latest articles into the cache and apply retention."""
    return {"cached": unwrap(await news.refresh_and_cache(limit))}


@router.get("/{article_id}", response_model=Article)
async def get_article(article_id: str, news: NewsRepository = Depends(get_news)) -> Article:
    return unwrap(await news.get_by_id(article_id))


@router.post("/{article_id}/save")
async def toggle_save(
    article_id: str, news: NewsRepository = Depends(get_news)
) -> dict[str, str | bool]:
    return {"id": article_id, "is_saved": unwrap(await news.toggle_save(article_id))}


@router.post("/{article_id}/read")
async def mark_as_read(
    article_id: str, news: NewsRepository = Depends(get_news)
) -> dict[str, str | bool]:
    return {"id": article_id, "is_read": unwrap(await news.mark_as_read(article_id))}
