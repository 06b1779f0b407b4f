"""Shared FastAPI dependencies and result-to-HTTP helpers."""

import json
from collections.abc import AsyncGenerator
from typing import Any, TypeVar

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import StreamingResponse

from cyberpulse.container import Container
from cyberpulse.core.errors import (
    CyberPulseError,
    NetworkError,
    NotFoundError,
    ParseError,
)
from cyberpulse.core.result import Failure, Result
from cyberpulse.repositories import (
    BreachRepository,
    CVERepository,
    EventRepository,
    NewsRepository,
)
from cyberpulse.services.search_service import OmniSearchService

T = TypeVar("T")


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_news(request: Request) -> NewsRepository:
    return get_container(request).news


def get_breaches(request: Request) -> BreachRepository:
    return get_container(request).breaches


def get_cves(request: Request) -> CVERepository:
    return get_container(request).cves


def get_events(request: Request) -> EventRepository:
    return get_container(request).events


def get_search(request: Request) -> OmniSearchService:
    return get_container(request).search


def status_for(error: CyberPulseError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, (NetworkError, ParseError)):
        return 502
    return 500


def unwrap(result: Result[T]) -> T:
    """Return the success value or raise the matching HTTPException."""
    if isinstance(result, Failure):
        raise HTTPException(status_code=status_for(result.error), detail=str(result.error))
    return result.value


def result_frame(result: Result[Any]) -> dict[str, Any]:
    if isinstance(result, Failure):
        return {
            "status": "error",
            "error": type(result.error).__name__,
            "detail": str(result.error),
        }
    return {"status": "success", "data": jsonable_encoder(result.value)}


def stream_results(results: AsyncGenerator[Result[Any], None]) -> StreamingResponse:
    """Serve a repository read stream as Server-Sent Events, one frame per result."""

    async def event_generator() -> AsyncGenerator[str, None]:
        try:
            async for result in results:
                # SSE format: data: <content>\n\n
                yield f"data: {json.dumps(result_frame(result))}\n\n"
        finally:
            await results.aclose()

    return StreamingResponse(event_generator(), media_type="text/event-stream")
