"""API v1 main router - aggregates all endpoint routers."""

from fastapi import APIRouter

from cyberpulse.api.v1 import breaches, cves, events, news, search

api_router = APIRouter()

api_router.include_router(news.router, prefix="/news", tags=["news"])
api_router.include_router(breaches.router, prefix="/breaches", tags=["breaches"])
api_router.include_router(cves.router, prefix="/cves", tags=["cves"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(search.router, prefix="/search", tags=["search"])
