"""Sync repositories - reconcile the record store with the remote sources."""

from cyberpulse.repositories.base import SyncRepository
from cyberpulse.repositories.breach_repository import BreachRepository
from cyberpulse.repositories.cve_repository import CVERepository
from cyberpulse.repositories.event_repository import EventRepository
from cyberpulse.repositories.news_repository import NewsRepository

__all__ = [
    "SyncRepository",
    "NewsRepository",
    "BreachRepository",
    "CVERepository",
    "EventRepository",
]
