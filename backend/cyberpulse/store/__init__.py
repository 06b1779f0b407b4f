"""Local record store package."""

from cyberpulse.store.base import RecordStore
from cyberpulse.store.stores import ArticleStore, BreachStore, CVEStore, EventStore

__all__ = ["RecordStore", "ArticleStore", "BreachStore", "CVEStore", "EventStore"]
