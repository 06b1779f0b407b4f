"""Record stores, one per entity kind."""

from cyberpulse.models import ArticleRecord, BreachRecord, CVERecord, EventRecord
from cyberpulse.store.base import RecordStore


class ArticleStore(RecordStore[ArticleRecord]):
    model = ArticleRecord
    kind = "article"
    search_fields = ("title", "summary")
    recency_field = "published_at"


class BreachStore(RecordStore[BreachRecord]):
    model = BreachRecord
    kind = "breach"
    search_fields = ("name", "domain")
    recency_field = "breach_date"


class CVEStore(RecordStore[CVERecord]):
    model = CVERecord
    kind = "cve"
    search_fields = ("id", "description")
    recency_field = "published_date"


class EventStore(RecordStore[EventRecord]):
    model = EventRecord
    kind = "event"
    search_fields = ("name", "organizer")
    recency_field = "start_date"
