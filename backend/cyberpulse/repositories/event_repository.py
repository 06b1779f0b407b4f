"""Cyber event repository backed by CTFtime."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

from cyberpulse.core.result import Result
from cyberpulse.models import EventRecord, now_ms
from cyberpulse.normalization import (
    event_from_ctftime,
    event_from_record,
    event_to_record,
    normalize_many,
)
from cyberpulse.normalization.common import to_epoch_ms
from cyberpulse.remote.ctftime import CtfTimeClient
from cyberpulse.repositories.base import SyncRepository
from cyberpulse.schemas.event import CyberEvent, EventType
from cyberpulse.store.stores import EventStore


class EventRepository(SyncRepository[CyberEvent, EventRecord]):
    """Upcoming CTFs and other events, with local reminder/registration state."""

    kind = "event"
    user_flags = ("is_registered", "has_reminder")

    def __init__(
        self,
        store: EventStore,
        remote: CtfTimeClient,
        horizon_days: int = 90,
        page_size: int = 100,
    ):
        super().__init__(
            store,
            from_record=event_from_record,
            to_record=event_to_record,
            recency=lambda event: event.start_date,
        )
        self.remote = remote
        self.horizon_days = horizon_days
        self.page_size = page_size

    async def _fetch_upcoming(self) -> list[CyberEvent]:
        now = datetime.now(UTC)
        raws = await self.remote.list_events(
            limit=self.page_size,
            start=int(now.timestamp()),
            finish=int((now + timedelta(days=self.horizon_days)).timestamp()),
        )
        return normalize_many(raws, event_from_ctftime, self.kind)

    def _stream_upcoming(
        self,
        event_type: EventType | None,
        force_refresh: bool,
    ) -> AsyncGenerator[Result[list[CyberEvent]], None]:
        async def read_cache() -> list[CyberEvent]:
            where = [EventRecord.start_date > now_ms()]
            if event_type is not None:
                where.append(EventRecord.type == event_type.value)
            return await self.load(*where, descending=False)

        def soonest(events: list[CyberEvent]) -> list[CyberEvent]:
            now = datetime.now(UTC)
            upcoming = [
                event
                for event in events
                if event.start_date > now and (event_type is None or event.type == event_type)
            ]
            return sorted(upcoming, key=self.recency)

        return self.read_through(read_cache, self._fetch_upcoming, force_refresh, view=soonest)

    def get_upcoming_events(
        self, force_refresh: bool = False
    ) -> AsyncGenerator[Result[list[CyberEvent]], None]:
        """Events that have not started yet, soonest first."""
        return self._stream_upcoming(None, force_refresh)

    def get_events_by_type(
        self, event_type: EventType, force_refresh: bool = False
    ) -> AsyncGenerator[Result[list[CyberEvent]], None]:
        return self._stream_upcoming(event_type, force_refresh)

    async def get_events_for_month(self, year: int, month: int) -> Result[list[CyberEvent]]:
        """Cached events starting in the given calendar month (UTC)."""
        start = datetime(year, month, 1, tzinfo=UTC)
        end = datetime(year + 1, 1, 1, tzinfo=UTC) if month == 12 else datetime(
            year, month + 1, 1, tzinfo=UTC
        )
        return await self.capture(
            self.load(
                EventRecord.start_date >= to_epoch_ms(start),
                EventRecord.start_date < to_epoch_ms(end),
                descending=False,
            )
        )

    async def toggle_reminder(self, event_id: str) -> Result[bool]:
        return await self.toggle_flag(event_id, "has_reminder")

    async def toggle_registered(self, event_id: str) -> Result[bool]:
        return await self.toggle_flag(event_id, "is_registered")

    async def get_events_with_reminders(self) -> Result[list[CyberEvent]]:
        return await self.capture(
            self.load(EventRecord.has_reminder.is_(True), descending=False)
        )

    async def delete_past_events(self) -> Result[int]:
        """Remove events that started before now; returns rows removed."""
        return await self.capture(self.store.delete_where(EventRecord.start_date < now_ms()))
