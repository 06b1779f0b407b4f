"""Shared cache-coordination protocols for the sync repositories."""

import asyncio
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable, Sequence
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy.sql import ColumnElement
from sqlmodel import SQLModel

from cyberpulse.core.errors import (
    CyberPulseError,
    NetworkError,
    NotFoundError,
    ParseError,
    StoreError,
)
from cyberpulse.core.result import Failure, Result, Success
from cyberpulse.store.base import RecordStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
R = TypeVar("R", bound=SQLModel)
T = TypeVar("T")

# Errors a remote fetch can end in; the read protocol falls back to the store on these.
REMOTE_ERRORS = (NetworkError, ParseError)


class SyncRepository(Generic[M, R]):
    """Reconciles one record store with one remote source.

    Subclasses set ``kind``, the model/record mappers and ``user_flags`` (the
    locally owned booleans a refresh must never overwrite), and build their
    public operations from the protocols below.
    """

    kind: str = "record"
    user_flags: tuple[str, ...] = ()

    def __init__(
        self,
        store: RecordStore[R],
        from_record: Callable[[R], M],
        to_record: Callable[[M], R],
        recency: Callable[[M], datetime],
        retention_size: int = 50,
    ):
        self.store = store
        self.from_record = from_record
        self.to_record = to_record
        self.recency = recency
        self.retention_size = retention_size

    # Read protocol

    async def read_through(
        self,
        read_cache: Callable[[], Awaitable[list[M]]],
        fetch: Callable[[], Awaitable[list[M]]],
        force_refresh: bool = False,
        view: Callable[[list[M]], list[M]] | None = None,
    ) -> AsyncGenerator[Result[list[M]], None]:
        """Yield cached data (unless ``force_refresh``), then fresh data.

        The cache read completes and is yielded before the fetch starts. A
        failed fetch falls back to the store and only yields a failure when
        the store has nothing. Everything fetched is cached; ``view`` narrows
        what the fresh emission shows. Closing the generator or cancelling
        its consumer cancels the in-flight fetch or upsert.
        """
        try:
            if not force_refresh:
                cached = await read_cache()
                if cached:
                    logger.debug("Serving %d cached %s records", len(cached), self.kind)
                    yield Success(cached)

            try:
                fetched = await fetch()
            except REMOTE_ERRORS as e:
                logger.warning("Fetching %s records failed: %s", self.kind, e)
                cached = await read_cache()
                if cached:
                    yield Success(cached)
                else:
                    yield Failure(e)
                return

            fresh = await self.save_fresh(fetched)
            yield Success(view(fresh) if view is not None else fresh)
        except StoreError as e:
            logger.error("Record store failure while reading %s: %s", self.kind, e)
            yield Failure(e)

    async def save_fresh(self, models: Sequence[M]) -> list[M]:
        """Upsert fetched models, keeping the user flags of rows already stored."""
        records = [self.to_record(model) for model in models]
        if self.user_flags and records:
            existing = await self.store.get_many([record.id for record in records])
            for record in records:
                current = existing.get(record.id)
                if current is None:
                    continue
                for flag in self.user_flags:
                    setattr(record, flag, getattr(current, flag))
        await self.store.upsert_many(records)
        logger.info("Cached %d fresh %s records", len(records), self.kind)
        return [self.from_record(record) for record in records]

    async def load(self, *where: ColumnElement[bool], **options: Any) -> list[M]:
        rows = await self.store.list_records(*where, **options)
        return [self.from_record(row) for row in rows]

    # Search protocol

    async def merge_search(
        self,
        local: Awaitable[list[M]],
        remote: Awaitable[list[M]],
    ) -> Result[list[M]]:
        """Run local and remote search together; remote wins on duplicate ids.

        A failing remote side counts as no results. The merge is a failure
        only when both sides failed.
        """
        local_result, remote_result = await asyncio.gather(
            local, remote, return_exceptions=True
        )
        for outcome in (local_result, remote_result):
            if isinstance(outcome, BaseException) and not isinstance(outcome, CyberPulseError):
                raise outcome

        if isinstance(local_result, CyberPulseError) and isinstance(remote_result, CyberPulseError):
            return Failure(remote_result)
        if isinstance(remote_result, CyberPulseError):
            logger.warning("Remote %s search failed: %s", self.kind, remote_result)
            remote_result = []
        if isinstance(local_result, CyberPulseError):
            logger.warning("Local %s search failed: %s", self.kind, local_result)
            local_result = []

        local_by_id = {item.id: item for item in local_result}
        merged: list[M] = []
        seen: set[str] = set()
        for item in [*remote_result, *local_result]:
            if item.id in seen:
                continue
            seen.add(item.id)
            merged.append(self._keep_user_flags(item, local_by_id.get(item.id)))
        merged.sort(key=self.recency, reverse=True)
        return Success(merged)

    def _keep_user_flags(self, item: M, local: M | None) -> M:
        if local is None or local is item or not self.user_flags:
            return item
        return item.model_copy(update={flag: getattr(local, flag) for flag in self.user_flags})

    # Single-shot helpers

    async def capture(self, operation: Awaitable[T]) -> Result[T]:
        """Await ``operation`` and turn sync-layer errors into a Failure."""
        try:
            return Success(await operation)
        except CyberPulseError as e:
            logger.warning("%s operation failed: %s", self.kind, e)
            return Failure(e)

    async def cached_count(self) -> Result[int]:
        """Number of locally cached records."""
        return await self.capture(self.store.count())

    # Toggle protocol

    async def toggle_flag(self, record_id: str, flag: str) -> Result[bool]:
        try:
            row = await self.store.get_by_id(record_id)
            if row is None:
                return Failure(NotFoundError(self.kind, record_id))
            value = not getattr(row, flag)
            await self.store.set_field(record_id, flag, value)
        except StoreError as e:
            return Failure(e)
        logger.debug("Set %s.%s=%s for %s", self.kind, flag, value, record_id)
        return Success(value)

    async def set_flag(self, record_id: str, flag: str, value: bool) -> Result[bool]:
        try:
            if not await self.store.set_field(record_id, flag, value):
                return Failure(NotFoundError(self.kind, record_id))
        except StoreError as e:
            return Failure(e)
        return Success(value)

    # Retention

    async def evict_stale(self, *evictable: ColumnElement[bool]) -> int:
        """Drop ``evictable`` rows beyond the ``retention_size`` newest by cache time."""
        return await self.store.evict_beyond(self.retention_size, *evictable)
