"""Generic async record store over one SQLModel table."""

import logging
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import ColumnElement
from sqlmodel import SQLModel

from cyberpulse.core.errors import StoreError
from cyberpulse.db.database import Database

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=SQLModel)


class RecordStore(Generic[R]):
    """Durable, queryable store for one entity kind.

    Upserts replace the whole row (last write wins). Every SQLAlchemy
    failure surfaces as ``StoreError``.
    """

    model: type[R]
    kind: str = "record"
    # Columns matched case-insensitively by search()
    search_fields: tuple[str, ...] = ()
    # Default sort key for list_records() and search()
    recency_field: str = "cached_at"

    def __init__(self, database: Database):
        self.database = database

    def column(self, name: str) -> Any:
        if name not in self.model.model_fields:
            raise ValueError(f"{self.model.__name__} has no field '{name}'")
        return getattr(self.model, name)

    async def upsert(self, record: R) -> None:
        await self.upsert_many([record])

    async def upsert_many(self, records: Sequence[R]) -> None:
        if not records:
            return
        try:
            async with self.database.session() as session:
                for record in records:
                    await session.merge(record)
                await session.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to upsert {len(records)} {self.kind} rows: {e}") from e
        logger.debug("Upserted %d %s rows", len(records), self.kind)

    async def get_by_id(self, record_id: str) -> R | None:
        try:
            async with self.database.session() as session:
                return await session.get(self.model, record_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load {self.kind} '{record_id}': {e}") from e

    async def get_many(self, ids: Sequence[str]) -> dict[str, R]:
        """Load the rows for ``ids`` that exist, keyed by id."""
        if not ids:
            return {}
        rows = await self._scalars(select(self.model).where(self.model.id.in_(list(ids))))
        return {row.id: row for row in rows}

    async def list_records(
        self,
        *where: ColumnElement[bool],
        order_by: str | None = None,
        descending: bool = True,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[R]:
        order = self.column(order_by or self.recency_field)
        query = (
            select(self.model)
            .where(*where)
            .order_by(order.desc() if descending else order.asc())
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        return await self._scalars(query)

    async def search(
        self,
        text: str,
        *where: ColumnElement[bool],
        limit: int | None = None,
    ) -> list[R]:
        """Case-insensitive substring match over ``search_fields``."""
        matches = or_(
            *[self.column(name).icontains(text, autoescape=True) for name in self.search_fields]
        )
        return await self.list_records(matches, *where, limit=limit)

    async def count(self, *where: ColumnElement[bool]) -> int:
        query = select(func.count()).select_from(self.model).where(*where)
        try:
            async with self.database.session() as session:
                result = await session.execute(query)
                return int(result.scalar_one())
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to count {self.kind} rows: {e}") from e

    async def delete_where(self, *where: ColumnElement[bool]) -> int:
        """Delete matching rows and return how many were removed."""
        try:
            async with self.database.session() as session:
                result = await session.execute(delete(self.model).where(*where))
                await session.commit()
                return result.rowcount or 0
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to delete {self.kind} rows: {e}") from e

    async def delete_all(self) -> int:
        return await self.delete_where()

    async def set_field(self, record_id: str, field: str, value: Any) -> bool:
        """Update a single column without rewriting the row."""
        self.column(field)
        try:
            async with self.database.session() as session:
                result = await session.execute(
                    update(self.model).where(self.model.id == record_id).values({field: value})
                )
                await session.commit()
                return bool(result.rowcount)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update {self.kind} '{record_id}': {e}") from e

    async def evict_beyond(
        self,
        keep: int,
        *where: ColumnElement[bool],
        order_by: str = "cached_at",
    ) -> int:
        """Delete rows matching ``where`` outside the ``keep`` newest by ``order_by``.

        Rows not matching ``where`` are neither counted nor deleted.
        """
        order = self.column(order_by)
        keep_ids = (
            select(self.model.id)
            .where(*where)
            .order_by(order.desc(), self.column(self.recency_field).desc())
            .limit(max(keep, 0))
        )
        removed = await self.delete_where(*where, self.model.id.not_in(keep_ids))
        if removed:
            logger.info("Evicted %d %s rows beyond the newest %d", removed, self.kind, keep)
        return removed

    async def _scalars(self, query: Any) -> list[R]:
        try:
            async with self.database.session() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to query {self.kind} rows: {e}") from e
