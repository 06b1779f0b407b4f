"""Breach repository backed by Have I Been Pwned."""

import logging
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

from cyberpulse.core.errors import NotFoundError, StoreError
from cyberpulse.core.result import Failure, Result, Success
from cyberpulse.models import BreachRecord
from cyberpulse.normalization import (
    breach_from_record,
    breach_from_remote,
    breach_to_record,
    normalize_many,
    paste_from_remote,
)
from cyberpulse.normalization.common import to_epoch_ms
from cyberpulse.remote.hibp import HibpClient
from cyberpulse.repositories.base import REMOTE_ERRORS, SyncRepository
from cyberpulse.schemas.breach import Breach, Paste, PwnedCheckResult
from cyberpulse.store.stores import BreachStore

logger = logging.getLogger(__name__)


def _newest_first(breaches: list[Breach]) -> list[Breach]:
    return sorted(breaches, key=lambda breach: breach.breach_date, reverse=True)


class BreachRepository(SyncRepository[Breach, BreachRecord]):
    """Known breaches, account checks and breach details."""

    kind = "breach"

    def __init__(self, store: BreachStore, remote: HibpClient, recent_days: int = 30):
        super().__init__(
            store,
            from_record=breach_from_record,
            to_record=breach_to_record,
            recency=lambda breach: breach.breach_date,
        )
        self.remote = remote
        self.recent_days = recent_days

    async def _fetch_all(self) -> list[Breach]:
        raws = await self.remote.list_all()
        return _newest_first(normalize_many(raws, breach_from_remote, self.kind))

    def get_all_breaches(
        self, force_refresh: bool = False
    ) -> AsyncGenerator[Result[list[Breach]], None]:
        """Every known breach, most recent breach date first."""
        return self.read_through(self.load, self._fetch_all, force_refresh)

    def get_recent_breaches(
        self,
        days: int | None = None,
        force_refresh: bool = False,
    ) -> AsyncGenerator[Result[list[Breach]], None]:
        """Breaches whose breach date falls within the last ``days`` days."""
        since = datetime.now(UTC) - timedelta(days=days if days is not None else self.recent_days)

        async def read_cache() -> list[Breach]:
            return await self.load(BreachRecord.breach_date >= to_epoch_ms(since))

        def recent(breaches: list[Breach]) -> list[Breach]:
            return [breach for breach in breaches if breach.breach_date >= since]

        return self.read_through(read_cache, self._fetch_all, force_refresh, view=recent)

    async def search(self, query: str) -> Result[list[Breach]]:
        """Match ``query`` against breach name and domain, locally and remotely."""
        needle = query.strip().lower()

        async def local() -> list[Breach]:
            rows = await self.store.search(query)
            return [breach_from_record(row) for row in rows]

        async def remote() -> list[Breach]:
            breaches = await self._fetch_all()
            return [
                breach
                for breach in breaches
                if needle in breach.id.lower()
                or needle in breach.name.lower()
                or needle in (breach.domain or "").lower()
            ]

        return await self.merge_search(local(), remote())

    async def check_email_pwned(self, email: str) -> Result[PwnedCheckResult]:
        """Look ``email`` up in every known breach and paste.

        A failed paste lookup does not fail the check; ``pastes`` is None then.
        """

        async def check() -> PwnedCheckResult:
            raws = await self.remote.list_by_email(email)
            breaches = normalize_many(raws, breach_from_remote, self.kind)
            pastes: list[Paste] | None
            try:
                paste_raws = await self.remote.list_pastes_by_email(email)
                pastes = normalize_many(paste_raws, paste_from_remote, "paste")
            except REMOTE_ERRORS as e:
                logger.warning("Paste lookup failed: %s", e)
                pastes = None
            return PwnedCheckResult(
                email=email,
                is_pwned=bool(breaches),
                breaches=breaches,
                pastes=pastes,
                checked_at=datetime.now(UTC),
            )

        return await self.capture(check())

    async def get_breach_details(self, name: str) -> Result[Breach]:
        """Fresh breach details, falling back to the cached copy."""
        remote_error = None
        try:
            raw = await self.remote.get_by_name(name)
            breach = breach_from_remote(raw) if raw is not None else None
            if breach is not None:
                saved = await self.save_fresh([breach])
                return Success(saved[0])
        except REMOTE_ERRORS as e:
            logger.warning("Breach lookup for %s failed, using cache: %s", name, e)
            remote_error = e
        except StoreError as e:
            return Failure(e)

        try:
            row = await self.store.get_by_id(name)
        except StoreError as e:
            return Failure(e)
        if row is not None:
            return Success(breach_from_record(row))
        return Failure(remote_error or NotFoundError(self.kind, name))
