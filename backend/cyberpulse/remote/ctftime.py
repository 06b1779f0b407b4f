"""CTFtime events client."""

from typing import Any

from cyberpulse.config import Settings
from cyberpulse.remote.base import ApiClient


class CtfTimeClient(ApiClient):
    name = "ctftime"

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "CtfTimeClient":
        return cls(settings.ctftime_base_url, **{**cls.transport_options(settings), **kwargs})

    async def list_events(
        self,
        limit: int = 100,
        start: int | None = None,
        finish: int | None = None,
    ) -> list[dict[str, Any]]:
        """List events; ``start``/``finish`` are unix timestamps in seconds."""
        payload = await self.get_json("events/", {"limit": limit, "start": start, "finish": finish})
        return self.expect_list(payload)
