"""Have I Been Pwned v3 client."""

from typing import Any
from urllib.parse import quote

from cyberpulse.config import Settings
from cyberpulse.remote.base import ApiClient


class HibpClient(ApiClient):
    """Breach and paste lookups. Account lookups answer 404 for clean accounts."""

    name = "hibp"

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "HibpClient":
        headers = {"hibp-api-key": settings.hibp_api_key} if settings.hibp_api_key else None
        return cls(
            settings.hibp_base_url,
            headers=headers,
            **{**cls.transport_options(settings), **kwargs},
        )

    async def list_by_email(self, email: str) -> list[dict[str, Any]]:
        payload = await self.get_json(
            f"breachedaccount/{quote(email, safe='')}",
            {"truncateResponse": "false"},
            allow_not_found=True,
        )
        return [] if payload is None else self.expect_list(payload)

    async def list_all(self) -> list[dict[str, Any]]:
        payload = await self.get_json("breaches")
        return self.expect_list(payload)

    async def get_by_name(self, name: str) -> dict[str, Any] | None:
        payload = await self.get_json(f"breach/{quote(name, safe='')}", allow_not_found=True)
        return None if payload is None else self.expect_dict(payload)

    async def list_pastes_by_email(self, email: str) -> list[dict[str, Any]]:
        payload = await self.get_json(
            f"pasteaccount/{quote(email, safe='')}", allow_not_found=True
        )
        return [] if payload is None else self.expect_list(payload)
