"""NIST NVD CVE API 2.0 client."""

from typing import Any

from cyberpulse.config import Settings
from cyberpulse.remote.base import ApiClient


class NvdClient(ApiClient):
    """All NVD queries go through the single ``cves/2.0`` endpoint."""

    name = "nvd"
    ENDPOINT = "cves/2.0"

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "NvdClient":
        headers = {"apiKey": settings.nvd_api_key} if settings.nvd_api_key else None
        return cls(
            settings.nvd_base_url,
            headers=headers,
            **{**cls.transport_options(settings), **kwargs},
        )

    async def search(
        self,
        keyword: str | None = None,
        severity: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        payload = await self.get_json(
            self.ENDPOINT,
            {
                "keywordSearch": keyword,
                "cvssV3Severity": severity,
                "resultsPerPage": limit,
                "startIndex": offset,
            },
        )
        return self.expect_list(payload, "vulnerabilities")

    async def get_by_id(self, cve_id: str) -> dict[str, Any] | None:
        payload = await self.get_json(self.ENDPOINT, {"cveId": cve_id}, allow_not_found=True)
        if payload is None:
            return None
        vulnerabilities = self.expect_list(payload, "vulnerabilities")
        return vulnerabilities[0] if vulnerabilities else None

    async def list_by_product(self, cpe_name: str, limit: int = 50) -> list[dict[str, Any]]:
        payload = await self.get_json(
            self.ENDPOINT, {"cpeName": cpe_name, "resultsPerPage": limit}
        )
        return self.expect_list(payload, "vulnerabilities")
