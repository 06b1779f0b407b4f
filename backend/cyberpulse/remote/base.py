"""Base class for the remote API clients."""

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from cyberpulse.config import Settings
from cyberpulse.core.errors import NetworkError, ParseError

logger = logging.getLogger(__name__)


class ApiClient:
    """Thin async JSON client over one base URL.

    Transport failures (timeouts, refused connections) are retried; HTTP
    error statuses are not. Everything that goes wrong surfaces as
    ``NetworkError`` or ``ParseError``.
    """

    name = "api"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        max_connections: int = 10,
        retry_attempts: int = 3,
        retry_wait: wait_base | None = None,
        user_agent: str = "CyberPulse/0.1",
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.retry_attempts = max(retry_attempts, 1)
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=2, max=10)
        self.http_client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            limits=httpx.Limits(max_connections=max_connections),
            headers={"User-Agent": user_agent, **(headers or {})},
            follow_redirects=True,
            transport=transport,
        )

    @staticmethod
    def transport_options(settings: Settings) -> dict[str, Any]:
        """Constructor keyword arguments shared by every client."""
        return {
            "timeout": settings.http_timeout_seconds,
            "max_connections": settings.http_max_connections,
            "retry_attempts": settings.http_retry_attempts,
            "user_agent": settings.user_agent,
        }

    async def get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        allow_not_found: bool = False,
    ) -> Any:
        """GET ``path`` and decode JSON. Returns None on 404 when ``allow_not_found``."""
        query = {key: value for key, value in (params or {}).items() if value is not None}
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.retry_attempts),
                wait=self.retry_wait,
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True,
            ):
                with attempt:
                    response = await self.http_client.get(path, params=query)
        except httpx.TimeoutException as e:
            raise NetworkError(f"{self.name} request to {path} timed out") from e
        except httpx.TransportError as e:
            raise NetworkError(f"{self.name} request to {path} failed: {e}") from e

        if allow_not_found and response.status_code == 404:
            return None
        if response.is_error:
            raise NetworkError(
                f"{self.name} returned HTTP {response.status_code} for {path}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"{self.name} returned invalid JSON for {path}") from e

    def expect_list(self, payload: Any, key: str | None = None) -> list[dict[str, Any]]:
        """Pull a list of objects out of ``payload`` (optionally under ``key``)."""
        value = payload.get(key) if key and isinstance(payload, dict) else payload
        if not isinstance(value, list):
            where = f"'{key}'" if key else "response body"
            raise ParseError(f"{self.name}: expected a list in {where}")
        return [item for item in value if isinstance(item, dict)]

    def expect_dict(self, payload: Any) -> dict[str, Any]:
        if not isinstance(payload, dict):
            raise ParseError(f"{self.name}: expected an object in response body")
        return payload

    async def close(self) -> None:
        await self.http_client.aclose()
