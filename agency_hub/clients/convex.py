from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from agency_hub.services.exceptions import DownstreamServiceError

logger = logging.getLogger(__name__)


class ConvexClient:
    """Async HTTP client for a Convex deployment's function API."""

    def __init__(
        self,
        base_url: str | None,
        *,
        timeout: float = 10.0,
        use_mock_data: bool = True,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = str(base_url).rstrip("/") if base_url else None
        self._timeout = timeout
        self.use_mock_data = use_mock_data or not self._base_url
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if token:
            self._headers["Authorization"] = f"Convex {token}"
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        if not self.use_mock_data and self._base_url:
            self._client = self._build_client()

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self.use_mock_data or not self._base_url:
            raise RuntimeError("HTTP client requested while running in mock mode")
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def query(self, path: str, args: Dict[str, Any] | None = None) -> Any:
        return await self._call("/api/query", path, args)

    async def mutation(self, path: str, args: Dict[str, Any] | None = None) -> Any:
        return await self._call("/api/mutation", path, args)

    async def _call(self, endpoint: str, path: str, args: Dict[str, Any] | None) -> Any:
        if self.use_mock_data:
            raise RuntimeError("Real HTTP call requested while mock mode is enabled")
        client = await self._ensure_client()
        payload = {"path": path, "args": args or {}, "format": "json"}
        logger.debug("Calling Convex %s %s", endpoint, path)
        try:
            response = await client.post(endpoint, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.exception("Convex returned error %s for %s", exc.response.status_code, path)
            raise DownstreamServiceError(
                "Document store returned an error response",
                status_code=exc.response.status_code,
                cause=exc,
            ) from exc
        except httpx.RequestError as exc:
            logger.exception("Unable to reach Convex: %s", exc)
            raise DownstreamServiceError(
                "Unable to reach document store", status_code=None, cause=exc
            ) from exc

        if body.get("status") != "success":
            message = body.get("errorMessage") or "Convex function failed"
            logger.error("Convex function %s failed: %s", path, message)
            raise DownstreamServiceError(message, status_code=response.status_code)
        return body.get("value")

    async def simulate_latency(self) -> None:
        """Allow services to await for latency even when mocking responses."""

        await asyncio.sleep(0)
