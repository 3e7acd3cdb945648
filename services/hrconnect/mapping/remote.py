"""Mapping source backed by an HTTP endpoint (e.g. a published sheet script)."""

from typing import Any

import httpx

from hrconnect.logging_config import get_logger
from hrconnect.mapping.protocol import MappingSourceError, ensure_rows

logger = get_logger(__name__)


class HttpMappingSource:
    def __init__(
        self,
        url: str,
        timeout_seconds: float = 10.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url:
            raise MappingSourceError("HTTP mapping source requires a URL")
        self._url = url
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers=headers or {},
            follow_redirects=True,
            transport=transport,
        )

    async def fetch(self) -> list[dict[str, Any]]:
        try:
            response = await self._client.get(self._url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise MappingSourceError(
                f"Mapping endpoint returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise MappingSourceError(f"Mapping endpoint unreachable: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise MappingSourceError("Mapping endpoint did not return JSON") from e

        rows = ensure_rows(payload, self._url)
        logger.debug("Mapping endpoint fetched", url=self._url, rows=len(rows))
        return rows

    async def close(self) -> None:
        await self._client.aclose()
