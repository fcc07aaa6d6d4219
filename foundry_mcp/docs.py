"""
Cached access to the official Foundry documentation.

The full LLM-oriented docs are large, so one copy is kept in memory and
refreshed lazily once it is older than the configured TTL. A failed refresh
keeps serving the previous copy.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

logger = logging.getLogger(__name__)


class DocsFetchError(Exception):
    """Raised when the docs cannot be fetched and nothing is cached."""


@dataclass(frozen=True, slots=True)
class CachedDocs:
    content: str
    timestamp: float


class DocsCache:
    def __init__(
        self,
        url: str,
        *,
        ttl_seconds: float = 3600.0,
        timeout: float = 10.0,
        async_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.url = url
        self.ttl_seconds = ttl_seconds
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None
        self._clock = clock
        self._entry: Optional[CachedDocs] = None

    @property
    def entry(self) -> Optional[CachedDocs]:
        return self._entry

    def is_fresh(self) -> bool:
        if self._entry is None:
            return False
        return (self._clock() - self._entry.timestamp) < self.ttl_seconds

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _download(self) -> str:
        client = await self._get_client()
        try:
            response = await client.get(self.url)
        except httpx.RequestError as exc:
            raise DocsFetchError(f"Failed to fetch docs: {exc}") from exc
        if response.status_code >= 400:
            raise DocsFetchError(f"Failed to fetch docs: {response.status_code}")
        return response.text

    async def get(self) -> str:
        """
        Return the docs text, downloading it when missing or stale.

        Raises:
            DocsFetchError: the download failed and no earlier copy exists.
        """
        if self.is_fresh():
            return self._entry.content  # type: ignore[union-attr]

        try:
            content = await self._download()
        except DocsFetchError:
            if self._entry is not None:
                logger.warning("Docs refresh failed; serving cached copy url=%s", self.url)
                return self._entry.content
            raise

        self._entry = CachedDocs(content=content, timestamp=self._clock())
        return content
