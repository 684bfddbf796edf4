"""Time-boxed cache in front of outbound JSON lookups.

Entries are keyed by the logical request URL. When the direct request fails
the same URL is retried through a proxy, and whatever answered is stored under
the original key, so callers never see which path was used.
"""
import asyncio
import logging
import time
import typing as tp
from dataclasses import dataclass
from urllib.parse import quote

import aiohttp

logger = logging.getLogger(__name__)

# Characters JavaScript's encodeURIComponent leaves alone, besides quote()'s own.
_URI_COMPONENT_SAFE = "!~*'()"


def quote_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


class FetchError(Exception):
    def __init__(self, url: str, message: str = "") -> None:
        super().__init__(message or f"Could not fetch {url.split('?')[0]}")
        self.url = url


@dataclass
class CacheEntry:
    time: float
    data: tp.Any


class FetchCache:
    """Process-wide URL -> payload map with a TTL and a proxy fallback.

    There is no locking and no coalescing of in-flight requests: two handlers
    asking for the same cold URL both go upstream and the last one to finish
    wins the slot.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        proxy_base: str = "",
        ttl: float = 600.0,
        primary_timeout: float = 5.0,
        fallback_timeout: float = 8.0,
        clock: tp.Callable[[], float] = time.monotonic,
    ) -> None:
        self.session = session
        self.proxy_base = proxy_base
        self.ttl = ttl
        self.primary_timeout = primary_timeout
        self.fallback_timeout = fallback_timeout
        self.clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: object) -> bool:
        entry = self._entries.get(url)  # type: ignore[arg-type]
        return entry is not None and self._is_fresh(entry, self.clock())

    def get_entry(self, url: str) -> tp.Optional[CacheEntry]:
        return self._entries.get(url)

    def clear(self) -> None:
        self._entries.clear()

    def proxy_url(self, url: str) -> str:
        return f"{self.proxy_base}{quote_component(url)}"

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.time < self.ttl

    async def fetch(self, url: str) -> tp.Any:
        now = self.clock()

        entry = self._entries.get(url)
        if entry is not None:
            if self._is_fresh(entry, now):
                logger.debug(f"[fetch] cache hit: {url.split('?')[0]}")
                return entry.data
            del self._entries[url]

        try:
            data = await self._request(url, self.primary_timeout)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            if not self.proxy_base:
                logger.error(f"[fetch] request failed and no proxy is configured: {e!r}")
                raise FetchError(url) from e
            logger.warning(f"[fetch] direct request failed ({e!r}), retrying through proxy")
            try:
                data = await self._request(self.proxy_url(url), self.fallback_timeout)
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as proxy_error:
                logger.error(f"[fetch] proxy request failed as well: {proxy_error!r}")
                raise FetchError(url) from proxy_error

        self._entries[url] = CacheEntry(time=now, data=data)
        return data

    async def _request(self, url: str, timeout: float) -> tp.Any:
        client_timeout = aiohttp.ClientTimeout(total=timeout)
        async with self.session.get(url, timeout=client_timeout) as resp:
            resp.raise_for_status()
            return await resp.json(content_type=None)
