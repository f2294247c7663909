import aiohttp
import asyncio
import logging
from typing import Optional
from urllib.parse import quote

from mangashelf.core.config import (
    MAX_RETRY_AFTER,
    PROXY_BASE,
    PROXY_RETRIES,
    REQUEST_DELAY,
    REQUEST_TIMEOUT,
    RETRY_BACKOFF,
)

logger = logging.getLogger(__name__)


class ProxyError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


def proxied_url(url: str, proxy_base: str = PROXY_BASE) -> str:
    if not proxy_base:
        return url
    return f"{proxy_base}{quote(url, safe='')}"


class ProxyClient:
    def __init__(
        self,
        proxy_base: str = PROXY_BASE,
        timeout: float = REQUEST_TIMEOUT,
        retries: int = PROXY_RETRIES,
        request_delay: float = REQUEST_DELAY,
        backoff: float = RETRY_BACKOFF,
    ):
        self.proxy_base = proxy_base
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.retries = max(0, retries)
        self.request_delay = request_delay
        self.backoff = backoff
        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time = 0
        self._lock = asyncio.Lock()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def _rate_limit(self):
        async with self._lock:
            now = asyncio.get_running_loop().time()
            elapsed = now - self._last_request_time
            if elapsed < self.request_delay:
                await asyncio.sleep(self.request_delay - elapsed)
            self._last_request_time = asyncio.get_running_loop().time()

    async def fetch_text(self, url: str) -> str:
        target = proxied_url(url, self.proxy_base)
        last_error: Optional[ProxyError] = None

        for attempt in range(self.retries + 1):
            if attempt:
                await asyncio.sleep(self.backoff * attempt)
            await self._rate_limit()
            session = await self._get_session()
            try:
                async with session.get(target) as response:
                    if response.status == 429:
                        retry_after = _retry_after(response.headers.get("Retry-After"))
                        last_error = ProxyError(f"rate limited fetching {url}", 429)
                        if attempt < self.retries:
                            logger.warning("proxy rate limited, waiting %ss", retry_after)
                            await asyncio.sleep(retry_after)
                        continue
                    if response.status >= 500:
                        last_error = ProxyError(f"proxy returned {response.status} for {url}", response.status)
                        logger.warning("%s (attempt %d)", last_error, attempt + 1)
                        continue
                    if response.status >= 400:
                        raise ProxyError(f"proxy returned {response.status} for {url}", response.status)
                    return await response.text(errors="replace")
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = ProxyError(f"request for {url} failed: {e!r}")
                logger.warning("%s (attempt %d)", last_error, attempt + 1)

        raise last_error or ProxyError(f"request for {url} failed")

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def _retry_after(value: Optional[str]) -> float:
    try:
        seconds = float(value) if value is not None else 1.0
    except ValueError:
        seconds = 1.0
    return min(max(seconds, 0.0), MAX_RETRY_AFTER)
