import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

import aiohttp
import httpx

from config import BenchmarkConfig

logger = logging.getLogger(__name__)


class ClientStrategy(Enum):
    POOLED = "pooled"    # keep-alive session over a bounded connection pool
    DEFAULT = "default"  # one-shot client, fresh connection per request


class HttpClient(ABC):
    def __init__(self, request_timeout_s: Optional[float] = None):
        self.request_timeout_s = request_timeout_s

    async def open(self):
        pass

    async def close(self):
        pass

    @abstractmethod
    async def get(self, url: str) -> int:
        """Issue one GET, read the body and return the status code.

        Any non-2xx status is returned as-is; only transport errors raise.
        """


class PooledClient(HttpClient):
    def __init__(self, pool_capacity: int, request_timeout_s: Optional[float] = None):
        super().__init__(request_timeout_s)
        self.pool_capacity = pool_capacity
        self._session: Optional[aiohttp.ClientSession] = None

    async def open(self):
        if self._session is not None:
            return
        connector = aiohttp.TCPConnector(limit=self.pool_capacity, force_close=False)
        # total=None disables aiohttp's built-in 5 minute ceiling
        timeout = aiohttp.ClientTimeout(total=self.request_timeout_s)
        self._session = aiohttp.ClientSession(connector=connector, timeout=timeout)
        logger.debug(f"Pooled client opened with capacity {self.pool_capacity}")

    async def close(self):
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.debug("Pooled client closed")

    async def get(self, url: str) -> int:
        if self._session is None:
            raise RuntimeError("PooledClient.get() called before open()")
        async with self._session.get(url) as resp:
            # Draining the body hands the connection back to the pool
            await resp.read()
            return resp.status


class DefaultClient(HttpClient):
    async def get(self, url: str) -> int:
        async with httpx.AsyncClient(timeout=self.request_timeout_s, trust_env=False) as client:
            resp = await client.get(url)
            return resp.status_code


def create_client(strategy: ClientStrategy, config: BenchmarkConfig) -> HttpClient:
    if strategy is ClientStrategy.POOLED:
        return PooledClient(config.pool_capacity, config.request_timeout_s)
    if strategy is ClientStrategy.DEFAULT:
        return DefaultClient(config.request_timeout_s)
    raise ValueError(f"Unknown client strategy: {strategy!r}")
