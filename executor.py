import asyncio
import logging
import time
from typing import Callable, Optional

import aiohttp
import httpx

from config import BenchmarkConfig
from http_clients import ClientStrategy, HttpClient, create_client

logger = logging.getLogger(__name__)

# httpx.InvalidURL sits outside the httpx.HTTPError tree
TRANSPORT_ERRORS = (aiohttp.ClientError, httpx.HTTPError, httpx.InvalidURL, asyncio.TimeoutError, OSError)


class RequestExecutor:
    """Times single GET requests over one client strategy.

    The executor owns its HTTP client for one strategy run: the client is
    opened on entry, before the first batch, and released on exit.
    """

    def __init__(self, strategy: ClientStrategy, config: BenchmarkConfig,
                 client_factory: Callable[[ClientStrategy, BenchmarkConfig], HttpClient] = create_client):
        self.strategy = strategy
        self.config = config
        self._client_factory = client_factory
        self.client: Optional[HttpClient] = None

    async def __aenter__(self):
        self.client = self._client_factory(self.strategy, self.config)
        await self.client.open()
        logger.debug(f"Executor for {self.strategy.value} client ready")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.client is not None:
            await self.client.close()
            self.client = None

    async def execute(self, url: str) -> Optional[float]:
        if self.client is None:
            raise RuntimeError("RequestExecutor must be entered before execute()")
        start = time.perf_counter()
        try:
            await self.client.get(url)
        except TRANSPORT_ERRORS as e:
            logger.error(f"Error: {str(e) or type(e).__name__}")
            return None
        return (time.perf_counter() - start) * 1000
