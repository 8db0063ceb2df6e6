"""
Page Fetcher Implementation

Wraps a single aiohttp GET and turns every outcome, including transport
errors and non-2xx statuses, into a FetchResult instead of raising.
"""

import asyncio
import logging
import time
from typing import Dict, Any, Optional

import aiohttp

from boat_scraper.core.base import PageFetcherInterface, FetchResult, FetchError


class PageFetcher(PageFetcherInterface):
    """
    HTTP fetcher backed by one shared aiohttp session.

    Requests are issued one at a time by the crawler; no retries are
    attempted and no timeout is imposed unless one is configured.
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.logger = logging.getLogger(__name__)
        self.timeout: Optional[float] = config.get('timeout')
        self.user_agent = config.get('user_agent', 'boat-scraper/0.1.0')
        self.session: Optional[aiohttp.ClientSession] = None

        self.stats = {
            'total_fetched': 0,
            'successful_fetches': 0,
            'failed_fetches': 0,
            'total_time': 0.0
        }

    async def initialize(self) -> None:
        """Open the HTTP session"""
        if self._initialized:
            return

        session_kwargs: Dict[str, Any] = {'headers': {'User-Agent': self.user_agent}}
        # Without a configured timeout aiohttp keeps its own defaults
        if self.timeout:
            session_kwargs['timeout'] = aiohttp.ClientTimeout(total=self.timeout)
        self.session = aiohttp.ClientSession(**session_kwargs)

        self._initialized = True
        self.logger.info("Page fetcher initialized")

    async def cleanup(self) -> None:
        """Close the HTTP session"""
        if self.session:
            await self.session.close()
            self.session = None
        self._initialized = False
        self.logger.info("Page fetcher cleaned up")

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch a single URL

        Args:
            url: Absolute URL to GET

        Returns:
            FetchResult; success is True only for a 2xx response
        """
        if not self._initialized:
            raise FetchError("Page fetcher not initialized")

        start_time = time.time()
        self.stats['total_fetched'] += 1

        try:
            self.logger.debug(f"Fetching: {url}")
            async with self.session.get(url) as response:
                body = await response.text(errors='replace')
                status = response.status

            if 200 <= status < 300:
                self.stats['successful_fetches'] += 1
                return FetchResult(url=url, success=True, status_code=status, body=body)

            self.stats['failed_fetches'] += 1
            return FetchResult(
                url=url,
                success=False,
                status_code=status,
                body=body,
                error_message=f"HTTP {status}"
            )

        except asyncio.TimeoutError:
            self.stats['failed_fetches'] += 1
            return FetchResult(url=url, success=False, error_message="Request timeout")
        except aiohttp.ClientError as e:
            self.stats['failed_fetches'] += 1
            return FetchResult(url=url, success=False, error_message=f"Client error: {e}")
        finally:
            self.stats['total_time'] += time.time() - start_time

    def get_stats(self) -> Dict[str, Any]:
        """Get fetch statistics"""
        return {
            **self.stats,
            'success_rate': (
                self.stats['successful_fetches'] / max(self.stats['total_fetched'], 1)
            ) * 100
        }
