"""
Fixed-delay rate limiter for outbound fetches.
"""

import asyncio
import logging


class RateLimiter:
    """Sleeps a fixed interval between consecutive fetches"""

    def __init__(self, delay: float = 1.0):
        if delay < 0:
            raise ValueError("Rate limit delay must be non-negative")
        self.delay = delay
        self.wait_count = 0
        self.total_waited = 0.0
        self.logger = logging.getLogger(__name__)

    async def wait(self) -> None:
        """Suspend for one rate-limit interval"""
        self.wait_count += 1
        if self.delay <= 0:
            return

        self.logger.debug(f"Waiting {self.delay:.2f}s before next request")
        await asyncio.sleep(self.delay)
        self.total_waited += self.delay
