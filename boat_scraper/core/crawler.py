"""
Boat Crawler Implementation

Processes one worklist row at a time: fetch the listing, extract the boat
record, mark the row done, then follow the dealer link at most once per run.
"""

import time
from datetime import datetime, timezone
from typing import Callable, Optional

from boat_scraper.core.base import (
    PageFetcherInterface,
    FieldExtractorInterface,
    WorkRow,
    BoatRecord,
    VendorRecord
)
from boat_scraper.core.rate_limiter import RateLimiter
from boat_scraper.core.state import CrawlState
from boat_scraper.core.logging import get_logger, logging_manager


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BoatCrawler:
    """
    Per-row fetch → extract → mark done → vendor crawl.

    Failures are logged and recorded in the run state; nothing raised by a
    single row or vendor escapes to the driver.
    """

    def __init__(self, fetcher: PageFetcherInterface, extractor: FieldExtractorInterface,
                 rate_limiter: RateLimiter, state: CrawlState,
                 clock: Optional[Callable[[], datetime]] = None):
        self.fetcher = fetcher
        self.extractor = extractor
        self.rate_limiter = rate_limiter
        self.state = state
        self.clock = clock or utc_now
        self.logger = get_logger()

    async def process_row(self, row: WorkRow) -> bool:
        """
        Process a single worklist row

        Args:
            row: Row to process; marked done in place on success

        Returns:
            True if a boat record was produced
        """
        start_time = time.time()

        result = await self.fetcher.fetch(row.link)
        if not result.success:
            self.state.failed_rows.append(row.index)
            logging_manager.log_row_result(row.link, False, time.time() - start_time, result.error_message)
            return False

        timestamp = self.clock()
        try:
            boat = self.extractor.extract_boat(result.body, row.index, row.link, timestamp)
        except Exception as e:
            self.logger.error(f"Error extracting boat from {row.link}: {e}", exc_info=True)
            self.state.failed_rows.append(row.index)
            return False

        self.state.boats.append(boat)
        self.state.processed_rows.append(row.index)
        row.mark_done(timestamp)
        logging_manager.log_row_result(row.link, True, time.time() - start_time)

        if boat.vendor_url:
            await self._follow_vendor(boat)

        return True

    async def _follow_vendor(self, boat: BoatRecord) -> None:
        try:
            await self.process_vendor(boat.vendor_url)
        except Exception as e:
            self.logger.error(f"Error processing vendor {boat.vendor_url} for row {boat.row_index}: {e}",
                              exc_info=True)
            self.state.failed_vendors.append(boat.vendor_url)

    async def process_vendor(self, url: str) -> Optional[VendorRecord]:
        """
        Fetch and record a vendor page, at most once per URL per run

        Args:
            url: Absolute vendor page URL

        Returns:
            The new VendorRecord, or None if the vendor was already seen or failed
        """
        if not self.state.seen_vendors.claim(url):
            self.logger.debug(f"Vendor already processed: {url}")
            return None

        await self.rate_limiter.wait()

        result = await self.fetcher.fetch(url)
        if not result.success:
            self.state.failed_vendors.append(url)
            self.logger.error(f"Failed to fetch vendor {url}: {result.error_message}")
            return None

        vendor = self.extractor.extract_vendor(result.body, url)
        self.state.vendors.append(vendor)
        self.logger.info(f"Recorded vendor {vendor.name or url}")
        return vendor
