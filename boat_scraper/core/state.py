"""
Run state shared by the driver and the crawler.
"""

from dataclasses import dataclass, field
from typing import List

from boat_scraper.core.base import WorkRow, BoatRecord, VendorRecord
from boat_scraper.core.vendors import VendorDeduplicator


@dataclass
class CrawlState:
    """Everything a run accumulates before the final flush"""
    rows: List[WorkRow] = field(default_factory=list)
    boats: List[BoatRecord] = field(default_factory=list)
    vendors: List[VendorRecord] = field(default_factory=list)
    seen_vendors: VendorDeduplicator = field(default_factory=VendorDeduplicator)
    processed_rows: List[int] = field(default_factory=list)
    failed_rows: List[int] = field(default_factory=list)
    failed_vendors: List[str] = field(default_factory=list)
