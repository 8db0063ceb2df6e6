"""
Core components for the Boat Listing Scraper

This package contains the core components for the scraper including:
- Base classes, data model and interfaces
- Configuration management
- Logging system
- Rate limiting, fetching, vendor deduplication
- Crawler and worklist driver
"""

from boat_scraper.core.base import (
    DONE_FLAG,
    RowStatus,
    WorkRow,
    KeyValue,
    Category,
    BoatRecord,
    VendorRecord,
    FetchResult,
    ReconciliationReport,
    RunSummary,
    BaseComponent,
    PageFetcherInterface,
    FieldExtractorInterface,
    ResultWriterInterface,
    ScraperError,
    ConfigurationError,
    StartupError,
    FetchError,
    ExtractionError,
    StorageError
)

from boat_scraper.core.config import (
    ConfigManager,
    ScraperConfig,
    OutputConfig,
    LoggingConfig,
    ExtractionConfig
)

from boat_scraper.core.logging import (
    LoggingManager,
    get_logger,
    setup_logging
)

from boat_scraper.core.rate_limiter import RateLimiter
from boat_scraper.core.fetcher import PageFetcher
from boat_scraper.core.vendors import VendorDeduplicator
from boat_scraper.core.state import CrawlState
from boat_scraper.core.crawler import BoatCrawler
from boat_scraper.core.driver import WorklistDriver

__all__ = [
    # Data model
    'DONE_FLAG',
    'RowStatus',
    'WorkRow',
    'KeyValue',
    'Category',
    'BoatRecord',
    'VendorRecord',
    'FetchResult',
    'ReconciliationReport',
    'RunSummary',

    # Base classes
    'BaseComponent',
    'PageFetcherInterface',
    'FieldExtractorInterface',
    'ResultWriterInterface',

    # Errors
    'ScraperError',
    'ConfigurationError',
    'StartupError',
    'FetchError',
    'ExtractionError',
    'StorageError',

    # Configuration
    'ConfigManager',
    'ScraperConfig',
    'OutputConfig',
    'LoggingConfig',
    'ExtractionConfig',

    # Logging
    'LoggingManager',
    'get_logger',
    'setup_logging',

    # Pipeline
    'RateLimiter',
    'PageFetcher',
    'VendorDeduplicator',
    'CrawlState',
    'BoatCrawler',
    'WorklistDriver'
]
