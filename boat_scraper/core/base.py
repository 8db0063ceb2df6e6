"""
Base Classes and Interfaces for the Boat Listing Scraper

Defines the data model shared by every stage of the crawl pipeline
(worklist rows, boat and vendor records, fetch results), the abstract
component interfaces, and the exception hierarchy.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


DONE_FLAG = "Y"


class RowStatus(Enum):
    """Outcome of a worklist row for the current run"""
    ALREADY_DONE = "already_done"
    PROCESSED = "processed"
    FAILED = "failed"
    UNVISITED = "unvisited"


@dataclass
class WorkRow:
    """One row of the input worklist"""
    index: int
    link: str
    done: Optional[str] = None
    timestamp: Optional[str] = None
    extra: Dict[str, str] = field(default_factory=dict)

    @property
    def is_done(self) -> bool:
        return self.done == DONE_FLAG

    def mark_done(self, timestamp: datetime) -> None:
        self.done = DONE_FLAG
        self.timestamp = timestamp.isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Row as written to the updated worklist, extra columns first"""
        data: Dict[str, Any] = dict(self.extra)
        data['link'] = self.link
        if self.done is not None:
            data['done'] = self.done
        if self.timestamp is not None:
            data['timestamp'] = self.timestamp
        return data


@dataclass(frozen=True)
class KeyValue:
    """A single key/value specification line"""
    key: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {'key': self.key, 'value': self.value}


@dataclass(frozen=True)
class Category:
    """An inventory category with its specification lines"""
    title_category: str
    details: List[KeyValue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title_category': self.title_category,
            'details': [detail.to_dict() for detail in self.details]
        }


@dataclass(frozen=True)
class BoatRecord:
    """Data model for a scraped boat listing"""
    row_index: int
    source_url: str
    year_of_construction: str
    description: str
    timestamp: datetime
    key_specs: List[KeyValue] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    vendor_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'row_index': self.row_index,
            'source_url': self.source_url,
            'year_of_construction': self.year_of_construction,
            'description': self.description,
            'timestamp': self.timestamp.isoformat(),
            'key_specs': [spec.to_dict() for spec in self.key_specs],
            'categories': [category.to_dict() for category in self.categories],
            'vendor_url': self.vendor_url
        }


@dataclass(frozen=True)
class VendorRecord:
    """Data model for a scraped vendor (dealer) page"""
    source_url: str
    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    zipcode: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    longitude: Optional[str] = None
    latitude: Optional[str] = None
    phone: Optional[str] = None
    mail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form; fields whose markup was absent are omitted"""
        data = {
            'source_url': self.source_url,
            'name': self.name,
            'description': self.description,
            'address': self.address,
            'zipcode': self.zipcode,
            'city': self.city,
            'country': self.country,
            'longitude': self.longitude,
            'latitude': self.latitude,
            'phone': self.phone,
            'mail': self.mail
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class FetchResult:
    """Outcome of a single HTTP GET"""
    url: str
    success: bool
    status_code: Optional[int] = None
    body: str = ""
    error_message: Optional[str] = None


@dataclass
class ReconciliationReport:
    """End-of-run accounting over the worklist"""
    total: int
    already_done: int
    processed: int
    failed: int
    unvisited: int = 0

    @property
    def pending(self) -> int:
        return self.failed + self.unvisited

    @property
    def unaccounted(self) -> int:
        return self.total - (self.already_done + self.processed + self.pending)

    @property
    def balanced(self) -> bool:
        return self.unaccounted == 0


@dataclass
class RunSummary:
    """Result of a complete driver run"""
    report: ReconciliationReport
    boats_path: str
    vendors_path: str
    worklist_path: str
    vendors_found: int = 0
    vendor_failures: int = 0
    interrupted: bool = False
    elapsed_time: float = 0.0
    fetch_stats: Dict[str, Any] = field(default_factory=dict)
    time_waited: float = 0.0


class BaseComponent(ABC):
    """Base class for all scraper components"""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self._initialized = False

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the component"""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Clean up resources"""
        pass

    def is_initialized(self) -> bool:
        """Check if component is initialized"""
        return self._initialized


class PageFetcherInterface(BaseComponent):
    """Interface for the HTTP fetch collaborator"""

    @abstractmethod
    async def fetch(self, url: str) -> FetchResult:
        """Fetch a single URL"""
        pass

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Get fetch statistics"""
        pass


class FieldExtractorInterface(BaseComponent):
    """Interface for turning fetched markup into records"""

    @abstractmethod
    def extract_boat(self, html: str, row_index: int, source_url: str,
                     timestamp: datetime) -> BoatRecord:
        """Extract a boat record from a listing page"""
        pass

    @abstractmethod
    def extract_vendor(self, html: str, source_url: str) -> VendorRecord:
        """Extract a vendor record from a dealer page"""
        pass


class ResultWriterInterface(BaseComponent):
    """Interface for persisting the run's artifacts"""

    @abstractmethod
    async def save_boats(self, boats: List[BoatRecord], path: str) -> str:
        """Write the boats document"""
        pass

    @abstractmethod
    async def save_vendors(self, vendors: List[VendorRecord], path: str) -> str:
        """Write the vendors document"""
        pass

    @abstractmethod
    async def save_worklist(self, rows: List[WorkRow], path: str,
                            fieldnames: Optional[List[str]] = None) -> str:
        """Write the updated worklist"""
        pass


class ScraperError(Exception):
    """Base exception for scraper errors"""
    pass


class ConfigurationError(ScraperError):
    """Configuration-related errors"""
    pass


class StartupError(ScraperError):
    """Input cannot be loaded; the run never starts"""
    pass


class FetchError(ScraperError):
    """Network failure or non-2xx response"""
    pass


class ExtractionError(ScraperError):
    """Markup could not be turned into a record"""
    pass


class StorageError(ScraperError):
    """Output could not be written"""
    pass
