"""
Field extraction for the Boat Listing Scraper

This package turns fetched listing and dealer pages into records:
- Declarative selector rule sets for boats and vendors
- A generic rule engine built on BeautifulSoup CSS selectors
"""

from boat_scraper.extractors.field_extractor import FieldExtractor
from boat_scraper.extractors.rules import BOAT_RULES, VENDOR_RULES, RULE_TYPES

__all__ = ['FieldExtractor', 'BOAT_RULES', 'VENDOR_RULES', 'RULE_TYPES']
