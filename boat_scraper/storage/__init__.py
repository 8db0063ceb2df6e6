"""
Storage components for the Boat Listing Scraper

This package contains components for reading and writing run artifacts:
- Worklist CSV loading and updated-worklist serialization
- JSON result writing for boats and vendors
"""

from .json_writer import JSONResultWriter
from .worklist import load_worklist, parse_worklist, count_done

__all__ = ['JSONResultWriter', 'load_worklist', 'parse_worklist', 'count_done']
