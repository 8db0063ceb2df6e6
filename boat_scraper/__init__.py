"""
Boat Listing Scraper

A batch crawler for a boat-listing website. Given a CSV worklist of listing
URLs it fetches each listing, extracts the boat's attributes, follows the
dealer link once per dealer, and writes boats, vendors and an updated
worklist that makes the next run resume where this one stopped.

Features:
- Resumable worklist processing via the ``done`` column
- Fixed-delay rate limiting between requests
- Vendor deduplication across listings
- Declarative, configurable extraction rules
- End-of-run reconciliation of row counts
- Configurable via YAML/JSON and environment variables
"""

__version__ = "0.1.0"
