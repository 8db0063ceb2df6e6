"""
Command Line Interface for the Boat Listing Scraper

This package provides command line argument parsing and validation
for the scraper. It handles the input worklist, output files and
configuration overrides.

Classes:
    CLIManager: Command line interface manager for the scraper
"""

from boat_scraper.cli.arguments import CLIManager

__all__ = ['CLIManager']
