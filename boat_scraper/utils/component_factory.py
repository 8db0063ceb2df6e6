"""
Component Factory for the Boat Listing Scraper

This module provides functions to create and register components with the driver.
"""

from typing import Dict, Any

from boat_scraper.core.driver import WorklistDriver
from boat_scraper.core.fetcher import PageFetcher
from boat_scraper.extractors.field_extractor import FieldExtractor
from boat_scraper.storage.json_writer import JSONResultWriter


def create_and_register_components(driver: WorklistDriver, config: Dict[str, Any]) -> None:
    """
    Create and register all components with the driver.

    Args:
        driver: The driver to register components with
        config: Flattened component configuration
    """
    driver.register_component("fetcher", PageFetcher(config))
    driver.register_component("extractor", FieldExtractor(config))
    driver.register_component("writer", JSONResultWriter(config))


def create_driver(config: Dict[str, Any], input_file: str) -> WorklistDriver:
    """Build a driver with the default components registered"""
    driver = WorklistDriver(config, input_file)
    create_and_register_components(driver, config)
    return driver
