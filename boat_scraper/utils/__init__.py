"""Helpers for wiring the scraper together."""

from boat_scraper.utils.component_factory import create_and_register_components, create_driver

__all__ = ['create_and_register_components', 'create_driver']
