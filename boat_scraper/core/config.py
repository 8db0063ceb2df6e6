"""
Configuration Manager for the Boat Listing Scraper

Handles YAML/JSON configuration files and environment variable integration
with validation of the crawl, output, logging and extraction settings.
"""

import os
import json
import yaml
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from pathlib import Path

from boat_scraper.core.base import ConfigurationError


DEFAULT_BASE_URL = "https://www.bandofboats.com"


@dataclass
class ScraperConfig:
    """Main crawl configuration"""
    base_url: str = DEFAULT_BASE_URL
    rate_limit: float = 1.0
    timeout: Optional[float] = None
    user_agent: str = "boat-scraper/0.1.0"
    throttle_skipped_rows: bool = True


@dataclass
class OutputConfig:
    """Output artifact configuration"""
    boats_file: Optional[str] = None
    vendors_file: Optional[str] = None
    worklist_suffix: str = ".updated"
    worklist_format: str = "json"
    indent: Optional[int] = 2


@dataclass
class LoggingConfig:
    """Logging system configuration"""
    level: str = "INFO"
    file: str = "./logs/boat_scraper.log"
    max_size: str = "10MB"
    backup_count: int = 5


@dataclass
class ExtractionConfig:
    """Overrides for the boat and vendor extraction rule sets"""
    boat: Dict[str, Any] = field(default_factory=dict)
    vendor: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """
    Centralized configuration manager with support for YAML/JSON files
    and environment variable integration.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or "config/config.yaml"
        self._config_data: Dict[str, Any] = {}
        self.scraper_config: Optional[ScraperConfig] = None
        self.output_config: Optional[OutputConfig] = None
        self.logging_config: Optional[LoggingConfig] = None
        self.extraction_config: Optional[ExtractionConfig] = None

    def load_config(self, config_path: Optional[str] = None) -> Dict[str, Any]:
        """Load configuration from file with environment variable override"""
        if config_path:
            self.config_path = config_path

        config_file = Path(self.config_path)

        # Load default configuration if file doesn't exist
        if not config_file.exists():
            self._config_data = self._get_default_config()
            self._create_default_config_file()
        else:
            # Load from file
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    if config_file.suffix.lower() == '.json':
                        self._config_data = json.load(f)
                    else:  # Assume YAML
                        self._config_data = yaml.safe_load(f) or {}
            except (OSError, ValueError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config from {config_file}: {e}")

        # Override with environment variables
        self._apply_env_overrides()

        # Parse into dataclass objects
        self._parse_config()

        return self._config_data

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration dictionary"""
        return {
            'scraper': {
                'base_url': DEFAULT_BASE_URL,
                'rate_limit': 1.0,
                'timeout': None,
                'user_agent': 'boat-scraper/0.1.0',
                'throttle_skipped_rows': True
            },
            'output': {
                'worklist_suffix': '.updated',
                'worklist_format': 'json',
                'indent': 2
            },
            'logging': {
                'level': 'INFO',
                'file': './logs/boat_scraper.log',
                'max_size': '10MB',
                'backup_count': 5
            }
        }

    def _create_default_config_file(self) -> None:
        """Create default configuration file"""
        config_dir = Path(self.config_path).parent
        try:
            config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.dump(self._config_data, f, default_flow_style=False, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Failed to create default config {self.config_path}: {e}")

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides"""
        # Base URL override
        if os.getenv('SCRAPER_BASE_URL'):
            self._config_data.setdefault('scraper', {})['base_url'] = os.getenv('SCRAPER_BASE_URL')

        # Rate limit override
        if os.getenv('SCRAPER_RATE_LIMIT'):
            try:
                self._config_data.setdefault('scraper', {})['rate_limit'] = float(os.getenv('SCRAPER_RATE_LIMIT'))
            except ValueError:
                raise ConfigurationError(f"SCRAPER_RATE_LIMIT is not a number: {os.getenv('SCRAPER_RATE_LIMIT')}")

        # Timeout override
        if os.getenv('SCRAPER_TIMEOUT'):
            try:
                self._config_data.setdefault('scraper', {})['timeout'] = float(os.getenv('SCRAPER_TIMEOUT'))
            except ValueError:
                raise ConfigurationError(f"SCRAPER_TIMEOUT is not a number: {os.getenv('SCRAPER_TIMEOUT')}")

        # Log level override
        if os.getenv('LOG_LEVEL'):
            self._config_data.setdefault('logging', {})['level'] = os.getenv('LOG_LEVEL')

    def _parse_config(self) -> None:
        """Parse configuration into dataclass objects"""
        # Scraper config
        scraper_data = self._config_data.get('scraper') or {}
        self.scraper_config = ScraperConfig(
            base_url=scraper_data.get('base_url', DEFAULT_BASE_URL),
            rate_limit=scraper_data.get('rate_limit', 1.0),
            timeout=scraper_data.get('timeout'),
            user_agent=scraper_data.get('user_agent', 'boat-scraper/0.1.0'),
            throttle_skipped_rows=scraper_data.get('throttle_skipped_rows', True)
        )

        # Output config
        output_data = self._config_data.get('output') or {}
        self.output_config = OutputConfig(
            boats_file=output_data.get('boats_file'),
            vendors_file=output_data.get('vendors_file'),
            worklist_suffix=output_data.get('worklist_suffix', '.updated'),
            worklist_format=output_data.get('worklist_format', 'json'),
            indent=output_data.get('indent', 2)
        )

        # Logging config
        logging_data = self._config_data.get('logging') or {}
        self.logging_config = LoggingConfig(
            level=logging_data.get('level', 'INFO'),
            file=logging_data.get('file', './logs/boat_scraper.log'),
            max_size=logging_data.get('max_size', '10MB'),
            backup_count=logging_data.get('backup_count', 5)
        )

        # Extraction rule overrides
        extraction_data = self._config_data.get('extraction') or {}
        self.extraction_config = ExtractionConfig(
            boat=extraction_data.get('boat') or {},
            vendor=extraction_data.get('vendor') or {}
        )

    def validate_config(self) -> bool:
        """Validate the loaded configuration"""
        if not self.scraper_config:
            raise ConfigurationError("Configuration not loaded")

        # Validate base URL
        if not self.scraper_config.base_url.startswith(('http://', 'https://')):
            raise ConfigurationError(f"Invalid base URL: {self.scraper_config.base_url}")

        # Validate numeric settings
        if self.scraper_config.rate_limit < 0:
            raise ConfigurationError("Rate limit must be non-negative")

        if self.scraper_config.timeout is not None and self.scraper_config.timeout <= 0:
            raise ConfigurationError("Timeout must be greater than 0")

        if self.output_config.worklist_format not in ('json', 'csv'):
            raise ConfigurationError(f"Invalid worklist format: {self.output_config.worklist_format}")

        return True

    def to_component_config(self) -> Dict[str, Any]:
        """Flatten the parsed sections into the dictionary handed to components"""
        if not self.scraper_config:
            raise ConfigurationError("Configuration not loaded")

        return {
            'base_url': self.scraper_config.base_url,
            'rate_limit': self.scraper_config.rate_limit,
            'timeout': self.scraper_config.timeout,
            'user_agent': self.scraper_config.user_agent,
            'throttle_skipped_rows': self.scraper_config.throttle_skipped_rows,
            'output': {
                'boats_file': self.output_config.boats_file,
                'vendors_file': self.output_config.vendors_file,
                'worklist_suffix': self.output_config.worklist_suffix,
                'worklist_format': self.output_config.worklist_format,
                'indent': self.output_config.indent
            },
            'extraction': {
                'boat': self.extraction_config.boat,
                'vendor': self.extraction_config.vendor
            }
        }
