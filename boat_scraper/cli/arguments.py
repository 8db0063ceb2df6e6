"""
Command Line Argument Parsing for the Boat Listing Scraper

Handles the input worklist and output file options plus configuration
overrides.
"""

import argparse
import os
from pathlib import Path
from typing import List, Optional, Dict, Any

from boat_scraper import __version__


class CLIManager:
    """
    Command line interface manager for the scraper

    Handles the input/output file options and configuration overrides.
    Provides validation and help documentation.
    """

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all options

        Returns:
            Configured argument parser
        """
        parser = argparse.ArgumentParser(
            prog="boat_scraper",
            description="Scrape boat listings and their dealers from a CSV worklist",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter,
            epilog=self._get_epilog()
        )

        # Input and output files
        files_group = parser.add_argument_group("Files")
        files_group.add_argument(
            "-c", "--csv-file",
            dest="csv_file",
            help="Input: CSV worklist with a 'link' column (and optional 'done' column)"
        )
        files_group.add_argument(
            "-b", "--boats-file",
            dest="boats_file",
            help="Output: JSON result file for boats - overwritten if exists"
        )
        files_group.add_argument(
            "-v", "--vendors-file",
            dest="vendors_file",
            help="Output: JSON result file for vendors - overwritten if exists"
        )

        # Configuration options
        config_group = parser.add_argument_group("Configuration")
        config_group.add_argument(
            "--config",
            default="config/config.yaml",
            help="Path to configuration file (created with defaults if missing)"
        )
        config_group.add_argument(
            "--log-level",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Logging level"
        )
        config_group.add_argument(
            "--rate-limit",
            type=float,
            help="Delay in seconds between consecutive requests"
        )
        config_group.add_argument(
            "--timeout",
            type=float,
            help="Request timeout in seconds (transport default if unset)"
        )
        config_group.add_argument(
            "--base-url",
            help="Site base URL used to resolve dealer links"
        )
        config_group.add_argument(
            "--worklist-format",
            choices=["json", "csv"],
            help="Format of the updated worklist"
        )

        # Version and examples
        parser.add_argument(
            "--version",
            action="version",
            version=f"Boat Listing Scraper v{__version__}"
        )

        parser.add_argument(
            "--examples",
            action="store_true",
            help="Show usage examples and exit"
        )

        return parser

    def _get_epilog(self) -> str:
        """
        Get epilog text for help message

        Returns:
            Formatted epilog text
        """
        return """
Examples:
  # Scrape every pending row of a worklist
  python -m boat_scraper -c boats.csv -b boats.json -v vendors.json

  # Resume an interrupted run from the updated worklist
  python -m boat_scraper -c boats.csv.updated -b boats2.json -v vendors2.json

  # Slow down and use a custom configuration
  python -m boat_scraper -c boats.csv --rate-limit=2.5 --config=my_config.yaml

Notes:
  - Rows whose 'done' column is 'Y' are skipped
  - The updated worklist is written next to the input as <input>.updated
    and can itself be used as the input of the next run
  - Output files default to <input stem>.boats.json and <input stem>.vendors.json
"""

    def parse_arguments(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command line arguments

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        parsed_args = self.parser.parse_args(args)
        self.validate_arguments(parsed_args)
        return parsed_args

    def validate_arguments(self, args: argparse.Namespace) -> bool:
        """
        Validate parsed arguments for consistency

        Args:
            args: Parsed arguments namespace

        Returns:
            True if arguments are valid
        """
        if args.examples:
            return True

        # Input worklist is required
        if not args.csv_file:
            self.parser.error("the following arguments are required: -c/--csv-file")

        # Check input file exists and is readable
        input_path = Path(args.csv_file)
        if not input_path.is_file():
            self.parser.error(f"Input file does not exist: {args.csv_file}")

        if not os.access(input_path, os.R_OK):
            self.parser.error(f"Input file is not readable: {args.csv_file}")

        # Validate numeric arguments
        if args.rate_limit is not None and args.rate_limit < 0:
            self.parser.error("Rate limit must be non-negative")

        if args.timeout is not None and args.timeout <= 0:
            self.parser.error("Timeout must be greater than 0")

        return True

    def apply_overrides(self, args: argparse.Namespace, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply command line overrides to the flattened component configuration

        Args:
            args: Parsed arguments namespace
            config: Configuration from ConfigManager.to_component_config()

        Returns:
            The updated configuration
        """
        # Crawl overrides
        if args.rate_limit is not None:
            config['rate_limit'] = args.rate_limit

        if args.timeout is not None:
            config['timeout'] = args.timeout

        if args.base_url:
            config['base_url'] = args.base_url

        # Output file overrides
        output = config.setdefault('output', {})
        if args.boats_file:
            output['boats_file'] = args.boats_file
        if args.vendors_file:
            output['vendors_file'] = args.vendors_file
        if args.worklist_format:
            output['worklist_format'] = args.worklist_format

        return config

    def print_help(self) -> None:
        """Print help message"""
        self.parser.print_help()

    def get_usage_examples(self) -> str:
        """
        Get usage examples for documentation

        Returns:
            Formatted usage examples
        """
        return self._get_epilog()
