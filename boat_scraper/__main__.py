#!/usr/bin/env python3
"""
Boat Listing Scraper - Main Entry Point

This module serves as the main entry point for the scraper application.
It initializes the configuration, sets up logging, and runs the worklist.
"""

import sys
import signal
import asyncio
from typing import List, Optional

from boat_scraper.core.config import ConfigManager
from boat_scraper.core.logging import setup_logging, get_logger
from boat_scraper.core.base import ScraperError, ConfigurationError, StartupError, StorageError
from boat_scraper.cli.arguments import CLIManager
from boat_scraper.utils.component_factory import create_driver


def install_interrupt_handler() -> bool:
    """
    Turn Ctrl-C into cancellation of the running task

    The driver then stops its row loop and flushes partial results, instead of
    KeyboardInterrupt escaping the event loop on interpreters older than 3.11.

    Returns:
        True if the handler was installed
    """
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    try:
        loop.add_signal_handler(signal.SIGINT, task.cancel)
    except (NotImplementedError, RuntimeError) as e:
        # Windows event loops and non-main threads have no signal handlers
        get_logger().debug(f"Ctrl-C will not flush partial results: {e}")
        return False
    return True


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the scraper"""
    cli_manager = CLIManager()
    args = cli_manager.parse_arguments(argv)

    if args.examples:
        print("\nBoat Listing Scraper - Usage Examples\n")
        print(cli_manager.get_usage_examples())
        return 0

    config_manager = ConfigManager(args.config)
    try:
        config_manager.load_config()
        config_manager.validate_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logging_config = config_manager.logging_config
    setup_logging(
        level=args.log_level or logging_config.level,
        log_file=logging_config.file,
        max_size=logging_config.max_size,
        backup_count=logging_config.backup_count
    )
    logger = get_logger()

    config = cli_manager.apply_overrides(args, config_manager.to_component_config())

    try:
        driver = create_driver(config, args.csv_file)
        await driver.initialize()
    except (ConfigurationError, StartupError) as e:
        logger.error(f"Cannot start: {e}")
        return 1

    interrupt_installed = install_interrupt_handler()
    try:
        summary = await driver.run()
    except StorageError as e:
        logger.error(f"Failed to write results: {e}")
        return 1
    except ScraperError as e:
        logger.error(f"Scraper execution failed: {e}", exc_info=True)
        return 1
    finally:
        if interrupt_installed:
            asyncio.get_running_loop().remove_signal_handler(signal.SIGINT)
        await driver.cleanup()

    if summary.interrupted:
        return 130
    return 0


def run() -> None:
    """Console script entry point"""
    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nScraper interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    run()
