"""
Logging System for the Boat Listing Scraper

Provides console and rotating file logging plus helpers for per-row results,
progress lines and the end-of-run summary.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any
import json


LOGGER_NAME = 'boat_scraper'


class LoggingManager:
    """
    Centralized logging manager with file rotation and structured logging
    """

    def __init__(self):
        self.logger: Optional[logging.Logger] = None
        self.file_handler: Optional[logging.handlers.RotatingFileHandler] = None
        self.console_handler: Optional[logging.StreamHandler] = None
        self._setup_complete = False

    def setup_logging(self, level: str = "INFO", log_file: Optional[str] = "./logs/boat_scraper.log",
                      max_size: str = "10MB", backup_count: int = 5) -> None:
        """
        Set up logging system with file rotation and console output

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Path to log file, or None for console only
            max_size: Maximum size before rotation (e.g., "10MB")
            backup_count: Number of backup files to keep
        """
        # Create logger
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(getattr(logging, level.upper()))

        # Clear existing handlers
        self.close()
        self.logger.handlers.clear()

        # Create formatters
        detailed_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        # File handler with rotation
        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            self.file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=self._parse_size(max_size), backupCount=backup_count, encoding='utf-8'
            )
            self.file_handler.setLevel(logging.DEBUG)
            self.file_handler.setFormatter(detailed_formatter)
            self.logger.addHandler(self.file_handler)

        # Console handler
        self.console_handler = logging.StreamHandler(sys.stdout)
        self.console_handler.setLevel(getattr(logging, level.upper()))
        self.console_handler.setFormatter(console_formatter)
        self.logger.addHandler(self.console_handler)

        self._setup_complete = True
        self.logger.info("Logging system initialized")

    def _parse_size(self, size_str: str) -> int:
        """Parse size string like '10MB' to bytes"""
        size_str = str(size_str).upper().strip()

        if size_str.endswith('KB'):
            return int(size_str[:-2]) * 1024
        elif size_str.endswith('MB'):
            return int(size_str[:-2]) * 1024 * 1024
        elif size_str.endswith('GB'):
            return int(size_str[:-2]) * 1024 * 1024 * 1024
        else:
            # Assume bytes
            return int(size_str)

    def get_logger(self) -> logging.Logger:
        """Get the package logger; unconfigured it simply propagates to the root logger"""
        if not self._setup_complete or not self.logger:
            return logging.getLogger(LOGGER_NAME)
        return self.logger

    def log_run_start(self, input_file: str, total: int, already_done: int) -> None:
        """Log the start of a run with worklist counts"""
        logger = self.get_logger()
        logger.info(f"Processing... : {input_file}")
        logger.info(f"Total # of boats in worklist: {total} ({already_done} already processed)")

    def log_row_result(self, link: str, success: bool, processing_time: float,
                       error_message: Optional[str] = None) -> None:
        """Log the result of processing a single worklist row"""
        logger = self.get_logger()
        if success:
            logger.info(f"Successfully processed {link} in {processing_time:.2f}s")
        else:
            logger.error(f"Failed to process {link} after {processing_time:.2f}s: {error_message}")

    def log_warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log a warning with optional context"""
        context_str = ""
        if context:
            context_str = f" | Context: {json.dumps(context, default=str)}"

        self.get_logger().warning(f"{message}{context_str}")

    def log_progress(self, current: int, total: int, message: str = "") -> None:
        """Log progress information"""
        percentage = (current / total) * 100 if total > 0 else 0
        progress_msg = f"Progress: {current}/{total} ({percentage:.1f}%)"
        if message:
            progress_msg += f" - {message}"

        self.get_logger().info(progress_msg)

    def generate_summary_report(self, stats: Dict[str, Any]) -> str:
        """Generate and log the end-of-run summary"""
        report_lines = [
            "=" * 60,
            "SCRAPING SESSION SUMMARY",
            "=" * 60,
            f"Input File: {stats.get('input_file', 'Unknown')}",
            f"Total Duration: {stats.get('duration', 0.0):.2f}s",
            f"Interrupted: {'yes' if stats.get('interrupted') else 'no'}",
            "",
            "WORKLIST:",
            f"  # of boats in input file: {stats.get('total', 0)}",
            f"  # already processed on entry: {stats.get('already_done', 0)}",
            f"  # processed this run: {stats.get('processed', 0)}",
            f"  # failed this run: {stats.get('failed', 0)}",
            f"  # not visited: {stats.get('unvisited', 0)}",
            "",
            "FETCHING:",
            f"  Requests sent: {stats.get('requests', 0)}",
            f"  Success rate: {stats.get('success_rate', 0.0):.1f}%",
            f"  Time spent rate limiting: {stats.get('time_waited', 0.0):.2f}s",
            "",
            "VENDORS:",
            f"  Vendors recorded: {stats.get('vendors', 0)}",
            f"  Vendor failures: {stats.get('vendor_failures', 0)}",
            "",
            "OUTPUT:",
            f"  Boats: {stats.get('boats_path', '')}",
            f"  Vendors: {stats.get('vendors_path', '')}",
            f"  Worklist: {stats.get('worklist_path', '')}",
            "=" * 60
        ]

        report = "\n".join(report_lines)
        self.get_logger().info(f"Session Summary:\n{report}")

        return report

    def close(self) -> None:
        """Close logging handlers"""
        if self.file_handler:
            self.file_handler.close()
            self.file_handler = None
        if self.console_handler:
            self.console_handler.close()
            self.console_handler = None


# Global logging manager instance
logging_manager = LoggingManager()


def get_logger() -> logging.Logger:
    """Get the global logger instance"""
    return logging_manager.get_logger()


def setup_logging(level: str = "INFO", log_file: Optional[str] = "./logs/boat_scraper.log",
                  max_size: str = "10MB", backup_count: int = 5) -> None:
    """Set up global logging system"""
    logging_manager.setup_logging(level, log_file, max_size, backup_count)
