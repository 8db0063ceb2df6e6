"""
Worklist Driver Implementation

Main driver for a scraping run: loads the worklist, walks it row by row
through the BoatCrawler with rate limiting, reconciles the counts and
flushes the three output artifacts.
"""

import asyncio
import time
from pathlib import Path
from typing import Dict, Any, List, Optional

from boat_scraper.core.base import (
    BaseComponent,
    PageFetcherInterface,
    FieldExtractorInterface,
    ResultWriterInterface,
    ReconciliationReport,
    RowStatus,
    RunSummary,
    ConfigurationError,
    StorageError
)
from boat_scraper.core.crawler import BoatCrawler
from boat_scraper.core.rate_limiter import RateLimiter
from boat_scraper.core.state import CrawlState
from boat_scraper.core.logging import get_logger, logging_manager
from boat_scraper.storage.worklist import load_worklist


class WorklistDriver(BaseComponent):
    """
    Drives one run over an input worklist.

    Rows already flagged done are skipped, every other row is handed to the
    BoatCrawler in file order, and the results are written once at the end,
    including after an interruption.
    """

    def __init__(self, config: Dict[str, Any], input_file: str):
        super().__init__(config)
        self.logger = get_logger()
        self.input_file = input_file

        self.fetcher: Optional[PageFetcherInterface] = None
        self.extractor: Optional[FieldExtractorInterface] = None
        self.writer: Optional[ResultWriterInterface] = None

        self.rate_limiter = RateLimiter(config.get('rate_limit', 1.0))
        self.throttle_skipped_rows = config.get('throttle_skipped_rows', True)
        self.state = CrawlState()
        self.crawler: Optional[BoatCrawler] = None

        self.fieldnames: List[str] = []
        self.already_done = 0
        self._done_on_entry: set = set()
        self._visited = 0

        self.boats_path, self.vendors_path, self.worklist_path = self.resolve_output_paths()

    def register_component(self, component_type: str, component: BaseComponent) -> None:
        """Register a component with the driver"""
        if component_type == "fetcher":
            self.fetcher = component
        elif component_type == "extractor":
            self.extractor = component
        elif component_type == "writer":
            self.writer = component
        else:
            raise ValueError(f"Unknown component type: {component_type}")

    def resolve_output_paths(self) -> tuple:
        """
        Work out and validate the three output paths before the run starts

        Raises:
            ConfigurationError: If an output location cannot be used
        """
        output = self.config.get('output', {})
        input_path = Path(self.input_file)
        stem = input_path.with_suffix('')

        boats_path = output.get('boats_file') or f"{stem}.boats.json"
        vendors_path = output.get('vendors_file') or f"{stem}.vendors.json"
        worklist_path = f"{self.input_file}{output.get('worklist_suffix', '.updated')}"

        paths = [boats_path, vendors_path, worklist_path]
        # Different spellings of one file must still collide
        if len({Path(path).resolve() for path in paths}) != len(paths):
            raise ConfigurationError(f"Output paths must be distinct: {paths}")

        for path in paths:
            target = Path(path)
            if target.is_dir():
                raise ConfigurationError(f"Output path is a directory: {path}")
            if target.resolve() == input_path.resolve():
                raise ConfigurationError(f"Output path would overwrite the input file: {path}")
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ConfigurationError(f"Cannot create output directory for {path}: {e}")

        return boats_path, vendors_path, worklist_path

    async def initialize(self) -> None:
        """Load the worklist and initialize all components"""
        if not (self.fetcher and self.extractor and self.writer):
            raise ConfigurationError("Fetcher, extractor and writer must be registered before initialize()")

        rows, self.fieldnames, self.already_done = load_worklist(self.input_file)
        self.state.rows = rows
        self._done_on_entry = {row.index for row in rows if row.is_done}
        logging_manager.log_run_start(self.input_file, len(rows), self.already_done)

        for component in (self.fetcher, self.extractor, self.writer):
            await component.initialize()

        self.crawler = BoatCrawler(self.fetcher, self.extractor, self.rate_limiter, self.state)
        self._initialized = True
        self.logger.info("Worklist driver initialized")

    async def cleanup(self) -> None:
        """Clean up resources"""
        for component in (self.fetcher, self.extractor, self.writer):
            if component:
                await component.cleanup()
        self.logger.info("Worklist driver cleanup completed")

    async def run(self) -> RunSummary:
        """
        Process the worklist and write the outputs

        Returns:
            RunSummary with the reconciliation report and output paths
        """
        if not self._initialized:
            await self.initialize()

        start_time = time.time()
        interrupted = False

        try:
            await self.process_rows()
        except (KeyboardInterrupt, asyncio.CancelledError):
            interrupted = True
            self.logger.warning(
                f"Run interrupted after {self._visited}/{len(self.state.rows)} rows, flushing partial results"
            )
        finally:
            # Partial results are flushed whatever stopped the loop
            report = self.reconcile()
            await self.write_outputs()

        summary = RunSummary(
            report=report,
            boats_path=self.boats_path,
            vendors_path=self.vendors_path,
            worklist_path=self.worklist_path,
            vendors_found=len(self.state.vendors),
            vendor_failures=len(self.state.failed_vendors),
            interrupted=interrupted,
            elapsed_time=time.time() - start_time,
            fetch_stats=self.fetcher.get_stats(),
            time_waited=self.rate_limiter.total_waited
        )
        self._log_summary(summary)
        return summary

    async def process_rows(self) -> None:
        """Walk the worklist in file order"""
        rows = self.state.rows
        total = len(rows)

        for position, row in enumerate(rows):
            skipped = row.is_done
            if skipped:
                self.logger.debug(f"Skipping row {row.index}, already processed: {row.link}")
            else:
                await self.crawler.process_row(row)

            self._visited = position + 1
            logging_manager.log_progress(self._visited, total, row.link)

            is_last = position == total - 1
            if not is_last and (not skipped or self.throttle_skipped_rows):
                await self.rate_limiter.wait()

    def row_statuses(self) -> Dict[int, RowStatus]:
        """Classify every row for this run"""
        processed = set(self.state.processed_rows)
        failed = set(self.state.failed_rows)
        statuses = {}

        for row in self.state.rows:
            if row.index in self._done_on_entry:
                statuses[row.index] = RowStatus.ALREADY_DONE
            elif row.index in processed:
                statuses[row.index] = RowStatus.PROCESSED
            elif row.index in failed:
                statuses[row.index] = RowStatus.FAILED
            else:
                statuses[row.index] = RowStatus.UNVISITED

        return statuses

    def reconcile(self) -> ReconciliationReport:
        """
        Check that every row is accounted for

        A mismatch is reported as a warning only; outputs are written regardless.
        """
        statuses = list(self.row_statuses().values())
        report = ReconciliationReport(
            total=len(self.state.rows),
            already_done=self.already_done,
            processed=len(self.state.processed_rows),
            failed=len(self.state.failed_rows),
            unvisited=statuses.count(RowStatus.UNVISITED)
        )

        equation = (f"{report.total} = {report.already_done} + {report.processed}"
                    f" + {report.pending} pending")
        if report.balanced:
            self.logger.info(f"Numbers match: {equation}")
        else:
            logging_manager.log_warning(
                f"Numbers don't match: {equation} ({report.unaccounted} unaccounted)",
                {'failed_rows': self.state.failed_rows}
            )
            logging_manager.log_warning("Some boats have not been properly processed!")

        done_now = sum(1 for row in self.state.rows if row.is_done)
        if done_now != report.already_done + report.processed:
            logging_manager.log_warning(
                f"Updated worklist has {done_now} rows done, expected "
                f"{report.already_done + report.processed}"
            )

        if report.pending:
            logging_manager.log_warning(
                f"{report.pending} rows left pending; rerun with {self.worklist_path} to resume",
                {'failed_rows': self.state.failed_rows, 'unvisited': report.unvisited}
            )

        return report

    async def write_outputs(self) -> None:
        """
        Write boats, vendors and the updated worklist independently

        Raises:
            StorageError: After attempting all three, if any write failed
        """
        errors = []
        writes = [
            (self.writer.save_boats, (self.state.boats, self.boats_path)),
            (self.writer.save_vendors, (self.state.vendors, self.vendors_path)),
            (self.writer.save_worklist, (self.state.rows, self.worklist_path, self.fieldnames))
        ]

        for save, args in writes:
            try:
                await save(*args)
            except StorageError as e:
                self.logger.error(str(e))
                errors.append(str(e))

        if errors:
            raise StorageError("; ".join(errors))

    def _log_summary(self, summary: RunSummary) -> None:
        report = summary.report
        logging_manager.generate_summary_report({
            'input_file': self.input_file,
            'duration': summary.elapsed_time,
            'interrupted': summary.interrupted,
            'total': report.total,
            'already_done': report.already_done,
            'processed': report.processed,
            'failed': report.failed,
            'unvisited': report.unvisited,
            'vendors': summary.vendors_found,
            'vendor_failures': summary.vendor_failures,
            'requests': summary.fetch_stats.get('total_fetched', 0),
            'success_rate': summary.fetch_stats.get('success_rate', 0.0),
            'time_waited': summary.time_waited,
            'boats_path': summary.boats_path,
            'vendors_path': summary.vendors_path,
            'worklist_path': summary.worklist_path
        })
        self.logger.info("DONE!!! (Please review results if errors have been thrown during execution!)")
