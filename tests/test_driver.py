"""
Tests for WorklistDriver

End-to-end runs over temporary worklists with HTTP mocked by aioresponses.
"""

import asyncio
import json
import pytest
from pathlib import Path
from unittest.mock import AsyncMock
from aioresponses import aioresponses

from boat_scraper.core.base import ConfigurationError, StartupError, StorageError, FetchResult, DONE_FLAG
from boat_scraper.utils.component_factory import create_driver


BASE_URL = "https://www.bandofboats.com"
LINKS = [f"{BASE_URL}/fr/bateau/{i}" for i in range(3)]


def make_config(**output):
    return {
        'base_url': BASE_URL,
        'rate_limit': 0,
        'timeout': 5,
        'user_agent': 'boat-scraper-tests',
        'throttle_skipped_rows': True,
        'output': output,
        'extraction': {}
    }


def write_csv(path: Path, lines):
    path.write_text("\n".join(lines) + "\n", encoding='utf-8')
    return str(path)


def read_json(path):
    return json.loads(Path(path).read_text(encoding='utf-8'))


@pytest.fixture
def worklist(tmp_path):
    return write_csv(tmp_path / "boats.csv", [
        "name,link",
        f"Alpha,{LINKS[0]}",
        f"Bravo,{LINKS[1]}",
        f"Charlie,{LINKS[2]}"
    ])


class TestOutputPaths:
    """Output path resolution and validation"""

    def test_default_paths_derive_from_input(self, tmp_path, worklist):
        driver = create_driver(make_config(), worklist)

        assert driver.boats_path == str(tmp_path / "boats.boats.json")
        assert driver.vendors_path == str(tmp_path / "boats.vendors.json")
        assert driver.worklist_path == str(tmp_path / "boats.csv.updated")

    def test_explicit_paths_and_parent_creation(self, tmp_path, worklist):
        boats = tmp_path / "out" / "b.json"
        vendors = tmp_path / "out" / "v.json"

        driver = create_driver(make_config(boats_file=str(boats), vendors_file=str(vendors)), worklist)

        assert driver.boats_path == str(boats)
        assert (tmp_path / "out").is_dir()

    def test_paths_must_be_distinct(self, tmp_path, worklist):
        same = str(tmp_path / "same.json")
        with pytest.raises(ConfigurationError, match="distinct"):
            create_driver(make_config(boats_file=same, vendors_file=same), worklist)

    def test_equivalent_spellings_collide(self, tmp_path, worklist, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigurationError, match="distinct"):
            create_driver(make_config(boats_file="out.json", vendors_file="./out.json"), worklist)

    def test_output_cannot_overwrite_input(self, worklist):
        with pytest.raises(ConfigurationError, match="overwrite the input"):
            create_driver(make_config(boats_file=worklist), worklist)

    def test_output_cannot_be_directory(self, tmp_path, worklist):
        with pytest.raises(ConfigurationError, match="directory"):
            create_driver(make_config(vendors_file=str(tmp_path)), worklist)


class TestStartup:
    """Failures before any row is processed"""

    @pytest.mark.asyncio
    async def test_missing_input(self, tmp_path):
        driver = create_driver(make_config(), str(tmp_path / "absent.csv"))
        with pytest.raises(StartupError, match="does not exist"):
            await driver.initialize()
        await driver.cleanup()

    @pytest.mark.asyncio
    async def test_missing_link_column(self, tmp_path):
        path = write_csv(tmp_path / "bad.csv", ["url,done", f"{LINKS[0]},"])
        driver = create_driver(make_config(), path)
        with pytest.raises(StartupError, match="link"):
            await driver.initialize()
        await driver.cleanup()
        assert not Path(driver.boats_path).exists()

    @pytest.mark.asyncio
    async def test_components_required(self, worklist):
        from boat_scraper.core.driver import WorklistDriver

        driver = WorklistDriver(make_config(), worklist)
        with pytest.raises(ConfigurationError):
            await driver.initialize()


class TestRun:
    """Complete runs"""

    @pytest.mark.asyncio
    async def test_shared_vendor_and_broken_link(self, worklist, boat_html, vendor_html, vendor_url):
        driver = create_driver(make_config(), worklist)
        driver.fetcher.fetch = AsyncMock(wraps=driver.fetcher.fetch)

        with aioresponses() as m:
            m.get(LINKS[0], status=200, body=boat_html)
            m.get(LINKS[1], status=404, body="Not Found")
            m.get(LINKS[2], status=200, body=boat_html)
            m.get(vendor_url, status=200, body=vendor_html, repeat=True)

            await driver.initialize()
            try:
                summary = await driver.run()
            finally:
                await driver.cleanup()

        vendor_calls = [c for c in driver.fetcher.fetch.await_args_list if c.args[0] == vendor_url]
        assert len(vendor_calls) == 1

        boats = read_json(summary.boats_path)
        assert [boat['row_index'] for boat in boats] == [0, 2]
        assert [boat['source_url'] for boat in boats] == [LINKS[0], LINKS[2]]
        assert boats[0]['year_of_construction'] == "2008"

        vendors = read_json(summary.vendors_path)
        assert len(vendors) == 1
        assert vendors[0]['source_url'] == vendor_url
        assert vendors[0]['city'] == "Marseille"

        rows = read_json(summary.worklist_path)
        assert [row.get('done') for row in rows] == [DONE_FLAG, None, DONE_FLAG]
        assert 'timestamp' not in rows[1]
        assert rows[0]['timestamp'] == boats[0]['timestamp']
        assert [row['name'] for row in rows] == ["Alpha", "Bravo", "Charlie"]

        report = summary.report
        assert (report.total, report.already_done, report.processed, report.failed) == (3, 0, 2, 1)
        assert report.unvisited == 0
        assert report.balanced
        assert not summary.interrupted
        assert summary.vendors_found == 1
        assert summary.fetch_stats['total_fetched'] == 4
        assert summary.fetch_stats['failed_fetches'] == 1
        assert summary.time_waited == 0.0

    @pytest.mark.asyncio
    async def test_resume_skips_done_rows(self, tmp_path, bare_boat_html):
        path = write_csv(tmp_path / "resume.csv", [
            "link,done,timestamp",
            f"{LINKS[0]},Y,2024-01-01T00:00:00+00:00",
            f"{LINKS[1]},,"
        ])
        driver = create_driver(make_config(), path)
        driver.fetcher.fetch = AsyncMock(wraps=driver.fetcher.fetch)

        with aioresponses() as m:
            m.get(LINKS[1], status=200, body=bare_boat_html)

            await driver.initialize()
            try:
                summary = await driver.run()
            finally:
                await driver.cleanup()

        fetched = [c.args[0] for c in driver.fetcher.fetch.await_args_list]
        assert fetched == [LINKS[1]]

        rows = read_json(summary.worklist_path)
        assert rows[0] == {'link': LINKS[0], 'done': 'Y', 'timestamp': '2024-01-01T00:00:00+00:00'}
        assert rows[1]['done'] == DONE_FLAG
        assert rows[1]['timestamp']

        assert summary.report.already_done == 1
        assert summary.report.processed == 1
        assert summary.report.balanced

    @pytest.mark.asyncio
    async def test_updated_worklist_feeds_next_run(self, tmp_path, worklist, bare_boat_html):
        driver = create_driver(make_config(), worklist)
        with aioresponses() as m:
            m.get(LINKS[0], status=200, body=bare_boat_html)
            m.get(LINKS[1], status=500)
            m.get(LINKS[2], status=200, body=bare_boat_html)
            await driver.initialize()
            try:
                first = await driver.run()
            finally:
                await driver.cleanup()

        second_driver = create_driver(
            make_config(boats_file=str(tmp_path / "second.boats.json"),
                        vendors_file=str(tmp_path / "second.vendors.json")),
            first.worklist_path
        )
        second_driver.fetcher.fetch = AsyncMock(wraps=second_driver.fetcher.fetch)
        with aioresponses() as m:
            m.get(LINKS[1], status=200, body=bare_boat_html)
            await second_driver.initialize()
            try:
                second = await second_driver.run()
            finally:
                await second_driver.cleanup()

        assert [c.args[0] for c in second_driver.fetcher.fetch.await_args_list] == [LINKS[1]]
        assert second.report.already_done == 2
        assert second.report.processed == 1
        assert [boat['row_index'] for boat in read_json(second.boats_path)] == [1]
        assert all(row['done'] == DONE_FLAG for row in read_json(second.worklist_path))

    @pytest.mark.asyncio
    async def test_csv_worklist_output(self, worklist, bare_boat_html):
        config = make_config(worklist_format='csv')
        driver = create_driver(config, worklist)
        with aioresponses() as m:
            for link in LINKS:
                m.get(link, status=200, body=bare_boat_html)
            await driver.initialize()
            try:
                summary = await driver.run()
            finally:
                await driver.cleanup()

        lines = Path(summary.worklist_path).read_text(encoding='utf-8').splitlines()
        assert lines[0] == "name,link,done,timestamp"
        assert lines[1].startswith(f"Alpha,{LINKS[0]},Y,")


class TestThrottling:
    """Waits between rows"""

    @pytest.fixture
    def mostly_done(self, tmp_path):
        return write_csv(tmp_path / "mostly_done.csv", [
            "link,done",
            f"{LINKS[0]},Y",
            f"{LINKS[1]},Y",
            f"{LINKS[2]},"
        ])

    async def _run(self, driver, body):
        with aioresponses() as m:
            m.get(LINKS[2], status=200, body=body)
            await driver.initialize()
            try:
                return await driver.run()
            finally:
                await driver.cleanup()

    @pytest.mark.asyncio
    async def test_skipped_rows_are_throttled_by_default(self, mostly_done, bare_boat_html):
        driver = create_driver(make_config(), mostly_done)
        driver.rate_limiter.wait = AsyncMock()

        await self._run(driver, bare_boat_html)

        # after rows 0 and 1, none after the last row
        assert driver.rate_limiter.wait.await_count == 2

    @pytest.mark.asyncio
    async def test_skipped_rows_not_throttled_when_disabled(self, mostly_done, bare_boat_html):
        config = make_config()
        config['throttle_skipped_rows'] = False
        driver = create_driver(config, mostly_done)
        driver.rate_limiter.wait = AsyncMock()

        await self._run(driver, bare_boat_html)

        driver.rate_limiter.wait.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wait_between_processed_rows(self, worklist, bare_boat_html):
        driver = create_driver(make_config(), worklist)
        driver.rate_limiter.wait = AsyncMock()

        with aioresponses() as m:
            for link in LINKS:
                m.get(link, status=200, body=bare_boat_html)
            await driver.initialize()
            try:
                await driver.run()
            finally:
                await driver.cleanup()

        assert driver.rate_limiter.wait.await_count == 2


class TestInterruption:
    """Interrupted runs still flush their outputs"""

    @pytest.mark.asyncio
    async def test_interrupt_flushes_partial_results(self, worklist, bare_boat_html):
        driver = create_driver(make_config(), worklist)

        async def fetch(url):
            if url == LINKS[0]:
                return FetchResult(url=url, success=True, status_code=200, body=bare_boat_html)
            raise asyncio.CancelledError()

        driver.fetcher.fetch = AsyncMock(side_effect=fetch)
        await driver.initialize()
        try:
            summary = await driver.run()
        finally:
            await driver.cleanup()

        assert summary.interrupted
        assert summary.report.processed == 1
        assert summary.report.failed == 0
        assert summary.report.unvisited == 2
        assert summary.report.balanced

        assert len(read_json(summary.boats_path)) == 1
        assert read_json(summary.vendors_path) == []
        rows = read_json(summary.worklist_path)
        assert rows[0]['done'] == DONE_FLAG
        assert 'done' not in rows[1]
        assert 'done' not in rows[2]


    @pytest.mark.asyncio
    async def test_unexpected_error_still_flushes(self, worklist, bare_boat_html):
        driver = create_driver(make_config(), worklist)

        async def fetch(url):
            if url == LINKS[0]:
                return FetchResult(url=url, success=True, status_code=200, body=bare_boat_html)
            raise RuntimeError("session exploded")

        driver.fetcher.fetch = AsyncMock(side_effect=fetch)
        await driver.initialize()
        try:
            with pytest.raises(RuntimeError, match="session exploded"):
                await driver.run()
        finally:
            await driver.cleanup()

        assert [boat['row_index'] for boat in read_json(driver.boats_path)] == [0]
        assert read_json(driver.vendors_path) == []
        rows = read_json(driver.worklist_path)
        assert rows[0]['done'] == DONE_FLAG
        assert 'done' not in rows[1]


class TestWriteFailures:
    """Storage errors"""

    @pytest.mark.asyncio
    async def test_all_outputs_attempted(self, worklist, bare_boat_html):
        driver = create_driver(make_config(), worklist)
        driver.writer.save_boats = AsyncMock(side_effect=StorageError("Failed to write boats"))
        driver.writer.save_vendors = AsyncMock()
        driver.writer.save_worklist = AsyncMock()

        with aioresponses() as m:
            for link in LINKS:
                m.get(link, status=200, body=bare_boat_html)
            await driver.initialize()
            try:
                with pytest.raises(StorageError, match="boats"):
                    await driver.run()
            finally:
                await driver.cleanup()

        driver.writer.save_vendors.assert_awaited_once()
        driver.writer.save_worklist.assert_awaited_once()
