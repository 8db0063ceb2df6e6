"""
Tests for worklist loading and serialization
"""

import csv
import io
import pytest

from boat_scraper.core.base import WorkRow, StartupError
from boat_scraper.storage.worklist import (
    parse_worklist,
    count_done,
    load_worklist,
    dump_worklist_csv,
    dump_worklist_json,
    worklist_columns
)


CSV_WORKLIST = (
    "ref,link,done,timestamp\n"
    "A1, https://www.bandofboats.com/fr/bateau/1 ,Y,2024-01-01T00:00:00+00:00\n"
    "A2,https://www.bandofboats.com/fr/bateau/2,,\n"
    "A3,https://www.bandofboats.com/fr/bateau/3,N,\n"
)


class TestParse:
    """Parsing CSV and JSON worklists"""

    def test_csv_rows(self):
        rows, fieldnames = parse_worklist(CSV_WORKLIST)

        assert fieldnames == ['ref', 'link', 'done', 'timestamp']
        assert [row.index for row in rows] == [0, 1, 2]
        assert rows[0].link == "https://www.bandofboats.com/fr/bateau/1"
        assert rows[0].is_done
        assert rows[0].extra == {'ref': 'A1'}
        assert not rows[1].is_done
        assert not rows[2].is_done

    def test_only_exact_flag_counts_as_done(self):
        raw = "link,done\nhttps://a/1,y\nhttps://a/2,Y\nhttps://a/3,yes\n"
        rows, _ = parse_worklist(raw)

        assert [row.is_done for row in rows] == [False, True, False]
        assert count_done(raw) == 1

    def test_json_rows(self):
        raw = ('[{"link": "https://a/1", "done": "Y", "timestamp": "t"},'
               ' {"link": "https://a/2", "note": "x"}]')
        rows, fieldnames = parse_worklist(raw)

        assert fieldnames == ['link', 'done', 'timestamp', 'note']
        assert rows[0].is_done
        assert rows[1].done is None
        assert rows[1].extra == {'note': 'x'}
        assert count_done(raw) == 1

    def test_missing_link_column(self):
        with pytest.raises(StartupError, match="no 'link' column"):
            parse_worklist("url,done\nhttps://a/1,\n")

    def test_invalid_json(self):
        with pytest.raises(StartupError, match="not valid JSON"):
            parse_worklist("[{")

    def test_json_must_hold_objects(self):
        with pytest.raises(StartupError, match="array of objects"):
            parse_worklist('["https://a/1"]')

    def test_empty_table(self):
        rows, fieldnames = parse_worklist("link,done\n")
        assert rows == []
        assert count_done("link,done\n") == 0


class TestLoad:
    """Loading from disk"""

    def test_load(self, tmp_path):
        path = tmp_path / "boats.csv"
        path.write_text(CSV_WORKLIST, encoding="utf-8")

        rows, fieldnames, already_done = load_worklist(str(path))

        assert len(rows) == 3
        assert already_done == 1
        assert 'link' in fieldnames

    def test_byte_order_mark_is_ignored(self, tmp_path):
        path = tmp_path / "boats.csv"
        path.write_text(CSV_WORKLIST, encoding="utf-8-sig")

        _, fieldnames, _ = load_worklist(str(path))

        assert fieldnames[0] == 'ref'

    def test_missing_file(self, tmp_path):
        with pytest.raises(StartupError, match="does not exist"):
            load_worklist(str(tmp_path / "absent.csv"))


class TestDump:
    """Writing the updated worklist"""

    def test_columns_gain_done_and_timestamp(self):
        assert worklist_columns(['link']) == ['link', 'done', 'timestamp']
        assert worklist_columns(['done', 'link']) == ['done', 'link', 'timestamp']

    def test_csv_round_trip_preserves_extra_columns(self):
        rows, fieldnames = parse_worklist(CSV_WORKLIST)

        data = dump_worklist_csv(rows, fieldnames)
        records = list(csv.DictReader(io.StringIO(data)))

        assert [record['ref'] for record in records] == ['A1', 'A2', 'A3']
        assert records[0]['done'] == 'Y'
        assert records[0]['timestamp'] == '2024-01-01T00:00:00+00:00'
        assert records[2]['done'] == 'N'

    def test_json_omits_unset_flags(self):
        rows = [WorkRow(index=0, link="https://a/1", extra={'ref': 'A1'})]

        assert dump_worklist_json(rows, indent=None) == '[{"ref": "A1", "link": "https://a/1"}]'
