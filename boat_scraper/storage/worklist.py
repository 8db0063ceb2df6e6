"""
Worklist loading and serialization.

The input is a CSV table with at least a ``link`` column; ``done`` and
``timestamp`` are optional and every other column is carried through. A JSON
array of objects, as written to the updated worklist, is accepted too so a
run can resume from the previous run's output.
"""

import csv
import io
import json
import logging
from pathlib import Path
from typing import List, Dict, Any, Tuple, Optional

from boat_scraper.core.base import WorkRow, StartupError, DONE_FLAG


logger = logging.getLogger(__name__)

RESERVED_COLUMNS = ('link', 'done', 'timestamp')


def read_worklist_text(path: str) -> str:
    """Read the raw worklist file, turning I/O problems into StartupError"""
    file_path = Path(path)
    if not file_path.is_file():
        raise StartupError(f"Input file does not exist: {path}")

    try:
        return file_path.read_text(encoding='utf-8-sig')
    except (OSError, UnicodeDecodeError) as e:
        raise StartupError(f"Input file is not readable: {path}: {e}")


def _is_json(raw: str) -> bool:
    return raw.lstrip().startswith('[')


def _records(raw: str) -> Tuple[List[Dict[str, Any]], List[str]]:
    """Decode raw worklist text into plain records and ordered column names"""
    if _is_json(raw):
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StartupError(f"Worklist is not valid JSON: {e}")
        if not all(isinstance(item, dict) for item in data):
            raise StartupError("JSON worklist must be an array of objects")

        fieldnames: List[str] = []
        for item in data:
            for key in item:
                if key not in fieldnames:
                    fieldnames.append(key)
        return data, fieldnames

    try:
        reader = csv.DictReader(io.StringIO(raw))
        fieldnames = list(reader.fieldnames or [])
        return list(reader), fieldnames
    except csv.Error as e:
        raise StartupError(f"Worklist is not valid CSV: {e}")


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def parse_worklist(raw: str) -> Tuple[List[WorkRow], List[str]]:
    """
    Parse worklist text into rows

    Args:
        raw: CSV or JSON contents

    Returns:
        Tuple of (rows in file order, column names in file order)

    Raises:
        StartupError: If the table is malformed or has no link column
    """
    records, fieldnames = _records(raw)
    if 'link' not in fieldnames:
        raise StartupError(f"Worklist has no 'link' column (columns: {fieldnames})")

    rows = []
    for index, record in enumerate(records):
        extra = {
            key: value for key, value in record.items()
            if key not in RESERVED_COLUMNS and key is not None
        }
        rows.append(WorkRow(
            index=index,
            link=str(record.get('link') or '').strip(),
            done=_optional_str(record.get('done')),
            timestamp=_optional_str(record.get('timestamp')),
            extra=extra
        ))

    return rows, fieldnames


def count_done(raw: str) -> int:
    """Count rows flagged done, from the raw contents rather than parsed rows"""
    records, _ = _records(raw)
    return sum(1 for record in records if record.get('done') == DONE_FLAG)


def load_worklist(path: str) -> Tuple[List[WorkRow], List[str], int]:
    """
    Load a worklist file

    Returns:
        Tuple of (rows, column names, number of rows already done on entry)
    """
    raw = read_worklist_text(path)
    rows, fieldnames = parse_worklist(raw)
    already_done = count_done(raw)

    missing_links = [row.index for row in rows if not row.link]
    if missing_links:
        logger.warning(f"Worklist rows without a link: {missing_links}")

    return rows, fieldnames, already_done


def worklist_columns(fieldnames: List[str]) -> List[str]:
    """Input columns followed by any of done/timestamp the input lacked"""
    columns = list(fieldnames)
    for column in ('done', 'timestamp'):
        if column not in columns:
            columns.append(column)
    return columns


def dump_worklist_json(rows: List[WorkRow], indent: Optional[int] = 2) -> str:
    return json.dumps([row.to_dict() for row in rows], ensure_ascii=False, indent=indent)


def dump_worklist_csv(rows: List[WorkRow], fieldnames: List[str]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=worklist_columns(fieldnames), extrasaction='ignore')
    writer.writeheader()
    for row in rows:
        writer.writerow(row.to_dict())
    return buffer.getvalue()
