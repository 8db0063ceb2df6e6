"""
Result Writer Implementation

Writes the three artifacts of a run: the boats document, the vendors
document and the updated worklist.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

import aiofiles

from boat_scraper.core.base import (
    ResultWriterInterface,
    BoatRecord,
    VendorRecord,
    WorkRow,
    StorageError
)
from boat_scraper.storage.worklist import dump_worklist_json, dump_worklist_csv


class JSONResultWriter(ResultWriterInterface):
    """
    Writes records as JSON documents, overwriting existing files
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.logger = logging.getLogger(__name__)
        output = config.get('output', {})
        self.indent: Optional[int] = output.get('indent', 2)
        self.worklist_format = output.get('worklist_format', 'json')

    async def initialize(self) -> None:
        """Initialize the component"""
        self._initialized = True

    async def cleanup(self) -> None:
        """Clean up resources"""
        pass

    async def save_boats(self, boats: List[BoatRecord], path: str) -> str:
        """
        Write the boats document

        Args:
            boats: Boat records in processing order
            path: Destination file

        Returns:
            Path written
        """
        data = json.dumps([boat.to_dict() for boat in boats], ensure_ascii=False, indent=self.indent)
        await self._write(path, data)
        self.logger.info(f"Saved {len(boats)} boats to {path}")
        return path

    async def save_vendors(self, vendors: List[VendorRecord], path: str) -> str:
        """Write the vendors document"""
        data = json.dumps([vendor.to_dict() for vendor in vendors], ensure_ascii=False, indent=self.indent)
        await self._write(path, data)
        self.logger.info(f"Saved {len(vendors)} vendors to {path}")
        return path

    async def save_worklist(self, rows: List[WorkRow], path: str,
                            fieldnames: Optional[List[str]] = None) -> str:
        """Write the updated worklist as JSON, or CSV when configured"""
        if self.worklist_format == 'csv':
            data = dump_worklist_csv(rows, fieldnames or ['link'])
        else:
            data = dump_worklist_json(rows, self.indent)

        await self._write(path, data)
        self.logger.info(f"Saved updated worklist ({len(rows)} rows) to {path}")
        return path

    async def _write(self, path: str, data: str) -> None:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, 'w', encoding='utf-8', newline='') as f:
                await f.write(data)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")
