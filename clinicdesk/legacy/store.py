"""
Spreadsheet store - one workbook per entity under the legacy directory.
"""
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter

# Set up logging
logger = logging.getLogger(__name__)


def _cell_value(value: Any) -> Any:
    """Flatten a record value into something a worksheet cell can hold."""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return value


class SheetStore:
    """
    Reads and rewrites whole entity sheets.

    Each entity lives in ``<directory>/<entity>.xlsx`` with a header row of
    field names followed by one row per record.
    """

    def __init__(self, directory: str):
        self.directory = Path(directory).expanduser()

    def path_for(self, entity: str) -> Path:
        return self.directory / f"{entity}.xlsx"

    def exists(self, entity: str) -> bool:
        return self.path_for(entity).exists()

    def read_records(self, entity: str) -> List[Dict[str, Any]]:
        """
        Read every row of an entity sheet as a dict keyed by the header row.

        A missing workbook reads as no records. Fully empty rows are skipped.
        """
        path = self.path_for(entity)
        if not path.exists():
            logger.info(f"No legacy sheet for {entity} at {path}")
            return []

        wb = load_workbook(path, read_only=True, data_only=True)
        try:
            rows = list(wb.active.iter_rows(values_only=True))
        finally:
            wb.close()

        if not rows:
            return []
        headers = [str(h).strip() if h is not None else "" for h in rows[0]]
        records = []
        for row in rows[1:]:
            if row is None or all(cell is None or cell == "" for cell in row):
                continue
            values = list(row) + [None] * (len(headers) - len(row))
            records.append({
                header: value
                for header, value in zip(headers, values)
                if header
            })
        return records

    def write_records(self, entity: str, records: List[Dict[str, Any]], headers: Optional[List[str]] = None) -> Path:
        """
        Rewrite an entity sheet with the given records.

        Args:
            entity: Entity name, used for the file and sheet title
            records: Records as plain dicts
            headers: Column order; defaults to the keys in first-seen order

        Returns:
            Path of the written workbook
        """
        if headers is None:
            headers = []
            for record in records:
                for key in record:
                    if key not in headers:
                        headers.append(key)

        self.directory.mkdir(parents=True, exist_ok=True)
        wb = Workbook()
        ws = wb.active
        ws.title = entity[:31]
        ws.append(headers)
        for record in records:
            ws.append([_cell_value(record.get(header)) for header in headers])

        for col in range(1, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col)].width = 18

        path = self.path_for(entity)
        wb.save(path)
        logger.info(f"Wrote {len(records)} {entity} rows to {path}")
        return path
