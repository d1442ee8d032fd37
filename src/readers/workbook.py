"""Workbook access helpers shared by the sheet readers."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from config import WORKBOOK_CONFIG
from etl.exceptions import WorkbookNotFoundError


logger = logging.getLogger(__name__)


@contextmanager
def open_workbook(file_path) -> Generator[Workbook, None, None]:
    """
    Open an .xlsx workbook read-only with cached formula values.

    Args:
        file_path: Path to the workbook

    Yields:
        openpyxl Workbook, closed on exit

    Raises:
        WorkbookNotFoundError: If the file does not exist
    """
    path = Path(file_path)
    if not path.is_file():
        logger.error(f"Excel file not found: {path}")
        raise WorkbookNotFoundError(f"Excel file not found: {path}")

    logger.info(f"Reading Excel file: {path}")
    workbook = load_workbook(path, data_only=True)
    try:
        yield workbook
    finally:
        workbook.close()


def find_sheet(workbook: Workbook, sheet_name: str,
               prefix_length: Optional[int] = None) -> Optional[Worksheet]:
    """
    Find a worksheet by name.

    Exact case-insensitive match first; then a prefix match on the first
    `prefix_length` characters, for names Excel truncated.

    Returns:
        Worksheet or None if not found
    """
    wanted = sheet_name.strip().lower()

    for ws in workbook.worksheets:
        if ws.title.strip().lower() == wanted:
            return ws

    if prefix_length is None:
        prefix_length = WORKBOOK_CONFIG["sheet_prefix_length"]

    prefix = wanted[:prefix_length]
    for ws in workbook.worksheets:
        if ws.title.strip().lower().startswith(prefix):
            logger.debug(f"Sheet '{sheet_name}' matched by prefix: '{ws.title}'")
            return ws

    return None


def cell_text(ws: Worksheet, row: int, column: int) -> str:
    """Displayed text of a cell ('' for empty cells)."""
    value = ws.cell(row=row, column=column).value
    if value is None:
        return ""
    return str(value).strip()
