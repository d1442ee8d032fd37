"""
KPI Definitions sheet reader.

Layout: headers in row 2, row 3 empty, data from row 4 in columns A-F.
Event number and event name are merged cells spanning each event's
outcome rows, so they are forward-filled.
"""

import logging
from typing import List, NamedTuple, Optional, Tuple

import pandas as pd
from openpyxl.worksheet.worksheet import Worksheet

from config import ETL_CONFIG, WORKBOOK_CONFIG
from etl.exceptions import ParsingError, SheetNotFoundError
from etl.models import KpiDefinitionData
from readers.constants import KPI_COLUMNS, KPI_EXPECTED_HEADERS
from readers.workbook import cell_text, open_workbook
from utils.cell_utils import CellConverter


class ForwardFillState(NamedTuple):
    """Accumulator threaded through the KPI row scan."""
    last_event_number: Optional[int] = None
    last_event_name: Optional[str] = None
    blank_run: int = 0


class ExcelKpiDataReader:
    """Reads KPI definitions from the "KPI Definitions" sheet."""

    def __init__(self, sheet_name: Optional[str] = None, max_blank_rows: Optional[int] = None):
        self.sheet_name = sheet_name or WORKBOOK_CONFIG["kpi_sheet"]
        self.header_row = WORKBOOK_CONFIG["kpi_header_row"]
        self.data_start_row = WORKBOOK_CONFIG["kpi_data_start_row"]
        self.max_blank_rows = ETL_CONFIG["kpi_max_blank_rows"] if max_blank_rows is None else max_blank_rows
        self.logger = logging.getLogger(__name__)

    def read_kpi_definitions(self, file_path) -> List[KpiDefinitionData]:
        """
        Read all KPI definitions from the workbook.

        Args:
            file_path: Path to the .xlsx workbook

        Returns:
            List of KpiDefinitionData in sheet order

        Raises:
            WorkbookNotFoundError: If the file does not exist
            SheetNotFoundError: If the KPI sheet is missing
            ParsingError: If an event number or PSR value cannot be parsed
        """
        with open_workbook(file_path) as workbook:
            ws = self._find_kpi_sheet(workbook.worksheets)
            if ws is None:
                self.logger.warning(f"{self.sheet_name} sheet not found in Excel file")
                raise SheetNotFoundError(f"Sheet '{self.sheet_name}' not found in Excel file")

            if not self.validate_headers(ws):
                self.logger.warning(f"Unexpected header row in '{ws.title}'; reading by column position")

            frame = self.load_frame(ws)

        definitions = self.extract_definitions(frame)
        self.logger.info(f"Extracted {len(definitions)} KPI definitions")
        return definitions

    def _find_kpi_sheet(self, worksheets) -> Optional[Worksheet]:
        wanted = self.sheet_name.lower()
        for ws in worksheets:
            if ws.title.strip().lower() == wanted:
                return ws
        return None

    def load_frame(self, ws: Worksheet) -> pd.DataFrame:
        """
        Raw A-F cell values from the data start row onwards.

        The index is the 1-based worksheet row number.
        """
        rows = list(ws.iter_rows(min_row=self.data_start_row, max_col=len(KPI_COLUMNS), values_only=True))
        frame = pd.DataFrame(rows, columns=KPI_COLUMNS, dtype=object)
        frame.index = range(self.data_start_row, self.data_start_row + len(frame))
        self.logger.debug(f"Loaded {len(frame)} raw rows from '{ws.title}'")
        return frame

    def extract_definitions(self, frame: pd.DataFrame) -> List[KpiDefinitionData]:
        """Fold the raw rows into definitions, stopping after a run of blank rows."""
        definitions = []
        state = ForwardFillState()

        for row_number, values in frame.iterrows():
            state, definition = self._step(state, int(row_number), values)

            # 0 and 1 both stop at the first blank row
            if state.blank_run and state.blank_run >= self.max_blank_rows:
                self.logger.debug(f"{state.blank_run} consecutive empty rows at {row_number}, stopping extraction")
                break

            if definition is not None:
                definitions.append(definition)

        return definitions

    def _step(self, state: ForwardFillState, row: int,
              values: pd.Series) -> Tuple[ForwardFillState, Optional[KpiDefinitionData]]:
        if all(CellConverter.is_blank(v) for v in values):
            return state._replace(blank_run=state.blank_run + 1), None

        event_number = self._parse_int(values["event_number"], row, "Event Number")
        event_name = CellConverter.safe_text(values["event_name"])

        state = ForwardFillState(
            last_event_number=event_number if event_number is not None else state.last_event_number,
            last_event_name=event_name or state.last_event_name,
            blank_run=0
        )

        psr_value = self._parse_decimal(values["psr_value"], row, "PSR Value")

        definition = KpiDefinitionData(
            event_number=state.last_event_number or 0,
            event_name=state.last_event_name or "",
            outcome=CellConverter.safe_text(values["outcome"]) or "",
            team_assignment=CellConverter.safe_text(values["team_assignment"]) or "",
            psr_value=psr_value if psr_value is not None else 0.0,
            definition=CellConverter.safe_text(values["definition"]) or "",
            source_row_number=row
        )
        return state, definition

    @staticmethod
    def _parse_int(value, row: int, field_name: str) -> Optional[int]:
        try:
            return CellConverter.to_int(value)
        except (ValueError, TypeError):
            raise ParsingError(f"Invalid integer value for '{field_name}' at row {row}: {value}", row=row)

    @staticmethod
    def _parse_decimal(value, row: int, field_name: str) -> Optional[float]:
        try:
            return CellConverter.to_float(value)
        except (ValueError, TypeError):
            raise ParsingError(f"Invalid decimal value for '{field_name}' at row {row}: {value}", row=row)

    def validate_headers(self, ws: Worksheet) -> bool:
        """Check that row 2 carries the expected A-F headers."""
        for column, expected in enumerate(KPI_EXPECTED_HEADERS, start=1):
            actual = cell_text(ws, self.header_row, column)
            if actual.lower() != expected.lower():
                self.logger.warning(
                    f"Header mismatch at column {column}: expected '{expected}', found '{actual}'"
                )
                return False
        return True
