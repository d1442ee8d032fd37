"""
Player statistics sheet extraction.

Row 3 of each "<n>. Player stats vs ..." sheet holds short header tokens.
Tokens repeat across sections, so columns are resolved by occurrence
order against the static header table in etl.player_fields.
"""

import logging
import threading
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from openpyxl.worksheet.worksheet import Worksheet

from config import ETL_CONFIG, WORKBOOK_CONFIG
from etl.exceptions import FieldValidationError, ParsingError
from etl.models import PlayerStatisticsData, PlayerStatsSheetData
from etl.player_fields import (
    CRITICAL_FIELDS,
    EXACT_HEADER_TABLE,
    SHARED_HEADER_TABLE,
    FieldKind,
    PlayerField,
)
from etl.results import ReadResult
from readers.sheet_classifier import MetadataParser, is_player_stats_sheet
from readers.workbook import cell_text, open_workbook
from utils.cell_utils import CellConverter


class PlayerStatsHeaderParser:
    """Builds the PlayerField -> column map for one player stats sheet."""

    def __init__(self, header_row: Optional[int] = None, min_expected_fields: Optional[int] = None):
        self.header_row = header_row or WORKBOOK_CONFIG["player_header_row"]
        self.min_expected_fields = min_expected_fields or ETL_CONFIG["min_expected_player_fields"]
        self.logger = logging.getLogger(__name__)

    def parse_header_row(self, ws: Worksheet) -> Tuple[Dict[PlayerField, int], List[str], List[str]]:
        """
        Map header columns to fields.

        An exact suffixed token ("Tot_Frees") maps directly; otherwise the
        n-th occurrence of a shared header text maps to the n-th field that
        shares it ("Tot" -> shots, frees, tackles, frees conceded, 50m).

        Args:
            ws: Player stats worksheet

        Returns:
            Tuple (field_map, warnings, duplicate_columns)

        Raises:
            ParsingError: If a critical field (#, Player Name, Min) is missing
        """
        field_map: Dict[PlayerField, int] = {}
        occurrences = defaultdict(int)
        warnings = []
        duplicates = []

        for column in range(1, ws.max_column + 1):
            header = cell_text(ws, self.header_row, column)
            if not header:
                continue

            key = header.lower()
            field = EXACT_HEADER_TABLE.get(key)

            if field is None or field.header.lower() == field.shared_header.lower():
                candidates = SHARED_HEADER_TABLE.get(key)
                if not candidates:
                    warnings.append(f"Unrecognized header '{header}' in column {column} ignored")
                    continue

                index = occurrences[key]
                occurrences[key] += 1
                if index >= len(candidates):
                    warnings.append(
                        f"Surplus header '{header}' in column {column} ignored "
                        f"(occurrence {index + 1} of {len(candidates)} expected)"
                    )
                    continue
                field = candidates[index]

            if field in field_map:
                duplicates.append(header)
                warnings.append(
                    f"Duplicate column for '{field.header}' in column {column} ignored "
                    f"(already mapped to column {field_map[field]})"
                )
                continue

            field_map[field] = column

        missing = [f.header for f in CRITICAL_FIELDS if f not in field_map]
        if missing:
            raise ParsingError(f"Critical field(s) missing from header row: {', '.join(missing)}",
                               sheet_name=ws.title, row=self.header_row)

        if len(field_map) < self.min_expected_fields:
            warnings.append(
                f"Only {len(field_map)} of {len(PlayerField)} expected fields mapped "
                f"(minimum {self.min_expected_fields})"
            )

        self.logger.debug(f"Mapped {len(field_map)} header columns in '{ws.title}'")
        return field_map, warnings, duplicates


class ExcelPlayerDataReader:
    """Reads player statistics sheets from a GAA statistics workbook."""

    def __init__(self, home_team: Optional[str] = None, etl_config: Optional[Dict] = None):
        self.etl_config = {**ETL_CONFIG, **(etl_config or {})}
        self.metadata_parser = MetadataParser(home_team)
        self.header_parser = PlayerStatsHeaderParser(
            min_expected_fields=self.etl_config["min_expected_player_fields"]
        )
        self.data_start_row = WORKBOOK_CONFIG["player_data_start_row"]
        self.logger = logging.getLogger(__name__)

    def read_player_stats_sheets(self, file_path,
                                 cancel_event: Optional[threading.Event] = None) -> ReadResult[PlayerStatsSheetData]:
        """
        Extract every player stats sheet in the workbook.

        Args:
            file_path: Path to the .xlsx workbook
            cancel_event: Checked between sheets; a set event stops the scan

        Returns:
            ReadResult with one PlayerStatsSheetData per extracted sheet

        Raises:
            WorkbookNotFoundError: If the file does not exist
        """
        result = ReadResult()

        with open_workbook(file_path) as workbook:
            for ws in workbook.worksheets:
                if cancel_event is not None and cancel_event.is_set():
                    result.add_warning("CANCELLED", "Player sheet extraction cancelled")
                    break

                if not is_player_stats_sheet(ws.title):
                    continue

                try:
                    sheet_data = self.extract_player_stats_sheet(ws, result)
                    result.items.append(sheet_data)
                    self.logger.debug(f"Extracted {len(sheet_data.players)} players from '{ws.title}'")

                except ParsingError as e:
                    self.logger.error(f"✗ Error extracting sheet '{ws.title}': {e.message}")
                    result.add_error(e.code, e.message, ws.title, e.row)

        self.logger.info(f"Found {len(result.items)} player stats sheets")
        return result

    def extract_player_stats_sheet(self, ws: Worksheet, result: ReadResult) -> PlayerStatsSheetData:
        """Parse metadata, header and player rows of one sheet. Row issues go to result warnings."""
        match_number, opposition, match_date = self.metadata_parser.parse_player_sheet_metadata(
            ws.title, cell_text(ws, 1, 2)
        )

        field_map, header_warnings, duplicates = self.header_parser.parse_header_row(ws)
        for warning in header_warnings:
            result.add_warning("HEADER", warning, ws.title, self.header_parser.header_row)

        sheet_data = PlayerStatsSheetData(
            sheet_name=ws.title,
            match_number=match_number,
            opposition=opposition,
            match_date=match_date,
            field_map=field_map,
            duplicate_columns=duplicates
        )

        jersey_column = field_map[PlayerField.JERSEY_NUMBER]
        name_column = field_map[PlayerField.PLAYER_NAME]

        for row in range(self.data_start_row, ws.max_row + 1):
            jersey_value = ws.cell(row=row, column=jersey_column).value
            name = CellConverter.safe_text(ws.cell(row=row, column=name_column).value)
            jersey_blank = CellConverter.is_blank(jersey_value)

            if jersey_blank and name is None:
                break

            if jersey_blank or name is None:
                result.add_warning("INCOMPLETE_ROW", "Row has only one of jersey number and player name; skipped",
                                   ws.title, row)
                continue

            jersey = CellConverter.safe_int(jersey_value)
            if jersey is None or jersey <= 0:
                result.add_warning("INVALID_JERSEY", f"Invalid jersey number '{jersey_value}'; row skipped",
                                   ws.title, row)
                continue

            sheet_data.players.append(self._extract_player_row(ws, row, jersey, name, field_map, result))

        return sheet_data

    def _extract_player_row(self, ws: Worksheet, row: int, jersey: int, name: str,
                            field_map: Dict[PlayerField, int], result: ReadResult) -> PlayerStatisticsData:
        player = PlayerStatisticsData(jersey_number=jersey, player_name=name, source_row=row)

        for field in PlayerField.statistic_fields():
            column = field_map.get(field)
            if column is None:
                continue

            raw = ws.cell(row=row, column=column).value
            try:
                value = self._convert_cell(field, raw)
            except FieldValidationError as e:
                result.add_warning(e.code, e.message, ws.title, row)
                value = 0 if field.kind is FieldKind.INT else None
            player.set(field, value)

        return player

    @staticmethod
    def _convert_cell(field: PlayerField, raw):
        """Convert one statistic cell. Blank counts read as 0."""
        if field.kind is FieldKind.TEXT:
            return CellConverter.safe_text(raw)

        if field.kind is FieldKind.DECIMAL:
            value = CellConverter.safe_float(raw)
        else:
            value = CellConverter.safe_int(raw)

        if value is None and not CellConverter.is_blank(raw):
            raise FieldValidationError(field.header, raw, "not numeric")

        if value is None and field.kind is FieldKind.INT:
            return 0
        return value
