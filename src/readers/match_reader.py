"""
Match sheet extraction.

Each match sheet is a fixed grid: scores in row 4, possession in row 5,
score sources in rows 7-14 and shot sources in rows 16-23. Home columns
are B-D and opposition columns E-G (1st, 2nd, Full).
"""

import logging
from typing import Optional

from openpyxl.worksheet.worksheet import Worksheet

from config import WORKBOOK_CONFIG
from etl.exceptions import GridCountError, ParsingError
from etl.models import MatchSheetData, TeamStatisticsData
from etl.results import ReadResult
from readers.constants import (
    EXPECTED_TEAM_STATISTICS,
    PERIOD_OFFSETS,
    POSSESSION_ROW,
    SCORE_ROW,
    SCORE_SOURCE_START_ROW,
    SHOT_SOURCE_START_ROW,
    SOURCE_ROWS,
    TEAM_COLUMN_OFFSETS,
)
from readers.sheet_classifier import MetadataParser, is_match_sheet
from readers.workbook import cell_text, open_workbook
from utils.cell_utils import CellConverter


class ExcelMatchDataReader:
    """Reads match sheets from a GAA statistics workbook."""

    def __init__(self, home_team: Optional[str] = None):
        self.home_team = home_team or WORKBOOK_CONFIG["home_team"]
        self.metadata_parser = MetadataParser(self.home_team)
        self.logger = logging.getLogger(__name__)

    def read_match_sheets(self, file_path) -> ReadResult[MatchSheetData]:
        """
        Extract every match sheet in the workbook.

        A sheet that fails to parse is recorded as an error and skipped;
        the other sheets are still extracted.

        Args:
            file_path: Path to the .xlsx workbook

        Returns:
            ReadResult with one MatchSheetData per extracted sheet

        Raises:
            WorkbookNotFoundError: If the file does not exist
        """
        result = ReadResult()

        with open_workbook(file_path) as workbook:
            for ws in workbook.worksheets:
                if not is_match_sheet(ws.title):
                    self.logger.debug(f"Skipping non-match sheet: {ws.title}")
                    continue

                try:
                    self.logger.debug(f"Processing match sheet: {ws.title}")
                    match_data, warnings = self.extract_match_data(ws)
                    result.items.append(match_data)
                    for warning in warnings:
                        result.add_warning("COMPETITION_DEFAULTED", warning, ws.title)

                except (ParsingError, GridCountError) as e:
                    self.logger.error(f"✗ Error extracting data from sheet '{ws.title}': {e.message}")
                    result.add_error(e.code, e.message, ws.title)

        self.logger.info(f"Found {len(result.items)} match sheets")
        return result

    def extract_match_data(self, ws: Worksheet):
        """
        Extract metadata, scores and the 6 team-period records of one sheet.

        Returns:
            Tuple (MatchSheetData, warnings)
        """
        metadata, warnings = self.metadata_parser.parse_match_metadata(ws.title, cell_text(ws, 1, 2))

        match_data = MatchSheetData(
            sheet_name=ws.title,
            match_number=metadata.match_number,
            competition=metadata.competition,
            opposition=metadata.opposition,
            match_date=metadata.match_date
        )

        # B4..G4
        match_data.home_score_first_half = cell_text(ws, SCORE_ROW, 2) or None
        match_data.home_score_second_half = cell_text(ws, SCORE_ROW, 3) or None
        match_data.home_score_full_time = cell_text(ws, SCORE_ROW, 4) or None
        match_data.away_score_first_half = cell_text(ws, SCORE_ROW, 5) or None
        match_data.away_score_second_half = cell_text(ws, SCORE_ROW, 6) or None
        match_data.away_score_full_time = cell_text(ws, SCORE_ROW, 7) or None

        match_data.team_statistics = self._extract_team_statistics(ws, match_data)

        if len(match_data.team_statistics) != EXPECTED_TEAM_STATISTICS:
            raise GridCountError(
                f"Expected {EXPECTED_TEAM_STATISTICS} team statistics records, "
                f"found {len(match_data.team_statistics)}",
                sheet_name=ws.title
            )

        self.logger.debug(f"Extracted {len(match_data.team_statistics)} team statistics records from '{ws.title}'")
        return match_data, warnings

    def _extract_team_statistics(self, ws: Worksheet, match_data: MatchSheetData):
        teams = {
            "home": self.home_team,
            "opposition": match_data.opposition
        }

        records = []
        for period, period_offset in PERIOD_OFFSETS.items():
            for team_key, team_column in TEAM_COLUMN_OFFSETS.items():
                column = team_column + period_offset
                stats = TeamStatisticsData(
                    team_name=teams[team_key],
                    period=period,
                    scoreline=cell_text(ws, SCORE_ROW, column) or None,
                    total_possession=CellConverter.safe_float(ws.cell(row=POSSESSION_ROW, column=column).value)
                )

                for index, category in enumerate(SOURCE_ROWS):
                    stats.score_sources[category] = CellConverter.safe_int(
                        ws.cell(row=SCORE_SOURCE_START_ROW + index, column=column).value
                    )
                    stats.shot_sources[category] = CellConverter.safe_int(
                        ws.cell(row=SHOT_SOURCE_START_ROW + index, column=column).value
                    )

                records.append(stats)

        return records
