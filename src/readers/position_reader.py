"""
Position category sheet reader.

The Goalkeepers, Defenders, Midfielders and Forwards sheets list player
names in column B, one player block every 28 rows starting at row 4.
Position sheets carry no jersey numbers, so the mapping is keyed by
normalized name only.
"""

import logging
import time
from typing import Dict, List, Optional

from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from config import WORKBOOK_CONFIG
from etl.models import PositionMappingResult
from etl.name_normalizer import normalize_player_key
from readers.workbook import cell_text, find_sheet, open_workbook


class ExcelPositionSheetReader:
    """Reads the player -> position mapping from the position sheets."""

    def __init__(self, workbook_config: Optional[Dict] = None):
        config = {**WORKBOOK_CONFIG, **(workbook_config or {})}
        self.position_sheets = config["position_sheets"]
        self.start_row = config["position_start_row"]
        self.name_column = config["position_name_column"]
        self.row_interval = config["position_row_interval"]
        self.prefix_length = config["sheet_prefix_length"]
        self.logger = logging.getLogger(__name__)

    def read_position_mappings(self, workbook: Workbook) -> PositionMappingResult:
        """
        Build the normalized name -> position code mapping.

        Sheets are read in configured order (GK, DEF, MID, FWD); a name
        found on several sheets keeps the last one.

        Args:
            workbook: Open openpyxl workbook

        Returns:
            PositionMappingResult; a failure when no sheet could be read
        """
        started = time.perf_counter()
        self.logger.info("Reading position sheets...")

        result = PositionMappingResult()

        for sheet_name, position_code in self.position_sheets.items():
            ws = find_sheet(workbook, sheet_name, self.prefix_length)
            if ws is None:
                message = (f"Position sheet '{sheet_name}' not found. "
                           f"Position detection for {position_code} will rely on inference.")
                self.logger.warning(message)
                result.warnings.append(message)
                continue

            try:
                players_read = self._read_players_from_sheet(
                    ws, position_code, result.mappings, result.duplicate_warnings
                )
            except Exception as e:
                message = f"Failed to read position sheet '{ws.title}': {e}"
                self.logger.error(f"✗ {message}")
                result.errors.append(message)
                continue

            self.logger.info(f"Position sheet '{ws.title}' processed: {players_read} players mapped to {position_code}")
            result.sheets_processed += 1

        for warning in result.duplicate_warnings:
            self.logger.warning(f"Duplicate player detected: {warning}")

        result.processing_time_ms = int((time.perf_counter() - started) * 1000)

        if result.sheets_processed == 0:
            message = "No position sheets found. Positions will be inferred from statistics."
            self.logger.error(f"✗ {message}")
            result.errors.append(message)
            result.mappings = {}
            return result

        self.logger.info(
            f"✓ Position sheets: {result.sheets_processed}/{len(self.position_sheets)} processed, "
            f"{len(result.mappings)} players mapped, {len(result.duplicate_warnings)} duplicates, "
            f"{result.processing_time_ms}ms"
        )
        return result

    def read_position_mappings_from_file(self, file_path) -> PositionMappingResult:
        """Open the workbook at file_path and read its position sheets."""
        with open_workbook(file_path) as workbook:
            return self.read_position_mappings(workbook)

    def _read_players_from_sheet(self, ws: Worksheet, position_code: str,
                                 mappings: Dict[str, str], duplicate_warnings: List[str]) -> int:
        players_read = 0
        row = self.start_row

        while row <= ws.max_row:
            player_name = cell_text(ws, row, self.name_column)
            if not player_name:
                break

            key = normalize_player_key(player_name)
            previous = mappings.get(key)
            if previous is not None:
                duplicate_warnings.append(
                    f"Player '{player_name}' appears in multiple position sheets. "
                    f"Previous: {previous}, Current: {position_code}. Last occurrence wins."
                )

            mappings[key] = position_code
            players_read += 1
            row += self.row_interval

        return players_read
