"""
Player statistics ETL.

Phases:
    1. Extract position mappings and player stats sheets
    2. Assign positions and validate each sheet
    3. Load each sheet against its match
"""

import re
import sqlite3
import logging
import threading
import time
from dataclasses import replace
from datetime import timedelta
from typing import Dict, Optional

from database.player_loader import PlayerDataLoader
from etl.exceptions import PipelineFatalError
from etl.models import PlayerStatsSheetData
from etl.player_fields import EXPECTED_FIELD_COUNT
from etl.player_transformer import PlayerDataTransformer
from etl.position_service import PositionDetectionService
from etl.results import PlayerEtlResult
from readers.player_reader import ExcelPlayerDataReader
from readers.position_reader import ExcelPositionSheetReader
from utils.progress_reporter import ProgressReporter, report_section

PLAYER_PREFIX = re.compile(r"^Player #-?\d+ \(.*?\): ")

# First matching keyword wins
ERROR_CATEGORIES = (
    ("JerseyError", ("jersey", "duplicate")),
    ("PlayerIdentificationError", ("name", "player")),
    ("FieldMapError", ("field", "column")),
    ("DataTypeError", ("percentage", "negative")),
    ("CrossFieldError", ("total", "sum", "match")),
    ("PositionError", ("position",)),
    ("BookingError", ("booking", "card")),
)


def categorize_error(message: str) -> str:
    """Bucket a validation error by keyword, ignoring the player prefix."""
    text = PLAYER_PREFIX.sub("", message).lower()
    for category, keywords in ERROR_CATEGORIES:
        if any(keyword in text for keyword in keywords):
            return category
    return "OtherError"


class PlayerStatisticsEtlService:
    """Runs the player statistics ETL against one workbook."""

    def __init__(self, conn: sqlite3.Connection, etl_config: Optional[Dict] = None,
                 home_team: Optional[str] = None, workbook_config: Optional[Dict] = None):
        self.conn = conn
        self.position_service = PositionDetectionService(conn)
        self.position_reader = ExcelPositionSheetReader(workbook_config)
        self.reader = ExcelPlayerDataReader(home_team, etl_config)
        self.transformer = PlayerDataTransformer(self.position_service, etl_config=etl_config)
        self.loader = PlayerDataLoader(conn, etl_config, position_service=self.position_service)
        self.logger = logging.getLogger(__name__)

    def process_player_statistics(self, file_path,
                                  cancel_event: Optional[threading.Event] = None) -> PlayerEtlResult:
        """
        Extract, validate and load every player stats sheet.

        The run succeeds when at least one statistics row was created.

        Args:
            file_path: Path to the .xlsx workbook
            cancel_event: Checked between sheets; a set event stops the run

        Returns:
            Finalized PlayerEtlResult
        """
        result = PlayerEtlResult()
        report_section("PLAYER STATISTICS ETL", self.logger)

        try:
            # Phase 1: extract
            self.logger.info(f"Phase 1: Extracting player data from {file_path}")
            mapping = self._read_position_mappings(file_path, result)

            extracted = self.reader.read_player_stats_sheets(file_path, cancel_event)
            result.extend(extracted.errors, extracted.warnings)

            if not extracted.items:
                self.logger.warning("No player statistics sheets found in Excel file")
                result.add_error("NO_SHEETS", "No player statistics sheets found in Excel file")
                return result.finalize()

            result.player_sheets_processed = len(extracted.items)
            self.logger.info(f"Found {len(extracted.items)} player statistics sheets")

            # Phases 2 and 3, sheet by sheet
            players_before = self._count_players()
            sheet_times = []
            progress = ProgressReporter("Player sheets", total=len(extracted.items), logger=self.logger)

            for sheet in extracted.items:
                if cancel_event is not None and cancel_event.is_set():
                    self.logger.warning("Player statistics ETL cancelled")
                    result.add_warning("CANCELLED", "Player statistics ETL cancelled")
                    break

                started = time.perf_counter()
                if self._process_sheet(sheet, mapping, result):
                    sheet_times.append(time.perf_counter() - started)
                progress.update(message=sheet.sheet_name)

            progress.complete()

            if sheet_times:
                result.average_sheet_processing_time = timedelta(seconds=sum(sheet_times) / len(sheet_times))
            result.players_created = self._count_players() - players_before
            result.success = result.player_statistics_created > 0

        except PipelineFatalError as e:
            self.logger.error(f"✗ {e.message}")
            result.add_error(e.code, e.message)

        except Exception as e:
            self.logger.exception(f"✗ Player statistics ETL failed: {e}")
            result.add_error("ETL_EXCEPTION", f"ETL failed with exception: {e}")

        result.finalize()
        self.logger.info(result.get_detailed_summary())
        return result

    def _read_position_mappings(self, file_path, result: PlayerEtlResult) -> Dict[str, str]:
        mapping_result = self.position_reader.read_position_mappings_from_file(file_path)

        for warning in mapping_result.duplicate_warnings:
            result.add_warning("DUPLICATE_POSITION", warning)

        if not mapping_result.is_success:
            message = "; ".join(mapping_result.errors) or "Position mapping failed"
            self.logger.warning(f"Position mapping failed, falling back to inference: {message}")
            result.add_warning("POSITION_MAPPING_FAILED", message)
            return {}

        for message in mapping_result.warnings + mapping_result.errors:
            result.add_warning("POSITION_SHEET", message)

        return mapping_result.mappings

    def _process_sheet(self, sheet: PlayerStatsSheetData, mapping: Dict[str, str],
                       result: PlayerEtlResult) -> bool:
        """Transform, validate and load one sheet. Returns True when the sheet was loaded."""
        transformed = self.transformer.transform_and_validate(sheet, mapping)
        validation = transformed.validation

        result.positions_mapped += transformed.positions_mapped
        result.positions_inferred += transformed.positions_inferred
        result.validation_errors_total += len(validation.result.errors)
        result.validation_warnings_total += len(validation.result.warnings)
        for error in validation.result.errors:
            category = categorize_error(error)
            result.errors_by_type[category] = result.errors_by_type.get(category, 0) + 1

        if not transformed.can_load:
            self.logger.warning(f"Skipping sheet '{sheet.sheet_name}' due to critical validation errors")
            result.add_warning("CRITICAL_VALIDATION",
                               "; ".join(validation.result.errors[:5]), sheet.sheet_name)
            result.players_skipped += len(sheet.players)
            return False

        result.players_skipped += len(validation.skipped_players)

        try:
            match_id = self.find_match(sheet)
            if match_id is None:
                self.logger.warning(
                    f"Could not find match for sheet '{sheet.sheet_name}' "
                    f"(Match #{sheet.match_number} vs {sheet.opposition} on {sheet.match_date}). Skipping."
                )
                result.add_warning("MATCH_NOT_FOUND", f"No match found for match #{sheet.match_number}",
                                   sheet.sheet_name)
                result.players_skipped += len(validation.valid_players)
                return False

            if self.loader.statistics_exist_for_match(match_id):
                self.logger.info(f"Statistics already exist for match {match_id} (vs {sheet.opposition}). Skipping.")
                result.add_warning("STATISTICS_EXIST", f"Statistics already loaded for match {match_id}",
                                   sheet.sheet_name)
                result.players_skipped += len(validation.valid_players)
                return False

            loadable = replace(sheet, players=validation.valid_players)
            created, updated, skipped = self.loader.load_player_statistics(loadable, match_id)

        except Exception as e:
            self.logger.error(f"✗ Error processing sheet '{sheet.sheet_name}': {e}")
            result.add_error("LOAD_ERROR", str(e), sheet.sheet_name)
            result.errors_by_type["LoadError"] = result.errors_by_type.get("LoadError", 0) + 1
            result.players_skipped += len(validation.valid_players)
            return False

        result.player_statistics_created += created
        result.players_updated += updated
        result.players_skipped += skipped
        result.fields_processed_total += len(loadable.players) * EXPECTED_FIELD_COUNT
        return True

    def find_match(self, sheet: PlayerStatsSheetData) -> Optional[int]:
        """
        Locate the match a player sheet belongs to.

        With a known date: number + date, then date + opposition substring.
        With an unknown date (truncated sheet name): number + opposition
        substring, then number alone when exactly one match carries it.

        Returns:
            match_id, or None when nothing matches
        """
        opposition = (sheet.opposition or "").strip().lower()

        if sheet.match_date is None:
            if opposition and opposition != "unknown":
                row = self.conn.execute("""
                    SELECT m.match_id FROM matches m
                    JOIN teams t ON t.team_id = m.away_team_id
                    WHERE m.match_number = ? AND INSTR(LOWER(t.name), ?) > 0
                    ORDER BY m.match_id LIMIT 1
                """, (sheet.match_number, opposition)).fetchone()
                if row:
                    return row[0]

            # Numbers repeat across competitions; only a unique number is trusted
            rows = self.conn.execute(
                "SELECT match_id FROM matches WHERE match_number = ? ORDER BY match_id LIMIT 2",
                (sheet.match_number,)
            ).fetchall()
            if len(rows) == 1:
                self.logger.info(f"Matched sheet '{sheet.sheet_name}' to match #{sheet.match_number} (by number only)")
                return rows[0][0]
            if rows:
                self.logger.warning(
                    f"Match #{sheet.match_number} is ambiguous for sheet '{sheet.sheet_name}' "
                    f"and opposition '{sheet.opposition}' does not narrow it"
                )

            return None

        match_date = sheet.match_date.isoformat()
        row = self.conn.execute(
            "SELECT match_id FROM matches WHERE match_number = ? AND match_date = ? ORDER BY match_id LIMIT 1",
            (sheet.match_number, match_date)
        ).fetchone()
        if row:
            return row[0]

        row = self.conn.execute("""
            SELECT m.match_id FROM matches m
            JOIN teams t ON t.team_id = m.away_team_id
            WHERE m.match_date = ? AND INSTR(LOWER(t.name), ?) > 0
            ORDER BY m.match_id LIMIT 1
        """, (match_date, opposition)).fetchone()
        return row[0] if row else None

    def _count_players(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM players").fetchone()[0]
