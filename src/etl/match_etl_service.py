"""
Match statistics ETL: extract match sheets, validate them, load them.
"""

import sqlite3
import logging
import threading
from typing import Dict, Optional

from database.match_loader import MatchDataLoader
from etl.exceptions import GridCountError, PipelineFatalError
from etl.match_transformer import MatchDataTransformer
from etl.results import EtlResult
from readers.match_reader import ExcelMatchDataReader
from utils.progress_reporter import report_section, report_stats


class MatchStatisticsEtlService:
    """Runs the match ETL against one workbook."""

    def __init__(self, conn: sqlite3.Connection, etl_config: Optional[Dict] = None,
                 home_team: Optional[str] = None):
        self.conn = conn
        self.reader = ExcelMatchDataReader(home_team)
        self.transformer = MatchDataTransformer(etl_config, home_team)
        self.loader = MatchDataLoader(conn, home_team)
        self.logger = logging.getLogger(__name__)

    def process_match_statistics(self, file_path, cancel_event: Optional[threading.Event] = None) -> EtlResult:
        """
        Extract, validate and load every match sheet in the workbook.

        Sheets that fail to parse or validate are recorded and skipped;
        the rest are loaded, one transaction per match.

        Args:
            file_path: Path to the .xlsx workbook
            cancel_event: Checked between matches during the load

        Returns:
            Finalized EtlResult
        """
        result = EtlResult()
        report_section("MATCH STATISTICS ETL", self.logger)

        try:
            # Phase 1: extract
            self.logger.info(f"Phase 1: Extracting match data from {file_path}")
            extracted = self.reader.read_match_sheets(file_path)
            result.extend(extracted.errors, extracted.warnings)

            if not extracted.items:
                self.logger.warning("No match sheets found in Excel file")
                result.add_warning("NO_MATCHES", "No match sheets found in Excel file")
                return result.finalize()

            # Phase 2: validate
            self.logger.info(f"Phase 2: Validating {len(extracted.items)} matches")
            valid_matches = []

            for match in extracted.items:
                try:
                    validation = self.transformer.validate_match(match)
                except GridCountError as e:
                    self.logger.error(f"✗ Match {match.match_number}: {e.message}")
                    result.add_error(e.code, e.message, match.sheet_name)
                    continue

                for warning in validation.warnings:
                    result.add_warning("VALIDATION_WARNING", warning, match.sheet_name)

                if not validation.is_valid:
                    self.logger.error(
                        f"✗ Match {match.match_number} failed validation: {'; '.join(validation.errors)}"
                    )
                    result.add_error("VALIDATION_FAILED", "; ".join(validation.errors), match.sheet_name)
                    continue

                valid_matches.append(match)

            # Phase 3: load
            self.logger.info(f"Phase 3: Loading {len(valid_matches)} matches")
            result.merge(self.loader.load_match_data(valid_matches, cancel_event))

        except PipelineFatalError as e:
            self.logger.error(f"✗ {e.message}")
            result.add_error(e.code, e.message)

        except Exception as e:
            self.logger.exception(f"✗ Match statistics ETL failed: {e}")
            result.add_error("UNEXPECTED_ERROR", f"Unexpected error: {e}")

        result.finalize()
        report_stats({
            "Matches processed": result.matches_processed,
            "Team statistics created": result.team_statistics_created,
            "Seasons created": result.seasons_created,
            "Competitions created": result.competitions_created,
            "Teams created": result.teams_created,
            "Errors": len(result.errors),
            "Warnings": len(result.warnings)
        }, self.logger)
        self.logger.info(("✓ " if result.success else "✗ ") + result.get_summary())
        return result
