"""
Loads validated match sheets into SQLite.

Each match is committed in its own transaction: reference data, the
match row and its 6 team-period statistics rows either all land or none
do. A failing match is recorded and the next one is attempted.
"""

import sqlite3
import logging
import threading
from typing import Dict, List, Optional

from config import WORKBOOK_CONFIG
from database.reference_data import ReferenceDataRepository
from etl.exceptions import ConflictError, GridCountError
from etl.models import MatchSheetData, TeamStatisticsData
from etl.results import EtlResult
from readers.constants import EXPECTED_TEAM_STATISTICS
from utils.database_context import transaction
from utils.progress_reporter import ProgressReporter


class MatchDataLoader:
    """Persists matches and their team statistics."""

    def __init__(self, conn: sqlite3.Connection, home_team: Optional[str] = None):
        self.conn = conn
        self.home_team = home_team or WORKBOOK_CONFIG["home_team"]
        self.reference_data = ReferenceDataRepository(conn)
        self.logger = logging.getLogger(__name__)

    def load_match_data(self, sheets: List[MatchSheetData],
                        cancel_event: Optional[threading.Event] = None) -> EtlResult:
        """
        Load every match, one transaction per match.

        Args:
            sheets: Validated match sheets
            cancel_event: Checked before each match; a set event stops the load

        Returns:
            EtlResult with match, statistics and reference data counts
        """
        result = EtlResult()
        progress = ProgressReporter("Loading matches", total=len(sheets), logger=self.logger)

        for sheet in sheets:
            if cancel_event is not None and cancel_event.is_set():
                result.add_warning("CANCELLED", "Match load cancelled")
                self.logger.warning("Match load cancelled")
                break

            try:
                with transaction(self.conn):
                    created = self._load_single_match(sheet)

                # Counted only once the match is committed
                result.matches_processed += 1
                result.team_statistics_created += created["team_statistics"]
                result.seasons_created += created["seasons"]
                result.competitions_created += created["competitions"]
                result.teams_created += created["teams"]
                progress.update(message=sheet.sheet_name)

            except Exception as e:
                message = e.message if hasattr(e, "message") else str(e)
                self.logger.error(f"✗ Failed to load match {sheet.match_number} ({sheet.sheet_name}): {message}")
                result.add_error(f"MATCH_{sheet.match_number}", message, sheet.sheet_name)

        progress.complete(f"{result.matches_processed} loaded, {len(result.errors)} failed")
        return result.finalize()

    def _load_single_match(self, sheet: MatchSheetData) -> Dict[str, int]:
        """Insert one match. Returns the rows created, keyed by kind."""
        created = {"seasons": 0, "competitions": 0, "teams": 0, "team_statistics": 0}

        season_id, is_new = self.reference_data.upsert_season(sheet.match_date.year)
        created["seasons"] += int(is_new)

        competition_id, is_new = self.reference_data.upsert_competition(season_id, sheet.competition)
        created["competitions"] += int(is_new)

        home_team_id, is_new = self.reference_data.upsert_team(self.home_team, is_home=True)
        created["teams"] += int(is_new)

        away_team_id, is_new = self.reference_data.upsert_team(sheet.opposition)
        created["teams"] += int(is_new)

        match_id = self._insert_match(sheet, competition_id, home_team_id, away_team_id)

        team_ids = {
            self.home_team.lower(): home_team_id,
            sheet.opposition.strip().lower(): away_team_id
        }

        if len(sheet.team_statistics) != EXPECTED_TEAM_STATISTICS:
            raise GridCountError(
                f"Expected {EXPECTED_TEAM_STATISTICS} team statistics records, "
                f"got {len(sheet.team_statistics)}",
                sheet_name=sheet.sheet_name
            )

        for stats in sheet.team_statistics:
            self._insert_team_statistics(match_id, team_ids[stats.team_name.strip().lower()], stats)

        created["team_statistics"] = len(sheet.team_statistics)
        self.logger.debug(f"Loaded match {sheet.match_number} (match_id={match_id})")
        return created

    def _insert_match(self, sheet: MatchSheetData, competition_id: int,
                      home_team_id: int, away_team_id: int) -> int:
        cursor = self.conn.cursor()
        cursor.execute("""
            SELECT match_id FROM matches
            WHERE competition_id = ? AND match_number = ?
        """, (competition_id, sheet.match_number))

        if cursor.fetchone():
            raise ConflictError(
                f"Match {sheet.match_number} already exists for {sheet.competition} "
                f"{sheet.match_date.year}",
                sheet_name=sheet.sheet_name
            )

        cursor.execute("""
            INSERT INTO matches (
                competition_id, match_number, home_team_id, away_team_id,
                match_date, venue,
                home_score_first_half, home_score_second_half, home_score_full_time,
                away_score_first_half, away_score_second_half, away_score_full_time
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            competition_id, sheet.match_number, home_team_id, away_team_id,
            sheet.match_date.isoformat(), sheet.venue,
            sheet.home_score_first_half, sheet.home_score_second_half, sheet.home_score_full_time,
            sheet.away_score_first_half, sheet.away_score_second_half, sheet.away_score_full_time
        ))
        return cursor.lastrowid

    def _insert_team_statistics(self, match_id: int, team_id: int, stats: TeamStatisticsData):
        counters = stats.counter_columns()
        columns = ["match_id", "team_id", "period", "scoreline", "total_possession"] + list(counters)
        values = [match_id, team_id, stats.period, stats.scoreline, stats.total_possession] + list(counters.values())

        placeholders = ", ".join("?" for _ in columns)
        self.conn.execute(
            f"INSERT INTO match_team_statistics ({', '.join(columns)}) VALUES ({placeholders})",
            values
        )
