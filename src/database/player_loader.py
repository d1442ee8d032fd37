"""
Loads per-match player statistics into SQLite.

A sheet is loaded in one transaction and every player in its own
savepoint, so a bad row rolls back only that player.
"""

import sqlite3
import logging
from typing import Dict, Optional, Tuple

from etl.exceptions import TransactionFailure
from etl.models import PlayerStatsSheetData, PlayerStatisticsData
from etl.player_fields import PlayerField
from etl.position_service import PositionDetectionService
from etl.roster_service import PlayerRosterService
from utils.database_context import savepoint, transaction

STATISTIC_COLUMNS = [f.attribute for f in PlayerField.statistic_fields()]


class PlayerDataLoader:
    """Persists validated player statistics for one match at a time."""

    def __init__(self, conn: sqlite3.Connection, etl_config: Optional[Dict] = None,
                 position_service: Optional[PositionDetectionService] = None,
                 roster_service: Optional[PlayerRosterService] = None):
        self.conn = conn
        self.position_service = position_service or PositionDetectionService(conn)
        self.roster_service = roster_service or PlayerRosterService(conn, etl_config)
        self.logger = logging.getLogger(__name__)

    def load_player_statistics(self, sheet: PlayerStatsSheetData, match_id: int) -> Tuple[int, int, int]:
        """
        Load every player on a sheet against a match.

        Args:
            sheet: Validated sheet (players already carry a position code)
            match_id: Target match

        Returns:
            (created, updated, skipped) where created counts statistics rows
            and updated counts existing players whose position changed

        Raises:
            TransactionFailure: If the sheet transaction itself fails
        """
        created = updated = skipped = 0

        try:
            with transaction(self.conn):
                for index, player in enumerate(sheet.players):
                    try:
                        with savepoint(self.conn, f"player_{index}"):
                            inserted, player_updated = self._load_player(player, match_id)
                    except Exception as e:
                        skipped += 1
                        self.logger.warning(f"Skipped {player.label} on '{sheet.sheet_name}': {e}")
                        continue

                    if inserted:
                        created += 1
                    else:
                        skipped += 1
                    if player_updated:
                        updated += 1

        except sqlite3.Error as e:
            raise TransactionFailure(
                f"Failed to load player statistics for match {match_id}: {e}",
                sheet_name=sheet.sheet_name
            ) from e

        self.logger.info(
            f"✓ '{sheet.sheet_name}': {created} statistics created, "
            f"{updated} players updated, {skipped} skipped"
        )
        return created, updated, skipped

    def _load_player(self, player: PlayerStatisticsData, match_id: int) -> Tuple[bool, bool]:
        position_id = self.position_service.get_position_id(player.position_code or "MID")
        row, _, updated = self.roster_service.get_or_create_player(
            player.jersey_number, player.player_name, position_id
        )
        player_id = row["player_id"]

        existing = self.conn.execute("""
            SELECT 1 FROM player_match_statistics
            WHERE match_id = ? AND player_id = ?
        """, (match_id, player_id)).fetchone()

        if existing:
            self.logger.debug(f"Statistics already exist for {player.label} in match {match_id}")
            return False, updated

        self._insert_statistics(player, match_id, player_id)
        return True, updated

    def _insert_statistics(self, player: PlayerStatisticsData, match_id: int, player_id: int):
        columns = ["match_id", "player_id"] + STATISTIC_COLUMNS
        values = [match_id, player_id] + [getattr(player, column) for column in STATISTIC_COLUMNS]

        placeholders = ", ".join("?" for _ in columns)
        self.conn.execute(
            f"INSERT INTO player_match_statistics ({', '.join(columns)}) VALUES ({placeholders})",
            values
        )

    def statistics_exist_for_match(self, match_id: int) -> bool:
        row = self.conn.execute(
            "SELECT COUNT(*) FROM player_match_statistics WHERE match_id = ?", (match_id,)
        ).fetchone()
        return row[0] > 0

    def delete_statistics_for_match(self, match_id: int) -> int:
        """Remove all statistics for a match. Returns the number of rows deleted."""
        with transaction(self.conn):
            cursor = self.conn.execute("DELETE FROM player_match_statistics WHERE match_id = ?", (match_id,))
        self.logger.info(f"Deleted {cursor.rowcount} player statistics for match {match_id}")
        return cursor.rowcount
