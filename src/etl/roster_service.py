"""
Player identity resolution.

A roster row is matched on jersey number plus name. Names drift between
sheets, so an inexact name on the same jersey is accepted when it is
within a small edit distance.
"""

import sqlite3
import logging
from typing import Dict, List, Optional, Tuple

from config import ETL_CONFIG
from etl.name_normalizer import NameNormalizer


class PlayerRosterService:
    """Finds or creates players by jersey number and name."""

    def __init__(self, conn: sqlite3.Connection, etl_config: Optional[Dict] = None):
        config = {**ETL_CONFIG, **(etl_config or {})}
        self.conn = conn
        self.max_distance = config["fuzzy_match_max_distance"]
        self.normalizer = NameNormalizer()
        self.logger = logging.getLogger(__name__)

    def get_or_create_player(self, jersey_number: int, name: str,
                             position_id: int) -> Tuple[sqlite3.Row, bool, bool]:
        """
        Resolve a player, creating one when no match exists.

        Matching order:
        1. Same jersey and same full name (case-insensitive, trimmed)
        2. Same jersey and name within the fuzzy distance (closest wins,
           first encountered on ties)
        3. New player

        A matched player whose position differs is moved to position_id.

        Args:
            jersey_number: Jersey number (1-99)
            name: Full name as written on the sheet
            position_id: Position to assign

        Returns:
            (player_row, created, updated)

        Raises:
            ValueError: If the name is empty or the jersey is not positive
        """
        if not name or not name.strip():
            raise ValueError("Player name cannot be empty")
        if jersey_number is None or jersey_number <= 0:
            raise ValueError(f"Invalid jersey number: {jersey_number}")

        name = name.strip()
        cursor = self.conn.cursor()

        cursor.execute("""
            SELECT * FROM players
            WHERE jersey_number = ? AND LOWER(TRIM(full_name)) = LOWER(?)
        """, (jersey_number, name))
        player = cursor.fetchone()

        if player is None:
            player = self._find_fuzzy_match(jersey_number, name)

        if player is None:
            return self._create_player(jersey_number, name, position_id), True, False

        updated = False
        if player["position_id"] != position_id:
            self.update_player_position(player["player_id"], position_id)
            player = self._get_player(player["player_id"])
            updated = True

        return player, False, updated

    def _find_fuzzy_match(self, jersey_number: int, name: str) -> Optional[sqlite3.Row]:
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM players WHERE jersey_number = ? ORDER BY player_id", (jersey_number,))

        best, best_distance = None, None
        for candidate in cursor.fetchall():
            distance = self.normalizer.name_distance(name, candidate["full_name"])
            if distance <= self.max_distance and (best_distance is None or distance < best_distance):
                best, best_distance = candidate, distance

        if best is not None:
            self.logger.info(
                f"Fuzzy matched '{name}' to '{best['full_name']}' "
                f"(#{jersey_number}, distance {best_distance})"
            )
        return best

    def _create_player(self, jersey_number: int, name: str, position_id: int) -> sqlite3.Row:
        first_name, last_name = self.normalizer.split_name(name)
        cursor = self.conn.cursor()
        cursor.execute("""
            INSERT INTO players (jersey_number, first_name, last_name, full_name, position_id, is_active)
            VALUES (?, ?, ?, ?, ?, 1)
        """, (jersey_number, first_name, last_name, name, position_id))

        self.logger.debug(f"Created player #{jersey_number} {name}")
        return self._get_player(cursor.lastrowid)

    def _get_player(self, player_id: int) -> sqlite3.Row:
        return self.conn.execute("SELECT * FROM players WHERE player_id = ?", (player_id,)).fetchone()

    def update_player_position(self, player_id: int, position_id: int):
        self.conn.execute("""
            UPDATE players
            SET position_id = ?, updated_at = CURRENT_TIMESTAMP
            WHERE player_id = ?
        """, (position_id, player_id))

    def get_all_active_players(self) -> List[sqlite3.Row]:
        cursor = self.conn.execute("""
            SELECT * FROM players
            WHERE is_active = 1
            ORDER BY jersey_number, full_name
        """)
        return cursor.fetchall()
