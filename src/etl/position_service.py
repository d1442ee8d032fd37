"""
Position lookups and heuristic position detection.
"""

import sqlite3
import logging
from typing import Callable, Dict, List, Optional, Tuple

from etl.exceptions import UnknownPositionError
from etl.models import PlayerStatisticsData
from etl.name_normalizer import normalize_player_key

VALID_POSITION_CODES = ("GK", "DEF", "MID", "FWD")


class PositionCache:
    """Position code -> id cache owned by a single service instance."""

    def __init__(self):
        self._entries: Optional[Dict[str, int]] = None

    def get_or_load(self, loader: Callable[[], Dict[str, int]]) -> Dict[str, int]:
        if self._entries is None:
            self._entries = loader()
        return self._entries

    def invalidate(self):
        self._entries = None


class PositionDetectionService:
    """
    Resolves position codes to ids and infers positions from statistics
    when a player has no explicit mapping.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.cache = PositionCache()
        self.logger = logging.getLogger(__name__)

    def _load_positions(self) -> Dict[str, int]:
        cursor = self.conn.execute("SELECT code, position_id FROM positions")
        positions = {row[0].upper(): row[1] for row in cursor.fetchall()}
        self.logger.debug(f"Loaded {len(positions)} positions")
        return positions

    def get_all_position_mappings(self) -> Dict[str, int]:
        """Position code -> position_id."""
        return dict(self.cache.get_or_load(self._load_positions))

    def get_position_id(self, code: str) -> int:
        """
        Args:
            code: GK, DEF, MID or FWD (case-insensitive)

        Raises:
            UnknownPositionError: If the code is not in the positions table
        """
        positions = self.cache.get_or_load(self._load_positions)
        key = (code or "").strip().upper()
        if key not in positions:
            raise UnknownPositionError(f"Unknown position code: {code}")
        return positions[key]

    def position_exists(self, code: str) -> bool:
        return (code or "").strip().upper() in self.cache.get_or_load(self._load_positions)

    def refresh_cache(self):
        self.cache.invalidate()

    @staticmethod
    def validate_and_normalize_position_code(code: Optional[str]) -> Optional[str]:
        """Return the canonical code, or None when the value is not a position."""
        if not code:
            return None
        normalized = code.strip().upper()
        return normalized if normalized in VALID_POSITION_CODES else None

    @staticmethod
    def detect_position(player: PlayerStatisticsData) -> str:
        """
        Infer a position from a player's statistics.

        Rules, first match wins:
        1. GK  - took kickouts
        2. FWD - more than 5 shots or more than 10 attacks
        3. DEF - more than 3 tackles with at most 2 shots
        4. MID - everything else
        """
        if (player.gk_total_kickouts or 0) > 0:
            return "GK"
        if (player.total_shots or 0) > 5 or (player.ta or 0) > 10:
            return "FWD"
        if (player.tackles_total or 0) > 3 and (player.total_shots or 0) <= 2:
            return "DEF"
        return "MID"

    def assign_positions(self, players: List[PlayerStatisticsData],
                         mapping: Optional[Dict[str, str]]) -> Tuple[int, int]:
        """
        Set position_code on every player.

        The explicit mapping (normalized name -> code) wins; the heuristic
        is used only for names the mapping does not cover.

        Returns:
            (mapped, inferred) counts
        """
        mapping = mapping or {}
        mapped = inferred = 0

        for player in players:
            code = self.validate_and_normalize_position_code(mapping.get(normalize_player_key(player.player_name)))
            if code:
                player.position_code = code
                mapped += 1
            else:
                player.position_code = self.detect_position(player)
                inferred += 1
                self.logger.debug(f"Inferred {player.position_code} for {player.label}")

        return mapped, inferred
