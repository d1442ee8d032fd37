"""
Reference data upserts: seasons, competitions and teams.

Every upsert is idempotent and returns (id, created). Callers own the
transaction; nothing here commits.
"""

import sqlite3
import logging
from typing import Tuple


def team_abbreviation(name: str) -> str:
    """First 3 characters uppercased, or the whole name when it is that short."""
    name = name.strip()
    return name.upper() if len(name) <= 3 else name[:3].upper()


class ReferenceDataRepository:
    """Idempotent lookups and inserts for the reference tables."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.logger = logging.getLogger(__name__)

    def upsert_season(self, year: int) -> Tuple[int, bool]:
        """
        Get or create the season for a calendar year.

        Args:
            year: Season year (e.g. 2025)

        Returns:
            (season_id, created)
        """
        cursor = self.conn.cursor()
        cursor.execute("SELECT season_id FROM seasons WHERE year = ?", (year,))
        row = cursor.fetchone()
        if row:
            return row[0], False

        cursor.execute("""
            INSERT INTO seasons (year, name, is_current)
            VALUES (?, ?, 0)
        """, (year, f"{year} Season"))
        self.logger.debug(f"Created season {year}")
        return cursor.lastrowid, True

    def upsert_competition(self, season_id: int, name: str) -> Tuple[int, bool]:
        """
        Get or create a competition within a season.

        The competition name doubles as its type (Championship, League,
        Cup or Friendly); it is normalized before it gets here.
        """
        cursor = self.conn.cursor()
        cursor.execute("""
            SELECT competition_id FROM competitions
            WHERE season_id = ? AND LOWER(name) = LOWER(?)
        """, (season_id, name))
        row = cursor.fetchone()
        if row:
            return row[0], False

        cursor.execute("""
            INSERT INTO competitions (season_id, name, type)
            VALUES (?, ?, ?)
        """, (season_id, name, name))
        self.logger.debug(f"Created competition {name} (season {season_id})")
        return cursor.lastrowid, True

    def upsert_team(self, name: str, is_home: bool = False) -> Tuple[int, bool]:
        """
        Get or create a team by name (case-insensitive).

        Args:
            name: Team name as written on the sheet
            is_home: Whether this is the club the workbook belongs to

        Returns:
            (team_id, created)
        """
        name = name.strip()
        cursor = self.conn.cursor()
        cursor.execute("SELECT team_id FROM teams WHERE LOWER(name) = LOWER(?)", (name,))
        row = cursor.fetchone()
        if row:
            return row[0], False

        cursor.execute("""
            INSERT INTO teams (name, abbreviation, is_home_team, is_active)
            VALUES (?, ?, ?, 1)
        """, (name, team_abbreviation(name), 1 if is_home else 0))
        self.logger.debug(f"Created team {name}")
        return cursor.lastrowid, True
