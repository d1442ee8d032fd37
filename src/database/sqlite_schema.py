"""
SQLite schema for the GAAStat statistics store.

Reference data (seasons, positions, teams, competitions), matches with
their per-period team statistics, players with their per-match
statistics, and the KPI definitions catalogue.
"""

import sqlite3
from typing import Optional
import logging


SCHEMA_SQL = """
-- ============================================================================
-- REFERENCE DATA
-- ============================================================================

CREATE TABLE IF NOT EXISTS seasons (
    season_id INTEGER PRIMARY KEY AUTOINCREMENT,
    year INTEGER NOT NULL UNIQUE,
    name TEXT NOT NULL,  -- "2025 Season"
    is_current INTEGER NOT NULL DEFAULT 0,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS positions (
    position_id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    code TEXT NOT NULL UNIQUE,  -- GK, DEF, MID, FWD
    display_order INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS teams (
    team_id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    abbreviation TEXT,
    is_home_team INTEGER NOT NULL DEFAULT 0,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS competitions (
    competition_id INTEGER PRIMARY KEY AUTOINCREMENT,
    season_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    type TEXT NOT NULL CHECK(type IN ('Championship', 'League', 'Cup', 'Friendly')),
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (season_id) REFERENCES seasons(season_id),
    UNIQUE(season_id, name)
);

-- ============================================================================
-- MATCHES
-- ============================================================================

CREATE TABLE IF NOT EXISTS matches (
    match_id INTEGER PRIMARY KEY AUTOINCREMENT,
    competition_id INTEGER NOT NULL,
    match_number INTEGER NOT NULL,
    home_team_id INTEGER NOT NULL,
    away_team_id INTEGER NOT NULL,
    match_date TEXT NOT NULL,  -- ISO format
    venue TEXT,
    home_score_first_half TEXT,
    home_score_second_half TEXT,
    home_score_full_time TEXT,
    away_score_first_half TEXT,
    away_score_second_half TEXT,
    away_score_full_time TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (competition_id) REFERENCES competitions(competition_id),
    FOREIGN KEY (home_team_id) REFERENCES teams(team_id),
    FOREIGN KEY (away_team_id) REFERENCES teams(team_id),
    UNIQUE(competition_id, match_number)
);

-- 6 rows per match: (home, away) x (1st, 2nd, Full)
CREATE TABLE IF NOT EXISTS match_team_statistics (
    match_team_stat_id INTEGER PRIMARY KEY AUTOINCREMENT,
    match_id INTEGER NOT NULL,
    team_id INTEGER NOT NULL,
    period TEXT NOT NULL CHECK(period IN ('1st', '2nd', 'Full')),
    scoreline TEXT,
    total_possession REAL CHECK(total_possession IS NULL OR (total_possession >= 0 AND total_possession <= 1)),

    -- Score sources
    score_source_kickout_long INTEGER NOT NULL DEFAULT 0,
    score_source_kickout_short INTEGER NOT NULL DEFAULT 0,
    score_source_opp_kickout_long INTEGER NOT NULL DEFAULT 0,
    score_source_opp_kickout_short INTEGER NOT NULL DEFAULT 0,
    score_source_turnover INTEGER NOT NULL DEFAULT 0,
    score_source_possession_lost INTEGER NOT NULL DEFAULT 0,
    score_source_shot_short INTEGER NOT NULL DEFAULT 0,
    score_source_throw_up_in INTEGER NOT NULL DEFAULT 0,

    -- Shot sources
    shot_source_kickout_long INTEGER NOT NULL DEFAULT 0,
    shot_source_kickout_short INTEGER NOT NULL DEFAULT 0,
    shot_source_opp_kickout_long INTEGER NOT NULL DEFAULT 0,
    shot_source_opp_kickout_short INTEGER NOT NULL DEFAULT 0,
    shot_source_turnover INTEGER NOT NULL DEFAULT 0,
    shot_source_possession_lost INTEGER NOT NULL DEFAULT 0,
    shot_source_shot_short INTEGER NOT NULL DEFAULT 0,
    shot_source_throw_up_in INTEGER NOT NULL DEFAULT 0,

    FOREIGN KEY (match_id) REFERENCES matches(match_id) ON DELETE CASCADE,
    FOREIGN KEY (team_id) REFERENCES teams(team_id),
    UNIQUE(match_id, team_id, period)
);

-- ============================================================================
-- PLAYERS
-- ============================================================================

CREATE TABLE IF NOT EXISTS players (
    player_id INTEGER PRIMARY KEY AUTOINCREMENT,
    jersey_number INTEGER NOT NULL CHECK(jersey_number BETWEEN 1 AND 99),
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    full_name TEXT NOT NULL,
    position_id INTEGER NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (position_id) REFERENCES positions(position_id)
);

CREATE TABLE IF NOT EXISTS player_match_statistics (
    player_match_stat_id INTEGER PRIMARY KEY AUTOINCREMENT,
    match_id INTEGER NOT NULL,
    player_id INTEGER NOT NULL,
    minutes_played INTEGER NOT NULL DEFAULT 0,
    total_engagements INTEGER NOT NULL DEFAULT 0,
    te_per_psr REAL,
    scores TEXT,
    psr INTEGER NOT NULL DEFAULT 0,
    psr_per_tp REAL,
    tp INTEGER NOT NULL DEFAULT 0,
    tow INTEGER NOT NULL DEFAULT 0,
    interceptions INTEGER NOT NULL DEFAULT 0,
    tpl INTEGER NOT NULL DEFAULT 0,
    kp INTEGER NOT NULL DEFAULT 0,
    hp INTEGER NOT NULL DEFAULT 0,
    ha INTEGER NOT NULL DEFAULT 0,
    turnovers INTEGER NOT NULL DEFAULT 0,
    ineffective INTEGER NOT NULL DEFAULT 0,
    shot_short INTEGER NOT NULL DEFAULT 0,
    shot_save INTEGER NOT NULL DEFAULT 0,
    fouled INTEGER NOT NULL DEFAULT 0,
    woodwork INTEGER NOT NULL DEFAULT 0,
    ko_home_kow INTEGER NOT NULL DEFAULT 0,
    ko_home_wc INTEGER NOT NULL DEFAULT 0,
    ko_home_bw INTEGER NOT NULL DEFAULT 0,
    ko_home_sw INTEGER NOT NULL DEFAULT 0,
    ko_opp_kow INTEGER NOT NULL DEFAULT 0,
    ko_opp_wc INTEGER NOT NULL DEFAULT 0,
    ko_opp_bw INTEGER NOT NULL DEFAULT 0,
    ko_opp_sw INTEGER NOT NULL DEFAULT 0,
    ta INTEGER NOT NULL DEFAULT 0,
    kr INTEGER NOT NULL DEFAULT 0,
    kl INTEGER NOT NULL DEFAULT 0,
    cr INTEGER NOT NULL DEFAULT 0,
    cl INTEGER NOT NULL DEFAULT 0,
    shots_play_total INTEGER NOT NULL DEFAULT 0,
    shots_play_points INTEGER NOT NULL DEFAULT 0,
    shots_play_2points INTEGER NOT NULL DEFAULT 0,
    shots_play_goals INTEGER NOT NULL DEFAULT 0,
    shots_play_wide INTEGER NOT NULL DEFAULT 0,
    shots_play_short INTEGER NOT NULL DEFAULT 0,
    shots_play_save INTEGER NOT NULL DEFAULT 0,
    shots_play_woodwork INTEGER NOT NULL DEFAULT 0,
    shots_play_blocked INTEGER NOT NULL DEFAULT 0,
    shots_play_45 INTEGER NOT NULL DEFAULT 0,
    shots_play_percentage REAL,
    frees_total INTEGER NOT NULL DEFAULT 0,
    frees_points INTEGER NOT NULL DEFAULT 0,
    frees_2points INTEGER NOT NULL DEFAULT 0,
    frees_goals INTEGER NOT NULL DEFAULT 0,
    frees_wide INTEGER NOT NULL DEFAULT 0,
    frees_short INTEGER NOT NULL DEFAULT 0,
    frees_save INTEGER NOT NULL DEFAULT 0,
    frees_woodwork INTEGER NOT NULL DEFAULT 0,
    frees_45 INTEGER NOT NULL DEFAULT 0,
    frees_qf INTEGER NOT NULL DEFAULT 0,
    frees_percentage REAL,
    total_shots INTEGER NOT NULL DEFAULT 0,
    total_shots_percentage REAL,
    assists_total INTEGER NOT NULL DEFAULT 0,
    assists_point INTEGER NOT NULL DEFAULT 0,
    assists_goal INTEGER NOT NULL DEFAULT 0,
    tackles_total INTEGER NOT NULL DEFAULT 0,
    tackles_contested INTEGER NOT NULL DEFAULT 0,
    tackles_missed INTEGER NOT NULL DEFAULT 0,
    tackles_percentage REAL,
    frees_conceded_total INTEGER NOT NULL DEFAULT 0,
    frees_conceded_attack INTEGER NOT NULL DEFAULT 0,
    frees_conceded_midfield INTEGER NOT NULL DEFAULT 0,
    frees_conceded_defense INTEGER NOT NULL DEFAULT 0,
    frees_conceded_penalty INTEGER NOT NULL DEFAULT 0,
    frees_50m_total INTEGER NOT NULL DEFAULT 0,
    frees_50m_delay INTEGER NOT NULL DEFAULT 0,
    frees_50m_dissent INTEGER NOT NULL DEFAULT 0,
    frees_50m_3v3 INTEGER NOT NULL DEFAULT 0,
    yellow_cards INTEGER NOT NULL DEFAULT 0,
    black_cards INTEGER NOT NULL DEFAULT 0,
    red_cards INTEGER NOT NULL DEFAULT 0,
    throw_up_won INTEGER NOT NULL DEFAULT 0,
    throw_up_lost INTEGER NOT NULL DEFAULT 0,
    gk_total_kickouts INTEGER NOT NULL DEFAULT 0,
    gk_kickout_retained INTEGER NOT NULL DEFAULT 0,
    gk_kickout_lost INTEGER NOT NULL DEFAULT 0,
    gk_kickout_percentage REAL,
    gk_saves INTEGER NOT NULL DEFAULT 0,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (match_id) REFERENCES matches(match_id) ON DELETE CASCADE,
    FOREIGN KEY (player_id) REFERENCES players(player_id),
    UNIQUE(match_id, player_id)
);

-- ============================================================================
-- KPI CATALOGUE
-- ============================================================================

CREATE TABLE IF NOT EXISTS kpi_definitions (
    kpi_id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_number INTEGER NOT NULL,
    event_name TEXT NOT NULL,
    outcome TEXT NOT NULL,
    team_assignment TEXT NOT NULL CHECK(team_assignment IN ('Home', 'Opposition', 'Both')),
    psr_value REAL NOT NULL,
    definition TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(event_number, event_name, outcome, team_assignment)
);

-- ============================================================================
-- INDICES
-- ============================================================================

CREATE INDEX IF NOT EXISTS idx_matches_date ON matches(match_date);
CREATE INDEX IF NOT EXISTS idx_matches_number ON matches(match_number);
CREATE INDEX IF NOT EXISTS idx_match_team_stats_match ON match_team_statistics(match_id);
CREATE INDEX IF NOT EXISTS idx_players_jersey ON players(jersey_number);
CREATE INDEX IF NOT EXISTS idx_player_stats_match ON player_match_statistics(match_id);
CREATE INDEX IF NOT EXISTS idx_player_stats_player ON player_match_statistics(player_id);

-- ============================================================================
-- SEED DATA
-- ============================================================================

INSERT OR IGNORE INTO positions (name, code, display_order) VALUES
    ('Goalkeeper', 'GK', 1),
    ('Defender', 'DEF', 2),
    ('Midfielder', 'MID', 3),
    ('Forward', 'FWD', 4);
"""


class SQLiteSchemaManager:
    """Manages the SQLite schema."""

    def __init__(self, db_path: str = "gaastat.db"):
        """
        Initialize schema manager.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path
        self.logger = logging.getLogger(__name__)

    def create_database(self, conn: Optional[sqlite3.Connection] = None) -> bool:
        """
        Create all tables, indices and seed rows. Safe to run repeatedly.

        Args:
            conn: Existing connection to use (a new one is opened otherwise)

        Returns:
            True if the schema was applied, False otherwise
        """
        own_connection = conn is None
        try:
            if own_connection:
                conn = sqlite3.connect(self.db_path)

            conn.executescript(SCHEMA_SQL)
            conn.commit()

            self.logger.info(f"✓ Database schema ready: {self.db_path}")
            return True

        except sqlite3.Error as e:
            self.logger.error(f"✗ Error creating database: {e}")
            return False

        finally:
            if own_connection and conn is not None:
                conn.close()

    def list_tables(self) -> list:
        """
        List all tables in the database.

        Returns:
            List of table names
        """
        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.execute("""
                SELECT name FROM sqlite_master
                WHERE type='table' AND name NOT LIKE 'sqlite_%'
                ORDER BY name
            """)
            return [row[0] for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_row_count(self, table_name: str) -> int:
        """Count rows in a table."""
        conn = sqlite3.connect(self.db_path)
        try:
            return conn.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()[0]
        finally:
            conn.close()

    def get_schema_summary(self) -> dict:
        """Row count per table."""
        return {table: self.get_row_count(table) for table in self.list_tables()}
