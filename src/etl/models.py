"""
In-memory records produced by the readers and consumed by the
transformers and loaders.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from etl.player_fields import PlayerField


PERIODS = ("1st", "2nd", "Full")

SOURCE_CATEGORIES = (
    "kickout_long",
    "kickout_short",
    "opp_kickout_long",
    "opp_kickout_short",
    "turnover",
    "possession_lost",
    "shot_short",
    "throw_up_in",
)


@dataclass
class MatchMetadata:
    """Identity of a match as encoded in a sheet name or its B1 cell."""
    match_number: int
    competition: str
    opposition: str
    match_date: date


@dataclass
class TeamStatisticsData:
    """One team-period block from a match sheet grid."""
    team_name: str
    period: str
    scoreline: Optional[str] = None
    total_possession: Optional[float] = None
    score_sources: Dict[str, int] = field(default_factory=dict)
    shot_sources: Dict[str, int] = field(default_factory=dict)

    def counter_columns(self) -> Dict[str, int]:
        """Flatten the 16 source counters to their column names."""
        columns = {}
        for category in SOURCE_CATEGORIES:
            columns[f"score_source_{category}"] = self.score_sources.get(category) or 0
            columns[f"shot_source_{category}"] = self.shot_sources.get(category) or 0
        return columns


@dataclass
class MatchSheetData:
    """Match-level data extracted from one match sheet."""
    sheet_name: str
    match_number: int
    competition: str
    opposition: str
    match_date: date
    venue: str = "Home"
    home_score_first_half: Optional[str] = None
    home_score_second_half: Optional[str] = None
    home_score_full_time: Optional[str] = None
    away_score_first_half: Optional[str] = None
    away_score_second_half: Optional[str] = None
    away_score_full_time: Optional[str] = None
    team_statistics: List[TeamStatisticsData] = field(default_factory=list)


@dataclass
class PlayerStatisticsData:
    """
    One player row from a player stats sheet.

    Counts default to 0 when the column is absent; decimals default to None.
    """
    jersey_number: int
    player_name: str
    source_row: Optional[int] = None
    position_code: Optional[str] = None

    # Summary
    minutes_played: int = 0
    total_engagements: int = 0
    te_per_psr: Optional[float] = None
    scores: Optional[str] = None
    psr: int = 0
    psr_per_tp: Optional[float] = None

    # Possession play
    tp: int = 0
    tow: int = 0
    interceptions: int = 0
    tpl: int = 0
    kp: int = 0
    hp: int = 0
    ha: int = 0
    turnovers: int = 0
    ineffective: int = 0
    shot_short: int = 0
    shot_save: int = 0
    fouled: int = 0
    woodwork: int = 0

    # Kickouts
    ko_home_kow: int = 0
    ko_home_wc: int = 0
    ko_home_bw: int = 0
    ko_home_sw: int = 0
    ko_opp_kow: int = 0
    ko_opp_wc: int = 0
    ko_opp_bw: int = 0
    ko_opp_sw: int = 0

    # Attacking play
    ta: int = 0
    kr: int = 0
    kl: int = 0
    cr: int = 0
    cl: int = 0

    # Shots from play
    shots_play_total: int = 0
    shots_play_points: int = 0
    shots_play_2points: int = 0
    shots_play_goals: int = 0
    shots_play_wide: int = 0
    shots_play_short: int = 0
    shots_play_save: int = 0
    shots_play_woodwork: int = 0
    shots_play_blocked: int = 0
    shots_play_45: int = 0
    shots_play_percentage: Optional[float] = None

    # Scoreable frees
    frees_total: int = 0
    frees_points: int = 0
    frees_2points: int = 0
    frees_goals: int = 0
    frees_wide: int = 0
    frees_short: int = 0
    frees_save: int = 0
    frees_woodwork: int = 0
    frees_45: int = 0
    frees_qf: int = 0
    frees_percentage: Optional[float] = None

    # Total shots
    total_shots: int = 0
    total_shots_percentage: Optional[float] = None

    # Assists
    assists_total: int = 0
    assists_point: int = 0
    assists_goal: int = 0

    # Tackles
    tackles_total: int = 0
    tackles_contested: int = 0
    tackles_missed: int = 0
    tackles_percentage: Optional[float] = None

    # Frees conceded
    frees_conceded_total: int = 0
    frees_conceded_attack: int = 0
    frees_conceded_midfield: int = 0
    frees_conceded_defense: int = 0
    frees_conceded_penalty: int = 0

    # 50m frees conceded
    frees_50m_total: int = 0
    frees_50m_delay: int = 0
    frees_50m_dissent: int = 0
    frees_50m_3v3: int = 0

    # Bookings
    yellow_cards: int = 0
    black_cards: int = 0
    red_cards: int = 0

    # Throw-up
    throw_up_won: int = 0
    throw_up_lost: int = 0

    # Goalkeeper
    gk_total_kickouts: int = 0
    gk_kickout_retained: int = 0
    gk_kickout_lost: int = 0
    gk_kickout_percentage: Optional[float] = None
    gk_saves: int = 0

    def get(self, player_field: PlayerField):
        return getattr(self, player_field.attribute)

    def set(self, player_field: PlayerField, value):
        setattr(self, player_field.attribute, value)

    @property
    def label(self) -> str:
        return f"Player #{self.jersey_number} ({self.player_name})"


@dataclass
class PlayerStatsSheetData:
    """A parsed player stats sheet. match_date is None when the sheet name was truncated."""
    sheet_name: str
    match_number: int
    opposition: str
    match_date: Optional[date] = None
    field_map: Dict[PlayerField, int] = field(default_factory=dict)
    players: List[PlayerStatisticsData] = field(default_factory=list)
    duplicate_columns: List[str] = field(default_factory=list)


@dataclass
class PositionMappingResult:
    """
    Outcome of reading the position category sheets.

    mappings: normalized player name -> position code (GK/DEF/MID/FWD)
    """
    mappings: Dict[str, str] = field(default_factory=dict)
    sheets_processed: int = 0
    duplicate_warnings: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    processing_time_ms: int = 0

    @property
    def is_success(self) -> bool:
        return self.sheets_processed > 0

    @classmethod
    def failure(cls, message: str) -> "PositionMappingResult":
        return cls(errors=[message])


@dataclass
class KpiDefinitionData:
    """One row of the KPI Definitions sheet."""
    event_number: int
    event_name: str
    outcome: str
    team_assignment: str
    psr_value: float
    definition: str
    source_row_number: int

    @property
    def natural_key(self) -> tuple:
        return (
            self.event_number,
            self.event_name.lower(),
            self.outcome.lower(),
            self.team_assignment.lower(),
        )
