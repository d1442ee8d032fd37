"""
Closed set of player statistics fields.

Each player stats sheet carries 84 columns identified by a short header
token in row 3. Several tokens repeat across sections ("Tot" appears for
shots, frees, tackles, frees conceded and 50m frees), so the header table
maps every header text to the ordered fields that share it; the n-th
occurrence on a sheet resolves to the n-th field.
"""

from enum import Enum
from typing import Dict, List, Tuple


class FieldKind(Enum):
    INT = "int"
    DECIMAL = "decimal"
    TEXT = "text"


class PlayerField(Enum):
    """Player statistic field: (header token, model attribute, kind)."""

    # Summary
    JERSEY_NUMBER = ("#", "jersey_number", FieldKind.INT)
    PLAYER_NAME = ("Player Name", "player_name", FieldKind.TEXT)
    MINUTES_PLAYED = ("Min", "minutes_played", FieldKind.INT)
    TOTAL_ENGAGEMENTS = ("TE", "total_engagements", FieldKind.INT)
    TE_PER_PSR = ("TE/PSR", "te_per_psr", FieldKind.DECIMAL)
    SCORES = ("Scores", "scores", FieldKind.TEXT)
    PSR = ("PSR", "psr", FieldKind.INT)
    PSR_PER_TP = ("PSR/TP", "psr_per_tp", FieldKind.DECIMAL)

    # Possession play
    TP = ("TP", "tp", FieldKind.INT)
    TOW = ("ToW", "tow", FieldKind.INT)
    INTERCEPTIONS = ("Int", "interceptions", FieldKind.INT)
    TPL = ("TPL", "tpl", FieldKind.INT)
    KP = ("KP", "kp", FieldKind.INT)
    HP = ("HP", "hp", FieldKind.INT)
    HA = ("Ha", "ha", FieldKind.INT)
    TURNOVERS = ("TO", "turnovers", FieldKind.INT)
    INEFFECTIVE = ("In", "ineffective", FieldKind.INT)
    SHOT_SHORT = ("SS", "shot_short", FieldKind.INT)
    SHOT_SAVE = ("S Save", "shot_save", FieldKind.INT)
    FOULED = ("Fo", "fouled", FieldKind.INT)
    WOODWORK = ("Ww", "woodwork", FieldKind.INT)

    # Kickouts won by the home team
    KO_HOME_KOW = ("KoW", "ko_home_kow", FieldKind.INT)
    KO_HOME_WC = ("WC", "ko_home_wc", FieldKind.INT)
    KO_HOME_BW = ("BW", "ko_home_bw", FieldKind.INT)
    KO_HOME_SW = ("SW", "ko_home_sw", FieldKind.INT)

    # Opposition kickouts
    KO_OPP_KOW = ("KoW_Opp", "ko_opp_kow", FieldKind.INT)
    KO_OPP_WC = ("WC_Opp", "ko_opp_wc", FieldKind.INT)
    KO_OPP_BW = ("BW_Opp", "ko_opp_bw", FieldKind.INT)
    KO_OPP_SW = ("SW_Opp", "ko_opp_sw", FieldKind.INT)

    # Attacking play
    TA = ("TA", "ta", FieldKind.INT)
    KR = ("KR", "kr", FieldKind.INT)
    KL = ("KL", "kl", FieldKind.INT)
    CR = ("CR", "cr", FieldKind.INT)
    CL = ("CL", "cl", FieldKind.INT)

    # Shots from play
    SHOTS_PLAY_TOTAL = ("Tot", "shots_play_total", FieldKind.INT)
    SHOTS_PLAY_POINTS = ("Pts", "shots_play_points", FieldKind.INT)
    SHOTS_PLAY_2POINTS = ("2 Pts", "shots_play_2points", FieldKind.INT)
    SHOTS_PLAY_GOALS = ("Gls", "shots_play_goals", FieldKind.INT)
    SHOTS_PLAY_WIDE = ("Wid", "shots_play_wide", FieldKind.INT)
    SHOTS_PLAY_SHORT = ("Sh", "shots_play_short", FieldKind.INT)
    SHOTS_PLAY_SAVE = ("Save", "shots_play_save", FieldKind.INT)
    SHOTS_PLAY_WOODWORK = ("Ww_Shots", "shots_play_woodwork", FieldKind.INT)
    SHOTS_PLAY_BLOCKED = ("Bd", "shots_play_blocked", FieldKind.INT)
    SHOTS_PLAY_45 = ("45", "shots_play_45", FieldKind.INT)
    SHOTS_PLAY_PERCENTAGE = ("%", "shots_play_percentage", FieldKind.DECIMAL)

    # Scoreable frees
    FREES_TOTAL = ("Tot_Frees", "frees_total", FieldKind.INT)
    FREES_POINTS = ("Pts_Frees", "frees_points", FieldKind.INT)
    FREES_2POINTS = ("2 Pts_Frees", "frees_2points", FieldKind.INT)
    FREES_GOALS = ("Gls_Frees", "frees_goals", FieldKind.INT)
    FREES_WIDE = ("Wid_Frees", "frees_wide", FieldKind.INT)
    FREES_SHORT = ("Sh_Frees", "frees_short", FieldKind.INT)
    FREES_SAVE = ("Save_Frees", "frees_save", FieldKind.INT)
    FREES_WOODWORK = ("Ww_Frees", "frees_woodwork", FieldKind.INT)
    FREES_45 = ("45_Frees", "frees_45", FieldKind.INT)
    FREES_QF = ("QF", "frees_qf", FieldKind.INT)
    FREES_PERCENTAGE = ("%_Frees", "frees_percentage", FieldKind.DECIMAL)

    # Total shots
    TOTAL_SHOTS = ("TS", "total_shots", FieldKind.INT)
    TOTAL_SHOTS_PERCENTAGE = ("%_Total", "total_shots_percentage", FieldKind.DECIMAL)

    # Assists
    ASSISTS_TOTAL = ("TA_Assists", "assists_total", FieldKind.INT)
    ASSISTS_POINT = ("Point", "assists_point", FieldKind.INT)
    ASSISTS_GOAL = ("Goal", "assists_goal", FieldKind.INT)

    # Tackles
    TACKLES_TOTAL = ("Tot_Tackles", "tackles_total", FieldKind.INT)
    TACKLES_CONTESTED = ("Con", "tackles_contested", FieldKind.INT)
    TACKLES_MISSED = ("Mis", "tackles_missed", FieldKind.INT)
    TACKLES_PERCENTAGE = ("%_Tackles", "tackles_percentage", FieldKind.DECIMAL)

    # Frees conceded
    FREES_CONCEDED_TOTAL = ("Tot_FC", "frees_conceded_total", FieldKind.INT)
    FREES_CONCEDED_ATTACK = ("Att", "frees_conceded_attack", FieldKind.INT)
    FREES_CONCEDED_MIDFIELD = ("Mid", "frees_conceded_midfield", FieldKind.INT)
    FREES_CONCEDED_DEFENSE = ("Def", "frees_conceded_defense", FieldKind.INT)
    FREES_CONCEDED_PENALTY = ("Pen", "frees_conceded_penalty", FieldKind.INT)

    # 50m frees conceded
    FREES_50M_TOTAL = ("Tot_50m", "frees_50m_total", FieldKind.INT)
    FREES_50M_DELAY = ("Delay", "frees_50m_delay", FieldKind.INT)
    FREES_50M_DISSENT = ("Diss", "frees_50m_dissent", FieldKind.INT)
    FREES_50M_3V3 = ("3v3", "frees_50m_3v3", FieldKind.INT)

    # Bookings
    YELLOW_CARDS = ("Yel", "yellow_cards", FieldKind.INT)
    BLACK_CARDS = ("Bla", "black_cards", FieldKind.INT)
    RED_CARDS = ("Red", "red_cards", FieldKind.INT)

    # Throw-up
    THROW_UP_WON = ("Won", "throw_up_won", FieldKind.INT)
    THROW_UP_LOST = ("Los", "throw_up_lost", FieldKind.INT)

    # Goalkeeper
    GK_TOTAL_KICKOUTS = ("TKo", "gk_total_kickouts", FieldKind.INT)
    GK_KICKOUT_RETAINED = ("KoR", "gk_kickout_retained", FieldKind.INT)
    GK_KICKOUT_LOST = ("KoL", "gk_kickout_lost", FieldKind.INT)
    GK_KICKOUT_PERCENTAGE = ("%_GK", "gk_kickout_percentage", FieldKind.DECIMAL)
    GK_SAVES = ("Saves", "gk_saves", FieldKind.INT)

    def __init__(self, header: str, attribute: str, kind: FieldKind):
        self.header = header
        self.attribute = attribute
        self.kind = kind

    @property
    def shared_header(self) -> str:
        """Header text as it appears on the sheet (token before any '_' suffix)."""
        return self.header.split("_", 1)[0]

    @classmethod
    def statistic_fields(cls) -> List["PlayerField"]:
        """All fields stored on the statistics record (everything but identity)."""
        return [f for f in cls if f not in IDENTITY_FIELDS]


IDENTITY_FIELDS = (PlayerField.JERSEY_NUMBER, PlayerField.PLAYER_NAME)

CRITICAL_FIELDS = (PlayerField.JERSEY_NUMBER, PlayerField.PLAYER_NAME, PlayerField.MINUTES_PLAYED)

EXPECTED_FIELD_COUNT = len(PlayerField)


def _build_header_tables() -> Tuple[Dict[str, Tuple[PlayerField, ...]], Dict[str, PlayerField]]:
    shared: Dict[str, List[PlayerField]] = {}
    exact: Dict[str, PlayerField] = {}

    for field in PlayerField:
        shared.setdefault(field.shared_header.lower(), []).append(field)
        exact[field.header.lower()] = field

    return {k: tuple(v) for k, v in shared.items()}, exact


# header text (lowercase) -> fields in sheet order
SHARED_HEADER_TABLE, EXACT_HEADER_TABLE = _build_header_tables()
