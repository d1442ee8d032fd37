"""Constants for the GAA workbook layout."""

from etl.models import SOURCE_CATEGORIES

# Sheet name patterns
MATCH_SHEET_PATTERN = r"^(\d+)\.\s+(.+?)\s+vs\s+"
PLAYER_SHEET_FULL_PATTERN = r"^(\d+)\.\s+Player\s+[Ss]tats\s+vs\s+(.+?)\s+(\d{2})\.(\d{2})\.(\d{2})$"
PLAYER_SHEET_TRUNCATED_PATTERN = r"^(\d+)\.\s+Player\s+[Ss]tats\s+vs\s+"
MATCH_NAME_METADATA_PATTERN = r"^(\d+)\.\s+(\w+)\s+vs\s+(.+?)\s+(\d{2})\.(\d{2})\.(\d{2})$"
TRAILING_DATE_FRAGMENT = r"\s+\d{1,2}\.\d{0,2}.*$"

COMPETITION_TYPES = ("Championship", "League", "Cup", "Friendly")
DEFAULT_COMPETITION = "League"

# Match sheet grid (1-based)
METADATA_CELL = "B1"
SCORE_ROW = 4
POSSESSION_ROW = 5
SCORE_SOURCE_START_ROW = 7
SHOT_SOURCE_START_ROW = 16

TEAM_COLUMN_OFFSETS = {
    "home": 2,
    "opposition": 5
}

PERIOD_OFFSETS = {
    "1st": 0,
    "2nd": 1,
    "Full": 2
}

# Row order of both source blocks
SOURCE_ROWS = SOURCE_CATEGORIES

EXPECTED_TEAM_STATISTICS = len(TEAM_COLUMN_OFFSETS) * len(PERIOD_OFFSETS)

# KPI sheet
KPI_COLUMNS = [
    "event_number",
    "event_name",
    "outcome",
    "team_assignment",
    "psr_value",
    "definition"
]
KPI_EXPECTED_HEADERS = ["Event #", "Event Name", "Outcome", "Assign to which team", "PSR Value", "Definition"]
