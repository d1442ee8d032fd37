"""Configuration file for GAAStat ETL."""

# Database Configuration
DATABASE_CONFIG = {
    "path": "gaastat.db",
    "foreign_keys": True
}

# Logging Configuration
LOGGING_CONFIG = {
    "level": "INFO",  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    "file": "gaastat_etl.log",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
}

# Workbook layout conventions
WORKBOOK_CONFIG = {
    "home_team": "Drum",
    "kpi_sheet": "KPI Definitions",
    "kpi_header_row": 2,
    "kpi_data_start_row": 4,
    # Processing order matters: later sheets win on duplicate names
    "position_sheets": {
        "Goalkeepers": "GK",
        "Defenders": "DEF",
        "Midfielders": "MID",
        "Forwards": "FWD"
    },
    "position_start_row": 4,
    "position_name_column": 2,  # Column B
    "position_row_interval": 28,
    "sheet_prefix_length": 25,  # Excel truncates sheet names at 31 chars
    "player_header_row": 3,
    "player_data_start_row": 4
}

# Tunable thresholds (empirical, pending product confirmation)
ETL_CONFIG = {
    "score_period_tolerance": 0.10,  # Half-time sums vs full-time score
    "possession_sum_tolerance": 0.05,
    "cross_field_tolerance": 2,
    "percentage_tolerance": 0.05,
    "fuzzy_match_max_distance": 3,
    "kpi_max_blank_rows": 5,
    "min_expected_player_fields": 80
}
