"""Validation of extracted match sheets before loading."""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Optional

from config import ETL_CONFIG, WORKBOOK_CONFIG
from etl.exceptions import GridCountError
from etl.models import PERIODS, SOURCE_CATEGORIES, MatchSheetData
from etl.validation.result import ValidationResult
from utils.score_utils import parse_gaa_score

MIN_MATCH_DATE = date(2000, 1, 1)
MAX_GOALS = 10
MAX_POINTS = 30


class MatchDataTransformer:
    """
    Validates match metadata, scores and team statistics.

    Errors reject the match; warnings are reported and the match is still
    loaded.
    """

    def __init__(self, etl_config: Optional[Dict] = None, home_team: Optional[str] = None):
        config = {**ETL_CONFIG, **(etl_config or {})}
        self.period_tolerance = config["score_period_tolerance"]
        self.possession_tolerance = config["possession_sum_tolerance"]
        self.home_team = home_team or WORKBOOK_CONFIG["home_team"]
        self.logger = logging.getLogger(__name__)

    def validate_match(self, match: MatchSheetData) -> ValidationResult:
        """
        Validate one match.

        Raises:
            GridCountError: If the match does not carry exactly 6 team-period records
        """
        result = ValidationResult()

        self._validate_metadata(match, result)
        self._validate_scores(match, result)
        self._validate_team_statistics(match, result)

        if result.is_valid:
            self.logger.debug(f"Validation passed for match {match.match_number}")
        return result

    def _validate_metadata(self, match, result):
        if match.match_number <= 0:
            result.add_error(f"Invalid match number: {match.match_number}")
        if not (match.competition or "").strip():
            result.add_error("Competition name cannot be empty")
        if not (match.opposition or "").strip():
            result.add_error("Opposition team name cannot be empty")

        max_date = datetime.now().date() + timedelta(days=365)
        if match.match_date < MIN_MATCH_DATE or match.match_date > max_date:
            result.add_error(f"Invalid match date: {match.match_date.isoformat()}")

    def _validate_scores(self, match, result):
        scores = {
            "Home 1st Half": match.home_score_first_half,
            "Home 2nd Half": match.home_score_second_half,
            "Home Full Time": match.home_score_full_time,
            "Away 1st Half": match.away_score_first_half,
            "Away 2nd Half": match.away_score_second_half,
            "Away Full Time": match.away_score_full_time,
        }

        for label, score in scores.items():
            self._validate_score_format(score, label, result)

        self._validate_period_totals(
            match.home_score_first_half, match.home_score_second_half, match.home_score_full_time, "Home", result
        )
        self._validate_period_totals(
            match.away_score_first_half, match.away_score_second_half, match.away_score_full_time, "Away", result
        )

    def _validate_score_format(self, score, label, result):
        if not score or not score.strip():
            result.add_warning(f"Missing score for {label}")
            return

        parsed = parse_gaa_score(score)
        if parsed is None:
            result.add_error(f"Invalid score format for {label}: {score}. Expected format: G-PP")
            return

        goals, points = parsed
        if goals > MAX_GOALS:
            result.add_error(f"Unrealistic goals value for {label}: {goals}")
        if points > MAX_POINTS:
            result.add_error(f"Unrealistic points value for {label}: {points}")

    def _validate_period_totals(self, first, second, full, team, result):
        parsed = [parse_gaa_score(s) for s in (first, second, full)]
        if any(p is None for p in parsed):
            return

        (g1, p1), (g2, p2), (g_full, p_full) = parsed

        goal_tolerance = max(1, int(g_full * self.period_tolerance))
        point_tolerance = max(1, int(p_full * self.period_tolerance))

        if abs(g1 + g2 - g_full) > goal_tolerance:
            result.add_warning(f"{team} goals: {g1}+{g2}≠{g_full} (tolerance: {goal_tolerance})")
        if abs(p1 + p2 - p_full) > point_tolerance:
            result.add_warning(f"{team} points: {p1}+{p2}≠{p_full} (tolerance: {point_tolerance})")

    def _validate_team_statistics(self, match, result):
        if len(match.team_statistics) != 6:
            raise GridCountError(
                f"Expected 6 team statistics records, found {len(match.team_statistics)}",
                sheet_name=match.sheet_name
            )

        for stats in match.team_statistics:
            if stats.period not in PERIODS:
                result.add_error(f"Invalid period: {stats.period}")

            if stats.total_possession is not None and not 0 <= stats.total_possession <= 1:
                result.add_error(f"Possession out of range: {stats.total_possession}")

            for category in SOURCE_CATEGORIES:
                for kind, counters in (("score_source", stats.score_sources), ("shot_source", stats.shot_sources)):
                    value = counters.get(category)
                    if value is not None and value < 0:
                        result.add_error(f"Negative value not allowed for {kind}_{category} "
                                         f"({stats.team_name}, {stats.period}): {value}")

        self._validate_possession_sums(match, result)

    def _validate_possession_sums(self, match, result):
        for period in PERIODS:
            home = next((s for s in match.team_statistics
                         if s.team_name == self.home_team and s.period == period), None)
            away = next((s for s in match.team_statistics
                         if s.team_name != self.home_team and s.period == period), None)

            if home is None or away is None or home.total_possession is None or away.total_possession is None:
                continue

            total = home.total_possession + away.total_possession
            if abs(total - 1.0) > self.possession_tolerance:
                result.add_warning(f"Possession sum for {period} period: {total:.4f} (expected ≈1.0)")
