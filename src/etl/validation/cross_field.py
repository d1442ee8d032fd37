"""Layer 4: totals must agree with their breakdowns."""

from typing import Dict, Optional

from config import ETL_CONFIG
from etl.models import PlayerStatisticsData
from etl.validation.base import ValidationLayer
from etl.validation.result import ValidationResult


def _score_value(points: int, two_pointers: int, goals: int) -> int:
    return points + two_pointers * 2 + goals * 3


class CrossFieldLayer(ValidationLayer):
    """
    Cross-field consistency checks.

    Shot totals that disagree with their outcomes are errors; every other
    mismatch is a warning.
    """

    name = "cross_field"

    def __init__(self, etl_config: Optional[Dict] = None):
        config = {**ETL_CONFIG, **(etl_config or {})}
        self.tolerance = config["cross_field_tolerance"]
        self.percentage_tolerance = config["percentage_tolerance"]

    def validate_player(self, player: PlayerStatisticsData, position: Optional[str]) -> ValidationResult:
        result = ValidationResult()
        p = player

        self._check_sum(result, "Home kickouts won", p.ko_home_kow, p.ko_home_wc + p.ko_home_bw + p.ko_home_sw)
        self._check_sum(result, "Opposition kickouts won", p.ko_opp_kow, p.ko_opp_wc + p.ko_opp_bw + p.ko_opp_sw)
        self._check_sum(result, "Total attacks", p.ta, p.kr + p.kl + p.cr + p.cl)

        play_outcomes = (p.shots_play_points + p.shots_play_2points + p.shots_play_goals + p.shots_play_wide
                         + p.shots_play_short + p.shots_play_save + p.shots_play_woodwork + p.shots_play_blocked)
        self._check_sum(result, "Shots from play total", p.shots_play_total, play_outcomes, error=True)

        free_outcomes = (p.frees_points + p.frees_2points + p.frees_goals + p.frees_wide
                         + p.frees_short + p.frees_save + p.frees_woodwork)
        self._check_sum(result, "Scoreable frees total", p.frees_total, free_outcomes, error=True)

        self._check_sum(result, "Total shots", p.total_shots, p.shots_play_total + p.frees_total, error=True)

        play_scores = _score_value(p.shots_play_points, p.shots_play_2points, p.shots_play_goals)
        free_scores = _score_value(p.frees_points, p.frees_2points, p.frees_goals)
        self._check_percentage(result, "Shots from play %", p.shots_play_percentage, play_scores, p.shots_play_total)
        self._check_percentage(result, "Frees %", p.frees_percentage, free_scores, p.frees_total)
        self._check_percentage(result, "Total shots %", p.total_shots_percentage,
                               play_scores + free_scores, p.total_shots)

        self._check_sum(result, "Total assists", p.assists_total, p.assists_point + p.assists_goal)

        self._check_sum(result, "Total tackles", p.tackles_total, p.tackles_contested + p.tackles_missed)
        self._check_percentage(result, "Tackles %", p.tackles_percentage, p.tackles_contested, p.tackles_total)

        self._check_sum(result, "Total frees conceded", p.frees_conceded_total,
                        p.frees_conceded_attack + p.frees_conceded_midfield
                        + p.frees_conceded_defense + p.frees_conceded_penalty)
        self._check_sum(result, "Total 50m frees", p.frees_50m_total,
                        p.frees_50m_delay + p.frees_50m_dissent + p.frees_50m_3v3)

        if (p.throw_up_won > 0 and p.throw_up_lost > 10) or (p.throw_up_lost > 0 and p.throw_up_won > 10):
            result.add_warning(f"Throw up stats seem imbalanced (Won: {p.throw_up_won}, Lost: {p.throw_up_lost})")

        self._check_sum(result, "GK total kickouts", p.gk_total_kickouts, p.gk_kickout_retained + p.gk_kickout_lost)
        self._check_percentage(result, "GK kickout %", p.gk_kickout_percentage,
                               p.gk_kickout_retained, p.gk_total_kickouts)

        if p.hp > p.ha:
            result.add_warning(f"Hand passes completed ({p.hp}) exceeds attempts ({p.ha})")

        return result

    def _check_sum(self, result: ValidationResult, label: str, total: int, breakdown: int, error: bool = False):
        if total > 0 and abs(total - breakdown) > self.tolerance:
            message = f"{label} ({total}) doesn't match sum of its breakdown ({breakdown})"
            if error:
                result.add_error(message)
            else:
                result.add_warning(message)

    def _check_percentage(self, result: ValidationResult, label: str, recorded: Optional[float],
                          numerator: int, denominator: int):
        if denominator <= 0 or recorded is None:
            return

        expected = numerator / denominator
        if abs(recorded - expected) > self.percentage_tolerance:
            result.add_warning(f"{label} ({recorded:.1%}) doesn't match calculated ({expected:.1%})")
