"""Layer 5: expectations per playing position. Warnings only."""

from typing import Optional

from etl.models import PlayerStatisticsData
from etl.validation.base import ValidationLayer
from etl.validation.result import ValidationResult


class PositionSpecificLayer(ValidationLayer):
    name = "position_specific"

    def validate_player(self, player: PlayerStatisticsData, position: Optional[str]) -> ValidationResult:
        result = ValidationResult()

        if not position:
            result.add_warning("Position code not set, skipping position-specific validation")
            return result

        checks = {
            "GK": self._validate_goalkeeper,
            "DEF": self._validate_defender,
            "MID": self._validate_midfielder,
            "FWD": self._validate_forward
        }

        check = checks.get(position.upper())
        if check is None:
            result.add_warning(f"Unknown position code '{position}'")
        else:
            check(player, result)

        return result

    def _validate_goalkeeper(self, p, result):
        if p.gk_total_kickouts == 0:
            result.add_warning("Goalkeeper has no kickouts recorded")
        if p.total_shots > 2:
            result.add_warning(f"Goalkeeper has {p.total_shots} shots, which is unusually high")
        if p.shots_play_goals > 0 or p.frees_goals > 0:
            result.add_warning("Goalkeeper has goals recorded, which is unusual")
        if p.ta > 5:
            result.add_warning(f"Goalkeeper has {p.ta} total attacks, which is unusually high")
        if p.tackles_total == 0 and p.minutes_played > 30:
            result.add_warning("Goalkeeper has no tackles despite significant playing time")

    def _validate_defender(self, p, result):
        self._no_kickouts(p, "Defender", result)
        if p.tackles_total == 0 and p.minutes_played > 30:
            result.add_warning(f"Defender has no tackles despite {p.minutes_played} minutes played")
        if p.total_shots > 10:
            result.add_warning(f"Defender has {p.total_shots} shots, which is unusually high for a defender")
        if p.minutes_played > 40 and p.tackles_total < 2 and p.interceptions < 2:
            result.add_warning(
                f"Defender has minimal defensive actions (tackles: {p.tackles_total}, "
                f"interceptions: {p.interceptions}) despite significant playing time"
            )

    def _validate_midfielder(self, p, result):
        self._no_kickouts(p, "Midfielder", result)
        if p.minutes_played > 40:
            if p.tp < 5:
                result.add_warning(f"Midfielder has only {p.tp} total possessions despite {p.minutes_played} minutes played")
            if p.ko_home_kow + p.ko_opp_kow == 0:
                result.add_warning("Midfielder has no kickout wins despite significant playing time")
            if p.tackles_total == 0:
                result.add_warning(f"Midfielder has no tackles despite {p.minutes_played} minutes played")

    def _validate_forward(self, p, result):
        self._no_kickouts(p, "Forward", result)
        if p.minutes_played > 40 and p.total_shots == 0:
            result.add_warning(f"Forward has no shots despite {p.minutes_played} minutes played")
        if p.minutes_played > 40 and p.ta < 3:
            result.add_warning(f"Forward has only {p.ta} total attacks despite {p.minutes_played} minutes played")
        if p.tackles_total > 8:
            result.add_warning(f"Forward has {p.tackles_total} tackles, which is unusually high for a forward")
        if p.minutes_played > 50:
            scores = p.shots_play_points + p.shots_play_goals + p.frees_points + p.frees_goals
            if scores + p.assists_total == 0:
                result.add_warning(f"Forward played {p.minutes_played} minutes but recorded no scores or assists")

    @staticmethod
    def _no_kickouts(p, role, result):
        if p.gk_total_kickouts > 0:
            result.add_warning(f"{role} has {p.gk_total_kickouts} kickouts, which should only be for goalkeepers")
