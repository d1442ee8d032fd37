"""Layer 6: match-level business rules for players and the whole team."""

import re
from typing import Dict, Optional

from etl.models import PlayerStatisticsData, PlayerStatsSheetData
from etl.validation.base import ValidationLayer
from etl.validation.result import ValidationResult

# "1-03" or "0-05(2f)"
PLAYER_SCORE_PATTERN = re.compile(r"^\d+-\d+(\(\d+f\))?$")


class BusinessRuleLayer(ValidationLayer):
    """Booking, activity and squad rules."""

    name = "business_rules"

    def validate_player(self, player: PlayerStatisticsData, position: Optional[str]) -> ValidationResult:
        result = ValidationResult()

        self._validate_bookings(player, result)
        self._validate_activity(player, result)
        self._validate_turnovers(player, result)
        self._validate_shooting(player, result)
        self._validate_engagement(player, result)
        self._validate_score_notation(player, result)

        return result

    def validate_team(self, sheet: PlayerStatsSheetData, positions: Dict[str, str]) -> ValidationResult:
        """
        Squad-level checks over all players on the sheet.

        Args:
            sheet: Parsed player stats sheet
            positions: Normalized name -> position code used for this sheet
        """
        result = ValidationResult()
        players = sheet.players
        if not players:
            return result

        context = f"Match vs {sheet.opposition}"

        if len(players) < 15:
            result.add_warning(f"{context}: Only {len(players)} players recorded (expected at least 15)")
        elif len(players) > 35:
            result.add_warning(f"{context}: {len(players)} players recorded (unusually high for GAA match)")

        has_goalkeeper = any(
            p.gk_total_kickouts > 0 or p.position_code == "GK" for p in players
        ) or "GK" in positions.values()
        if not has_goalkeeper:
            result.add_warning(f"{context}: No goalkeeper detected (no kickout stats recorded)")

        total_minutes = sum(p.minutes_played for p in players)
        if total_minutes < 700:
            result.add_warning(f"{context}: Total player-minutes ({total_minutes}) is low (expected ~1050)")
        elif total_minutes > 1400:
            result.add_warning(f"{context}: Total player-minutes ({total_minutes}) is high (expected ~1050)")

        regulars = [p for p in players if p.minutes_played > 40]
        if len(regulars) < 10:
            result.add_warning(f"{context}: Only {len(regulars)} players with >40 minutes (expected ~15)")

        inactive = [p for p in regulars if p.total_engagements == 0]
        if inactive:
            names = ", ".join(f"#{p.jersey_number} {p.player_name}" for p in inactive)
            result.add_warning(f"{context}: Players with >40 minutes but 0 engagements: {names}")

        return result

    def _validate_bookings(self, p, result):
        if p.red_cards > 0 and p.minutes_played > 60:
            result.add_warning(f"Has red card but played {p.minutes_played} minutes (expected early send-off)")
        if p.black_cards > 0 and p.minutes_played > 60:
            result.add_warning(f"Has black card but played {p.minutes_played} minutes (expected early send-off)")
        if p.red_cards > 1:
            result.add_error(f"Has {p.red_cards} red cards (maximum 1 per match)")
        if p.black_cards > 1:
            result.add_error(f"Has {p.black_cards} black cards (maximum 1 per match)")

        total_cards = p.yellow_cards + p.black_cards + p.red_cards
        if total_cards > 2:
            result.add_warning(f"Has {total_cards} total cards, which is unusual")

    def _validate_activity(self, p, result):
        if p.minutes_played == 0:
            if p.total_engagements > 0 or p.total_shots > 0 or p.tackles_total > 0 or p.gk_total_kickouts > 0:
                result.add_warning("Has 0 minutes played but has statistics recorded (may be data entry error)")
        elif p.minutes_played > 30 and p.total_engagements == 0:
            result.add_warning(f"Played {p.minutes_played} minutes but has 0 total engagements")

    def _validate_turnovers(self, p, result):
        if p.turnovers > 5 and p.tow == 0:
            result.add_warning(f"Has {p.turnovers} turnovers lost but 0 won (very poor possession retention)")
        if p.tpl > 0 and p.turnovers > p.tpl:
            result.add_warning(f"Turnovers ({p.turnovers}) exceeds total possession lost ({p.tpl})")

    def _validate_shooting(self, p, result):
        if p.total_shots > 5:
            scores = p.shots_play_points + p.shots_play_goals + p.frees_points + p.frees_goals
            if scores == 0:
                result.add_warning(f"Took {p.total_shots} shots but scored 0 points (0% accuracy)")
            elif scores / p.total_shots < 0.1:
                result.add_warning(
                    f"Very low shooting accuracy ({scores / p.total_shots:.0%}) from {p.total_shots} shots"
                )

        if p.total_shots >= 5 and p.total_shots_percentage is not None and p.total_shots_percentage >= 1.0:
            result.add_warning(f"Has 100% shooting accuracy from {p.total_shots} shots (verify data)")

    def _validate_engagement(self, p, result):
        if p.minutes_played < 20:
            return

        rate = p.total_engagements / p.minutes_played
        if rate > 2.0:
            result.add_warning(f"Very high engagement rate ({rate:.1f} per minute) - verify data")
        elif rate < 0.2 and p.minutes_played > 40:
            result.add_warning(f"Very low engagement rate ({rate:.1f} per minute)")

    def _validate_score_notation(self, p, result):
        if not p.scores:
            return
        if not PLAYER_SCORE_PATTERN.match(p.scores):
            result.add_warning(
                f"Score notation '{p.scores}' doesn't match expected GAA format (e.g. '1-03' or '0-05(2f)')"
            )
