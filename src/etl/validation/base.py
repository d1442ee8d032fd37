"""Base class for validation layers."""

from typing import Dict, Optional

from etl.models import PlayerStatisticsData, PlayerStatsSheetData
from etl.validation.result import ValidationResult


class ValidationLayer:
    """
    One layer of the player sheet validation pipeline.

    Subclasses override the hooks they need; the defaults report nothing.

    Attributes:
        name: Layer name used in logs
        halts_sheet: Errors from validate_sheet stop the whole run
        gates_player: Errors from validate_player exclude the player
    """

    name = "layer"
    halts_sheet = False
    gates_player = False

    def validate_sheet(self, sheet: PlayerStatsSheetData) -> ValidationResult:
        return ValidationResult()

    def validate_player(self, player: PlayerStatisticsData, position: Optional[str]) -> ValidationResult:
        return ValidationResult()

    def validate_team(self, sheet: PlayerStatsSheetData, positions: Dict[str, str]) -> ValidationResult:
        return ValidationResult()
