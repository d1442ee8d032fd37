"""
Six-layer validation pipeline for player statistics sheets.

Layer order is fixed:
    1. Sheet structure      (halts the sheet on error)
    2. Player identification (excludes the player on error)
    3. Data types
    4. Cross-field consistency
    5. Position-specific expectations
    6. Business rules
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from etl.models import PlayerStatisticsData, PlayerStatsSheetData
from etl.validation.base import ValidationLayer
from etl.validation.business_rules import BusinessRuleLayer
from etl.validation.cross_field import CrossFieldLayer
from etl.validation.data_type import DataTypeLayer
from etl.validation.identification import PlayerIdentificationLayer
from etl.validation.position_specific import PositionSpecificLayer
from etl.validation.result import ValidationResult
from etl.validation.structure import SheetStructureLayer

CRITICAL_ERROR_MARKERS = (
    "Field map is empty",
    "Player list is empty",
    "Critical field",
    "Match number",
    "Opposition team name is empty",
)


@dataclass
class SheetValidationOutcome:
    """Validation outcome for one player stats sheet."""
    result: ValidationResult = field(default_factory=ValidationResult)
    valid_players: List[PlayerStatisticsData] = field(default_factory=list)
    skipped_players: List[PlayerStatisticsData] = field(default_factory=list)
    halted: bool = False

    @property
    def has_critical_errors(self) -> bool:
        return any(marker in error for error in self.result.errors for marker in CRITICAL_ERROR_MARKERS)


def default_layers(etl_config: Optional[Dict] = None) -> List[ValidationLayer]:
    return [
        SheetStructureLayer(),
        PlayerIdentificationLayer(),
        DataTypeLayer(),
        CrossFieldLayer(etl_config),
        PositionSpecificLayer(),
        BusinessRuleLayer(),
    ]


class ValidationPipeline:
    """Runs the validation layers over a sheet in order."""

    def __init__(self, layers: Optional[Sequence[ValidationLayer]] = None, etl_config: Optional[Dict] = None):
        self.layers = list(layers) if layers is not None else default_layers(etl_config)
        self.logger = logging.getLogger(__name__)

    def validate(self, sheet: PlayerStatsSheetData, positions: Optional[Dict[str, str]] = None) -> SheetValidationOutcome:
        """
        Validate a sheet, its players and the team as a whole.

        Args:
            sheet: Parsed sheet; players should already carry position codes
            positions: Normalized name -> position code mapping in use

        Returns:
            SheetValidationOutcome
        """
        positions = positions or {}
        outcome = SheetValidationOutcome()

        # Sheet hooks
        for layer in self.layers:
            sheet_result = layer.validate_sheet(sheet)
            outcome.result.merge(sheet_result)

            if layer.halts_sheet and not sheet_result.is_valid:
                outcome.halted = True
                outcome.skipped_players = list(sheet.players)
                self.logger.warning(
                    f"✗ Sheet '{sheet.sheet_name}' failed {layer.name} validation: "
                    f"{len(sheet_result.errors)} errors"
                )
                return outcome

        # Player hooks
        for player in sheet.players:
            prefix = f"Player #{player.jersey_number} ({player.player_name}): "
            excluded = False

            for layer in self.layers:
                player_result = layer.validate_player(player, player.position_code)
                outcome.result.merge(player_result, prefix)

                if layer.gates_player and not player_result.is_valid:
                    excluded = True
                    break

            if excluded:
                outcome.skipped_players.append(player)
            else:
                outcome.valid_players.append(player)

        # Team hooks
        for layer in self.layers:
            outcome.result.merge(layer.validate_team(sheet, positions))

        self.logger.debug(
            f"Validated '{sheet.sheet_name}': {len(outcome.valid_players)} valid, "
            f"{len(outcome.skipped_players)} skipped, {len(outcome.result.errors)} errors, "
            f"{len(outcome.result.warnings)} warnings"
        )
        return outcome
