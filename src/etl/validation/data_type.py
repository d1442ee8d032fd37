"""Layer 3: value ranges for count, minute and percentage fields."""

from typing import Optional

from etl.models import PlayerStatisticsData
from etl.player_fields import FieldKind, PlayerField
from etl.validation.base import ValidationLayer
from etl.validation.result import ValidationResult

MAX_REASONABLE_COUNT = 100
MAX_MINUTES = 120
PERCENTAGE_ROUNDING_LIMIT = 1.05

CARD_MAXIMUMS = {
    PlayerField.YELLOW_CARDS: 5,
    PlayerField.BLACK_CARDS: 5,
    PlayerField.RED_CARDS: 2
}

# Ratios, not fractions: only the sign is checked
RATIO_FIELDS = (PlayerField.TE_PER_PSR, PlayerField.PSR_PER_TP)


class DataTypeLayer(ValidationLayer):
    """Range checks on every numeric statistic."""

    name = "data_type"

    def validate_player(self, player: PlayerStatisticsData, position: Optional[str]) -> ValidationResult:
        result = ValidationResult()

        if not 0 <= player.minutes_played <= MAX_MINUTES:
            result.add_error(f"Minutes played ({player.minutes_played}) outside 0-{MAX_MINUTES}")

        for field in PlayerField.statistic_fields():
            if field is PlayerField.MINUTES_PLAYED:
                continue

            value = player.get(field)
            if field.kind is FieldKind.INT:
                self._validate_count(field, value, result)
            elif field.kind is FieldKind.DECIMAL:
                if field in RATIO_FIELDS:
                    if value is not None and value < 0:
                        result.add_error(f"{field.header} cannot be negative (got {value})")
                else:
                    self._validate_percentage(field, value, result)

        return result

    def _validate_count(self, field, value, result):
        max_value = CARD_MAXIMUMS.get(field, MAX_REASONABLE_COUNT)
        if value is None:
            return

        if value < 0:
            result.add_error(f"{field.header} cannot be negative (got {value})")
        elif value > max_value:
            result.add_warning(f"{field.header} is unusually high ({value}, max expected {max_value})")

    def _validate_percentage(self, field, value, result):
        if value is None:
            return

        if value < 0:
            result.add_error(f"{field.header} cannot be negative (got {value})")
        elif value > 1:
            if value <= PERCENTAGE_ROUNDING_LIMIT:
                result.add_warning(f"{field.header} is slightly over 100% ({value:.2%}), likely rounding error")
            else:
                result.add_error(f"{field.header} exceeds 100% ({value:.2%})")
