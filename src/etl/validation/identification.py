"""Layer 2: player identification. Errors here exclude the player."""

import re
from collections import defaultdict
from typing import Optional

from etl.models import PlayerStatisticsData, PlayerStatsSheetData
from etl.validation.base import ValidationLayer
from etl.validation.result import ValidationResult

VALID_NAME_PATTERN = re.compile(r"^[a-zA-Z\s'\-\.]+$")

MAX_JERSEY = 99
HIGH_JERSEY = 40
MAX_MINUTES = 90
REGULAR_MINUTES = 70


class PlayerIdentificationLayer(ValidationLayer):
    """Jersey number, name and minutes sanity checks."""

    name = "identification"
    gates_player = True

    def validate_sheet(self, sheet: PlayerStatsSheetData) -> ValidationResult:
        """Duplicate jersey numbers are reported but do not block loading."""
        result = ValidationResult()

        by_jersey = defaultdict(list)
        for player in sheet.players:
            by_jersey[player.jersey_number].append(player.player_name)

        for jersey, names in by_jersey.items():
            if len(names) > 1:
                result.add_warning(f"Duplicate jersey number {jersey} found for players: {', '.join(names)}")

        return result

    def validate_player(self, player: PlayerStatisticsData, position: Optional[str]) -> ValidationResult:
        result = ValidationResult()

        self._validate_jersey(player, result)
        self._validate_name(player, result)
        self._validate_minutes(player, result)

        return result

    def _validate_jersey(self, player, result):
        if player.jersey_number <= 0:
            result.add_error(f"Jersey number must be positive (got {player.jersey_number})")
        elif player.jersey_number > MAX_JERSEY:
            result.add_error(f"Jersey number {player.jersey_number} exceeds maximum ({MAX_JERSEY})")
        elif player.jersey_number > HIGH_JERSEY:
            result.add_warning(f"Jersey number {player.jersey_number} is unusually high")

    def _validate_name(self, player, result):
        name = player.player_name or ""

        if not name.strip():
            result.add_error("Player name is empty")
            return

        if len(name) < 2:
            result.add_error(f"Player name '{name}' is too short (minimum 2 characters)")
            return

        if len(name) > 100:
            result.add_error(f"Player name is too long ({len(name)} characters)")

        if not VALID_NAME_PATTERN.match(name):
            result.add_warning(f"Name '{name}' contains unusual characters")

        if "  " in name:
            result.add_warning(f"Name '{name}' contains double spaces")

        if name != name.strip():
            result.add_warning(f"Name '{name}' has leading or trailing spaces")

        if len(name) > 3:
            if name == name.upper():
                result.add_warning(f"Name '{name}' is all uppercase")
            elif name == name.lower():
                result.add_warning(f"Name '{name}' is all lowercase")

    def _validate_minutes(self, player, result):
        minutes = player.minutes_played

        if minutes < 0:
            result.add_error(f"Minutes played cannot be negative (got {minutes})")
        elif minutes == 0:
            result.add_warning("Minutes played is 0 (player was on bench)")
        elif minutes > MAX_MINUTES:
            result.add_error(f"Minutes played ({minutes}) exceeds maximum ({MAX_MINUTES})")
        elif minutes > REGULAR_MINUTES:
            result.add_warning(f"Minutes played ({minutes}) is higher than standard match duration")
