"""Layer 1: sheet structure. Errors here halt validation of the sheet."""

from collections import defaultdict
from datetime import date, timedelta

from etl.models import PlayerStatsSheetData
from etl.player_fields import CRITICAL_FIELDS
from etl.validation.base import ValidationLayer
from etl.validation.result import ValidationResult

MIN_REQUIRED_FIELDS = 10
EXPECTED_FIELD_FLOOR = 70
MIN_MATCH_DATE = date(2020, 1, 1)


class SheetStructureLayer(ValidationLayer):
    """Checks sheet name, match metadata, field map and player list."""

    name = "structure"
    halts_sheet = True

    def validate_sheet(self, sheet: PlayerStatsSheetData) -> ValidationResult:
        result = ValidationResult()

        self._validate_sheet_name(sheet, result)
        self._validate_match_metadata(sheet, result)
        self._validate_field_map(sheet, result)
        self._validate_player_list(sheet, result)

        return result

    def _validate_sheet_name(self, sheet, result):
        if not sheet.sheet_name or not sheet.sheet_name.strip():
            result.add_error("Sheet name is empty")
        elif len(sheet.sheet_name) > 50:
            result.add_warning(f"Sheet name is unusually long ({len(sheet.sheet_name)} characters): '{sheet.sheet_name}'")

    def _validate_match_metadata(self, sheet, result):
        if sheet.match_number <= 0:
            result.add_error(f"Match number must be a positive integer (got {sheet.match_number})")
        elif sheet.match_number > 100:
            result.add_warning(f"Unusually high match number: {sheet.match_number}")

        if not sheet.opposition or not sheet.opposition.strip():
            result.add_error("Opposition team name is empty")
        elif len(sheet.opposition.strip()) < 2:
            result.add_warning(f"Opposition name is very short: '{sheet.opposition}'")

        if sheet.match_date is not None:
            max_date = date.today() + timedelta(days=365)

            if sheet.match_date < MIN_MATCH_DATE:
                result.add_error(
                    f"Match date {sheet.match_date.isoformat()} is too far in the past "
                    f"(before {MIN_MATCH_DATE.isoformat()})"
                )
            elif sheet.match_date > max_date:
                result.add_error(
                    f"Match date {sheet.match_date.isoformat()} is too far in the future "
                    f"(after {max_date.isoformat()})"
                )

    def _validate_field_map(self, sheet, result):
        field_map = sheet.field_map or {}
        if not field_map:
            result.add_error("Field map is empty")
            return

        if len(field_map) < MIN_REQUIRED_FIELDS:
            result.add_error(f"Field map has only {len(field_map)} fields. Minimum {MIN_REQUIRED_FIELDS} required.")

        for critical in CRITICAL_FIELDS:
            if critical not in field_map:
                result.add_error(f"Critical field '{critical.header}' is missing from field map")

        if len(field_map) < EXPECTED_FIELD_FLOOR:
            result.add_warning(
                f"Field map has only {len(field_map)} fields. Some statistics may be missing."
            )

        by_column = defaultdict(list)
        for player_field, column in field_map.items():
            by_column[column].append(player_field.header)
        for column, headers in by_column.items():
            if len(headers) > 1:
                result.add_warning(f"Multiple fields mapped to column {column}: {', '.join(headers)}")

        for header in sheet.duplicate_columns:
            result.add_warning(f"Duplicate header column '{header}' ignored")

    def _validate_player_list(self, sheet, result):
        count = len(sheet.players)
        if count == 0:
            result.add_error("Player list is empty. No players found in sheet.")
        elif count < 10:
            result.add_warning(f"Only {count} players found. Expected at least 10 for a GAA match.")
        elif count > 40:
            result.add_warning(f"Found {count} players. This is unusually high for a GAA match.")
