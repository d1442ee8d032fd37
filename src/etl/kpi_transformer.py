"""Normalization and validation of KPI definitions."""

import logging
from typing import List, Tuple

from etl.exceptions import DuplicateKeyError
from etl.models import KpiDefinitionData

VALID_TEAM_ASSIGNMENTS = ("Home", "Opposition", "Both")
MIN_PSR_VALUE = -10.0
MAX_PSR_VALUE = 10.0
MAX_NAME_LENGTH = 100
MAX_DEFINITION_LENGTH = 1000

# Known spreadsheet typos
TEAM_ASSIGNMENT_ALIASES = {
    "oppostion": "Opposition"
}


class KpiDataTransformer:
    """Cleans up and validates KPI definitions before loading."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def normalize_definitions(self, definitions: List[KpiDefinitionData]) -> List[KpiDefinitionData]:
        """Trim text fields and canonicalize team assignments in place."""
        for definition in definitions:
            definition.team_assignment = self.normalize_team_assignment(definition.team_assignment)
            definition.event_name = definition.event_name.strip()
            definition.outcome = definition.outcome.strip()
            definition.definition = definition.definition.strip()

        self.logger.debug(f"Normalized {len(definitions)} KPI definitions")
        return definitions

    def normalize_team_assignment(self, value: str) -> str:
        """
        Map a team assignment to Home/Opposition/Both.

        Example:
            normalize_team_assignment("Oppostion")  # "Opposition"
            normalize_team_assignment(" both ")     # "Both"
        """
        if not value or not value.strip():
            return value

        token = value.strip()
        alias = TEAM_ASSIGNMENT_ALIASES.get(token.lower())
        if alias:
            self.logger.info(f"Normalized team assignment: '{token}' → '{alias}'")
            return alias

        for canonical in VALID_TEAM_ASSIGNMENTS:
            if token.lower() == canonical.lower():
                return canonical

        return token

    def validate_kpi_definitions(self, definitions: List[KpiDefinitionData]) -> Tuple[bool, List[str], List[str]]:
        """
        Validate every definition and check the natural key is unique.

        Returns:
            Tuple (is_valid, errors, warnings)

        Raises:
            DuplicateKeyError: If two definitions share a natural key
        """
        errors = []
        warnings = []

        for definition in definitions:
            row_errors, row_warnings = self._validate_single_definition(definition)
            errors.extend(f"Row {definition.source_row_number}: {e}" for e in row_errors)
            warnings.extend(f"Row {definition.source_row_number}: {w}" for w in row_warnings)

        for error in errors:
            self.logger.error(f"✗ {error}")

        self.ensure_no_duplicates(definitions)

        return not errors, errors, warnings

    def _validate_single_definition(self, d: KpiDefinitionData) -> Tuple[List[str], List[str]]:
        errors = []
        warnings = []

        if d.event_number <= 0:
            errors.append(f"Invalid Event Number: {d.event_number}. Must be > 0.")

        if not d.event_name.strip():
            errors.append("Event Name cannot be empty")
        elif len(d.event_name) > MAX_NAME_LENGTH:
            errors.append(f"Event Name too long: {len(d.event_name)} chars (max {MAX_NAME_LENGTH})")

        if not d.outcome.strip():
            errors.append("Outcome cannot be empty")
        elif len(d.outcome) > MAX_NAME_LENGTH:
            errors.append(f"Outcome too long: {len(d.outcome)} chars (max {MAX_NAME_LENGTH})")

        if d.team_assignment not in VALID_TEAM_ASSIGNMENTS:
            errors.append(
                f"Invalid Team Assignment: '{d.team_assignment}'. "
                f"Must be one of: {', '.join(VALID_TEAM_ASSIGNMENTS)}"
            )

        if not MIN_PSR_VALUE <= d.psr_value <= MAX_PSR_VALUE:
            errors.append(
                f"PSR Value out of range: {d.psr_value}. Must be between {MIN_PSR_VALUE} and {MAX_PSR_VALUE}"
            )

        if not d.definition.strip():
            warnings.append("Definition field is empty")
        elif len(d.definition) > MAX_DEFINITION_LENGTH:
            errors.append(f"Definition too long: {len(d.definition)} chars (max {MAX_DEFINITION_LENGTH})")

        return errors, warnings

    def ensure_no_duplicates(self, definitions: List[KpiDefinitionData]):
        """
        Raises:
            DuplicateKeyError: Listing every row whose natural key was already seen
        """
        seen = set()
        duplicates = []

        for d in definitions:
            if d.natural_key in seen:
                duplicates.append(
                    f"Row {d.source_row_number}: Event {d.event_number} - {d.event_name} - "
                    f"{d.outcome} ({d.team_assignment})"
                )
            else:
                seen.add(d.natural_key)

        if duplicates:
            for duplicate in duplicates:
                self.logger.error(f"Duplicate KPI definition found: {duplicate}")
            raise DuplicateKeyError(f"Found {len(duplicates)} duplicate KPI definitions", duplicates)
