"""Position enrichment and validation of player stats sheets."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from etl.models import PlayerStatsSheetData
from etl.position_service import PositionDetectionService
from etl.validation import SheetValidationOutcome, ValidationPipeline


@dataclass
class PlayerTransformResult:
    sheet: PlayerStatsSheetData
    validation: SheetValidationOutcome = field(default_factory=SheetValidationOutcome)
    positions_mapped: int = 0
    positions_inferred: int = 0

    @property
    def can_load(self) -> bool:
        return not (self.validation.halted or self.validation.has_critical_errors)


class PlayerDataTransformer:
    """
    Assigns positions to every player on a sheet and runs the validation
    pipeline over the result.
    """

    def __init__(self, position_service: Optional[PositionDetectionService] = None,
                 pipeline: Optional[ValidationPipeline] = None, etl_config: Optional[Dict] = None):
        # assign_positions never touches the database
        self.position_service = position_service or PositionDetectionService(conn=None)
        self.pipeline = pipeline or ValidationPipeline(etl_config=etl_config)
        self.logger = logging.getLogger(__name__)

    def transform_and_validate(self, sheet: PlayerStatsSheetData,
                               mapping: Optional[Dict[str, str]] = None) -> PlayerTransformResult:
        """
        Args:
            sheet: Extracted sheet
            mapping: Normalized player name -> position code from the position sheets

        Returns:
            PlayerTransformResult
        """
        mapping = mapping or {}
        mapped, inferred = self.position_service.assign_positions(sheet.players, mapping)

        validation = self.pipeline.validate(sheet, mapping)

        self.logger.debug(
            f"Transformed '{sheet.sheet_name}': {mapped} positions mapped, {inferred} inferred, "
            f"{len(validation.result.errors)} validation errors"
        )
        return PlayerTransformResult(
            sheet=sheet,
            validation=validation,
            positions_mapped=mapped,
            positions_inferred=inferred
        )
