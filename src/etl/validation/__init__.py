"""Player sheet validation layers and pipeline."""

from .result import ValidationResult
from .base import ValidationLayer
from .structure import SheetStructureLayer
from .identification import PlayerIdentificationLayer
from .data_type import DataTypeLayer
from .cross_field import CrossFieldLayer
from .position_specific import PositionSpecificLayer
from .business_rules import BusinessRuleLayer
from .pipeline import ValidationPipeline, SheetValidationOutcome, default_layers

__all__ = [
    'ValidationResult', 'ValidationLayer',
    'SheetStructureLayer', 'PlayerIdentificationLayer', 'DataTypeLayer',
    'CrossFieldLayer', 'PositionSpecificLayer', 'BusinessRuleLayer',
    'ValidationPipeline', 'SheetValidationOutcome', 'default_layers'
]
