"""
Exception hierarchy for the GAAStat ETL.

Sheet-level and match-level failures are caught by the services and
recorded on the result; only PipelineFatalError subclasses end a run.
"""

from typing import Optional


class EtlError(Exception):
    """Base class for all ETL errors."""

    code = "ETL_ERROR"

    def __init__(self, message: str, sheet_name: Optional[str] = None, row: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.sheet_name = sheet_name
        self.row = row


class ParsingError(EtlError):
    """Metadata or cell content did not match the expected pattern. Skips one sheet."""

    code = "PARSE_ERROR"


class GridCountError(EtlError):
    """A match did not yield exactly 6 team-period statistic records."""

    code = "GRID_COUNT"


class FieldValidationError(EtlError):
    """A field-level validation failure for a single player or row."""

    code = "FIELD_VALIDATION"

    def __init__(self, field_name: str, field_value, message: str, **kwargs):
        super().__init__(
            f"Validation failed for field '{field_name}' with value '{field_value}': {message}",
            **kwargs
        )
        self.field_name = field_name
        self.field_value = field_value


class DuplicateKeyError(EtlError):
    """Duplicate KPI natural key. Fails the whole KPI batch."""

    code = "DUPLICATE_KEY"

    def __init__(self, message: str, duplicates=None, **kwargs):
        super().__init__(message, **kwargs)
        self.duplicates = list(duplicates or [])


class ConflictError(EtlError):
    """Match already exists for (competition, match number)."""

    code = "CONFLICT"


class TransactionFailure(EtlError):
    """Unexpected loader failure; the enclosing transaction was rolled back."""

    code = "TRANSACTION_FAILED"


class PipelineFatalError(EtlError):
    """Nothing to process: the run cannot continue."""

    code = "PIPELINE_FATAL"


class WorkbookNotFoundError(PipelineFatalError):
    code = "FILE_NOT_FOUND"


class SheetNotFoundError(PipelineFatalError):
    code = "SHEET_NOT_FOUND"


class UnknownPositionError(KeyError):
    """Position code not present in the positions table."""
