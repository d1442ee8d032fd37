"""
KPI definitions ETL: extract the KPI sheet, normalize, validate, load.
"""

import sqlite3
import logging
from typing import Dict, Optional

from config import ETL_CONFIG
from database.kpi_loader import KpiDataLoader
from etl.exceptions import DuplicateKeyError, ParsingError, PipelineFatalError
from etl.kpi_transformer import KpiDataTransformer
from etl.results import KpiEtlResult
from readers.kpi_reader import ExcelKpiDataReader
from utils.progress_reporter import report_section


class KpiDefinitionsEtlService:
    """Runs the KPI definitions ETL against one workbook."""

    def __init__(self, conn: sqlite3.Connection, sheet_name: Optional[str] = None,
                 max_blank_rows: Optional[int] = None, etl_config: Optional[Dict] = None):
        config = {**ETL_CONFIG, **(etl_config or {})}
        if max_blank_rows is None:
            max_blank_rows = config["kpi_max_blank_rows"]

        self.conn = conn
        self.reader = ExcelKpiDataReader(sheet_name, max_blank_rows)
        self.transformer = KpiDataTransformer()
        self.loader = KpiDataLoader(conn)
        self.logger = logging.getLogger(__name__)

    def process_kpi_definitions(self, file_path) -> KpiEtlResult:
        """
        Returns:
            Finalized KpiEtlResult. Validation errors or a duplicate natural
            key fail the whole batch before anything is written.
        """
        result = KpiEtlResult(sheet_name=self.reader.sheet_name)
        report_section("KPI DEFINITIONS ETL", self.logger)

        try:
            self.logger.info(f"Phase 1: Extracting KPI definitions from {file_path}")
            definitions = self.reader.read_kpi_definitions(file_path)

            if not definitions:
                self.logger.warning("No KPI definitions found")
                result.add_warning("NO_DEFINITIONS", "No KPI definitions found in sheet", result.sheet_name)
                return result.finalize()

            self.logger.info(f"Phase 2: Validating {len(definitions)} KPI definitions")
            definitions = self.transformer.normalize_definitions(definitions)
            is_valid, errors, warnings = self.transformer.validate_kpi_definitions(definitions)

            for warning in warnings:
                result.add_warning("VALIDATION_WARNING", warning, result.sheet_name)

            if not is_valid:
                for error in errors:
                    result.add_error("VALIDATION_FAILED", error, result.sheet_name)
                self.logger.error(f"✗ KPI validation failed with {len(errors)} errors; nothing loaded")
                return result.finalize()

            self.logger.info("Phase 3: Loading KPI definitions")
            loaded = self.loader.load_kpi_definitions(definitions)
            result.merge(loaded)
            result.kpi_definitions_created = loaded.kpi_definitions_created
            result.kpi_definitions_updated = loaded.kpi_definitions_updated
            result.kpi_definitions_skipped = loaded.kpi_definitions_skipped

        except DuplicateKeyError as e:
            for duplicate in e.duplicates:
                result.add_error(e.code, f"Duplicate KPI definition: {duplicate}", result.sheet_name)
            if not e.duplicates:
                result.add_error(e.code, e.message, result.sheet_name)

        except ParsingError as e:
            self.logger.error(f"✗ {e.message}")
            result.add_error(e.code, e.message, result.sheet_name, e.row)

        except PipelineFatalError as e:
            self.logger.error(f"✗ {e.message}")
            result.add_error(e.code, e.message)

        except Exception as e:
            self.logger.exception(f"✗ KPI definitions ETL failed: {e}")
            result.add_error("UNEXPECTED_ERROR", f"Unexpected error: {e}")

        result.finalize()
        self.logger.info(("✓ " if result.success else "✗ ") + result.get_summary())
        return result
