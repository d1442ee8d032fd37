"""
Loads KPI definitions with a diff-based upsert.

Existing rows are matched on the case-insensitive natural key
(event number, event name, outcome, team assignment). Unchanged rows are
skipped, changed PSR values or definitions are updated, the rest are
inserted. The whole batch is one transaction.
"""

import sqlite3
import logging
import math
from typing import Dict, List

from etl.models import KpiDefinitionData
from etl.results import KpiEtlResult
from utils.database_context import transaction


class KpiDataLoader:
    """Persists KPI definitions."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.logger = logging.getLogger(__name__)

    def load_kpi_definitions(self, definitions: List[KpiDefinitionData]) -> KpiEtlResult:
        """
        Upsert a batch of definitions.

        Returns:
            KpiEtlResult with created/updated/skipped counts. On failure the
            batch is rolled back, the counts are zero and a LOAD_FAILED
            error is recorded.
        """
        result = KpiEtlResult()

        try:
            with transaction(self.conn):
                existing = self._load_existing()

                for definition in definitions:
                    current = existing.get(definition.natural_key)

                    if current is None:
                        self._insert(definition)
                        result.kpi_definitions_created += 1
                    elif self._has_changed(current, definition):
                        self._update(current["kpi_id"], definition)
                        result.kpi_definitions_updated += 1
                    else:
                        result.kpi_definitions_skipped += 1

        except Exception as e:
            self.logger.error(f"✗ KPI definitions load failed, batch rolled back: {e}")
            result.kpi_definitions_created = 0
            result.kpi_definitions_updated = 0
            result.kpi_definitions_skipped = 0
            result.add_error("LOAD_FAILED", f"Failed to load KPI definitions: {e}")
            return result.finalize()

        self.logger.info(
            f"✓ KPI definitions loaded: {result.kpi_definitions_created} inserted, "
            f"{result.kpi_definitions_updated} updated, {result.kpi_definitions_skipped} unchanged"
        )
        return result.finalize()

    def _load_existing(self) -> Dict[tuple, sqlite3.Row]:
        cursor = self.conn.execute("""
            SELECT kpi_id, event_number, event_name, outcome, team_assignment, psr_value, definition
            FROM kpi_definitions
        """)
        return {
            (row["event_number"], row["event_name"].lower(), row["outcome"].lower(), row["team_assignment"].lower()): row
            for row in cursor.fetchall()
        }

    @staticmethod
    def _has_changed(current: sqlite3.Row, definition: KpiDefinitionData) -> bool:
        if not math.isclose(current["psr_value"], definition.psr_value, abs_tol=1e-9):
            return True
        return (current["definition"] or "") != (definition.definition or "")

    def _insert(self, d: KpiDefinitionData):
        self.conn.execute("""
            INSERT INTO kpi_definitions (event_number, event_name, outcome, team_assignment, psr_value, definition)
            VALUES (?, ?, ?, ?, ?, ?)
        """, (d.event_number, d.event_name, d.outcome, d.team_assignment, d.psr_value, d.definition))

    def _update(self, kpi_id: int, d: KpiDefinitionData):
        self.conn.execute("""
            UPDATE kpi_definitions
            SET psr_value = ?, definition = ?, updated_at = CURRENT_TIMESTAMP
            WHERE kpi_id = ?
        """, (d.psr_value, d.definition, kpi_id))
