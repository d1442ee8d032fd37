"""
Full import of a statistics workbook: KPI definitions, matches, then
player statistics.
"""

import logging
import threading
from typing import Dict, NamedTuple, Optional

from config import DATABASE_CONFIG
from database.sqlite_schema import SQLiteSchemaManager
from etl.kpi_etl_service import KpiDefinitionsEtlService
from etl.match_etl_service import MatchStatisticsEtlService
from etl.player_etl_service import PlayerStatisticsEtlService
from etl.results import EtlResult, KpiEtlResult, PlayerEtlResult
from utils.database_context import get_db_connection


class PipelineResults(NamedTuple):
    kpi: KpiEtlResult
    matches: EtlResult
    players: PlayerEtlResult

    @property
    def success(self) -> bool:
        return all(result.success for result in self)


class EtlPipeline:
    """Runs the three ETL services in order against one database."""

    def __init__(self, db_path: Optional[str] = None, etl_config: Optional[Dict] = None,
                 home_team: Optional[str] = None):
        self.db_path = db_path or DATABASE_CONFIG["path"]
        self.etl_config = etl_config
        self.home_team = home_team
        self.logger = logging.getLogger(__name__)

    def run_all(self, file_path, cancel_event: Optional[threading.Event] = None) -> PipelineResults:
        """
        Ensure the schema exists, then run KPI, match and player ETL.

        Matches are loaded before player statistics so every player sheet
        can find its match.

        Returns:
            PipelineResults(kpi, matches, players)
        """
        self.logger.info(f"Starting full ETL run: {file_path} -> {self.db_path}")

        with get_db_connection(self.db_path) as conn:
            SQLiteSchemaManager(self.db_path).create_database(conn)

            kpi_result = KpiDefinitionsEtlService(
                conn, etl_config=self.etl_config
            ).process_kpi_definitions(file_path)

            match_result = MatchStatisticsEtlService(
                conn, self.etl_config, self.home_team
            ).process_match_statistics(file_path, cancel_event)

            player_result = PlayerStatisticsEtlService(
                conn, self.etl_config, self.home_team
            ).process_player_statistics(file_path, cancel_event)

        results = PipelineResults(kpi_result, match_result, player_result)
        marker = "✓" if results.success else "✗"
        self.logger.info(f"{marker} Full ETL run finished")
        return results
