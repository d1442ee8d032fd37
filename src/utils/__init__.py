"""Utils package for shared ETL utilities."""

from .cell_utils import CellConverter
from .score_utils import parse_gaa_score, score_to_points, format_gaa_score
from .database_context import connect, get_db_connection, transaction, savepoint
from .progress_reporter import ProgressReporter, report_section, report_stats

__all__ = [
    'CellConverter',
    'parse_gaa_score', 'score_to_points', 'format_gaa_score',
    'connect', 'get_db_connection', 'transaction', 'savepoint',
    'ProgressReporter', 'report_section', 'report_stats'
]
