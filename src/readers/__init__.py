"""Readers for the GAA statistics workbook."""

from .match_reader import ExcelMatchDataReader
from .player_reader import ExcelPlayerDataReader, PlayerStatsHeaderParser
from .position_reader import ExcelPositionSheetReader
from .kpi_reader import ExcelKpiDataReader, ForwardFillState
from .sheet_classifier import MetadataParser, is_match_sheet, is_player_stats_sheet, normalize_competition

__all__ = [
    'ExcelMatchDataReader', 'ExcelPlayerDataReader', 'PlayerStatsHeaderParser',
    'ExcelPositionSheetReader', 'ExcelKpiDataReader', 'ForwardFillState',
    'MetadataParser', 'is_match_sheet', 'is_player_stats_sheet', 'normalize_competition'
]
