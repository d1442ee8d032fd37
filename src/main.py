"""Command-line entry point for the GAAStat spreadsheet ETL."""

import argparse
import logging
import sys

import pandas as pd

from config import DATABASE_CONFIG, LOGGING_CONFIG
from database.sqlite_schema import SQLiteSchemaManager
from etl.kpi_etl_service import KpiDefinitionsEtlService
from etl.match_etl_service import MatchStatisticsEtlService
from etl.pipeline import EtlPipeline
from etl.player_etl_service import PlayerStatisticsEtlService
from utils.database_context import get_db_connection


logger = logging.getLogger(__name__)


def configure_logging(level=None):
    logging.basicConfig(
        level=getattr(logging, (level or LOGGING_CONFIG["level"]).upper()),
        format=LOGGING_CONFIG["format"],
        handlers=[
            logging.FileHandler(LOGGING_CONFIG["file"]),
            logging.StreamHandler()
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Import GAA statistics workbooks into SQLite')
    parser.add_argument('--db', default=DATABASE_CONFIG["path"],
                        help='SQLite database path')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Override the configured log level')
    parser.add_argument('--report',
                        help='Write all errors and warnings to this CSV file')

    subparsers = parser.add_subparsers(dest='command', required=True)
    subparsers.add_parser('init-db', help='Create the database schema')
    for name, help_text in (
        ('kpi', 'Import KPI definitions'),
        ('matches', 'Import match statistics'),
        ('players', 'Import player statistics'),
        ('all', 'Import KPI definitions, matches and player statistics'),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument('file', help='Path to the .xlsx workbook')

    return parser


def write_report(results, path: str):
    frames = [result.to_dataframe() for result in results]
    report = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()
    report.to_csv(path, index=False)
    logger.info(f"Report written to {path} ({len(report)} messages)")


def run(args) -> int:
    if args.command == 'init-db':
        return 0 if SQLiteSchemaManager(args.db).create_database() else 1

    if args.command == 'all':
        results = list(EtlPipeline(args.db).run_all(args.file))
    else:
        with get_db_connection(args.db) as conn:
            SQLiteSchemaManager(args.db).create_database(conn)

            if args.command == 'kpi':
                results = [KpiDefinitionsEtlService(conn).process_kpi_definitions(args.file)]
            elif args.command == 'matches':
                results = [MatchStatisticsEtlService(conn).process_match_statistics(args.file)]
            else:
                results = [PlayerStatisticsEtlService(conn).process_player_statistics(args.file)]

    if args.report:
        write_report(results, args.report)

    return 0 if all(result.success for result in results) else 1


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        return run(args)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
