"""
Progress Reporting Utilities

Consistent progress logging for the sheet-by-sheet ETL runs.
"""

import logging
from typing import Optional
from datetime import datetime, timedelta


class ProgressReporter:
    """
    Report progress of a sheet-by-sheet import.

    Example:
        reporter = ProgressReporter("Loading matches", total=len(sheets))

        for sheet in sheets:
            load(sheet)
            reporter.update(message=sheet.sheet_name)

        reporter.complete()
    """

    def __init__(
        self,
        task_name: str,
        total: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
        report_interval: int = 1
    ):
        """
        Initialize progress reporter.

        Args:
            task_name: Name of the task being reported
            total: Total number of items (None if unknown)
            logger: Logger instance (creates new if None)
            report_interval: Report every N items
        """
        self.task_name = task_name
        self.total = total
        self.logger = logger or logging.getLogger(__name__)
        self.report_interval = max(1, report_interval)

        self.current = 0
        self.start_time = datetime.now()

    def update(self, current: Optional[int] = None, message: str = ""):
        """
        Update progress.

        Args:
            current: Current item number (if None, increments by 1)
            message: Optional additional message
        """
        if current is not None:
            self.current = current
        else:
            self.current += 1

        if self.current % self.report_interval == 0 or self.current == self.total:
            self._report(message)

    def _report(self, message: str = ""):
        """Generate and log progress report."""
        elapsed = datetime.now() - self.start_time

        if self.total:
            percentage = (self.current / self.total) * 100
            progress_str = f"{self.current}/{self.total} ({percentage:.1f}%)"
        else:
            progress_str = str(self.current)

        full_message = f"  Progress [{self.task_name}]: {progress_str} | Elapsed: {self._format_timedelta(elapsed)}"
        if message:
            full_message += f" | {message}"

        self.logger.info(full_message)

    def complete(self, final_message: str = ""):
        """Report task completion."""
        elapsed = datetime.now() - self.start_time

        completion_msg = f"✓ {self.task_name} completed: {self.current} items in {self._format_timedelta(elapsed)}"
        if final_message:
            completion_msg += f" | {final_message}"

        self.logger.info(completion_msg)

    def error(self, error_message: str):
        """Report task error."""
        elapsed = datetime.now() - self.start_time
        self.logger.error(
            f"✗ {self.task_name} failed after {self._format_timedelta(elapsed)}: {error_message}"
        )

    @staticmethod
    def _format_timedelta(td: timedelta) -> str:
        """Format timedelta for display."""
        total_seconds = int(td.total_seconds())

        if total_seconds < 60:
            return f"{total_seconds}s"
        elif total_seconds < 3600:
            minutes = total_seconds // 60
            seconds = total_seconds % 60
            return f"{minutes}m {seconds}s"
        else:
            hours = total_seconds // 3600
            minutes = (total_seconds % 3600) // 60
            return f"{hours}h {minutes}m"


def report_section(title: str, logger: Optional[logging.Logger] = None):
    """
    Log a section header for organized output.

    Example:
        report_section("PLAYER STATISTICS ETL")
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    logger.info("=" * 70)
    logger.info(title.center(70))
    logger.info("=" * 70)


def report_stats(stats: dict, logger: Optional[logging.Logger] = None):
    """
    Log statistics in a formatted way.

    Args:
        stats: Dictionary of stat name -> value
        logger: Logger instance

    Example:
        report_stats({
            'Matches processed': 12,
            'Team statistics created': 72,
            'Errors': 1
        })
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if not stats:
        return

    max_key_length = max(len(str(k)) for k in stats.keys())

    for key, value in stats.items():
        logger.info(f"  {str(key).ljust(max_key_length)} : {value}")
