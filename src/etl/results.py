"""
Structured outcome objects returned by every ETL phase and service.

A result is created at phase start, mutated additively while the phase
runs, and finalized once before it is returned.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Generic, List, Optional, TypeVar

import pandas as pd


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class EtlMessage:
    """A structured error or warning."""
    code: str
    message: str
    sheet_name: Optional[str] = None
    row: Optional[int] = None
    timestamp: datetime = field(default_factory=_utcnow)

    def __str__(self) -> str:
        context = f" [{self.sheet_name}" + (f", row {self.row}" if self.row else "") + "]" if self.sheet_name else ""
        return f"{self.code}: {self.message}{context}"


T = TypeVar("T")


@dataclass
class ReadResult(Generic[T]):
    """Output of an extraction phase: data plus the issues met while reading it."""
    items: List[T] = field(default_factory=list)
    errors: List[EtlMessage] = field(default_factory=list)
    warnings: List[EtlMessage] = field(default_factory=list)

    def add_error(self, code: str, message: str, sheet_name: Optional[str] = None, row: Optional[int] = None):
        self.errors.append(EtlMessage(code, message, sheet_name, row))

    def add_warning(self, code: str, message: str, sheet_name: Optional[str] = None, row: Optional[int] = None):
        self.warnings.append(EtlMessage(code, message, sheet_name, row))


@dataclass
class EtlResult:
    """Aggregate outcome of an ETL run."""
    success: bool = True
    start_time: datetime = field(default_factory=_utcnow)
    end_time: Optional[datetime] = None
    matches_processed: int = 0
    team_statistics_created: int = 0
    seasons_created: int = 0
    competitions_created: int = 0
    teams_created: int = 0
    errors: List[EtlMessage] = field(default_factory=list)
    warnings: List[EtlMessage] = field(default_factory=list)

    @property
    def duration(self) -> timedelta:
        end = self.end_time or _utcnow()
        return end - self.start_time

    @property
    def is_finalized(self) -> bool:
        return self.end_time is not None

    def add_error(self, code: str, message: str, sheet_name: Optional[str] = None, row: Optional[int] = None):
        """Record an error and mark the run as failed."""
        self.errors.append(EtlMessage(code, message, sheet_name, row))
        self.success = False

    def add_warning(self, code: str, message: str, sheet_name: Optional[str] = None, row: Optional[int] = None):
        self.warnings.append(EtlMessage(code, message, sheet_name, row))

    def extend(self, errors: List[EtlMessage] = (), warnings: List[EtlMessage] = ()):
        """Append already-structured messages (e.g. from a ReadResult)."""
        if errors:
            self.errors.extend(errors)
            self.success = False
        self.warnings.extend(warnings)

    def merge(self, other: "EtlResult"):
        """Fold another result's counters and messages into this one."""
        self.matches_processed += other.matches_processed
        self.team_statistics_created += other.team_statistics_created
        self.seasons_created += other.seasons_created
        self.competitions_created += other.competitions_created
        self.teams_created += other.teams_created
        self.extend(other.errors, other.warnings)

    def finalize(self) -> "EtlResult":
        if self.end_time is None:
            self.end_time = _utcnow()
        return self

    def to_dataframe(self) -> pd.DataFrame:
        """All errors and warnings as one frame, ordered by timestamp."""
        rows = [
            {"severity": severity, "code": m.code, "message": m.message,
             "sheet_name": m.sheet_name, "row": m.row, "timestamp": m.timestamp}
            for severity, messages in (("error", self.errors), ("warning", self.warnings))
            for m in messages
        ]
        columns = ["severity", "code", "message", "sheet_name", "row", "timestamp"]
        df = pd.DataFrame(rows, columns=columns)
        if not df.empty:
            df = df.sort_values("timestamp", kind="stable").reset_index(drop=True)
        return df

    def get_summary(self) -> str:
        status = "SUCCESS" if self.success else "FAILED"
        return (
            f"{status} in {self.duration.total_seconds():.2f}s | "
            f"Matches: {self.matches_processed}, Team stats: {self.team_statistics_created}, "
            f"Errors: {len(self.errors)}, Warnings: {len(self.warnings)}"
        )

    @classmethod
    def create_success(cls, **kwargs) -> "EtlResult":
        return cls(success=True, **kwargs)

    @classmethod
    def create_failure(cls, code: str, message: str, **kwargs) -> "EtlResult":
        result = cls(**kwargs)
        result.add_error(code, message)
        return result


@dataclass
class PlayerEtlResult(EtlResult):
    """Outcome of the player statistics ETL."""
    player_sheets_processed: int = 0
    players_created: int = 0
    players_updated: int = 0
    player_statistics_created: int = 0
    players_skipped: int = 0
    validation_errors_total: int = 0
    validation_warnings_total: int = 0
    average_sheet_processing_time: timedelta = field(default_factory=timedelta)
    fields_processed_total: int = 0
    positions_mapped: int = 0
    positions_inferred: int = 0
    errors_by_type: Dict[str, int] = field(default_factory=dict)

    def get_detailed_summary(self) -> str:
        """Multi-line summary used in the final log output."""
        lines = [
            "Player Statistics ETL Summary",
            f"  Status: {'SUCCESS' if self.success else 'FAILED'}",
            f"  Duration: {self.duration.total_seconds():.2f}s",
            f"  Sheets processed: {self.player_sheets_processed}",
            f"  Players created: {self.players_created}",
            f"  Players updated: {self.players_updated}",
            f"  Player statistics created: {self.player_statistics_created}",
            f"  Players skipped: {self.players_skipped}",
            f"  Positions mapped / inferred: {self.positions_mapped} / {self.positions_inferred}",
            f"  Fields processed: {self.fields_processed_total}",
            f"  Average sheet time: {self.average_sheet_processing_time.total_seconds() * 1000:.0f}ms",
            f"  Validation errors: {self.validation_errors_total}",
            f"  Validation warnings: {self.validation_warnings_total}",
        ]

        if self.errors_by_type:
            lines.append("  Errors by type:")
            for error_type, count in sorted(self.errors_by_type.items(), key=lambda kv: -kv[1]):
                lines.append(f"    {error_type}: {count}")

        if self.errors:
            lines.append(f"  ETL errors: {len(self.errors)}")
            for message in self.errors[:10]:
                lines.append(f"    - {message}")

        return "\n".join(lines)


@dataclass
class KpiEtlResult(EtlResult):
    """Outcome of the KPI definitions ETL."""
    kpi_definitions_created: int = 0
    kpi_definitions_updated: int = 0
    kpi_definitions_skipped: int = 0
    sheet_name: Optional[str] = None

    def get_summary(self) -> str:
        status = "SUCCESS" if self.success else "FAILED"
        return (
            f"{status} in {self.duration.total_seconds():.2f}s | "
            f"Inserted: {self.kpi_definitions_created}, Updated: {self.kpi_definitions_updated}, "
            f"Skipped: {self.kpi_definitions_skipped}, Errors: {len(self.errors)}"
        )
