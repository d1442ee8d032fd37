"""
Pytest configuration and shared fixtures for GAAStat ETL tests.

This module provides reusable fixtures for database connections and a
builder that writes real .xlsx workbooks laid out like the club's
statistics spreadsheets.
"""

import os
import sqlite3
import sys
import tempfile
from pathlib import Path
from typing import Dict, Generator, Iterable, List, Optional

import pytest
from openpyxl import Workbook

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from database.sqlite_schema import SQLiteSchemaManager
from etl.models import SOURCE_CATEGORIES
from etl.player_fields import FieldKind, PlayerField
from utils.database_context import connect


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def temp_sqlite_db() -> Generator[str, None, None]:
    """
    Create a temporary SQLite database for testing.

    Yields:
        Path to temporary database file
    """
    with tempfile.NamedTemporaryFile(mode='w', suffix='.db', delete=False) as f:
        db_path = f.name

    yield db_path

    if os.path.exists(db_path):
        try:
            os.unlink(db_path)
        except PermissionError:
            # Still locked on some platforms; the OS cleans temp files up
            pass


@pytest.fixture
def sqlite_connection(temp_sqlite_db: str) -> Generator[sqlite3.Connection, None, None]:
    """
    SQLite connection with row factory and foreign keys enabled.

    Yields:
        SQLite connection object
    """
    conn = connect(temp_sqlite_db)

    yield conn

    conn.close()


@pytest.fixture
def initialized_db(temp_sqlite_db: str, sqlite_connection: sqlite3.Connection) -> sqlite3.Connection:
    """Connection to a database with the full schema applied."""
    assert SQLiteSchemaManager(temp_sqlite_db).create_database(sqlite_connection)
    return sqlite_connection


# ============================================================================
# Workbook Fixtures
# ============================================================================

SQUAD_NAMES = [
    "Cathal McLaughlin", "Ryan Doherty", "Sean O'Neill", "Conor Mullan",
    "Eoin Bradley", "Niall Kelly", "Padraig Quinn", "Declan Hasson",
    "Ciaran Feeney", "Mark Lynch", "Kevin Moran", "Shane Heaney",
    "Oisin Devlin", "Tomas Burke", "Liam McGrath",
]


def make_player(jersey: int, name: str, **stats) -> Dict:
    """
    A player row that passes every validation error check.

    Args:
        jersey: Jersey number
        name: Player name
        **stats: Overrides keyed by model attribute
    """
    row = {
        "jersey_number": jersey,
        "player_name": name,
        "minutes_played": 60,
        "total_engagements": 25,
        "psr": 5,
        "tp": 8,
        "hp": 4,
        "ha": 5,
        "tackles_total": 3,
        "tackles_contested": 2,
        "tackles_missed": 1,
        "ko_home_kow": 1,
        "ko_home_wc": 1,
    }
    row.update(stats)
    return row


def default_squad(count: int = 15) -> List[Dict]:
    """15 outfield players plus a goalkeeper at #1."""
    squad = []
    for index, name in enumerate(SQUAD_NAMES[:count], start=1):
        if index == 1:
            squad.append(make_player(index, name, gk_total_kickouts=20, gk_kickout_retained=15,
                                     gk_kickout_lost=5, gk_kickout_percentage=0.75,
                                     tackles_total=0, tackles_contested=0, tackles_missed=0))
        else:
            squad.append(make_player(index, name))
    return squad


class WorkbookBuilder:
    """Writes GAA statistics workbooks with openpyxl."""

    def __init__(self, directory: Path):
        self.directory = directory
        self.workbook = Workbook()
        self.workbook.remove(self.workbook.active)

    def add_match_sheet(self, number: int = 9, competition: str = "Championship",
                        opposition: str = "Slaughtmanus", date_text: str = "26.09.25",
                        home_team: str = "Drum", title: Optional[str] = None,
                        b1: Optional[str] = None,
                        scores: Iterable[str] = ("0-05", "1-04", "1-09", "0-04", "0-06", "0-10"),
                        possession: Iterable[float] = (0.55, 0.55, 0.55, 0.45, 0.45, 0.45),
                        counter: int = 2):
        """
        Match sheet grid: B1 metadata, row 4 scores, row 5 possession,
        rows 7-14 score sources and rows 16-23 shot sources (B-G).
        """
        ws = self.workbook.create_sheet(title or f"{number:02d}. {competition} vs {opposition} {date_text}")
        ws.cell(row=1, column=2, value=b1 if b1 is not None
                else f"{number:02d}. {competition} {home_team} vs {opposition} {date_text}")

        for column, score in enumerate(scores, start=2):
            ws.cell(row=4, column=column, value=score)
        for column, value in enumerate(possession, start=2):
            ws.cell(row=5, column=column, value=value)

        for index, category in enumerate(SOURCE_CATEGORIES):
            ws.cell(row=7 + index, column=1, value=category)
            ws.cell(row=16 + index, column=1, value=category)
            for column in range(2, 8):
                ws.cell(row=7 + index, column=column, value=counter)
                ws.cell(row=16 + index, column=column, value=counter)
        return ws

    def add_player_sheet(self, players: Optional[List[Dict]] = None,
                         title: str = "09. Player stats vs Slaughtmanus 26.09.25",
                         b1: Optional[str] = None,
                         headers: Optional[List[str]] = None):
        """
        Player stats sheet: header tokens on row 3, one player per row from row 4.

        Headers default to the shared tokens in sheet order, so repeated
        tokens such as "Tot" appear as they do in the real workbook.
        """
        ws = self.workbook.create_sheet(title)
        if b1:
            ws.cell(row=1, column=2, value=b1)

        fields = list(PlayerField)
        header_texts = headers if headers is not None else [f.shared_header for f in fields]
        for column, header in enumerate(header_texts, start=1):
            ws.cell(row=3, column=column, value=header)

        for row, player in enumerate(players if players is not None else default_squad(), start=4):
            for column, field in enumerate(fields, start=1):
                if column > len(header_texts):
                    break
                value = player.get(field.attribute)
                if value is None and field.kind is FieldKind.INT:
                    value = 0
                ws.cell(row=row, column=column, value=value)
        return ws

    def add_position_sheets(self, positions: Dict[str, List[str]], interval: int = 28):
        """Names in column B from row 4, one every `interval` rows."""
        for sheet_name, names in positions.items():
            ws = self.workbook.create_sheet(sheet_name)
            for index, name in enumerate(names):
                ws.cell(row=4 + index * interval, column=2, value=name)

    def add_kpi_sheet(self, rows: List[tuple], title: str = "KPI Definitions",
                      headers: Iterable[str] = ("Event #", "Event Name", "Outcome",
                                                "Assign to which team", "PSR Value", "Definition")):
        """KPI sheet: headers on row 2, data from row 4. Rows are (A..F) tuples."""
        ws = self.workbook.create_sheet(title)
        for column, header in enumerate(headers, start=1):
            ws.cell(row=2, column=column, value=header)
        for row, values in enumerate(rows, start=4):
            for column, value in enumerate(values, start=1):
                ws.cell(row=row, column=column, value=value)
        return ws

    def save(self, name: str = "stats.xlsx") -> Path:
        path = self.directory / name
        self.workbook.save(path)
        return path


SAMPLE_KPI_ROWS = [
    (1, "Kickout", "Won clean", "Home", 1, "Own kickout won cleanly"),
    (None, None, "Lost clean", "Home", -1, "Own kickout lost cleanly"),
    (2, "Attacks", "Score", "Oppostion", 2.5, "Attack ending in a score"),
    (3, "Shot from play", "Point", "Both", 1, "Point from play"),
]


@pytest.fixture
def workbook_builder(tmp_path: Path) -> WorkbookBuilder:
    """Fresh workbook builder writing into the test's tmp_path."""
    return WorkbookBuilder(tmp_path)


@pytest.fixture
def full_workbook(workbook_builder: WorkbookBuilder) -> Path:
    """
    A complete workbook: KPI sheet, one match, its player sheet and the
    four position sheets.
    """
    workbook_builder.add_kpi_sheet(SAMPLE_KPI_ROWS)
    workbook_builder.add_match_sheet()
    workbook_builder.add_player_sheet()
    workbook_builder.add_position_sheets({
        "Goalkeepers": [SQUAD_NAMES[0]],
        "Defenders": SQUAD_NAMES[1:7],
        "Midfielders": SQUAD_NAMES[7:11],
        "Forwards": SQUAD_NAMES[11:15],
    })
    return workbook_builder.save()
