"""
Sheet classification and metadata parsing.

Sheet names encode match identity, e.g.
    "09. Championship vs Slaughtmanus 26.09.25"
    "09. Player stats vs Slaughtmanus 26.09.25"

Excel caps sheet names at 31 characters, so names are often truncated
("09. Player stats vs Slaughtma"). Cell B1 carries the full text,
including the home team: "09. Championship Drum vs Slaughtmanus 26.09.25".
"""

import logging
import re
from datetime import date
from typing import List, Optional, Tuple

from config import WORKBOOK_CONFIG
from etl.exceptions import ParsingError
from etl.models import MatchMetadata
from readers.constants import (
    COMPETITION_TYPES,
    DEFAULT_COMPETITION,
    MATCH_NAME_METADATA_PATTERN,
    MATCH_SHEET_PATTERN,
    PLAYER_SHEET_FULL_PATTERN,
    PLAYER_SHEET_TRUNCATED_PATTERN,
    TRAILING_DATE_FRAGMENT,
)


logger = logging.getLogger(__name__)

_MATCH_SHEET_RE = re.compile(MATCH_SHEET_PATTERN)
_MATCH_NAME_RE = re.compile(MATCH_NAME_METADATA_PATTERN)
_PLAYER_FULL_RE = re.compile(PLAYER_SHEET_FULL_PATTERN, re.IGNORECASE)
_PLAYER_TRUNCATED_RE = re.compile(PLAYER_SHEET_TRUNCATED_PATTERN, re.IGNORECASE)
_TRAILING_DATE_RE = re.compile(TRAILING_DATE_FRAGMENT)


def is_match_sheet(sheet_name: str) -> bool:
    """True for "<n>. <competition> vs ..." sheets that are not player sheets."""
    if not sheet_name:
        return False
    return bool(_MATCH_SHEET_RE.match(sheet_name)) and "player" not in sheet_name.lower()


def is_player_stats_sheet(sheet_name: str) -> bool:
    """True for full or truncated "<n>. Player stats vs ..." sheets."""
    if not sheet_name:
        return False
    return bool(_PLAYER_FULL_RE.match(sheet_name) or _PLAYER_TRUNCATED_RE.match(sheet_name))


def normalize_competition(value: str) -> Tuple[str, Optional[str]]:
    """
    Map a competition token to one of the allowed types.

    Returns:
        Tuple (competition, warning). Unknown values become "League" with
        a warning message; known values are returned in canonical casing.

    Example:
        normalize_competition("CUP")      # ("Cup", None)
        normalize_competition("Hurling")  # ("League", "Invalid competition type ...")
    """
    token = (value or "").strip()
    for competition in COMPETITION_TYPES:
        if competition.lower() == token.lower():
            return competition, None

    warning = f"Invalid competition type '{token}'. Defaulting to '{DEFAULT_COMPETITION}'."
    return DEFAULT_COMPETITION, warning


def _build_date(day: str, month: str, year: str, source: str) -> date:
    try:
        return date(2000 + int(year), int(month), int(day))
    except ValueError as e:
        raise ParsingError(f"Invalid match date {day}.{month}.{year} in '{source}': {e}", sheet_name=source)


class MetadataParser:
    """Parses match identity from sheet names and their B1 cell."""

    def __init__(self, home_team: Optional[str] = None):
        self.home_team = home_team or WORKBOOK_CONFIG["home_team"]
        self.logger = logging.getLogger(__name__)

        home = re.escape(self.home_team)
        self._match_cell_re = re.compile(
            rf"^(\d+)\.\s+(\w+)\s+{home}\s+vs\s+(.+?)\s+(\d{{2}})\.(\d{{2}})\.(\d{{2}})$"
        )
        self._player_cell_re = re.compile(
            rf"^(\d+)\.\s+.+?\s+{home}\s+vs\s+(.+?)\s+(\d{{2}})\.(\d{{2}})\.(\d{{2}})$",
            re.IGNORECASE
        )

    def parse_match_metadata(self, sheet_name: str, cell_text: str = "") -> Tuple[MatchMetadata, List[str]]:
        """
        Parse a match sheet's identity.

        Cell B1 is tried first since it survives sheet-name truncation;
        the sheet name is the fallback.

        Args:
            sheet_name: Worksheet title
            cell_text: Text of cell B1

        Returns:
            Tuple (MatchMetadata, warnings)

        Raises:
            ParsingError: If neither source matches or the date is impossible
        """
        match = self._match_cell_re.match((cell_text or "").strip())
        source = "cell B1"
        if not match:
            match = _MATCH_NAME_RE.match((sheet_name or "").strip())
            source = "sheet name"

        if not match:
            raise ParsingError(
                f"Invalid match metadata format in cell B1: '{cell_text}' or sheet name: '{sheet_name}'",
                sheet_name=sheet_name
            )

        warnings = []
        competition, warning = normalize_competition(match.group(2))
        if warning:
            self.logger.warning(f"{warning} (sheet '{sheet_name}')")
            warnings.append(warning)

        metadata = MatchMetadata(
            match_number=int(match.group(1)),
            competition=competition,
            opposition=match.group(3).strip(),
            match_date=_build_date(match.group(4), match.group(5), match.group(6), sheet_name)
        )

        self.logger.debug(
            f"Parsed metadata from {source}: Match {metadata.match_number}, {metadata.competition}, "
            f"{metadata.opposition}, {metadata.match_date.isoformat()}"
        )
        return metadata, warnings

    def parse_player_sheet_metadata(self, sheet_name: str,
                                    cell_text: str = "") -> Tuple[int, str, Optional[date]]:
        """
        Parse a player stats sheet's identity.

        Returns:
            Tuple (match_number, opposition, match_date). match_date is None
            when only a truncated sheet name is available.

        Raises:
            ParsingError: If no pattern matches
        """
        name = (sheet_name or "").strip()

        match = _PLAYER_FULL_RE.match(name)
        if match:
            return (
                int(match.group(1)),
                match.group(2).strip(),
                _build_date(match.group(3), match.group(4), match.group(5), sheet_name)
            )

        match = self._player_cell_re.match((cell_text or "").strip())
        if match:
            return (
                int(match.group(1)),
                match.group(2).strip(),
                _build_date(match.group(3), match.group(4), match.group(5), sheet_name)
            )

        match = _PLAYER_TRUNCATED_RE.match(name)
        if match:
            number = int(re.match(r"^(\d+)", name).group(1))
            opposition = name[match.end():]
            opposition = _TRAILING_DATE_RE.sub("", opposition).strip() or "Unknown"
            self.logger.debug(f"Truncated player sheet '{sheet_name}': opposition '{opposition}', date unknown")
            return number, opposition, None

        raise ParsingError(f"Invalid player sheet name format: '{sheet_name}'", sheet_name=sheet_name)
