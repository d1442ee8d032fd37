"""
Unit tests for player stats header resolution.
"""

import pytest
from openpyxl import Workbook

from etl.exceptions import ParsingError
from etl.player_fields import CRITICAL_FIELDS, EXPECTED_FIELD_COUNT, SHARED_HEADER_TABLE, PlayerField
from readers.player_reader import PlayerStatsHeaderParser


def header_sheet(headers):
    ws = Workbook().active
    ws.title = "09. Player stats vs Glen 26.09.25"
    for column, header in enumerate(headers, start=1):
        ws.cell(row=3, column=column, value=header)
    return ws


@pytest.mark.unit
class TestPlayerFieldTable:
    """Test the static header table."""

    def test_field_count(self):
        assert EXPECTED_FIELD_COUNT == len(PlayerField) == 84

    def test_tot_is_shared_in_sheet_order(self):
        assert SHARED_HEADER_TABLE["tot"] == (
            PlayerField.SHOTS_PLAY_TOTAL,
            PlayerField.FREES_TOTAL,
            PlayerField.TACKLES_TOTAL,
            PlayerField.FREES_CONCEDED_TOTAL,
            PlayerField.FREES_50M_TOTAL,
        )

    def test_statistic_fields_exclude_identity(self):
        fields = PlayerField.statistic_fields()
        assert PlayerField.JERSEY_NUMBER not in fields
        assert PlayerField.PLAYER_NAME not in fields
        assert len(fields) == 82

    def test_critical_fields(self):
        assert [f.header for f in CRITICAL_FIELDS] == ["#", "Player Name", "Min"]


@pytest.mark.unit
class TestHeaderParser:
    """Test occurrence-order header mapping."""

    def setup_method(self):
        self.parser = PlayerStatsHeaderParser(header_row=3, min_expected_fields=80)

    def test_full_sheet_header_maps_every_field(self):
        ws = header_sheet([f.shared_header for f in PlayerField])

        field_map, warnings, duplicates = self.parser.parse_header_row(ws)

        assert len(field_map) == 84
        assert warnings == []
        assert duplicates == []
        assert field_map[PlayerField.SHOTS_PLAY_TOTAL] < field_map[PlayerField.FREES_TOTAL]
        assert field_map[PlayerField.FREES_50M_TOTAL] == list(PlayerField).index(PlayerField.FREES_50M_TOTAL) + 1

    def test_exact_suffixed_token_maps_directly(self):
        ws = header_sheet(["#", "Player Name", "Min", "Tot_Frees", "Tot"])

        field_map, _, _ = self.parser.parse_header_row(ws)

        assert field_map[PlayerField.FREES_TOTAL] == 4
        assert field_map[PlayerField.SHOTS_PLAY_TOTAL] == 5

    def test_headers_are_case_insensitive(self):
        ws = header_sheet(["#", "player name", "MIN"])

        field_map, _, _ = self.parser.parse_header_row(ws)

        assert field_map[PlayerField.PLAYER_NAME] == 2
        assert field_map[PlayerField.MINUTES_PLAYED] == 3

    def test_unrecognized_header_is_a_warning(self):
        ws = header_sheet(["#", "Player Name", "Min", "Notes"])

        field_map, warnings, _ = self.parser.parse_header_row(ws)

        assert len(field_map) == 3
        assert any("Unrecognized header 'Notes'" in w for w in warnings)

    def test_surplus_occurrence_is_a_warning(self):
        ws = header_sheet(["#", "Player Name", "Min"] + ["Tot"] * 6)

        field_map, warnings, _ = self.parser.parse_header_row(ws)

        assert PlayerField.FREES_50M_TOTAL in field_map
        assert any("Surplus header 'Tot'" in w for w in warnings)

    def test_duplicate_column_is_reported(self):
        ws = header_sheet(["#", "Player Name", "Min", "Tot_Frees", "Tot", "Tot"])

        field_map, _, duplicates = self.parser.parse_header_row(ws)

        # second "Tot" resolves to frees, already mapped from the exact token
        assert field_map[PlayerField.FREES_TOTAL] == 4
        assert duplicates == ["Tot"]

    def test_missing_critical_field_raises(self):
        ws = header_sheet(["#", "Player Name", "TE"])

        with pytest.raises(ParsingError) as exc_info:
            self.parser.parse_header_row(ws)

        assert "Min" in exc_info.value.message

    def test_few_fields_is_a_warning(self):
        ws = header_sheet(["#", "Player Name", "Min"])

        _, warnings, _ = self.parser.parse_header_row(ws)

        assert any("Only 3 of 84" in w for w in warnings)
