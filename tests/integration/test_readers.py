"""
Integration Test: Workbook Readers

Builds real .xlsx files with openpyxl and reads them back through the
match, player, position and KPI readers.
"""

from datetime import date
from pathlib import Path
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from etl.exceptions import ParsingError, SheetNotFoundError, WorkbookNotFoundError
from etl.player_fields import PlayerField
from readers import (
    ExcelKpiDataReader,
    ExcelMatchDataReader,
    ExcelPlayerDataReader,
    ExcelPositionSheetReader,
)

from conftest import SAMPLE_KPI_ROWS, SQUAD_NAMES, make_player


@pytest.mark.integration
class TestMatchReader:
    """Match sheet grid extraction."""

    def test_reads_match_sheet(self, full_workbook):
        result = ExcelMatchDataReader().read_match_sheets(full_workbook)

        assert result.errors == []
        assert len(result.items) == 1

        match = result.items[0]
        assert match.match_number == 9
        assert match.competition == "Championship"
        assert match.opposition == "Slaughtmanus"
        assert match.match_date == date(2025, 9, 26)
        assert match.home_score_full_time == "1-09"
        assert match.away_score_full_time == "0-10"

    def test_team_statistics_grid(self, full_workbook):
        match = ExcelMatchDataReader().read_match_sheets(full_workbook).items[0]

        assert len(match.team_statistics) == 6
        home_first, away_first = match.team_statistics[0], match.team_statistics[1]

        assert (home_first.team_name, home_first.period) == ("Drum", "1st")
        assert home_first.scoreline == "0-05"
        assert home_first.total_possession == pytest.approx(0.55)
        assert home_first.score_sources["turnover"] == 2

        assert (away_first.team_name, away_first.period) == ("Slaughtmanus", "1st")
        assert away_first.scoreline == "0-04"

        periods = [s.period for s in match.team_statistics]
        assert periods == ["1st", "1st", "2nd", "2nd", "Full", "Full"]

    def test_player_and_reference_sheets_are_not_matches(self, full_workbook):
        titles = [m.sheet_name for m in ExcelMatchDataReader().read_match_sheets(full_workbook).items]
        assert titles == ["09. Championship vs Slaughtmanus 26.09.25"]

    def test_unknown_competition_defaults_to_league(self, workbook_builder):
        workbook_builder.add_match_sheet(competition="Hurling")
        path = workbook_builder.save()

        result = ExcelMatchDataReader().read_match_sheets(path)

        assert result.items[0].competition == "League"
        assert result.warnings[0].code == "COMPETITION_DEFAULTED"

    def test_truncated_name_uses_b1(self, workbook_builder):
        workbook_builder.add_match_sheet(number=12, opposition="Faughanvale",
                                         title="12. League vs Faughanvale 0")
        path = workbook_builder.save()

        match = ExcelMatchDataReader().read_match_sheets(path).items[0]

        assert match.match_number == 12
        assert match.opposition == "Faughanvale"
        assert match.match_date == date(2025, 9, 26)

    def test_unparseable_sheet_is_skipped(self, workbook_builder):
        workbook_builder.add_match_sheet(number=10, title="10. Cup vs Nowhere", b1="not metadata")
        workbook_builder.add_match_sheet(number=11, opposition="Glack")
        path = workbook_builder.save()

        result = ExcelMatchDataReader().read_match_sheets(path)

        assert [m.match_number for m in result.items] == [11]
        assert result.errors[0].code == "PARSE_ERROR"
        assert result.errors[0].sheet_name == "10. Cup vs Nowhere"

    def test_missing_file(self, tmp_path):
        with pytest.raises(WorkbookNotFoundError):
            ExcelMatchDataReader().read_match_sheets(tmp_path / "missing.xlsx")


@pytest.mark.integration
class TestPlayerReader:
    """Player stats sheet extraction."""

    def test_reads_full_sheet(self, full_workbook):
        result = ExcelPlayerDataReader().read_player_stats_sheets(full_workbook)

        assert result.errors == []
        sheet = result.items[0]
        assert sheet.match_number == 9
        assert sheet.opposition == "Slaughtmanus"
        assert sheet.match_date == date(2025, 9, 26)
        assert len(sheet.field_map) == len(PlayerField)
        assert len(sheet.players) == 15

    def test_player_values(self, full_workbook):
        sheet = ExcelPlayerDataReader().read_player_stats_sheets(full_workbook).items[0]
        keeper = sheet.players[0]

        assert keeper.jersey_number == 1
        assert keeper.player_name == SQUAD_NAMES[0]
        assert keeper.source_row == 4
        assert keeper.minutes_played == 60
        assert keeper.gk_total_kickouts == 20
        assert keeper.gk_kickout_percentage == pytest.approx(0.75)
        assert keeper.tackles_percentage is None

    def test_truncated_name_recovers_date_from_b1(self, workbook_builder):
        workbook_builder.add_player_sheet(
            title="09. Player stats vs Slaughtma",
            b1="09. Player stats Drum vs Slaughtmanus 26.09.25"
        )
        path = workbook_builder.save()

        sheet = ExcelPlayerDataReader().read_player_stats_sheets(path).items[0]

        assert sheet.opposition == "Slaughtmanus"
        assert sheet.match_date == date(2025, 9, 26)

    def test_truncated_name_without_b1(self, workbook_builder):
        workbook_builder.add_player_sheet(title="09. Player stats vs Slaughtma")
        path = workbook_builder.save()

        sheet = ExcelPlayerDataReader().read_player_stats_sheets(path).items[0]

        assert sheet.match_number == 9
        assert sheet.opposition == "Slaughtma"
        assert sheet.match_date is None

    def test_row_level_issues(self, workbook_builder):
        players = [
            make_player(1, "Cathal McLaughlin"),
            make_player(2, None),
            make_player(3, "Sean O'Neill", tp="lots"),
            make_player(4, "Conor Mullan"),
        ]
        workbook_builder.add_player_sheet(players=players)
        path = workbook_builder.save()

        result = ExcelPlayerDataReader().read_player_stats_sheets(path)
        sheet = result.items[0]
        codes = [w.code for w in result.warnings]

        assert [p.jersey_number for p in sheet.players] == [1, 3, 4]
        assert "INCOMPLETE_ROW" in codes
        assert "FIELD_VALIDATION" in codes
        assert any("'TP'" in w.message and "lots" in w.message for w in result.warnings)
        assert sheet.players[1].tp == 0

    def test_stops_at_first_blank_row(self, workbook_builder):
        ws = workbook_builder.add_player_sheet(players=[make_player(1, "Cathal McLaughlin")])
        ws.cell(row=7, column=1, value=99)
        ws.cell(row=7, column=2, value="Notes Row")
        path = workbook_builder.save()

        sheet = ExcelPlayerDataReader().read_player_stats_sheets(path).items[0]

        assert len(sheet.players) == 1

    def test_missing_critical_header_skips_sheet(self, workbook_builder):
        headers = [f.shared_header for f in PlayerField]
        headers[headers.index("Min")] = "Minutes?"
        workbook_builder.add_player_sheet(headers=headers)
        path = workbook_builder.save()

        result = ExcelPlayerDataReader().read_player_stats_sheets(path)

        assert result.items == []
        assert result.errors[0].code == "PARSE_ERROR"


@pytest.mark.integration
class TestPositionReader:
    """Position sheet mapping."""

    def test_reads_all_sheets(self, full_workbook):
        result = ExcelPositionSheetReader().read_position_mappings_from_file(full_workbook)

        assert result.is_success
        assert result.sheets_processed == 4
        assert len(result.mappings) == 15
        assert result.mappings["cathal mclaughlin"] == "GK"
        assert result.mappings["liam mcgrath"] == "FWD"

    def test_duplicate_name_keeps_last_sheet(self, workbook_builder):
        workbook_builder.add_position_sheets({
            "Defenders": ["Ryan Doherty"],
            "Midfielders": ["ryan doherty "],
        })
        path = workbook_builder.save()

        result = ExcelPositionSheetReader().read_position_mappings_from_file(path)

        assert result.mappings == {"ryan doherty": "MID"}
        assert "Previous: DEF, Current: MID" in result.duplicate_warnings[0]
        assert len(result.warnings) == 2

    def test_no_position_sheets(self, workbook_builder):
        workbook_builder.add_kpi_sheet(SAMPLE_KPI_ROWS)
        path = workbook_builder.save()

        result = ExcelPositionSheetReader().read_position_mappings_from_file(path)

        assert not result.is_success
        assert result.mappings == {}
        assert result.errors

    def test_custom_interval(self, workbook_builder):
        workbook_builder.add_position_sheets({"Goalkeepers": ["Cathal McLaughlin", "Oisin Devlin"]}, interval=3)
        path = workbook_builder.save()

        result = ExcelPositionSheetReader({"position_row_interval": 3}).read_position_mappings_from_file(path)

        assert len(result.mappings) == 2


@pytest.mark.integration
class TestKpiReader:
    """KPI Definitions sheet extraction."""

    def test_forward_fill(self, full_workbook):
        definitions = ExcelKpiDataReader().read_kpi_definitions(full_workbook)

        assert len(definitions) == 4
        lost = definitions[1]
        assert (lost.event_number, lost.event_name, lost.outcome) == (1, "Kickout", "Lost clean")
        assert lost.source_row_number == 5
        assert definitions[2].psr_value == pytest.approx(2.5)
        # normalization happens in the transformer, not the reader
        assert definitions[2].team_assignment == "Oppostion"

    def test_stops_after_blank_run(self, workbook_builder):
        rows = SAMPLE_KPI_ROWS + [(None,) * 6] * 5 + [(9, "Late", "Row", "Home", 1, "Ignored")]
        workbook_builder.add_kpi_sheet(rows)
        path = workbook_builder.save()

        definitions = ExcelKpiDataReader().read_kpi_definitions(path)

        assert len(definitions) == 4

    def test_short_gap_is_skipped_over(self, workbook_builder):
        rows = SAMPLE_KPI_ROWS + [(None,) * 6] * 2 + [(9, "Late", "Row", "Home", 1, "Kept")]
        workbook_builder.add_kpi_sheet(rows)
        path = workbook_builder.save()

        definitions = ExcelKpiDataReader().read_kpi_definitions(path)

        assert len(definitions) == 5
        assert definitions[-1].source_row_number == 10

    @pytest.mark.parametrize("limit", [0, 1])
    def test_zero_or_one_blank_row_limit_stops_at_first_gap(self, workbook_builder, limit):
        rows = SAMPLE_KPI_ROWS + [(None,) * 6] + [(9, "Late", "Row", "Home", 1, "Ignored")]
        workbook_builder.add_kpi_sheet(rows)
        path = workbook_builder.save()

        definitions = ExcelKpiDataReader(max_blank_rows=limit).read_kpi_definitions(path)

        assert len(definitions) == 4

    def test_header_mismatch_still_reads(self, workbook_builder):
        workbook_builder.add_kpi_sheet(SAMPLE_KPI_ROWS, headers=("No.", "Name", "Result", "Team", "PSR", "Text"))
        path = workbook_builder.save()

        assert len(ExcelKpiDataReader().read_kpi_definitions(path)) == 4

    def test_missing_sheet(self, workbook_builder):
        workbook_builder.add_match_sheet()
        path = workbook_builder.save()

        with pytest.raises(SheetNotFoundError):
            ExcelKpiDataReader().read_kpi_definitions(path)

    def test_bad_event_number(self, workbook_builder):
        workbook_builder.add_kpi_sheet([("one", "Kickout", "Won", "Home", 1, "text")])
        path = workbook_builder.save()

        with pytest.raises(ParsingError) as exc_info:
            ExcelKpiDataReader().read_kpi_definitions(path)

        assert exc_info.value.row == 4
