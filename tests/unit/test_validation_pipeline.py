"""
Unit tests for the six-layer player sheet validation pipeline.
"""

from datetime import date

import pytest

from etl.models import PlayerStatisticsData, PlayerStatsSheetData
from etl.player_fields import PlayerField
from etl.validation import (
    BusinessRuleLayer,
    CrossFieldLayer,
    DataTypeLayer,
    PlayerIdentificationLayer,
    PositionSpecificLayer,
    SheetStructureLayer,
    ValidationLayer,
    ValidationPipeline,
    ValidationResult,
)


def make_player(jersey=5, name="Ryan Doherty", **stats):
    defaults = dict(minutes_played=60, total_engagements=25, tp=8, hp=4, ha=5,
                    tackles_total=3, tackles_contested=2, tackles_missed=1)
    defaults.update(stats)
    return PlayerStatisticsData(jersey_number=jersey, player_name=name, **defaults)


def make_sheet(players=None, **overrides):
    values = dict(
        sheet_name="09. Player stats vs Slaughtmanus 26.09.25",
        match_number=9,
        opposition="Slaughtmanus",
        match_date=date(2025, 9, 26),
        field_map={f: i for i, f in enumerate(PlayerField, start=1)},
        players=players if players is not None else [make_player(n, f"Player {chr(64 + n)}x") for n in range(1, 16)],
    )
    values.update(overrides)
    return PlayerStatsSheetData(**values)


@pytest.mark.unit
class TestValidationResult:

    def test_merge_with_prefix(self):
        target = ValidationResult()
        target.merge(ValidationResult(errors=["bad"], warnings=["odd"]), "Player #1 (A): ")

        assert target.errors == ["Player #1 (A): bad"]
        assert target.warnings == ["Player #1 (A): odd"]
        assert not target.is_valid

    def test_factories(self):
        assert ValidationResult.success().is_valid
        assert ValidationResult.failure("x").errors == ["x"]


@pytest.mark.unit
class TestSheetStructureLayer:
    """Layer 1 checks."""

    def setup_method(self):
        self.layer = SheetStructureLayer()

    def test_valid_sheet(self):
        assert self.layer.validate_sheet(make_sheet()).is_valid

    def test_invalid_match_number(self):
        result = self.layer.validate_sheet(make_sheet(match_number=0))
        assert any("Match number" in e for e in result.errors)

    def test_empty_opposition(self):
        result = self.layer.validate_sheet(make_sheet(opposition="  "))
        assert "Opposition team name is empty" in result.errors

    def test_date_before_2020(self):
        result = self.layer.validate_sheet(make_sheet(match_date=date(2019, 12, 31)))
        assert not result.is_valid

    def test_unknown_date_is_accepted(self):
        assert self.layer.validate_sheet(make_sheet(match_date=None)).is_valid

    def test_empty_field_map(self):
        result = self.layer.validate_sheet(make_sheet(field_map={}))
        assert "Field map is empty" in result.errors

    def test_missing_critical_field(self):
        field_map = {f: i for i, f in enumerate(PlayerField, start=1) if f is not PlayerField.MINUTES_PLAYED}
        result = self.layer.validate_sheet(make_sheet(field_map=field_map))
        assert any(e.startswith("Critical field 'Min'") for e in result.errors)

    def test_empty_player_list(self):
        result = self.layer.validate_sheet(make_sheet(players=[]))
        assert any("Player list is empty" in e for e in result.errors)

    def test_few_players_is_a_warning(self):
        result = self.layer.validate_sheet(make_sheet(players=[make_player()]))
        assert result.is_valid
        assert any("Only 1 players" in w for w in result.warnings)


@pytest.mark.unit
class TestPlayerIdentificationLayer:
    """Layer 2 checks."""

    def setup_method(self):
        self.layer = PlayerIdentificationLayer()

    def test_valid_player(self):
        result = self.layer.validate_player(make_player(), "MID")
        assert result.is_valid
        assert result.warnings == []

    def test_jersey_limits(self):
        assert not self.layer.validate_player(make_player(jersey=0), None).is_valid
        assert not self.layer.validate_player(make_player(jersey=100), None).is_valid
        high = self.layer.validate_player(make_player(jersey=45), None)
        assert high.is_valid and high.warnings

    def test_name_checks(self):
        assert not self.layer.validate_player(make_player(name=""), None).is_valid
        assert not self.layer.validate_player(make_player(name="A"), None).is_valid

        shouty = self.layer.validate_player(make_player(name="RYAN DOHERTY"), None)
        assert shouty.is_valid
        assert any("all uppercase" in w for w in shouty.warnings)

        odd = self.layer.validate_player(make_player(name="Ryan  D0herty"), None)
        assert any("unusual characters" in w for w in odd.warnings)
        assert any("double spaces" in w for w in odd.warnings)

    def test_minutes(self):
        assert not self.layer.validate_player(make_player(minutes_played=95), None).is_valid
        assert not self.layer.validate_player(make_player(minutes_played=-1), None).is_valid
        assert self.layer.validate_player(make_player(minutes_played=0), None).warnings
        assert self.layer.validate_player(make_player(minutes_played=75), None).warnings

    def test_duplicate_jersey_is_a_sheet_warning(self):
        sheet = make_sheet(players=[make_player(7, "Ryan Doherty"), make_player(7, "Conor Mullan")])

        result = self.layer.validate_sheet(sheet)

        assert result.is_valid
        assert "Ryan Doherty, Conor Mullan" in result.warnings[0]


@pytest.mark.unit
class TestDataTypeLayer:
    """Layer 3 checks."""

    def setup_method(self):
        self.layer = DataTypeLayer()

    def test_negative_count(self):
        result = self.layer.validate_player(make_player(tp=-1), None)
        assert "TP cannot be negative (got -1)" in result.errors

    def test_high_count_is_a_warning(self):
        result = self.layer.validate_player(make_player(tp=150), None)
        assert result.is_valid
        assert result.warnings

    def test_card_maximum(self):
        result = self.layer.validate_player(make_player(red_cards=3), None)
        assert any(w.startswith("Red is unusually high") for w in result.warnings)

    def test_percentages(self):
        assert self.layer.validate_player(make_player(tackles_percentage=0.5), None).is_valid

        rounding = self.layer.validate_player(make_player(tackles_percentage=1.03), None)
        assert rounding.is_valid and rounding.warnings

        assert not self.layer.validate_player(make_player(tackles_percentage=1.2), None).is_valid
        assert not self.layer.validate_player(make_player(tackles_percentage=-0.1), None).is_valid

    def test_ratio_fields_allow_values_over_one(self):
        assert self.layer.validate_player(make_player(te_per_psr=4.5, psr_per_tp=1.8), None).is_valid


@pytest.mark.unit
class TestCrossFieldLayer:
    """Layer 4 checks."""

    def setup_method(self):
        self.layer = CrossFieldLayer()

    def test_consistent_player(self):
        result = self.layer.validate_player(make_player(), None)
        assert result.is_valid
        assert result.warnings == []

    def test_shots_total_mismatch_is_an_error(self):
        player = make_player(shots_play_total=10, shots_play_points=2, total_shots=10)
        result = self.layer.validate_player(player, None)
        assert any("Shots from play total" in e for e in result.errors)

    def test_within_tolerance(self):
        player = make_player(shots_play_total=4, shots_play_points=2, total_shots=4)
        assert self.layer.validate_player(player, None).is_valid

    def test_tolerance_is_configurable(self):
        layer = CrossFieldLayer({"cross_field_tolerance": 0})
        player = make_player(shots_play_total=3, shots_play_points=2, total_shots=3)
        assert not layer.validate_player(player, None).is_valid

    def test_kickout_mismatch_is_a_warning(self):
        result = self.layer.validate_player(make_player(ko_home_kow=8, ko_home_wc=1), None)
        assert result.is_valid
        assert any("Home kickouts won" in w for w in result.warnings)

    def test_percentage_check(self):
        player = make_player(shots_play_total=4, shots_play_points=2, shots_play_wide=2,
                             total_shots=4, shots_play_percentage=0.9)
        result = self.layer.validate_player(player, None)
        assert any("Shots from play %" in w for w in result.warnings)


@pytest.mark.unit
class TestPositionSpecificLayer:
    """Layer 5 checks."""

    def setup_method(self):
        self.layer = PositionSpecificLayer()

    def test_missing_position(self):
        assert self.layer.validate_player(make_player(), None).warnings

    def test_goalkeeper_without_kickouts(self):
        result = self.layer.validate_player(make_player(), "GK")
        assert "Goalkeeper has no kickouts recorded" in result.warnings

    def test_outfield_player_with_kickouts(self):
        result = self.layer.validate_player(make_player(gk_total_kickouts=4), "FWD")
        assert any("should only be for goalkeepers" in w for w in result.warnings)
        assert result.is_valid


@pytest.mark.unit
class TestBusinessRuleLayer:
    """Layer 6 checks."""

    def setup_method(self):
        self.layer = BusinessRuleLayer()

    def test_two_red_cards_is_an_error(self):
        assert not self.layer.validate_player(make_player(red_cards=2, minutes_played=30), None).is_valid

    def test_late_red_card_is_a_warning(self):
        result = self.layer.validate_player(make_player(red_cards=1, minutes_played=65), None)
        assert result.is_valid
        assert result.warnings

    def test_bad_score_notation(self):
        result = self.layer.validate_player(make_player(scores="1:03"), None)
        assert any("Score notation" in w for w in result.warnings)
        assert self.layer.validate_player(make_player(scores="0-05(2f)"), None).warnings == []

    def test_team_without_goalkeeper(self):
        result = self.layer.validate_team(make_sheet(), {})
        assert any("No goalkeeper" in w for w in result.warnings)


@pytest.mark.unit
class TestValidationPipeline:
    """Test layer ordering, halting and gating."""

    def test_valid_sheet(self):
        outcome = ValidationPipeline().validate(make_sheet())

        assert outcome.result.is_valid
        assert len(outcome.valid_players) == 15
        assert not outcome.halted
        assert not outcome.has_critical_errors

    def test_structure_failure_halts(self):
        outcome = ValidationPipeline().validate(make_sheet(field_map={}))

        assert outcome.halted
        assert outcome.has_critical_errors
        assert outcome.valid_players == []
        assert len(outcome.skipped_players) == 15

    def test_identification_failure_excludes_player(self):
        players = [make_player(1, "Ryan Doherty"), make_player(2, "A", tp=-5)]

        outcome = ValidationPipeline().validate(make_sheet(players=players))

        assert [p.player_name for p in outcome.valid_players] == ["Ryan Doherty"]
        assert [p.player_name for p in outcome.skipped_players] == ["A"]
        # gated: the data type layer never saw the negative TP
        assert not any("TP cannot be negative" in e for e in outcome.result.errors)

    def test_player_messages_are_prefixed(self):
        players = [make_player(4, "Ryan Doherty", tp=-1)]

        outcome = ValidationPipeline().validate(make_sheet(players=players))

        assert "Player #4 (Ryan Doherty): TP cannot be negative (got -1)" in outcome.result.errors
        assert outcome.valid_players
        assert not outcome.has_critical_errors

    def test_custom_layers(self):
        class RejectEveryone(ValidationLayer):
            name = "reject"
            gates_player = True

            def validate_player(self, player, position):
                return ValidationResult.failure("rejected")

        outcome = ValidationPipeline([RejectEveryone()]).validate(make_sheet())

        assert outcome.valid_players == []
        assert len(outcome.result.errors) == 15
