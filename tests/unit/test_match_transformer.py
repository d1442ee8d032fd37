"""
Unit tests for match sheet validation.
"""

from datetime import date

import pytest

from etl.exceptions import GridCountError
from etl.match_transformer import MatchDataTransformer
from etl.models import PERIODS, SOURCE_CATEGORIES, MatchSheetData, TeamStatisticsData


def team_stats(home_possession=0.55, away_possession=0.45, counter=2):
    records = []
    for team, possession in (("Drum", home_possession), ("Slaughtmanus", away_possession)):
        for period in PERIODS:
            records.append(TeamStatisticsData(
                team_name=team,
                period=period,
                scoreline="0-05",
                total_possession=possession,
                score_sources={c: counter for c in SOURCE_CATEGORIES},
                shot_sources={c: counter for c in SOURCE_CATEGORIES},
            ))
    return records


def make_match(**overrides):
    values = dict(
        sheet_name="09. Championship vs Slaughtmanus 26.09.25",
        match_number=9,
        competition="Championship",
        opposition="Slaughtmanus",
        match_date=date(2025, 9, 26),
        home_score_first_half="0-05",
        home_score_second_half="1-04",
        home_score_full_time="1-09",
        away_score_first_half="0-04",
        away_score_second_half="0-06",
        away_score_full_time="0-10",
        team_statistics=team_stats(),
    )
    values.update(overrides)
    return MatchSheetData(**values)


@pytest.mark.unit
class TestMatchDataTransformer:

    def setup_method(self):
        self.transformer = MatchDataTransformer(home_team="Drum")

    def test_valid_match(self):
        result = self.transformer.validate_match(make_match())

        assert result.is_valid
        assert result.warnings == []

    def test_invalid_metadata(self):
        result = self.transformer.validate_match(make_match(match_number=0, competition=" ", opposition=""))

        assert "Invalid match number: 0" in result.errors
        assert "Competition name cannot be empty" in result.errors
        assert "Opposition team name cannot be empty" in result.errors

    def test_date_out_of_range(self):
        result = self.transformer.validate_match(make_match(match_date=date(1999, 12, 31)))
        assert "Invalid match date: 1999-12-31" in result.errors

    def test_missing_score_is_a_warning(self):
        result = self.transformer.validate_match(make_match(away_score_second_half=None))

        assert result.is_valid
        assert "Missing score for Away 2nd Half" in result.warnings

    def test_bad_score_format(self):
        result = self.transformer.validate_match(make_match(home_score_full_time="one-nine"))
        assert any("Invalid score format for Home Full Time" in e for e in result.errors)

    def test_unrealistic_score(self):
        result = self.transformer.validate_match(make_match(home_score_full_time="11-09"))
        assert "Unrealistic goals value for Home Full Time: 11" in result.errors

    def test_period_totals_outside_tolerance(self):
        result = self.transformer.validate_match(make_match(home_score_full_time="1-15"))

        assert result.is_valid
        assert any(w.startswith("Home points: 5+4≠15") for w in result.warnings)

    def test_period_totals_within_tolerance(self):
        result = self.transformer.validate_match(make_match(home_score_full_time="1-10"))
        assert result.warnings == []

    def test_possession_sum_warning(self):
        match = make_match(team_statistics=team_stats(home_possession=0.56, away_possession=0.50))

        result = self.transformer.validate_match(match)

        assert result.is_valid
        assert len([w for w in result.warnings if w.startswith("Possession sum")]) == 3

    def test_possession_out_of_range(self):
        match = make_match(team_statistics=team_stats(home_possession=1.5, away_possession=0.45))
        assert not self.transformer.validate_match(match).is_valid

    def test_negative_counter(self):
        match = make_match(team_statistics=team_stats(counter=-1))

        result = self.transformer.validate_match(match)

        assert any("Negative value not allowed for score_source_kickout_long" in e for e in result.errors)

    def test_grid_count(self):
        with pytest.raises(GridCountError):
            self.transformer.validate_match(make_match(team_statistics=team_stats()[:5]))

    def test_tolerance_from_config(self):
        transformer = MatchDataTransformer({"possession_sum_tolerance": 0.2}, home_team="Drum")
        match = make_match(team_statistics=team_stats(home_possession=0.6, away_possession=0.55))

        assert transformer.validate_match(match).warnings == []
