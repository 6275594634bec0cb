"""Tests for factor level resolution and attribute coercion."""

import logging

import pytest

from complexity_scorer.catalog import get_default_catalog
from complexity_scorer.factor_scorer import FactorScorer
from complexity_scorer.schema import (
    ClarityLevel,
    CostSensitivity,
    FinancialReporting,
    ProjectAttributes,
    RequirementLevel,
    TimeConstraint,
    coerce_amount,
    coerce_count,
)


def factor(area: str, name: str):
    rubric = get_default_catalog().get_rubric(area)
    return next(f for f in rubric.factors if f.name == name)


@pytest.fixture
def scorer():
    return FactorScorer()


class TestBucketBoundaries:
    """A factor scores at the highest level whose lower bound is met."""

    @pytest.mark.parametrize("team_size,level", [
        (0, 1), (1, 1), (3, 1),
        (4, 2), (8, 2),
        (9, 3), (15, 3),
        (16, 4), (25, 4),
        (26, 5), (30, 5), (500, 5),
    ])
    def test_team_size(self, scorer, team_size, level):
        match = scorer.score(factor("resources", "Team Size"), ProjectAttributes(team_size=team_size))
        assert match.level == level

    @pytest.mark.parametrize("budget,level", [
        (10_000, 1),
        (50_000, 2),
        (249_999, 2),
        (250_000, 3),
        (1_000_000, 4),
        (4_999_999, 4),
        (5_000_000, 5),
        (6_000_000, 5),
    ])
    def test_budget(self, scorer, budget, level):
        match = scorer.score(factor("costs", "Budget Size"), ProjectAttributes(budget=budget))
        assert match.level == level

    def test_inclusion_and_exclusion_are_combined(self, scorer):
        inclusion_exclusion = factor("scope", "Inclusion/Exclusion Criteria")
        assert scorer.score(inclusion_exclusion, ProjectAttributes(inclusion_count=4)).level == 2
        assert scorer.score(
            inclusion_exclusion, ProjectAttributes(inclusion_count=4, exclusion_count=3)
        ).level == 4

    def test_match_carries_criteria(self, scorer):
        match = scorer.score(factor("resources", "Team Size"), ProjectAttributes(team_size=30))
        assert match.criteria.description == "Very large team (25+ people)"
        assert match.measure == 30


class TestMissingAttributes:
    """Missing attributes default to the lowest level, never raise."""

    def test_missing_budget_scores_level_one(self, scorer):
        match = scorer.score(factor("costs", "Budget Size"), ProjectAttributes())
        assert match.level == 1
        assert match.measure is None

    def test_missing_ordinal_scores_level_one(self, scorer):
        match = scorer.score(factor("costs", "Cost Sensitivity"), ProjectAttributes())
        assert match.level == 1

    def test_default_is_described(self, scorer):
        budget = factor("costs", "Budget Size")
        result = scorer.to_complexity_factor(budget, scorer.score(budget, ProjectAttributes()))
        assert result.score == 1.0
        assert "no budget supplied" in result.description

    def test_measure_is_described(self, scorer):
        budget = factor("costs", "Budget Size")
        result = scorer.to_complexity_factor(
            budget, scorer.score(budget, ProjectAttributes(budget=6_000_000))
        )
        assert result.score == 5.0
        assert result.weight == 0.35
        assert "budget=6,000,000" in result.description


class TestOrdinalAttributes:
    """Qualitative attributes measure as their rank."""

    def test_cost_sensitivity_scale_starts_at_two(self, scorer):
        sensitivity = factor("costs", "Cost Sensitivity")
        levels = [
            scorer.score(sensitivity, ProjectAttributes(cost_sensitivity=value)).level
            for value in ("low", "medium", "high", "critical")
        ]
        assert levels == [2, 3, 4, 5]

    def test_ranks(self):
        assert CostSensitivity.LOW.rank == 2
        assert FinancialReporting.REGULATORY.rank == 5
        assert RequirementLevel.LOW.rank == 1
        assert RequirementLevel.VERY_HIGH.rank == 4
        assert ClarityLevel.VERY_CLEAR.rank == 1
        assert TimeConstraint.STANDARD.rank == 3

    @pytest.mark.parametrize("raw", ["very high", "Very-High", "VERY_HIGH", " very high "])
    def test_free_text_is_normalised(self, raw):
        assert ProjectAttributes(precision_requirements=raw).precision_requirements == RequirementLevel.VERY_HIGH

    def test_unrecognised_value_is_a_gap(self, scorer):
        attributes = ProjectAttributes(scope_definition="fuzzy")
        assert attributes.scope_definition is None
        assert scorer.score(factor("scope", "Scope Clarity"), attributes).level == 1


class TestCoercion:
    """Counts and amounts are coerced leniently."""

    def test_lists_count_distinct_items(self):
        attributes = ProjectAttributes(skill_count=["python", "sql", "python", "", None])
        assert attributes.skill_count == 2

    def test_numeric_strings(self):
        assert coerce_count("12") == 12
        assert coerce_count("7.9") == 7

    @pytest.mark.parametrize("raw", [-3, "lots", float("nan"), True, {"a": 1}])
    def test_malformed_counts_are_gaps(self, raw):
        assert coerce_count(raw) is None
        assert ProjectAttributes(team_size=raw).team_size is None

    @pytest.mark.parametrize("raw,amount", [
        (6_000_000, 6_000_000.0),
        ("$6,000,000", 6_000_000.0),
        ("6M", 6_000_000.0),
        ("250k", 250_000.0),
        ("1.5b", 1_500_000_000.0),
    ])
    def test_amounts(self, raw, amount):
        assert coerce_amount(raw) == amount

    @pytest.mark.parametrize("raw", ["unknown", -10, "", "M"])
    def test_malformed_amounts_are_gaps(self, raw):
        assert coerce_amount(raw) is None

    def test_oversized_integers_are_gaps(self):
        assert coerce_count(10**400) is None
        assert coerce_amount(10**400) is None
        attributes = ProjectAttributes(team_size=10**400, budget=10**400)
        assert attributes.team_size is None
        assert attributes.budget is None

    def test_fractional_counts_are_truncated_and_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="complexity_scorer.schema"):
            assert coerce_count(2.9, "team_size") == 2
        assert "Truncating fractional value 2.9 for team_size to 2" in caplog.text

    def test_whole_floats_are_not_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="complexity_scorer.schema"):
            assert coerce_count(4.0) == 4
        assert "Truncating" not in caplog.text

    def test_identity_defaults(self):
        attributes = ProjectAttributes(project_id=None, project_name="  ")
        assert attributes.project_id == "unknown"
        assert attributes.project_name == "Unnamed Project"

    def test_unknown_measure_raises(self):
        with pytest.raises(ValueError):
            ProjectAttributes().measure("team_mood")
