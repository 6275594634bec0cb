"""Tests for knowledge-area scoring and secondary trigger propagation."""

import pytest

from complexity_scorer.area_scorer import KnowledgeAreaScorer, clamp_score, level_label
from complexity_scorer.catalog import get_default_catalog
from complexity_scorer.schema import (
    ComplexityLevel,
    KnowledgeArea,
    KnowledgeAreaRubric,
    ProjectAttributes,
    RubricFactor,
)


@pytest.fixture
def scorer():
    return KnowledgeAreaScorer()


@pytest.fixture
def resources_rubric():
    return get_default_catalog().get_rubric(KnowledgeArea.RESOURCES)


class TestAreaScore:
    """Area score is the weighted average of factor levels."""

    def test_weighted_average(self, scorer, resources_rubric):
        attributes = ProjectAttributes(team_size=16, skill_count=3)
        result = scorer.score_area(resources_rubric, attributes)
        # 0.30 * 4 + 0.25 * 2 + 0.45 * 1
        assert result.complexity_score == pytest.approx(2.15)
        assert [f.score for f in result.factors] == [4.0, 2.0, 1.0, 1.0, 1.0]

    def test_all_factors_at_top_level(self, scorer, resources_rubric):
        attributes = ProjectAttributes(
            team_size=30, skill_count=10, resource_constraint_count=8,
            location_count=6, external_dependency_count=9,
        )
        result = scorer.score_area(resources_rubric, attributes)
        assert result.complexity_score == 5.0
        assert result.complexity_level == ComplexityLevel.CRITICAL

    def test_empty_project_scores_one(self, scorer, resources_rubric):
        result = scorer.score_area(resources_rubric, ProjectAttributes())
        assert result.complexity_score == 1.0
        assert result.complexity_level == ComplexityLevel.VERY_LOW
        assert result.documentation_required is False
        assert result.secondary_triggers == ()

    def test_normalised_by_total_weight(self, scorer, resources_rubric):
        team, skills = resources_rubric.factors[0], resources_rubric.factors[1]
        rubric = KnowledgeAreaRubric(
            area=KnowledgeArea.RESOURCES,
            factors=(
                RubricFactor(name="Team", weight=0.2, attribute="team_size", criteria=team.criteria),
                RubricFactor(name="Skills", weight=0.2, attribute="skill_count", criteria=skills.criteria),
            ),
        )
        result = scorer.score_area(rubric, ProjectAttributes(team_size=30, skill_count=0))
        assert result.complexity_score == pytest.approx(3.0)

    def test_reasoning_names_top_factors(self, scorer, resources_rubric):
        result = scorer.score_area(resources_rubric, ProjectAttributes(team_size=16, skill_count=3))
        assert result.reasoning.startswith("Based on resources analysis: Minimal complexity")
        assert result.reasoning.endswith("driven by Team Size")


class TestDocumentationThreshold:
    """Documentation is required from the minimal threshold upward."""

    def test_exactly_minimal_requires_documentation(self, scorer, resources_rubric):
        attributes = ProjectAttributes(
            team_size=4, skill_count=3, resource_constraint_count=1,
            location_count=2, external_dependency_count=1,
        )
        result = scorer.score_area(resources_rubric, attributes)
        assert result.complexity_score == 2.0
        assert result.complexity_level == ComplexityLevel.MINIMAL
        assert result.documentation_required is True

    def test_below_minimal(self, scorer, resources_rubric):
        result = scorer.score_area(resources_rubric, ProjectAttributes(team_size=9))
        # 0.30 * 3 + 0.70 * 1
        assert result.complexity_score == pytest.approx(1.6)
        assert result.documentation_required is False


class TestSecondaryTriggers:
    """Only factors at or above the high threshold propagate triggers.

    The aggregate area score plays no part: a high area whose lower-level
    factors declare triggers does not propagate them, and a low area with
    one high factor does.
    """

    def test_single_high_factor_triggers_in_low_area(self, scorer, resources_rubric):
        result = scorer.score_area(resources_rubric, ProjectAttributes(team_size=30))
        assert result.complexity_score == pytest.approx(2.2)
        assert result.secondary_triggers == (
            KnowledgeArea.INTEGRATION,
            KnowledgeArea.SCHEDULE,
            KnowledgeArea.COMMUNICATION,
            KnowledgeArea.STAKEHOLDER,
        )

    def test_level_three_factor_does_not_trigger(self, scorer, resources_rubric):
        result = scorer.score_area(resources_rubric, ProjectAttributes(skill_count=5))
        assert result.factors[1].score == 3.0
        assert result.secondary_triggers == ()

    def test_high_area_ignores_triggers_of_lower_factors(self, scorer, resources_rubric):
        attributes = ProjectAttributes(
            team_size=30, skill_count=10, resource_constraint_count=7,
            location_count=6, external_dependency_count=3,
        )
        result = scorer.score_area(resources_rubric, attributes)
        assert result.complexity_score == pytest.approx(4.8)
        # External Dependencies sits at level 3, so procurement is not triggered
        assert KnowledgeArea.PROCUREMENT not in result.secondary_triggers
        assert result.secondary_triggers == (
            KnowledgeArea.INTEGRATION,
            KnowledgeArea.SCHEDULE,
            KnowledgeArea.COMMUNICATION,
            KnowledgeArea.RISK,
            KnowledgeArea.STAKEHOLDER,
        )

    def test_triggers_are_secondary_areas(self, scorer):
        catalog = get_default_catalog()
        attributes = ProjectAttributes(
            budget=6_000_000, funding_source_count=5, cost_sensitivity="critical",
            reporting_requirements="regulatory",
        )
        result = scorer.score_area(catalog.get_rubric("costs"), attributes)
        assert result.secondary_triggers
        assert all(not area.is_primary for area in result.secondary_triggers)


class TestHelpers:

    def test_clamp_score(self):
        assert clamp_score(0.2) == 1.0
        assert clamp_score(7.5) == 5.0
        assert clamp_score(2.123456) == 2.1235

    def test_level_label(self):
        assert level_label(ComplexityLevel.VERY_LOW) == "Very Low"
        assert level_label(ComplexityLevel.HIGH) == "High"
