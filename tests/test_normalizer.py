"""Tests for project record normalization."""

import pytest

from complexity_scorer.normalizer import ProjectNormalizer, attribute_gaps
from complexity_scorer.schema import ClarityLevel, CostSensitivity, TimeConstraint


@pytest.fixture
def normalizer():
    return ProjectNormalizer()


class TestFieldNames:
    """Snake_case, camelCase and upstream record names are accepted."""

    def test_snake_case(self, normalizer):
        attributes = normalizer.normalize({"team_size": 12, "cost_sensitivity": "high"})
        assert attributes.team_size == 12
        assert attributes.cost_sensitivity == CostSensitivity.HIGH

    def test_camel_case(self, normalizer):
        attributes = normalizer.normalize({
            "projectId": "P-1",
            "projectName": "Warehouse",
            "teamSize": 12,
            "scopeDefinition": "Very Clear",
            "timeConstraints": "Tight",
        })
        assert attributes.project_id == "P-1"
        assert attributes.project_name == "Warehouse"
        assert attributes.team_size == 12
        assert attributes.scope_definition == ClarityLevel.VERY_CLEAR
        assert attributes.time_constraints == TimeConstraint.TIGHT

    def test_item_lists_are_counted(self, normalizer):
        attributes = normalizer.normalize({
            "skillRequirements": ["python", "sql", "design"],
            "stakeholders": ["cfo", "ops", "it", "legal", "audit", "hr"],
            "inclusionCriteria": ["api", "ui"],
            "exclusionCriteria": ["mobile"],
        })
        assert attributes.skill_count == 3
        assert attributes.stakeholder_count == 6
        assert attributes.measure("inclusion_exclusion_count") == 3.0

    def test_canonical_name_wins_over_alias(self, normalizer):
        attributes = normalizer.normalize({"team_size": 5, "teamSize": 40})
        assert attributes.team_size == 5

    def test_null_falls_through_to_alias(self, normalizer):
        attributes = normalizer.normalize({"team_size": None, "teamSize": 40})
        assert attributes.team_size == 40

    def test_unknown_keys_ignored(self, normalizer):
        attributes = normalizer.normalize({"favouriteColour": "blue", "team_size": 3})
        assert attributes.team_size == 3


class TestGaps:

    def test_empty_record_is_all_gaps(self, normalizer):
        attributes = normalizer.normalize({})
        gaps = attribute_gaps(attributes)
        assert "budget" in gaps
        assert "team_size" in gaps
        assert "project_id" not in gaps

    def test_none_record(self, normalizer):
        assert normalizer.normalize(None).project_id == "unknown"

    def test_non_mapping_rejected(self, normalizer):
        with pytest.raises(TypeError):
            normalizer.normalize("team_size=3")
