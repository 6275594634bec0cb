"""Tests for the overall complexity aggregator."""

import pytest

from complexity_scorer.aggregator import ComplexityAggregator
from complexity_scorer.exceptions import ConfigurationError, UnknownKnowledgeAreaError
from complexity_scorer.schema import (
    ComplexityLevel,
    KnowledgeArea,
    KnowledgeAreaComplexity,
    PrimaryAreas,
)


def area_result(area: KnowledgeArea, score: float) -> KnowledgeAreaComplexity:
    return KnowledgeAreaComplexity(
        area=area,
        complexity_score=score,
        complexity_level=ComplexityLevel.MODERATE,
        documentation_required=score >= 2.0,
    )


def primary_areas(resources=1.0, costs=1.0, quality=1.0, scope=1.0) -> PrimaryAreas:
    return PrimaryAreas(
        resources=area_result(KnowledgeArea.RESOURCES, resources),
        costs=area_result(KnowledgeArea.COSTS, costs),
        quality=area_result(KnowledgeArea.QUALITY, quality),
        scope=area_result(KnowledgeArea.SCOPE, scope),
    )


class TestDefaultWeights:
    """Default weights: resources 0.25, costs 0.20, quality 0.15, scope 0.10."""

    def test_normalised_by_weight_sum(self):
        overall = ComplexityAggregator().aggregate(primary_areas(5.0, 5.0, 1.0, 1.0))
        # (0.25 * 5 + 0.20 * 5 + 0.15 + 0.10) / 0.70
        assert overall == pytest.approx(2.5 / 0.7, abs=1e-4)

    def test_all_ones(self):
        assert ComplexityAggregator().aggregate(primary_areas()) == 1.0

    def test_all_fives(self):
        assert ComplexityAggregator().aggregate(primary_areas(5.0, 5.0, 5.0, 5.0)) == 5.0

    @pytest.mark.parametrize("scores", [
        (1.0, 5.0, 1.0, 5.0),
        (2.3, 4.1, 3.3, 1.0),
        (5.0, 1.0, 5.0, 1.0),
    ])
    def test_stays_within_scale(self, scores):
        overall = ComplexityAggregator().aggregate(primary_areas(*scores))
        assert min(scores) <= overall <= max(scores)
        assert 1.0 <= overall <= 5.0


class TestCustomWeights:
    """Tuned weights are accepted and still normalised."""

    def test_weights_summing_above_one(self):
        aggregator = ComplexityAggregator({"resources": 2.0, "costs": 2.0, "quality": 0.0, "scope": 0.0})
        assert aggregator.aggregate(primary_areas(5.0, 3.0, 1.0, 1.0)) == 4.0

    def test_subset_of_areas(self):
        aggregator = ComplexityAggregator({KnowledgeArea.QUALITY: 1.0})
        assert aggregator.aggregate(primary_areas(1.0, 1.0, 4.5, 1.0)) == 4.5

    def test_mapping_input(self):
        results = {
            "costs": area_result(KnowledgeArea.COSTS, 4.0),
            KnowledgeArea.RESOURCES: area_result(KnowledgeArea.RESOURCES, 2.0),
        }
        aggregator = ComplexityAggregator({"resources": 1.0, "costs": 1.0})
        assert aggregator.aggregate(results) == 3.0

    def test_secondary_weight_rejected(self):
        with pytest.raises(UnknownKnowledgeAreaError):
            ComplexityAggregator({"risk": 0.5})

    def test_secondary_result_rejected(self):
        aggregator = ComplexityAggregator()
        with pytest.raises(UnknownKnowledgeAreaError):
            aggregator.aggregate({"schedule": area_result(KnowledgeArea.SCHEDULE, 3.0)})

    def test_unknown_area_rejected(self):
        with pytest.raises(UnknownKnowledgeAreaError):
            ComplexityAggregator({"marketing": 0.5})

    def test_negative_weight_rejected(self):
        with pytest.raises(ConfigurationError):
            ComplexityAggregator({"resources": -0.1, "costs": 1.0})

    def test_zero_total_weight_rejected(self):
        aggregator = ComplexityAggregator({"resources": 0.0, "costs": 0.0})
        with pytest.raises(ConfigurationError):
            aggregator.aggregate(primary_areas(3.0, 3.0))
