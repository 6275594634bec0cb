"""Complexity Aggregator - Phase 4 of the Complexity Engine.

Combines the primary area scores into the overall project complexity.
"""

from typing import Mapping, Optional, Union

from .area_scorer import clamp_score
from .catalog import resolve_area
from .config import PrimaryWeightsConfig
from .exceptions import ConfigurationError, UnknownKnowledgeAreaError
from .schema import KnowledgeArea, KnowledgeAreaComplexity, PrimaryAreas


class ComplexityAggregator:
    """Weighted average of primary area scores.

    The result is normalised by the sum of the weights actually applied, so
    it stays within [1, 5] whatever the configured weights add up to.
    """

    def __init__(self, weights: Optional[Mapping[Union[KnowledgeArea, str], float]] = None):
        """Initialize aggregator with optional custom primary weights."""
        if weights is None:
            weights = PrimaryWeightsConfig().as_mapping()
        resolved = {resolve_area(area): float(weight) for area, weight in weights.items()}
        for area, weight in resolved.items():
            if not area.is_primary:
                raise UnknownKnowledgeAreaError(area, f"Not a primary area: {area.value}")
            if weight < 0:
                raise ConfigurationError(f"Primary weight for {area.value} must not be negative")
        self.weights = resolved

    def aggregate(
        self,
        primary: Union[PrimaryAreas, Mapping[KnowledgeArea, KnowledgeAreaComplexity]],
    ) -> float:
        """Calculate overall complexity.

        Args:
            primary: Primary area results, as PrimaryAreas or keyed by area

        Returns:
            Overall complexity in [1, 5]

        Raises:
            UnknownKnowledgeAreaError: If a non-primary area is supplied
            ConfigurationError: If no supplied area carries a positive weight
        """
        if isinstance(primary, PrimaryAreas):
            results = primary.areas()
        else:
            results = []
            for key, result in primary.items():
                area = resolve_area(key)
                if not area.is_primary:
                    raise UnknownKnowledgeAreaError(area, f"Not a primary area: {area.value}")
                results.append(result)
            results.sort(key=lambda r: r.area.order)

        weighted_sum = 0.0
        total_weight = 0.0
        for result in results:
            weight = self.weights.get(result.area, 0.0)
            weighted_sum += result.complexity_score * weight
            total_weight += weight

        if total_weight <= 0:
            raise ConfigurationError("No positive primary weight applies to the supplied areas")

        return clamp_score(weighted_sum / total_weight)
