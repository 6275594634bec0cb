"""Factor Scorer - Phase 2 of the Complexity Engine.

Resolves one rubric factor to a level (1-5) for a project.
"""

import logging
from typing import NamedTuple, Optional

from .schema import ComplexityFactor, ProjectAttributes, RubricFactor, ScoringCriteria

logger = logging.getLogger(__name__)


class FactorMatch(NamedTuple):
    """Level a factor resolved to, with the criteria that matched."""
    level: int
    criteria: ScoringCriteria
    measure: Optional[float]


class FactorScorer:
    """Matches project attributes against a factor's level buckets.

    Each level's ``min_value`` is the lower bound of its bucket; the factor
    scores at the highest level whose bound the attribute meets. A missing
    attribute scores level 1.
    """

    def score(self, factor: RubricFactor, attributes: ProjectAttributes) -> FactorMatch:
        """Score a factor.

        Args:
            factor: Rubric factor with five ordered criteria
            attributes: Normalized project attributes

        Returns:
            The matched level and criteria
        """
        lowest = factor.criteria[0]
        measure = attributes.measure(factor.attribute)

        if measure is None:
            logger.debug(
                "No %s for project %s; %s defaults to level %d",
                factor.attribute, attributes.project_id, factor.name, lowest.level,
            )
            return FactorMatch(lowest.level, lowest, None)

        matched = lowest
        for criteria in factor.criteria:
            if measure >= criteria.min_value:
                matched = criteria

        return FactorMatch(matched.level, matched, measure)

    def to_complexity_factor(self, factor: RubricFactor, match: FactorMatch) -> ComplexityFactor:
        """Describe a factor match as a scoring result."""
        if match.measure is None:
            detail = f"no {factor.attribute} supplied; defaulted to level {match.level}"
        else:
            detail = f"{factor.attribute}={_format_measure(match.measure)}"
        return ComplexityFactor(
            name=factor.name,
            weight=factor.weight,
            score=float(match.level),
            description=f"{match.criteria.description} ({detail})",
        )


def _format_measure(value: float) -> str:
    if value.is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"
