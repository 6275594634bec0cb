"""Knowledge-Area Scorer - Phase 3 of the Complexity Engine.

Aggregates a rubric's factor levels into one weighted area score and
determines documentation need and triggered secondary areas.
"""

from typing import Optional

from .factor_scorer import FactorMatch, FactorScorer
from .schema import (
    ComplexityLevel,
    KnowledgeArea,
    KnowledgeAreaComplexity,
    KnowledgeAreaRubric,
    ProjectAttributes,
    RubricFactor,
)

MIN_SCORE = 1.0
MAX_SCORE = 5.0
SCORE_PRECISION = 4


def clamp_score(value: float) -> float:
    """Bound a score to [1, 5], rounding off float noise."""
    return round(min(MAX_SCORE, max(MIN_SCORE, value)), SCORE_PRECISION)


def level_label(level: ComplexityLevel) -> str:
    return level.value.replace("_", " ").title()


class KnowledgeAreaScorer:
    """Scores a primary knowledge area against its rubric.

    Scoring rules:
    - The area score is the weight-normalised average of factor levels
    - Documentation is required once the score reaches the minimal threshold
    - Only factors scoring at or above the high threshold propagate their
      matched level's secondary triggers. A high aggregate alone triggers
      nothing.
    """

    def __init__(self, factor_scorer: Optional[FactorScorer] = None):
        self.factor_scorer = factor_scorer or FactorScorer()

    def score_area(
        self,
        rubric: KnowledgeAreaRubric,
        attributes: ProjectAttributes,
    ) -> KnowledgeAreaComplexity:
        """Score one knowledge area.

        Args:
            rubric: Rubric of the area to score
            attributes: Normalized project attributes

        Returns:
            The area's complexity with its factor breakdown
        """
        matches = [(factor, self.factor_scorer.score(factor, attributes)) for factor in rubric.factors]

        weighted_sum = sum(match.level * factor.weight for factor, match in matches)
        total_weight = sum(factor.weight for factor, _ in matches)
        score = clamp_score(weighted_sum / total_weight) if total_weight > 0 else MIN_SCORE

        level = rubric.thresholds.level_for(score)

        return KnowledgeAreaComplexity(
            area=rubric.area,
            complexity_score=score,
            complexity_level=level,
            factors=tuple(self.factor_scorer.to_complexity_factor(f, m) for f, m in matches),
            documentation_required=score >= rubric.thresholds.minimal,
            secondary_triggers=self._secondary_triggers(rubric, matches),
            reasoning=self._reasoning(rubric.area, matches, score, level),
        )

    def _secondary_triggers(
        self,
        rubric: KnowledgeAreaRubric,
        matches: list[tuple[RubricFactor, FactorMatch]],
    ) -> tuple[KnowledgeArea, ...]:
        """Union of triggers declared on high-scoring factors' matched levels."""
        triggered: set[KnowledgeArea] = set()
        for _, match in matches:
            if match.level >= rubric.thresholds.high:
                triggered.update(match.criteria.secondary_triggers)
        return tuple(sorted(triggered, key=lambda area: area.order))

    def _reasoning(
        self,
        area: KnowledgeArea,
        matches: list[tuple[RubricFactor, FactorMatch]],
        score: float,
        level: ComplexityLevel,
    ) -> str:
        top_level = max(match.level for _, match in matches)
        drivers = [factor.name for factor, match in matches if match.level == top_level]
        return (
            f"Based on {area.value} analysis: {level_label(level)} complexity "
            f"({score:.1f}/5) driven by {', '.join(drivers)}"
        )
