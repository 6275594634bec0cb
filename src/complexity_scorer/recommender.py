"""Recommendation Synthesizer - Phase 6 of the Complexity Engine.

Turns area complexity into a prioritised list of documents to produce.
"""

from typing import Optional, Sequence

from .config import PriorityConfig
from .schema import (
    AREA_DOCUMENTS,
    ComplexityLevel,
    DocumentationRecommendation,
    KnowledgeAreaComplexity,
    PrimaryAreas,
    Priority,
    ProfileSummary,
    SecondaryAreas,
)


class RecommendationSynthesizer:
    """Generates documentation recommendations from scored areas.

    Principles:
    - One recommendation per document type of each area needing documentation
    - Priority follows the area score, not the area kind
    - Ordering is by priority only; equal priorities keep area order
      (primary before secondary, each in declaration order)
    """

    def __init__(self, priority: Optional[PriorityConfig] = None):
        """Initialize synthesizer with optional priority cutoffs."""
        self.priority = priority or PriorityConfig()

    def priority_for(self, score: float) -> Priority:
        """Map an area score to a documentation priority."""
        if score >= self.priority.critical_cutoff:
            return Priority.CRITICAL
        if score >= self.priority.high_cutoff:
            return Priority.HIGH
        if score >= self.priority.medium_cutoff:
            return Priority.MEDIUM
        return Priority.LOW

    def synthesize(
        self,
        primary: PrimaryAreas,
        secondary: SecondaryAreas,
    ) -> list[DocumentationRecommendation]:
        """Build the sorted recommendation list.

        Args:
            primary: Scored primary areas
            secondary: Derived secondary areas

        Returns:
            Recommendations by non-increasing priority
        """
        recommendations: list[DocumentationRecommendation] = []

        for result in primary.areas():
            if result.documentation_required:
                recommendations.extend(self._for_area(
                    result,
                    reason=(
                        f"Required for {result.area.value} management "
                        f"(complexity: {result.complexity_score:.1f}/5)"
                    ),
                    trigger=f"{result.area.value} complexity",
                ))

        for result in secondary.areas():
            if result.documentation_required:
                drivers = ", ".join(a.value for a in result.driven_by)
                recommendations.extend(self._for_area(
                    result,
                    reason=(
                        f"Triggered by primary area complexity: {drivers} "
                        f"({result.area.value} complexity: {result.complexity_score:.1f}/5)"
                    ),
                    trigger=drivers,
                ))

        # list.sort is stable, so ties keep insertion order
        recommendations.sort(key=lambda r: -r.priority.weight)
        return recommendations

    def _for_area(
        self,
        result: KnowledgeAreaComplexity,
        reason: str,
        trigger: str,
    ) -> list[DocumentationRecommendation]:
        priority = self.priority_for(result.complexity_score)
        return [
            DocumentationRecommendation(
                knowledge_area=result.area,
                document_types=(document,),
                priority=priority,
                reason=reason,
                complexity_trigger=trigger,
            )
            for document in AREA_DOCUMENTS[result.area]
        ]

    def summarize(
        self,
        primary: PrimaryAreas,
        secondary: SecondaryAreas,
        recommendations: Sequence[DocumentationRecommendation],
        overall_level: ComplexityLevel,
    ) -> ProfileSummary:
        """Headline counts for a profile."""
        return ProfileSummary(
            overall_level=overall_level,
            primary_areas_requiring_documentation=sum(
                1 for r in primary.areas() if r.documentation_required
            ),
            secondary_areas_requiring_documentation=sum(
                1 for r in secondary.areas() if r.documentation_required
            ),
            recommendation_count=len(recommendations),
            priority_counts={
                p: sum(1 for r in recommendations if r.priority == p) for p in Priority
            },
        )
