"""Secondary-Area Deriver - Phase 5 of the Complexity Engine.

Secondary areas are not rated directly. Each is derived from one or more
primary scores, scaled by a coefficient and a contextual multiplier taken
from the project attributes, then bounded to [1, 5].
"""

import logging
from typing import Optional, Sequence

from .area_scorer import clamp_score, level_label
from .config import MultiplierStep, SecondaryDerivationConfig, SecondaryWeightsConfig
from .schema import (
    ComplexityFactor,
    ComplexityThresholds,
    KnowledgeArea,
    KnowledgeAreaComplexity,
    PrimaryAreas,
    ProjectAttributes,
    SecondaryAreas,
    TimeConstraint,
)

logger = logging.getLogger(__name__)


def step_multiplier(count: int, steps: Sequence[MultiplierStep]) -> float:
    """Multiplier of the highest step whose ``above`` the count exceeds."""
    multiplier = 1.0
    for step in sorted(steps, key=lambda s: s.above):
        if count > step.above:
            multiplier = step.multiplier
    return multiplier


class SecondaryAreaDeriver:
    """Derives the six secondary areas from primary scores.

    Secondary documentation is gated on the moderate threshold, a stricter
    gate than the minimal threshold used for primary areas. Each result
    carries its configured reporting weight; the weights never change a score.
    """

    def __init__(
        self,
        config: Optional[SecondaryDerivationConfig] = None,
        thresholds: Optional[ComplexityThresholds] = None,
        weights: Optional[SecondaryWeightsConfig] = None,
    ):
        self.config = config or SecondaryDerivationConfig()
        self.thresholds = thresholds or ComplexityThresholds()
        self.weights = (weights or SecondaryWeightsConfig()).as_mapping()

    def derive(self, primary: PrimaryAreas, attributes: ProjectAttributes) -> SecondaryAreas:
        """Derive all secondary areas.

        Args:
            primary: Scored primary areas
            attributes: Normalized project attributes (context multipliers)

        Returns:
            Secondary area results
        """
        return SecondaryAreas(
            integration=self._integration(primary),
            schedule=self._schedule(primary, attributes),
            communication=self._communication(primary, attributes),
            risk=self._risk(primary),
            procurement=self._procurement(primary, attributes),
            stakeholder=self._stakeholder(primary, attributes),
        )

    def _integration(self, primary: PrimaryAreas) -> KnowledgeAreaComplexity:
        coefficient = self.config.integration_factor
        top = max(primary.areas(), key=lambda r: r.complexity_score)
        factor = ComplexityFactor(
            name=f"{top.area.value.title()} complexity",
            weight=coefficient,
            score=top.complexity_score,
            description=f"Highest primary area score x {coefficient}",
        )
        return self._build(
            KnowledgeArea.INTEGRATION,
            top.complexity_score * coefficient,
            (factor,),
            KnowledgeArea.primary(),
            primary,
        )

    def _schedule(self, primary: PrimaryAreas, attributes: ProjectAttributes) -> KnowledgeAreaComplexity:
        coefficient = self.config.schedule_factor
        time_constraint = attributes.time_constraints
        if time_constraint is None:
            logger.debug("No time_constraints for project %s; assuming standard", attributes.project_id)
            time_constraint = TimeConstraint.STANDARD
        multiplier = self.config.time_multipliers.get(time_constraint.value, 1.0)
        return self._scaled(
            KnowledgeArea.SCHEDULE, primary.resources, coefficient, multiplier,
            f"{time_constraint.value} time constraints", primary,
        )

    def _communication(self, primary: PrimaryAreas, attributes: ProjectAttributes) -> KnowledgeAreaComplexity:
        coefficient = self.config.communication_factor
        count = attributes.stakeholder_count
        if count is None:
            logger.debug("No stakeholder_count for project %s; assuming 1", attributes.project_id)
            count = 1
        multiplier = step_multiplier(count, self.config.stakeholder_count_steps)
        return self._scaled(
            KnowledgeArea.COMMUNICATION, primary.resources, coefficient, multiplier,
            f"{count} stakeholders", primary,
        )

    def _risk(self, primary: PrimaryAreas) -> KnowledgeAreaComplexity:
        coefficient = self.config.risk_factor
        sources = (primary.costs, primary.quality, primary.scope)
        mean = sum(r.complexity_score for r in sources) / len(sources)
        factors = tuple(
            ComplexityFactor(
                name=f"{r.area.value.title()} complexity",
                weight=coefficient / len(sources),
                score=r.complexity_score,
                description=f"Mean of costs, quality and scope scores x {coefficient}",
            )
            for r in sources
        )
        return self._build(
            KnowledgeArea.RISK,
            mean * coefficient,
            factors,
            tuple(r.area for r in sources),
            primary,
        )

    def _procurement(self, primary: PrimaryAreas, attributes: ProjectAttributes) -> KnowledgeAreaComplexity:
        coefficient = self.config.procurement_factor
        count = attributes.vendor_count
        if count is None:
            logger.debug("No vendor_count for project %s; assuming 0", attributes.project_id)
            count = 0
        multiplier = step_multiplier(count, self.config.vendor_count_steps)
        return self._scaled(
            KnowledgeArea.PROCUREMENT, primary.costs, coefficient, multiplier,
            f"{count} vendors", primary,
        )

    def _stakeholder(self, primary: PrimaryAreas, attributes: ProjectAttributes) -> KnowledgeAreaComplexity:
        coefficient = self.config.stakeholder_factor
        count = attributes.stakeholder_type_count
        if count is None:
            logger.debug("No stakeholder_type_count for project %s; assuming 1", attributes.project_id)
            count = 1
        multiplier = step_multiplier(count, self.config.stakeholder_type_steps)
        return self._scaled(
            KnowledgeArea.STAKEHOLDER, primary.scope, coefficient, multiplier,
            f"{count} stakeholder types", primary,
        )

    def _scaled(
        self,
        area: KnowledgeArea,
        source: KnowledgeAreaComplexity,
        coefficient: float,
        multiplier: float,
        context: str,
        primary: PrimaryAreas,
    ) -> KnowledgeAreaComplexity:
        """Area driven by a single primary score and a context multiplier."""
        factor = ComplexityFactor(
            name=f"{source.area.value.title()} complexity",
            weight=coefficient,
            score=source.complexity_score,
            description=f"{source.area.value.title()} score x {coefficient} x {multiplier} ({context})",
        )
        return self._build(
            area,
            source.complexity_score * coefficient * multiplier,
            (factor,),
            (source.area,),
            primary,
        )

    def _build(
        self,
        area: KnowledgeArea,
        raw_score: float,
        factors: tuple[ComplexityFactor, ...],
        driven_by: tuple[KnowledgeArea, ...],
        primary: PrimaryAreas,
    ) -> KnowledgeAreaComplexity:
        score = clamp_score(raw_score)
        level = self.thresholds.level_for(score)
        triggered_by = tuple(r.area for r in primary.areas() if area in r.secondary_triggers)

        reasoning = (
            f"Derived from {', '.join(a.value for a in driven_by)}: "
            f"{level_label(level)} complexity ({score:.1f}/5)"
        )
        if triggered_by:
            reasoning += f"; flagged by high-scoring {', '.join(a.value for a in triggered_by)} factors"

        return KnowledgeAreaComplexity(
            area=area,
            complexity_score=score,
            complexity_level=level,
            factors=factors,
            documentation_required=score >= self.thresholds.moderate,
            driven_by=driven_by,
            triggered_by=triggered_by,
            weight=self.weights[area],
            reasoning=reasoning,
        )
