"""Complexity Engine - runs the scoring pipeline for one or many projects.

Phases:
1. Normalize the raw project record
2-3. Score each primary knowledge area against its rubric
4. Aggregate primary scores into overall complexity
5. Derive the secondary areas
6. Synthesize documentation recommendations
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Mapping, Optional, Union

from .aggregator import ComplexityAggregator
from .area_scorer import KnowledgeAreaScorer
from .catalog import RubricCatalog, ensure_valid, get_default_catalog, load_rubric_catalog
from .config import ScorerConfig, get_config
from .normalizer import ProjectNormalizer
from .recommender import RecommendationSynthesizer
from .schema import (
    KnowledgeArea,
    KnowledgeAreaComplexity,
    PrimaryAreas,
    ProjectAttributes,
    ProjectComplexityProfile,
)
from .secondary_deriver import SecondaryAreaDeriver

logger = logging.getLogger(__name__)

ProjectInput = Union[ProjectAttributes, Mapping[str, Any]]


class ComplexityEngine:
    """Scores projects and recommends PMBOK documentation.

    The engine holds no per-project state; a single instance may analyze
    projects from several threads at once.
    """

    def __init__(
        self,
        catalog: Optional[RubricCatalog] = None,
        config: Optional[ScorerConfig] = None,
    ):
        """Initialize the engine.

        Args:
            catalog: Rubric catalog. Defaults to the catalog named in the
                config, or the packaged catalog.
            config: Engine configuration. Defaults to the global config.
        """
        self.config = config or get_config()

        if catalog is not None:
            self.catalog = ensure_valid(catalog)
        elif self.config.rubric_catalog_path:
            self.catalog = load_rubric_catalog(self.config.rubric_catalog_path)
        else:
            self.catalog = get_default_catalog()

        self.normalizer = ProjectNormalizer()
        self.area_scorer = KnowledgeAreaScorer()
        self.aggregator = ComplexityAggregator(self.config.primary_weights.as_mapping())
        self.deriver = SecondaryAreaDeriver(
            self.config.secondary_derivation,
            self.catalog.default_thresholds,
            self.config.secondary_weights,
        )
        self.synthesizer = RecommendationSynthesizer(self.config.priority)

    def analyze(self, project: ProjectInput) -> ProjectComplexityProfile:
        """Analyze one project.

        Args:
            project: ProjectAttributes or a raw project record

        Returns:
            The project's complexity profile
        """
        attributes = self._attributes(project)

        primary = PrimaryAreas(**{
            area.value: self.score_area(area, attributes)
            for area in KnowledgeArea.primary()
        })
        overall = self.aggregator.aggregate(primary)
        secondary = self.deriver.derive(primary, attributes)
        recommendations = self.synthesizer.synthesize(primary, secondary)
        overall_level = self.catalog.default_thresholds.level_for(overall)

        profile = ProjectComplexityProfile(
            rubric_version=self.catalog.version,
            project_id=attributes.project_id,
            project_name=attributes.project_name,
            primary_areas=primary,
            secondary_areas=secondary,
            overall_complexity=overall,
            documentation_recommendations=tuple(recommendations),
            summary=self.synthesizer.summarize(primary, secondary, recommendations, overall_level),
        )

        logger.info(
            "Complexity analysis for %s: overall %.2f (%s), %d recommendations",
            attributes.project_id, overall, overall_level.value, len(recommendations),
        )
        return profile

    def analyze_many(
        self,
        projects: Iterable[ProjectInput],
        max_workers: Optional[int] = None,
    ) -> list[ProjectComplexityProfile]:
        """Analyze several projects concurrently.

        Results are returned in input order. The first failing project
        raises and no partial list is returned.
        """
        projects = list(projects)
        if not projects:
            return []
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.analyze, projects))

    def score_area(
        self,
        area: Union[KnowledgeArea, str],
        attributes: ProjectInput,
    ) -> KnowledgeAreaComplexity:
        """Score a single primary knowledge area.

        Raises:
            UnknownKnowledgeAreaError: For unknown tags and secondary areas
        """
        rubric = self.catalog.get_rubric(area)
        return self.area_scorer.score_area(rubric, self._attributes(attributes))

    def _attributes(self, project: ProjectInput) -> ProjectAttributes:
        if isinstance(project, ProjectAttributes):
            return project
        return self.normalizer.normalize(project)
