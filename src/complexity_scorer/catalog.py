"""Rubric Catalog - static, versioned scoring rubrics.

Loads the rubric catalog from YAML, validates it, and exposes area lookup.
A malformed catalog is a configuration error and aborts loading.
"""

import logging
import threading
from importlib import resources
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import CatalogValidationError, UnknownKnowledgeAreaError
from .schema import (
    AREA_DOCUMENTS,
    ATTRIBUTE_MEASURES,
    ComplexityThresholds,
    KnowledgeArea,
    KnowledgeAreaRubric,
)

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 1e-6
LEVELS = (1, 2, 3, 4, 5)


def resolve_area(area: Union[KnowledgeArea, str]) -> KnowledgeArea:
    """Resolve a knowledge area tag, failing fast outside the closed set."""
    if isinstance(area, KnowledgeArea):
        return area
    try:
        return KnowledgeArea(area)
    except ValueError:
        raise UnknownKnowledgeAreaError(area) from None


class RubricCatalog(BaseModel):
    """Immutable set of rubrics, one per primary knowledge area."""
    model_config = ConfigDict(frozen=True)

    version: str
    default_thresholds: ComplexityThresholds = Field(
        default_factory=ComplexityThresholds,
        description="Thresholds for secondary areas and the overall score"
    )
    rubrics: tuple[KnowledgeAreaRubric, ...]

    @property
    def areas(self) -> tuple[KnowledgeArea, ...]:
        return tuple(rubric.area for rubric in self.rubrics)

    def get_rubric(self, area: Union[KnowledgeArea, str]) -> KnowledgeAreaRubric:
        """Get the rubric for a primary area.

        Raises:
            UnknownKnowledgeAreaError: For tags outside the closed set and for
                areas that have no rubric (the secondary areas).
        """
        resolved = resolve_area(area)
        for rubric in self.rubrics:
            if rubric.area == resolved:
                return rubric
        raise UnknownKnowledgeAreaError(
            resolved, f"No rubric for knowledge area: {resolved.value}"
        )


def _check_thresholds(label: str, thresholds: ComplexityThresholds) -> list[str]:
    cutoffs = [thresholds.minimal, thresholds.moderate, thresholds.high, thresholds.critical]
    if cutoffs != sorted(cutoffs):
        return [f"{label}: thresholds must be non-decreasing, got {cutoffs}"]
    return []


def _check_rubric(rubric: KnowledgeAreaRubric) -> list[str]:
    area = rubric.area.value
    problems = _check_thresholds(f"{area} rubric", rubric.thresholds)

    if not rubric.factors:
        problems.append(f"{area} rubric has no factors")
        return problems

    total_weight = sum(f.weight for f in rubric.factors)
    if abs(total_weight - 1.0) > WEIGHT_TOLERANCE:
        problems.append(f"{area} rubric factor weights sum to {total_weight:.4f}, expected 1.0")

    names = [f.name for f in rubric.factors]
    for name in sorted({n for n in names if names.count(n) > 1}):
        problems.append(f"{area} rubric has duplicate factor '{name}'")

    for factor in rubric.factors:
        label = f"{area}/{factor.name}"
        if factor.attribute not in ATTRIBUTE_MEASURES:
            problems.append(f"{label}: unknown project attribute '{factor.attribute}'")

        levels = tuple(c.level for c in factor.criteria)
        if levels != LEVELS:
            problems.append(f"{label}: expected levels {list(LEVELS)} in order, got {list(levels)}")
            continue

        bounds = [c.min_value for c in factor.criteria]
        if any(lower >= upper for lower, upper in zip(bounds, bounds[1:])):
            problems.append(f"{label}: level bounds must be strictly ascending, got {bounds}")

        for criteria in factor.criteria:
            primary = [a.value for a in criteria.secondary_triggers if a.is_primary]
            if primary:
                problems.append(
                    f"{label} level {criteria.level}: triggers must be secondary areas, got {primary}"
                )

    return problems


def validate_catalog(catalog: RubricCatalog) -> list[str]:
    """Check a catalog against the structural rules scoring relies on.

    Returns:
        A list of problems; empty when the catalog is valid.
    """
    problems = _check_thresholds("default", catalog.default_thresholds)

    areas = list(catalog.areas)
    for area in KnowledgeArea.primary():
        count = areas.count(area)
        if count == 0:
            problems.append(f"missing rubric for primary area '{area.value}'")
        elif count > 1:
            problems.append(f"duplicate rubrics for primary area '{area.value}'")
    for area in KnowledgeArea.secondary():
        if area in areas:
            problems.append(f"secondary area '{area.value}' must not have a rubric")

    for rubric in catalog.rubrics:
        problems.extend(_check_rubric(rubric))

    for area in KnowledgeArea:
        if not AREA_DOCUMENTS.get(area):
            problems.append(f"no document types mapped for area '{area.value}'")

    return problems


def ensure_valid(catalog: RubricCatalog) -> RubricCatalog:
    """Return the catalog unchanged, or raise CatalogValidationError."""
    problems = validate_catalog(catalog)
    if problems:
        raise CatalogValidationError(problems)
    return catalog


def load_rubric_catalog(path: Optional[Union[str, Path]] = None) -> RubricCatalog:
    """Load and validate a rubric catalog.

    Args:
        path: YAML catalog file. Defaults to the catalog shipped with the package.

    Raises:
        CatalogValidationError: If the file cannot be parsed or fails validation.
    """
    if path is None:
        source = "packaged rubrics.yaml"
        text = resources.files("complexity_scorer").joinpath("data/rubrics.yaml").read_text(encoding="utf-8")
    else:
        source = str(path)
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise CatalogValidationError([f"cannot read {source}: {e}"]) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CatalogValidationError([f"{source} is not valid YAML: {e}"]) from e

    if not isinstance(data, dict):
        raise CatalogValidationError([f"{source} must contain a mapping at the top level"])

    try:
        catalog = RubricCatalog.model_validate(data)
    except ValidationError as e:
        raise CatalogValidationError(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ) from e

    ensure_valid(catalog)
    logger.info(
        "Loaded rubric catalog %s with %d rubrics from %s",
        catalog.version, len(catalog.rubrics), source,
    )
    return catalog


_default_catalog: Optional[RubricCatalog] = None
_default_catalog_lock = threading.Lock()


def get_default_catalog() -> RubricCatalog:
    """Get the packaged catalog, loading it once on first use."""
    global _default_catalog
    if _default_catalog is None:
        with _default_catalog_lock:
            if _default_catalog is None:
                _default_catalog = load_rubric_catalog()
    return _default_catalog
