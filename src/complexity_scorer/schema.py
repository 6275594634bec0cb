"""Pydantic models for the Complexity Scoring Engine.

Rubric catalog models (static, loaded once), the project attributes input
record, and the scoring result models returned to callers.
"""

import logging
import math
import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

logger = logging.getLogger(__name__)


# =============================================================================
# Knowledge Areas and Document Types
# =============================================================================


class KnowledgeArea(str, Enum):
    """PMBOK knowledge areas, primary areas first.

    Declaration order is the fixed evaluation and reporting order.
    """
    RESOURCES = "resources"
    COSTS = "costs"
    QUALITY = "quality"
    SCOPE = "scope"
    INTEGRATION = "integration"
    SCHEDULE = "schedule"
    COMMUNICATION = "communication"
    RISK = "risk"
    PROCUREMENT = "procurement"
    STAKEHOLDER = "stakeholder"

    @property
    def is_primary(self) -> bool:
        """Primary areas are measured directly from project attributes."""
        return self in PRIMARY_AREAS

    @property
    def order(self) -> int:
        return list(KnowledgeArea).index(self)

    @classmethod
    def primary(cls) -> tuple["KnowledgeArea", ...]:
        return PRIMARY_AREAS

    @classmethod
    def secondary(cls) -> tuple["KnowledgeArea", ...]:
        return SECONDARY_AREAS


PRIMARY_AREAS = (
    KnowledgeArea.RESOURCES,
    KnowledgeArea.COSTS,
    KnowledgeArea.QUALITY,
    KnowledgeArea.SCOPE,
)

SECONDARY_AREAS = (
    KnowledgeArea.INTEGRATION,
    KnowledgeArea.SCHEDULE,
    KnowledgeArea.COMMUNICATION,
    KnowledgeArea.RISK,
    KnowledgeArea.PROCUREMENT,
    KnowledgeArea.STAKEHOLDER,
)


class DocumentType(str, Enum):
    """Project documents the engine can recommend."""
    SCOPE_STATEMENT = "scope-statement"
    WBS = "wbs"
    WBS_DICTIONARY = "wbs-dictionary"
    RESOURCE_MANAGEMENT_PLAN = "resource-management-plan"
    COST_MANAGEMENT_PLAN = "cost-management-plan"
    BUDGET = "budget"
    QUALITY_MANAGEMENT_PLAN = "quality-management-plan"
    QUALITY_CHECKLISTS = "quality-checklists"
    QUALITY_METRICS = "quality-metrics"
    SCHEDULE_MANAGEMENT_PLAN = "schedule-management-plan"
    PROJECT_SCHEDULE = "project-schedule"
    MILESTONE_LIST = "milestone-list"
    COMMUNICATION_MANAGEMENT_PLAN = "communication-management-plan"
    STAKEHOLDER_ENGAGEMENT_PLAN = "stakeholder-engagement-plan"
    RISK_MANAGEMENT_PLAN = "risk-management-plan"
    RISK_REGISTER = "risk-register"
    PROCUREMENT_MANAGEMENT_PLAN = "procurement-management-plan"
    INTEGRATION_MANAGEMENT_PLAN = "integration-management-plan"
    CHANGE_MANAGEMENT_PLAN = "change-management-plan"


# Every knowledge area maps to its documents; completeness is checked by
# catalog validation and the test suite.
AREA_DOCUMENTS: dict[KnowledgeArea, tuple[DocumentType, ...]] = {
    KnowledgeArea.RESOURCES: (DocumentType.RESOURCE_MANAGEMENT_PLAN,),
    KnowledgeArea.COSTS: (DocumentType.COST_MANAGEMENT_PLAN, DocumentType.BUDGET),
    KnowledgeArea.QUALITY: (
        DocumentType.QUALITY_MANAGEMENT_PLAN,
        DocumentType.QUALITY_CHECKLISTS,
        DocumentType.QUALITY_METRICS,
    ),
    KnowledgeArea.SCOPE: (
        DocumentType.SCOPE_STATEMENT,
        DocumentType.WBS,
        DocumentType.WBS_DICTIONARY,
    ),
    KnowledgeArea.INTEGRATION: (
        DocumentType.INTEGRATION_MANAGEMENT_PLAN,
        DocumentType.CHANGE_MANAGEMENT_PLAN,
    ),
    KnowledgeArea.SCHEDULE: (
        DocumentType.SCHEDULE_MANAGEMENT_PLAN,
        DocumentType.PROJECT_SCHEDULE,
        DocumentType.MILESTONE_LIST,
    ),
    KnowledgeArea.COMMUNICATION: (DocumentType.COMMUNICATION_MANAGEMENT_PLAN,),
    KnowledgeArea.RISK: (DocumentType.RISK_MANAGEMENT_PLAN, DocumentType.RISK_REGISTER),
    KnowledgeArea.PROCUREMENT: (DocumentType.PROCUREMENT_MANAGEMENT_PLAN,),
    KnowledgeArea.STAKEHOLDER: (DocumentType.STAKEHOLDER_ENGAGEMENT_PLAN,),
}


class Priority(str, Enum):
    """Documentation priority, highest first."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        """Sort weight: critical=4 ... low=1."""
        return len(Priority) - list(Priority).index(self)


class ComplexityLevel(str, Enum):
    """Complexity label derived from a score and a rubric's thresholds."""
    VERY_LOW = "very_low"
    MINIMAL = "minimal"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


# =============================================================================
# Ordinal Project Attributes
# =============================================================================


class OrdinalLevel(str, Enum):
    """Qualitative attribute whose members are declared lowest first.

    The highest member always ranks 5; shorter scales start above 1, so a
    four-member scale ranks 2..5.
    """

    @property
    def rank(self) -> int:
        members = list(type(self))
        return members.index(self) + 6 - len(members)

    @classmethod
    def from_string(cls, value: Any) -> Optional["OrdinalLevel"]:
        """Parse a member from free text; None when it does not match."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = re.sub(r"[\s_]+", "-", value.strip().lower())
        for member in cls:
            if member.value == key:
                return member
        return None


class CostSensitivity(OrdinalLevel):
    """Level of cost control required."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FinancialReporting(OrdinalLevel):
    """Financial reporting requirement."""
    BASIC = "basic"
    STANDARD = "standard"
    DETAILED = "detailed"
    REGULATORY = "regulatory"


class RequirementLevel(OrdinalLevel):
    """Precision and change-management requirement."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"
    CRITICAL = "critical"


class AssuranceLevel(OrdinalLevel):
    """Testing and quality-assurance depth."""
    BASIC = "basic"
    STANDARD = "standard"
    COMPREHENSIVE = "comprehensive"
    EXTENSIVE = "extensive"
    EXHAUSTIVE = "exhaustive"


class ClarityLevel(OrdinalLevel):
    """How well scope or its boundaries are defined."""
    VERY_CLEAR = "very-clear"
    CLEAR = "clear"
    MODERATE = "moderate"
    UNCLEAR = "unclear"
    UNDEFINED = "undefined"


class TimeConstraint(OrdinalLevel):
    """Schedule pressure on the project."""
    STANDARD = "standard"
    TIGHT = "tight"
    CRITICAL = "critical"


# =============================================================================
# Project Attributes (engine input)
# =============================================================================


COUNT_FIELDS = (
    "team_size",
    "skill_count",
    "resource_constraint_count",
    "location_count",
    "external_dependency_count",
    "funding_source_count",
    "regulatory_requirement_count",
    "quality_standard_count",
    "deliverable_count",
    "inclusion_count",
    "exclusion_count",
    "stakeholder_count",
    "stakeholder_type_count",
    "vendor_count",
)

ORDINAL_FIELDS: dict[str, type[OrdinalLevel]] = {
    "cost_sensitivity": CostSensitivity,
    "reporting_requirements": FinancialReporting,
    "precision_requirements": RequirementLevel,
    "testing_requirements": AssuranceLevel,
    "qa_requirements": AssuranceLevel,
    "scope_definition": ClarityLevel,
    "scope_boundaries": ClarityLevel,
    "change_management": RequirementLevel,
    "time_constraints": TimeConstraint,
}

# Measures a rubric factor may read. Inclusion and exclusion criteria are
# scored together as one combined count.
ATTRIBUTE_MEASURES = frozenset(
    set(COUNT_FIELDS) | set(ORDINAL_FIELDS) | {"budget", "inclusion_exclusion_count"}
)

_AMOUNT_SUFFIXES = {"k": 1_000, "m": 1_000_000, "b": 1_000_000_000}


def _in_range(value: float) -> bool:
    """True for finite, non-negative numbers that fit in a float."""
    try:
        number = float(value)
    except OverflowError:
        return False
    return math.isfinite(number) and number >= 0


def coerce_count(value: Any, field: str = "count") -> Optional[int]:
    """Coerce a count or a collection of items to a non-negative int.

    Collections count their distinct items. Anything malformed becomes None.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        logger.debug("Ignoring boolean value for %s", field)
        return None
    if isinstance(value, (list, tuple, set, frozenset)):
        return len({str(item).strip() for item in value if item is not None and str(item).strip()})
    if isinstance(value, (int, float)):
        if not _in_range(value):
            logger.debug("Ignoring out-of-range value %r for %s", value, field)
            return None
        if value != int(value):
            logger.debug("Truncating fractional value %r for %s to %d", value, field, int(value))
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            logger.debug("Ignoring non-numeric value %r for %s", value, field)
            return None
        return coerce_count(number, field)
    logger.debug("Ignoring unsupported %s value for %s", type(value).__name__, field)
    return None


def coerce_amount(value: Any, field: str = "amount") -> Optional[float]:
    """Coerce a monetary amount such as 6000000, "$6,000,000" or "6M"."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not _in_range(value):
            logger.debug("Ignoring out-of-range value %r for %s", value, field)
            return None
        return float(value)
    if isinstance(value, str):
        text = value.strip().lower().replace(",", "").replace("$", "").replace(" ", "")
        if not text:
            return None
        multiplier = 1
        if text[-1] in _AMOUNT_SUFFIXES:
            multiplier = _AMOUNT_SUFFIXES[text[-1]]
            text = text[:-1]
        try:
            return coerce_amount(float(text) * multiplier, field)
        except ValueError:
            logger.debug("Ignoring non-numeric value %r for %s", value, field)
            return None
    logger.debug("Ignoring unsupported %s value for %s", type(value).__name__, field)
    return None


class ProjectAttributes(BaseModel):
    """Analyst-supplied project attributes.

    Every attribute is optional. Missing or malformed values are stored as
    None and score at the lowest complexity level; they never raise.
    Counts may be given as integers or as lists of items.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    project_id: str = "unknown"
    project_name: str = "Unnamed Project"

    # Resources
    team_size: Optional[int] = None
    skill_count: Optional[int] = None
    resource_constraint_count: Optional[int] = None
    location_count: Optional[int] = None
    external_dependency_count: Optional[int] = None

    # Costs
    budget: Optional[float] = None
    funding_source_count: Optional[int] = None
    cost_sensitivity: Optional[CostSensitivity] = None
    reporting_requirements: Optional[FinancialReporting] = None

    # Quality
    regulatory_requirement_count: Optional[int] = None
    quality_standard_count: Optional[int] = None
    precision_requirements: Optional[RequirementLevel] = None
    testing_requirements: Optional[AssuranceLevel] = None
    qa_requirements: Optional[AssuranceLevel] = None

    # Scope
    deliverable_count: Optional[int] = None
    scope_definition: Optional[ClarityLevel] = None
    inclusion_count: Optional[int] = None
    exclusion_count: Optional[int] = None
    scope_boundaries: Optional[ClarityLevel] = None
    change_management: Optional[RequirementLevel] = None

    # Context for secondary areas
    time_constraints: Optional[TimeConstraint] = None
    stakeholder_count: Optional[int] = None
    stakeholder_type_count: Optional[int] = None
    vendor_count: Optional[int] = None

    @field_validator("project_id", "project_name", mode="before")
    @classmethod
    def _coerce_identity(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return str(value)

    @field_validator(*COUNT_FIELDS, mode="before")
    @classmethod
    def _coerce_counts(cls, value: Any, info: ValidationInfo) -> Optional[int]:
        return coerce_count(value, info.field_name)

    @field_validator("budget", mode="before")
    @classmethod
    def _coerce_budget(cls, value: Any, info: ValidationInfo) -> Optional[float]:
        return coerce_amount(value, info.field_name)

    @field_validator(*ORDINAL_FIELDS, mode="before")
    @classmethod
    def _coerce_ordinals(cls, value: Any, info: ValidationInfo) -> Optional[OrdinalLevel]:
        if value is None:
            return None
        parsed = ORDINAL_FIELDS[info.field_name].from_string(value)
        if parsed is None:
            logger.debug("Ignoring unrecognised value %r for %s", value, info.field_name)
        return parsed

    def measure(self, name: str) -> Optional[float]:
        """Numeric measure a rubric factor compares against its bucket bounds.

        Ordinal attributes measure as their rank. Returns None for a gap.
        """
        if name not in ATTRIBUTE_MEASURES:
            raise ValueError(f"Unknown project attribute measure: {name}")
        if name == "inclusion_exclusion_count":
            if self.inclusion_count is None and self.exclusion_count is None:
                return None
            return float(self.inclusion_count or 0) + float(self.exclusion_count or 0)
        value = getattr(self, name)
        if value is None:
            return None
        if isinstance(value, OrdinalLevel):
            return float(value.rank)
        return float(value)


# =============================================================================
# Rubric Catalog Models
# =============================================================================


class ScoringCriteria(BaseModel):
    """One ordinal level (1-5) of a rubric factor."""
    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1, le=5)
    min_value: float = Field(..., description="Lower bound of the attribute bucket for this level")
    description: str
    indicators: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()
    documentation_required: bool = False
    secondary_triggers: tuple[KnowledgeArea, ...] = ()


class RubricFactor(BaseModel):
    """A weighted dimension of a knowledge area."""
    model_config = ConfigDict(frozen=True)

    name: str
    weight: float = Field(..., ge=0.0, le=1.0)
    description: str = ""
    attribute: str = Field(..., description="ProjectAttributes measure this factor reads")
    criteria: tuple[ScoringCriteria, ...]


class ComplexityThresholds(BaseModel):
    """Ascending score cutoffs for a knowledge area."""
    model_config = ConfigDict(frozen=True)

    minimal: float = Field(2.0, ge=1.0, le=5.0)
    moderate: float = Field(3.0, ge=1.0, le=5.0)
    high: float = Field(4.0, ge=1.0, le=5.0)
    critical: float = Field(5.0, ge=1.0, le=5.0)

    def level_for(self, score: float) -> ComplexityLevel:
        """Label a score against these cutoffs."""
        if score >= self.critical:
            return ComplexityLevel.CRITICAL
        if score >= self.high:
            return ComplexityLevel.HIGH
        if score >= self.moderate:
            return ComplexityLevel.MODERATE
        if score >= self.minimal:
            return ComplexityLevel.MINIMAL
        return ComplexityLevel.VERY_LOW


class KnowledgeAreaRubric(BaseModel):
    """Scoring rubric for one primary knowledge area."""
    model_config = ConfigDict(frozen=True)

    area: KnowledgeArea
    description: str = ""
    factors: tuple[RubricFactor, ...]
    thresholds: ComplexityThresholds = Field(default_factory=ComplexityThresholds)


# =============================================================================
# Scoring Result Models
# =============================================================================


class ComplexityFactor(BaseModel):
    """A factor's resolved score for one project."""
    model_config = ConfigDict(frozen=True)

    name: str
    weight: float
    score: float
    description: str


class KnowledgeAreaComplexity(BaseModel):
    """Complexity of one knowledge area for one project."""
    model_config = ConfigDict(frozen=True)

    area: KnowledgeArea
    complexity_score: float = Field(..., ge=1.0, le=5.0)
    complexity_level: ComplexityLevel
    factors: tuple[ComplexityFactor, ...] = ()
    documentation_required: bool
    # Secondary areas named by this area's high-scoring factors (primary only)
    secondary_triggers: tuple[KnowledgeArea, ...] = ()
    # Primary areas whose scores feed this area's formula (secondary only)
    driven_by: tuple[KnowledgeArea, ...] = ()
    # Primary areas whose factors triggered this area (secondary only)
    triggered_by: tuple[KnowledgeArea, ...] = ()
    # Reporting weight of this area from config (secondary only)
    weight: Optional[float] = None
    reasoning: str = ""


class PrimaryAreas(BaseModel):
    """The four directly measured areas."""
    model_config = ConfigDict(frozen=True)

    resources: KnowledgeAreaComplexity
    costs: KnowledgeAreaComplexity
    quality: KnowledgeAreaComplexity
    scope: KnowledgeAreaComplexity

    def areas(self) -> list[KnowledgeAreaComplexity]:
        """Areas in declaration order."""
        return [getattr(self, area.value) for area in PRIMARY_AREAS]

    def get(self, area: KnowledgeArea) -> KnowledgeAreaComplexity:
        return getattr(self, KnowledgeArea(area).value)


class SecondaryAreas(BaseModel):
    """The six areas derived from primary scores."""
    model_config = ConfigDict(frozen=True)

    integration: KnowledgeAreaComplexity
    schedule: KnowledgeAreaComplexity
    communication: KnowledgeAreaComplexity
    risk: KnowledgeAreaComplexity
    procurement: KnowledgeAreaComplexity
    stakeholder: KnowledgeAreaComplexity

    def areas(self) -> list[KnowledgeAreaComplexity]:
        """Areas in declaration order."""
        return [getattr(self, area.value) for area in SECONDARY_AREAS]

    def get(self, area: KnowledgeArea) -> KnowledgeAreaComplexity:
        return getattr(self, KnowledgeArea(area).value)


class DocumentationRecommendation(BaseModel):
    """A recommended project document."""
    model_config = ConfigDict(frozen=True)

    knowledge_area: KnowledgeArea
    document_types: tuple[DocumentType, ...]
    priority: Priority
    reason: str
    complexity_trigger: str


class ProfileSummary(BaseModel):
    """Headline numbers for a complexity profile."""
    model_config = ConfigDict(frozen=True)

    overall_level: ComplexityLevel
    primary_areas_requiring_documentation: int = 0
    secondary_areas_requiring_documentation: int = 0
    recommendation_count: int = 0
    priority_counts: dict[Priority, int] = Field(default_factory=dict)


class ProjectComplexityProfile(BaseModel):
    """Complete complexity analysis for one project."""
    model_config = ConfigDict(frozen=True)

    scoring_version: str = "1.0.0"
    rubric_version: str
    project_id: str
    project_name: str
    primary_areas: PrimaryAreas
    secondary_areas: SecondaryAreas
    overall_complexity: float = Field(..., ge=1.0, le=5.0)
    documentation_recommendations: tuple[DocumentationRecommendation, ...] = ()
    summary: ProfileSummary

    def all_areas(self) -> list[KnowledgeAreaComplexity]:
        """Primary then secondary areas in declaration order."""
        return [*self.primary_areas.areas(), *self.secondary_areas.areas()]

    def recommended_documents(self) -> list[DocumentType]:
        """Distinct recommended document types, in recommendation order."""
        seen: dict[DocumentType, None] = {}
        for rec in self.documentation_recommendations:
            for doc in rec.document_types:
                seen.setdefault(doc, None)
        return list(seen)
