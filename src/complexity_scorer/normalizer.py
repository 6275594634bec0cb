"""Project Normalizer - Phase 1 of the Complexity Engine.

Normalizes raw project records from the surrounding system into
ProjectAttributes. Accepts snake_case field names as well as the camelCase
names and item lists used by upstream project records.
"""

import logging
from typing import Any, Mapping, Optional

from .schema import ProjectAttributes

logger = logging.getLogger(__name__)


class ProjectNormalizer:
    """Normalizes raw project records into ProjectAttributes."""

    # Alternative keys accepted for each attribute, checked in order after
    # the attribute's own name
    FIELD_ALIASES = {
        "project_id": ["projectId", "id"],
        "project_name": ["projectName", "name"],
        "team_size": ["teamSize", "team"],
        "skill_count": ["skillRequirements", "skill_requirements", "skills", "skillCount"],
        "resource_constraint_count": ["resourceConstraints", "resource_constraints"],
        "location_count": ["locations", "locationCount"],
        "external_dependency_count": ["externalDependencies", "external_dependencies"],
        "budget": ["budgetAmount", "budget_amount"],
        "funding_source_count": ["fundingSources", "funding_sources"],
        "cost_sensitivity": ["costSensitivity", "costConstraints", "cost_constraints"],
        "reporting_requirements": ["reportingRequirements", "financial_reporting"],
        "regulatory_requirement_count": ["regulatoryRequirements", "regulatory_requirements"],
        "quality_standard_count": ["qualityStandards", "quality_standards"],
        "precision_requirements": ["precisionRequirements"],
        "testing_requirements": ["testingRequirements"],
        "qa_requirements": ["qaRequirements"],
        "deliverable_count": ["deliverables", "deliverableCount"],
        "scope_definition": ["scopeDefinition", "scope_clarity"],
        "inclusion_count": ["inclusionCriteria", "inclusion_criteria"],
        "exclusion_count": ["exclusionCriteria", "exclusion_criteria"],
        "scope_boundaries": ["scopeBoundaries"],
        "change_management": ["changeManagementRequirements", "change_management_requirements"],
        "time_constraints": ["timeConstraints"],
        "stakeholder_count": ["stakeholders", "stakeholderCount"],
        "stakeholder_type_count": ["stakeholderTypes", "stakeholder_types"],
        "vendor_count": ["vendors", "vendorCount"],
    }

    def normalize(self, raw: Optional[Mapping[str, Any]]) -> ProjectAttributes:
        """Normalize a raw project record.

        Unknown keys are ignored and missing or malformed values become gaps;
        neither raises.
        """
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise TypeError(f"Project record must be a mapping, got {type(raw).__name__}")

        values: dict[str, Any] = {}
        consumed: set[str] = set()

        for field, aliases in self.FIELD_ALIASES.items():
            for key in [field, *aliases]:
                if key in raw and raw[key] is not None:
                    values[field] = raw[key]
                    consumed.add(key)
                    break

        ignored = sorted(str(k) for k in raw if k not in consumed)
        if ignored:
            logger.debug("Ignoring unrecognised project keys: %s", ", ".join(ignored))

        attributes = ProjectAttributes.model_validate(values)

        missing = attribute_gaps(attributes)
        if missing:
            logger.debug(
                "Project %s has no value for: %s",
                attributes.project_id, ", ".join(missing),
            )
        return attributes


def attribute_gaps(attributes: ProjectAttributes) -> list[str]:
    """Names of attributes with no usable value."""
    return [
        name for name in ProjectAttributes.model_fields
        if name not in ("project_id", "project_name") and getattr(attributes, name) is None
    ]
