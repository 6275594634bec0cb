"""PMBOK complexity scoring and documentation recommendation engine."""

from .catalog import RubricCatalog, get_default_catalog, load_rubric_catalog
from .config import ScorerConfig, get_config, load_config
from .engine import ComplexityEngine
from .exceptions import (
    CatalogValidationError,
    ComplexityScorerError,
    ConfigurationError,
    UnknownKnowledgeAreaError,
)
from .schema import (
    DocumentType,
    KnowledgeArea,
    Priority,
    ProjectAttributes,
    ProjectComplexityProfile,
)

__version__ = "1.0.0"

__all__ = [
    "CatalogValidationError",
    "ComplexityEngine",
    "ComplexityScorerError",
    "ConfigurationError",
    "DocumentType",
    "KnowledgeArea",
    "Priority",
    "ProjectAttributes",
    "ProjectComplexityProfile",
    "RubricCatalog",
    "ScorerConfig",
    "UnknownKnowledgeAreaError",
    "get_config",
    "get_default_catalog",
    "load_config",
    "load_rubric_catalog",
]
