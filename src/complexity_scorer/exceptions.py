"""
Exceptions raised by the complexity scoring engine.
"""
from typing import Iterable


class ComplexityScorerError(Exception):
    """Base exception for the complexity scorer."""
    pass


class CatalogValidationError(ComplexityScorerError):
    """Raised when the rubric catalog is malformed.

    Collects every problem found so a broken catalog can be fixed in one pass.
    """
    def __init__(self, problems: Iterable[str]):
        self.problems = list(problems)
        message = "Invalid rubric catalog:\n" + "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(message)


class UnknownKnowledgeAreaError(ComplexityScorerError):
    """Raised when a knowledge area tag is outside the closed set or has no rubric."""
    def __init__(self, area: object, message: str = ""):
        self.area = area
        self.message = message or f"Unknown knowledge area: {area!r}"
        super().__init__(self.message)


class ConfigurationError(ComplexityScorerError):
    """Raised for an invalid engine configuration."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)
