"""Centralized configuration management for the complexity scorer."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .exceptions import ConfigurationError
from .schema import KnowledgeArea


class PrimaryWeightsConfig(BaseModel):
    """Weights of the primary areas in the overall complexity score.

    These do not need to sum to 1.0; the overall score is normalised by
    the sum of the weights actually used.
    """
    resources: float = Field(0.25, ge=0.0, description="Weight for resources complexity")
    costs: float = Field(0.20, ge=0.0, description="Weight for costs complexity")
    quality: float = Field(0.15, ge=0.0, description="Weight for quality complexity")
    scope: float = Field(0.10, ge=0.0, description="Weight for scope complexity")

    @model_validator(mode="after")
    def _check_any_weight(self) -> "PrimaryWeightsConfig":
        if sum(self.as_mapping().values()) <= 0:
            raise ValueError("at least one primary weight must be positive")
        return self

    def as_mapping(self) -> dict[KnowledgeArea, float]:
        return {area: getattr(self, area.value) for area in KnowledgeArea.primary()}


class SecondaryWeightsConfig(BaseModel):
    """Reporting weights of the secondary areas.

    Not used in any score. Each secondary area result reports its weight,
    which together with the primary weights describes the area's share of
    project influence.
    """
    integration: float = Field(0.02, ge=0.0)
    schedule: float = Field(0.08, ge=0.0)
    communication: float = Field(0.07, ge=0.0)
    risk: float = Field(0.05, ge=0.0)
    procurement: float = Field(0.05, ge=0.0)
    stakeholder: float = Field(0.03, ge=0.0)

    def as_mapping(self) -> dict[KnowledgeArea, float]:
        return {area: getattr(self, area.value) for area in KnowledgeArea.secondary()}


class MultiplierStep(BaseModel):
    """Multiplier applied when a count is strictly greater than ``above``."""
    above: int = Field(..., ge=0)
    multiplier: float = Field(..., gt=0.0)


class SecondaryDerivationConfig(BaseModel):
    """Coefficients and contextual multipliers for secondary areas."""
    integration_factor: float = Field(0.8, gt=0.0, description="Scale on the highest primary score")
    schedule_factor: float = Field(0.9, gt=0.0, description="Scale on resources score")
    communication_factor: float = Field(0.8, gt=0.0, description="Scale on resources score")
    risk_factor: float = Field(0.9, gt=0.0, description="Scale on mean of costs, quality, scope")
    procurement_factor: float = Field(0.85, gt=0.0, description="Scale on costs score")
    stakeholder_factor: float = Field(0.8, gt=0.0, description="Scale on scope score")

    time_multipliers: dict[str, float] = Field(
        default_factory=lambda: {"standard": 1.0, "tight": 1.1, "critical": 1.2},
        description="Schedule multiplier per time-constraint level",
    )
    stakeholder_count_steps: list[MultiplierStep] = Field(
        default_factory=lambda: [
            MultiplierStep(above=5, multiplier=1.1),
            MultiplierStep(above=10, multiplier=1.3),
        ],
        description="Communication multiplier by stakeholder count",
    )
    vendor_count_steps: list[MultiplierStep] = Field(
        default_factory=lambda: [
            MultiplierStep(above=2, multiplier=1.1),
            MultiplierStep(above=5, multiplier=1.3),
        ],
        description="Procurement multiplier by vendor count",
    )
    stakeholder_type_steps: list[MultiplierStep] = Field(
        default_factory=lambda: [
            MultiplierStep(above=3, multiplier=1.1),
            MultiplierStep(above=5, multiplier=1.2),
        ],
        description="Stakeholder multiplier by distinct stakeholder types",
    )


class PriorityConfig(BaseModel):
    """Score cutoffs for documentation priority."""
    critical_cutoff: float = Field(4.5, description="Minimum area score for critical priority")
    high_cutoff: float = Field(3.5, description="Minimum area score for high priority")
    medium_cutoff: float = Field(2.5, description="Minimum area score for medium priority")

    @model_validator(mode="after")
    def _check_order(self) -> "PriorityConfig":
        if not self.medium_cutoff <= self.high_cutoff <= self.critical_cutoff:
            raise ValueError("priority cutoffs must be ascending: medium <= high <= critical")
        return self


class ScorerConfig(BaseModel):
    """Complete configuration for the complexity scorer."""
    primary_weights: PrimaryWeightsConfig = Field(default_factory=PrimaryWeightsConfig)
    secondary_weights: SecondaryWeightsConfig = Field(default_factory=SecondaryWeightsConfig)
    secondary_derivation: SecondaryDerivationConfig = Field(default_factory=SecondaryDerivationConfig)
    priority: PriorityConfig = Field(default_factory=PriorityConfig)
    rubric_catalog_path: Optional[str] = Field(
        None,
        description="Rubric catalog YAML file (default: the packaged catalog)"
    )


# Global config instance
_config: Optional[ScorerConfig] = None


def get_config() -> ScorerConfig:
    """Get the current configuration.

    Returns the global config, initializing with defaults if not yet loaded.
    """
    global _config
    if _config is None:
        _config = ScorerConfig()
    return _config


def load_config(path: Path) -> ScorerConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        The loaded ScorerConfig.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid YAML
            or fails validation.
    """
    global _config

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Could not read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {path}: {e}") from e

    try:
        _config = ScorerConfig.model_validate(data or {})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e
    return _config


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _config
    _config = ScorerConfig()


def find_config_file() -> Optional[Path]:
    """Find a scorer configuration file.

    Looks in (order of priority):
    1. COMPLEXITY_SCORER_CONFIG environment variable
    2. ./complexity-config.yaml
    3. ./complexity-config.yml
    4. ~/.config/complexity-scorer/config.yaml
    """
    env_path = os.environ.get("COMPLEXITY_SCORER_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    for name in ["complexity-config.yaml", "complexity-config.yml"]:
        path = Path(name)
        if path.exists():
            return path

    user_config = Path.home() / ".config" / "complexity-scorer" / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def save_default_config(path: Path) -> None:
    """Save the default configuration to a YAML file.

    Args:
        path: Path where to save the configuration.
    """
    data = ScorerConfig().model_dump()

    yaml_content = """# Complexity Scorer Configuration
# ===============================
#
# Primary area weights, secondary area derivation multipliers and
# documentation priority cutoffs.
#
# Copy this file to one of these locations:
#   - ./complexity-config.yaml (current directory)
#   - ~/.config/complexity-scorer/config.yaml (user config)
#
# Or set the COMPLEXITY_SCORER_CONFIG environment variable.

"""
    yaml_content += yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(yaml_content)
