"""Centralized configuration management for the hazard scorer."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator


class ScoringConfig(BaseModel):
    """Per-category scoring parameters.

    A matched keyword contributes ``weight * min(count, occurrence_cap)``
    to the category's matched weight. Each distinct matched keyword adds
    ``bonus_per_keyword`` points of breadth bonus, up to
    ``max_frequency_bonus``.
    """
    occurrence_cap: int = Field(
        3,
        ge=1,
        description="Maximum occurrence multiplier for a single keyword"
    )
    bonus_per_keyword: float = Field(
        2.0,
        ge=0,
        description="Breadth bonus points per distinct matched keyword"
    )
    max_frequency_bonus: float = Field(
        20.0,
        ge=0,
        description="Upper bound on the breadth bonus"
    )


class RiskThresholdsConfig(BaseModel):
    """Score thresholds for risk level bucketing (0-100).

    Applied everywhere a score is classified, for categories and for the
    overall score alike.
    """
    critical: int = Field(80, description="Minimum score for Critical")
    high: int = Field(51, description="Minimum score for High")
    medium: int = Field(21, description="Minimum score for Medium")

    @model_validator(mode="after")
    def _check_order(self) -> "RiskThresholdsConfig":
        if not (0 < self.medium < self.high < self.critical <= 100):
            raise ValueError(
                "risk thresholds must satisfy 0 < medium < high < critical <= 100"
            )
        return self


class UserWeightConfig(BaseModel):
    """Bounds for the analyst's per-category weight multiplier."""
    minimum: float = Field(0.5, gt=0, description="Lowest allowed user weight")
    maximum: float = Field(2.0, gt=0, description="Highest allowed user weight")
    default: float = Field(1.0, gt=0, description="User weight for fresh results")

    @model_validator(mode="after")
    def _check_bounds(self) -> "UserWeightConfig":
        if not (self.minimum <= self.default <= self.maximum):
            raise ValueError("user weight bounds must satisfy minimum <= default <= maximum")
        return self


class SummaryConfig(BaseModel):
    """Narrative summary generation."""
    top_categories: int = Field(
        3,
        ge=1,
        description="Categories named per group in the summary"
    )


class TaxonomyConfig(BaseModel):
    """Taxonomy source selection."""
    path: Optional[str] = Field(
        None,
        description="Custom taxonomy YAML file (default: bundled CICTT table)"
    )


class HazardScorerConfig(BaseModel):
    """Complete configuration for the hazard scorer."""
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    risk_thresholds: RiskThresholdsConfig = Field(default_factory=RiskThresholdsConfig)
    user_weight: UserWeightConfig = Field(default_factory=UserWeightConfig)
    summary: SummaryConfig = Field(default_factory=SummaryConfig)
    taxonomy: TaxonomyConfig = Field(default_factory=TaxonomyConfig)


# Global config instance
_config: Optional[HazardScorerConfig] = None


def get_config() -> HazardScorerConfig:
    """Get the current configuration.

    Returns the global config, initializing with defaults if not yet loaded.
    """
    global _config
    if _config is None:
        _config = HazardScorerConfig()
    return _config


def load_config(path: Path) -> HazardScorerConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        The loaded HazardScorerConfig.
    """
    global _config

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    _config = HazardScorerConfig.model_validate(data or {})
    return _config


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _config
    _config = HazardScorerConfig()


def find_config_file() -> Optional[Path]:
    """Find a hazard scorer configuration file.

    Looks in (order of priority):
    1. CICTT_SCORER_CONFIG environment variable
    2. ./hazard-config.yaml
    3. ./hazard-config.yml
    4. ~/.config/cictt-hazard-scorer/config.yaml
    """
    env_path = os.environ.get("CICTT_SCORER_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    for name in ["hazard-config.yaml", "hazard-config.yml"]:
        path = Path(name)
        if path.exists():
            return path

    user_config = Path.home() / ".config" / "cictt-hazard-scorer" / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def save_default_config(path: Path) -> None:
    """Save the default configuration to a YAML file.

    Args:
        path: Path where to save the configuration.
    """
    config = HazardScorerConfig()
    data = config.model_dump()

    yaml_content = """# CICTT Hazard Scorer Configuration
# =================================
#
# Tunes keyword scoring, risk level thresholds, user weight bounds and
# summary generation.
#
# Copy this file to one of these locations:
#   - ./hazard-config.yaml (current directory)
#   - ~/.config/cictt-hazard-scorer/config.yaml (user config)
#
# Or set the CICTT_SCORER_CONFIG environment variable.

"""
    yaml_content += yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(yaml_content)
