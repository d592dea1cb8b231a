"""Pydantic models for the hazard scoring engine.

Taxonomy definitions are immutable. Per-analysis results serialize with
the camelCase field names used by exported reports (``userWeight``,
``isEnabled``, ``overallRiskScore``...) and accept either spelling on input.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from .config import get_config


class RiskLevel(str, Enum):
    """Coarse bucketing of a 0-100 risk score."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @classmethod
    def from_score(cls, score: float) -> "RiskLevel":
        """Classify a score using the configured thresholds."""
        thresholds = get_config().risk_thresholds
        if score >= thresholds.critical:
            return cls.CRITICAL
        if score >= thresholds.high:
            return cls.HIGH
        if score >= thresholds.medium:
            return cls.MEDIUM
        return cls.LOW


# =============================================================================
# Taxonomy
# =============================================================================


class Category(BaseModel):
    """A taxonomy category with its weighted keyword vocabulary.

    Keyword order is the declaration order of the source table. The
    keyword mapping is read-only.
    """
    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=1)
    name: str
    group: str
    description: str = ""
    keywords: Mapping[str, int]

    @field_validator("keywords", mode="before")
    @classmethod
    def _normalize_keywords(cls, value):
        if not isinstance(value, Mapping):
            return value
        normalized: dict[str, int] = {}
        for phrase, weight in value.items():
            key = " ".join(str(phrase).lower().split())
            if not key:
                raise ValueError("keyword phrases must not be blank")
            if key in normalized:
                raise ValueError(f"duplicate keyword phrase: {key!r}")
            normalized[key] = weight
        return normalized

    @field_validator("keywords")
    @classmethod
    def _check_keywords(cls, value: Mapping[str, int]) -> Mapping[str, int]:
        if not value:
            raise ValueError("a category needs at least one keyword")
        for phrase, weight in value.items():
            if not 1 <= weight <= 10:
                raise ValueError(f"keyword {phrase!r} has weight {weight} outside 1-10")
        return MappingProxyType(dict(value))

    @field_serializer("keywords")
    def _serialize_keywords(self, value: Mapping[str, int]) -> dict[str, int]:
        return dict(value)

    @property
    def total_weight(self) -> int:
        """Sum of all keyword weights (the coverage denominator)."""
        return sum(self.keywords.values())


# =============================================================================
# Analysis results
# =============================================================================


class _ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MatchedKeyword(_ReportModel):
    """A keyword found in the analyzed text."""
    word: str
    count: int = Field(..., ge=1)
    weight: int


class CategoryResult(_ReportModel):
    """Scoring outcome for one category.

    ``score`` and ``risk_level`` capture the textual evidence and are fixed
    once computed. ``user_weight`` and ``is_enabled`` are the analyst's
    adjustments and only affect aggregation.
    """
    code: str
    name: str
    group: str
    score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    matched_keywords: list[MatchedKeyword] = Field(default_factory=list)
    user_weight: float = Field(default_factory=lambda: get_config().user_weight.default)
    is_manually_added: bool = False
    is_enabled: bool = True

    @field_validator("user_weight")
    @classmethod
    def _check_user_weight(cls, value: float) -> float:
        bounds = get_config().user_weight
        if not bounds.minimum <= value <= bounds.maximum:
            raise ValueError(
                f"user weight {value} outside {bounds.minimum}-{bounds.maximum}"
            )
        return value


class OverallScore(BaseModel):
    """Aggregate score over a set of category results."""
    model_config = ConfigDict(frozen=True)

    score: int
    level: RiskLevel


class AnalysisResult(_ReportModel):
    """Full analysis report.

    ``recommendations`` is only populated by delegated (model-backed)
    analysis; the keyword engine leaves it as None and exports omit it.
    """
    summary: str
    overall_risk_score: int = Field(..., ge=0, le=100)
    overall_risk_level: RiskLevel
    categories: list[CategoryResult] = Field(default_factory=list)
    detected_count: int = Field(0, ge=0)
    total_categories: int = Field(0, ge=0)
    recommendations: Optional[list[str]] = None

    def get_category(self, code: str) -> Optional[CategoryResult]:
        """Find a category result by code."""
        return next((c for c in self.categories if c.code == code), None)

    @property
    def detected(self) -> list[CategoryResult]:
        """Categories with textual evidence (score > 0)."""
        return [c for c in self.categories if c.score > 0]
