"""Keyword-weighted CICTT hazard scoring for aviation safety documents."""

from .aggregator import aggregate
from .editor import (
    add_manual,
    clamp_weight,
    create_manual,
    remove_manual,
    set_enabled,
    set_weight,
    toggle_enabled,
)
from .engine import HazardEngine, analyze, apply_categories, recalculate
from .exceptions import AnalysisRequestError, HazardScorerError, TaxonomyError
from .schema import (
    AnalysisResult,
    Category,
    CategoryResult,
    MatchedKeyword,
    OverallScore,
    RiskLevel,
)
from .scorer import estimate_risk
from .summary import summarize
from .taxonomy import (
    categories_by_group,
    get_category,
    is_valid_code,
    list_categories,
    list_groups,
    search_by_keyword,
)

__version__ = "1.0.0"

__all__ = [
    "AnalysisRequestError",
    "AnalysisResult",
    "Category",
    "CategoryResult",
    "HazardEngine",
    "HazardScorerError",
    "MatchedKeyword",
    "OverallScore",
    "RiskLevel",
    "TaxonomyError",
    "add_manual",
    "aggregate",
    "analyze",
    "apply_categories",
    "categories_by_group",
    "clamp_weight",
    "create_manual",
    "estimate_risk",
    "get_category",
    "is_valid_code",
    "list_categories",
    "list_groups",
    "recalculate",
    "remove_manual",
    "search_by_keyword",
    "set_enabled",
    "set_weight",
    "summarize",
    "toggle_enabled",
]
