"""Hazard Scoring Engine - main entry point.

Pipeline:
1. Normalize and tokenize the text once
2. Score every taxonomy category (Category Scorer)
3. Aggregate the detected categories into an overall score
4. Generate the narrative summary

Analyst edits go through the Category Editor and come back through
``recalculate`` or ``apply_categories``; they never re-run the matcher.
"""

import logging
import time
from typing import Optional, Sequence

from .aggregator import aggregate
from .config import HazardScorerConfig, get_config
from .matcher import normalize_text, tokenize
from .schema import AnalysisResult, CategoryResult, OverallScore, RiskLevel
from .scorer import CategoryScorer
from .summary import summarize
from .taxonomy import Taxonomy, get_taxonomy

logger = logging.getLogger(__name__)

EMPTY_INPUT_SUMMARY = "No text provided for analysis."


class HazardEngine:
    """Keyword-weighted CICTT hazard analysis.

    Holds only read-only state (taxonomy and configuration), so one
    instance can serve concurrent callers.
    """

    def __init__(
        self,
        taxonomy: Optional[Taxonomy] = None,
        config: Optional[HazardScorerConfig] = None,
    ):
        self.config = config or get_config()
        self.taxonomy = taxonomy or get_taxonomy()
        self.scorer = CategoryScorer(self.config.scoring)

    def analyze(self, text: str) -> AnalysisResult:
        """Analyze text against every taxonomy category.

        Empty or whitespace-only text is not an error: it yields a zeroed
        result with no categories.
        """
        if not text or not text.strip():
            return AnalysisResult(
                summary=EMPTY_INPUT_SUMMARY,
                overall_risk_score=0,
                overall_risk_level=RiskLevel.LOW,
                categories=[],
                detected_count=0,
                total_categories=len(self.taxonomy),
            )

        started = time.perf_counter()
        normalized = normalize_text(text)
        tokens = tokenize(normalized)

        results = [
            self.scorer.score_normalized(normalized, category, tokens)
            for category in self.taxonomy
        ]
        detected = [c for c in results if c.score > 0]
        overall = aggregate(detected)

        logger.debug(
            "Analyzed %d tokens: %d/%d categories detected, overall %d (%s) in %.1f ms",
            len(tokens), len(detected), len(results), overall.score, overall.level.value,
            (time.perf_counter() - started) * 1000,
        )

        return AnalysisResult(
            summary=summarize(detected, self.config.summary.top_categories),
            overall_risk_score=overall.score,
            overall_risk_level=overall.level,
            categories=results,
            detected_count=len(detected),
            total_categories=len(self.taxonomy),
        )

    def recalculate(self, categories: Sequence[CategoryResult]) -> OverallScore:
        """Re-derive the overall score after analyst edits."""
        return aggregate(categories)

    def apply_categories(
        self,
        result: AnalysisResult,
        categories: Sequence[CategoryResult],
    ) -> AnalysisResult:
        """Return ``result`` with an edited category set.

        Overall score, level and summary are re-derived from the enabled
        categories; ``detected_count`` and ``total_categories`` describe the
        original detection and are kept.
        """
        overall = self.recalculate(categories)
        return result.model_copy(update={
            "categories": list(categories),
            "overall_risk_score": overall.score,
            "overall_risk_level": overall.level,
            "summary": summarize(categories, self.config.summary.top_categories),
        })


def analyze(text: str) -> AnalysisResult:
    """Analyze text with the process-wide taxonomy and configuration."""
    return HazardEngine().analyze(text)


def recalculate(categories: Sequence[CategoryResult]) -> OverallScore:
    """Re-derive the overall score of an edited category set."""
    return aggregate(categories)


def apply_categories(result: AnalysisResult, categories: Sequence[CategoryResult]) -> AnalysisResult:
    """Replace the category set of ``result`` and refresh derived fields."""
    return HazardEngine().apply_categories(result, categories)
