"""Category Scorer - turns keyword evidence into a 0-100 category score.

For each keyword of a category:

    total_category_weight += weight                    (always)
    total_matched_weight  += weight * min(count, cap)  (when matched)

    base_score      = total_matched_weight / total_category_weight * 100
    frequency_bonus = min(max_bonus, distinct_matches * bonus_per_keyword)
    score           = round_score(min(100, base_score + frequency_bonus))

Repeated boilerplate phrases get diminishing returns through the
occurrence cap; the bonus rewards breadth of evidence.
"""

import logging
import math
from typing import Optional

from .config import ScoringConfig, get_config
from .matcher import normalize_text, occurrences, tokenize
from .schema import Category, CategoryResult, MatchedKeyword, RiskLevel
from .taxonomy import Taxonomy, get_taxonomy

logger = logging.getLogger(__name__)

MAX_SCORE = 100


def round_score(value: float) -> int:
    """Round half up (67.5 -> 68).

    Scores are never negative, so this matches rounding half toward
    positive infinity.
    """
    return int(math.floor(value + 0.5))


class CategoryScorer:
    """Scores text against individual taxonomy categories.

    Stateless apart from its configuration; safe to share between threads.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or get_config().scoring

    def score(self, text: str, category: Category) -> CategoryResult:
        """Score raw text against one category."""
        normalized = normalize_text(text)
        return self.score_normalized(normalized, category, tokenize(normalized))

    def score_normalized(
        self,
        text: str,
        category: Category,
        tokens: Optional[list[str]] = None,
    ) -> CategoryResult:
        """Score already-normalized text against one category.

        Args:
            text: Output of ``normalize_text``.
            category: Taxonomy category to evaluate.
            tokens: Optional pre-computed tokens of ``text``.

        Returns:
            A fresh, enabled, non-manual result with default user weight.
        """
        if tokens is None:
            tokens = tokenize(text)

        matched: list[MatchedKeyword] = []
        total_category_weight = 0
        total_matched_weight = 0

        for phrase, weight in category.keywords.items():
            total_category_weight += weight
            found, count = occurrences(text, phrase, tokens)
            if found:
                matched.append(MatchedKeyword(word=phrase, count=count, weight=weight))
                total_matched_weight += weight * min(count, self.config.occurrence_cap)

        base_score = (
            total_matched_weight / total_category_weight * 100
            if total_category_weight > 0 else 0
        )
        frequency_bonus = min(
            self.config.max_frequency_bonus,
            len(matched) * self.config.bonus_per_keyword,
        )
        score = round_score(min(MAX_SCORE, base_score + frequency_bonus))

        if matched:
            logger.debug(
                "%s: %d keyword(s) matched, base %.2f + bonus %.1f -> %d",
                category.code, len(matched), base_score, frequency_bonus, score,
            )

        return CategoryResult(
            code=category.code,
            name=category.name,
            group=category.group,
            score=score,
            risk_level=RiskLevel.from_score(score),
            matched_keywords=matched,
        )


def estimate_risk(text: str, code: Optional[str] = None, taxonomy: Optional[Taxonomy] = None) -> int:
    """Coarse keyword-density risk estimate.

    Averages the weight of every keyword occurrence found across the whole
    taxonomy, or only the category ``code`` when given, and scales it to
    0-100 (an average weight of 7 gives 70). Returns 0 when nothing matches
    or ``code`` is unknown.
    """
    if taxonomy is None:
        taxonomy = get_taxonomy()
    if code is None:
        categories = list(taxonomy)
    else:
        category = taxonomy.get(code)
        categories = [category] if category else []

    normalized = normalize_text(text)
    tokens = tokenize(normalized)

    weighted_total = 0
    total_matches = 0
    for category in categories:
        for phrase, weight in category.keywords.items():
            found, count = occurrences(normalized, phrase, tokens)
            if found:
                weighted_total += weight * count
                total_matches += count

    if total_matches == 0:
        return 0
    return min(MAX_SCORE, round_score(weighted_total / total_matches * 10))
