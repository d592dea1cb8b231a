"""Aggregator - overall risk from a set of category results."""

from typing import Iterable

from .schema import CategoryResult, OverallScore, RiskLevel
from .scorer import round_score


def aggregate(categories: Iterable[CategoryResult]) -> OverallScore:
    """Weighted mean of enabled category scores.

    ``score = round(sum(score * user_weight) / sum(user_weight))`` over the
    enabled entries. An empty or fully disabled set scores 0 (Low). The
    input is never modified and its order does not matter.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for category in categories:
        if not category.is_enabled:
            continue
        weighted_sum += category.score * category.user_weight
        total_weight += category.user_weight

    if total_weight <= 0:
        return OverallScore(score=0, level=RiskLevel.LOW)

    score = round_score(weighted_sum / total_weight)
    return OverallScore(score=score, level=RiskLevel.from_score(score))
