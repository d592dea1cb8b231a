"""Narrative summary of detected hazards, grouped by taxonomy group."""

from collections import defaultdict
from typing import Iterable, Optional

from .config import get_config
from .schema import CategoryResult
from .scorer import round_score

NO_HAZARDS_SUMMARY = "No significant hazards detected in the provided text."


def summarize(categories: Iterable[CategoryResult], top_n: Optional[int] = None) -> str:
    """Describe enabled categories with evidence (score > 0).

    Groups are listed alphabetically. Each names its ``top_n`` highest
    scoring categories (ties keep input order) and their rounded average:

        "Fire/Smoke hazards identified (Fire / Smoke - Non-Impact): 40/100 risk score; ..."
    """
    if top_n is None:
        top_n = get_config().summary.top_categories

    by_group: dict[str, list[CategoryResult]] = defaultdict(list)
    for category in categories:
        if category.score > 0 and category.is_enabled:
            by_group[category.group].append(category)

    if not by_group:
        return NO_HAZARDS_SUMMARY

    parts = []
    for group in sorted(by_group):
        top = sorted(by_group[group], key=lambda c: c.score, reverse=True)[:top_n]
        names = ", ".join(c.name for c in top)
        average = round_score(sum(c.score for c in top) / len(top))
        parts.append(f"{group} hazards identified ({names}): {average}/100 risk score")

    return "; ".join(parts) + "."
