"""Category Editor - analyst edits to a category result set.

Every operation returns a new list and leaves its input untouched, so a
previously returned snapshot stays valid for anyone still reading it.
Rejected edits (unknown code, duplicate add, removing a detected
category) return None and the caller decides how to report it.

Only ``is_enabled``, ``user_weight`` and set membership ever change;
scores are textual evidence and are never recomputed here.
"""

import logging
from typing import Optional, Sequence

from .config import get_config
from .schema import CategoryResult, RiskLevel
from .taxonomy import Taxonomy, get_taxonomy

logger = logging.getLogger(__name__)


def _index_of(categories: Sequence[CategoryResult], code: str) -> Optional[int]:
    for index, category in enumerate(categories):
        if category.code == code:
            return index
    return None


def _replace(
    categories: Sequence[CategoryResult],
    index: int,
    **changes,
) -> list[CategoryResult]:
    updated = list(categories)
    updated[index] = categories[index].model_copy(update=changes)
    return updated


def clamp_weight(value: float) -> float:
    """Clamp a requested user weight into the allowed range."""
    bounds = get_config().user_weight
    clamped = min(bounds.maximum, max(bounds.minimum, value))
    if clamped != value:
        logger.warning("User weight %s clamped to %s", value, clamped)
    return clamped


def toggle_enabled(categories: Sequence[CategoryResult], code: str) -> Optional[list[CategoryResult]]:
    """Flip ``is_enabled`` for ``code``. None if the code is not in the set."""
    index = _index_of(categories, code)
    if index is None:
        return None
    return _replace(categories, index, is_enabled=not categories[index].is_enabled)


def set_enabled(
    categories: Sequence[CategoryResult],
    code: str,
    enabled: bool,
) -> Optional[list[CategoryResult]]:
    """Set ``is_enabled`` for ``code`` explicitly. None if the code is not in the set."""
    index = _index_of(categories, code)
    if index is None:
        return None
    return _replace(categories, index, is_enabled=enabled)


def set_weight(
    categories: Sequence[CategoryResult],
    code: str,
    weight: float,
) -> Optional[list[CategoryResult]]:
    """Set ``user_weight`` for ``code``. None if the code is not in the set.

    Raises:
        ValueError: If ``weight`` is outside the configured bounds. Use
            ``clamp_weight`` first when the value comes from free input.
    """
    bounds = get_config().user_weight
    if not bounds.minimum <= weight <= bounds.maximum:
        raise ValueError(
            f"User weight {weight} outside {bounds.minimum}-{bounds.maximum}"
        )

    index = _index_of(categories, code)
    if index is None:
        return None
    return _replace(categories, index, user_weight=float(weight))


def create_manual(code: str, taxonomy: Optional[Taxonomy] = None) -> Optional[CategoryResult]:
    """Build a manually added result (no evidence, score 0) for ``code``.

    Returns None if the code is not in the taxonomy.
    """
    category = (taxonomy or get_taxonomy()).get(code)
    if category is None:
        return None

    return CategoryResult(
        code=category.code,
        name=category.name,
        group=category.group,
        score=0,
        risk_level=RiskLevel.LOW,
        matched_keywords=[],
        is_manually_added=True,
        is_enabled=True,
    )


def add_manual(
    categories: Sequence[CategoryResult],
    code: str,
    taxonomy: Optional[Taxonomy] = None,
) -> Optional[list[CategoryResult]]:
    """Append a manual entry for ``code``.

    None if the code is unknown to the taxonomy or already in the set.
    """
    if _index_of(categories, code) is not None:
        logger.debug("Category %s already present; manual add rejected", code)
        return None

    manual = create_manual(code, taxonomy)
    if manual is None:
        logger.debug("Unknown category code %s; manual add rejected", code)
        return None

    return [*categories, manual]


def remove_manual(categories: Sequence[CategoryResult], code: str) -> Optional[list[CategoryResult]]:
    """Remove the manually added entry for ``code``.

    Detected categories can never be removed, even with a score of 0.
    None if there is no manually added entry for ``code``.
    """
    index = _index_of(categories, code)
    if index is None or not categories[index].is_manually_added:
        return None
    return [c for i, c in enumerate(categories) if i != index]
