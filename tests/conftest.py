"""Shared fixtures for the hazard scorer tests."""

from typing import Optional

import pytest

from hazard_scorer.config import reset_config
from hazard_scorer.schema import CategoryResult, RiskLevel
from hazard_scorer.taxonomy import reset_taxonomy


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Start every test from default config and the bundled taxonomy."""
    monkeypatch.delenv("CICTT_SCORER_CONFIG", raising=False)
    reset_config()
    reset_taxonomy()
    yield
    reset_config()
    reset_taxonomy()


def make_result(
    code: str,
    score: int,
    group: str = "Test Group",
    name: Optional[str] = None,
    user_weight: float = 1.0,
    is_enabled: bool = True,
    is_manually_added: bool = False,
) -> CategoryResult:
    """Build a category result without running the scorer."""
    return CategoryResult(
        code=code,
        name=name or f"Category {code}",
        group=group,
        score=score,
        risk_level=RiskLevel.from_score(score),
        user_weight=user_weight,
        is_enabled=is_enabled,
        is_manually_added=is_manually_added,
    )


@pytest.fixture
def result_factory():
    """Factory for hand-built category results."""
    return make_result
