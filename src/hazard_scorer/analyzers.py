"""Interchangeable analysis back ends sharing one contract.

``HazardAnalyzer.analyze(text) -> AnalysisResult`` is awaitable so that a
network-backed implementation can sit behind the same interface as the
deterministic keyword engine. Timeouts and cancellation belong to the
caller.
"""

import json
import logging
import math
from typing import Awaitable, Callable, Optional, Protocol, runtime_checkable

from pydantic import ValidationError

from .engine import HazardEngine
from .exceptions import AnalysisRequestError
from .schema import AnalysisResult, RiskLevel

logger = logging.getLogger(__name__)

# (system_instruction, text) -> raw model response
CompletionFn = Callable[[str, str], Awaitable[str]]

SYSTEM_INSTRUCTION = """\
You are an aviation safety analyst. Classify the provided text (incident
report, system prompt, model card or technical documentation) against the
CICTT occurrence taxonomy.

For every category you consider relevant give a risk score from 0 (no
hazard) to 100 (critical hazard). Compute the overall risk score as a
weighted average and add actionable mitigation recommendations.

Respond with JSON only, shaped as:
{"summary": str, "overallRiskScore": int, "overallRiskLevel": "Low"|"Medium"|"High"|"Critical",
 "categories": [{"code": str, "name": str, "group": str, "score": int,
                 "riskLevel": str, "matchedKeywords": [], "userWeight": 1.0,
                 "isManuallyAdded": false, "isEnabled": true}],
 "detectedCount": int, "totalCategories": int, "recommendations": [str]}
"""


@runtime_checkable
class HazardAnalyzer(Protocol):
    """Anything that can turn text into an ``AnalysisResult``."""

    async def analyze(self, text: str) -> AnalysisResult:
        ...


class KeywordHazardAnalyzer:
    """Deterministic keyword-weighted analysis. Never raises for input."""

    def __init__(self, engine: Optional[HazardEngine] = None):
        self.engine = engine or HazardEngine()

    async def analyze(self, text: str) -> AnalysisResult:
        return self.engine.analyze(text)


class LlmHazardAnalyzer:
    """Delegates scoring to a language model through an injected completion call.

    The completion callable owns the transport (SDK, HTTP client, retries).
    Any failure, from the call itself to an unusable response, surfaces
    as ``AnalysisRequestError``.
    """

    def __init__(
        self,
        complete: CompletionFn,
        system_instruction: str = SYSTEM_INSTRUCTION,
        engine: Optional[HazardEngine] = None,
    ):
        self.complete = complete
        self.system_instruction = system_instruction
        self.engine = engine or HazardEngine()

    async def analyze(self, text: str) -> AnalysisResult:
        if not text or not text.strip():
            return self.engine.analyze(text)

        try:
            raw = await self.complete(self.system_instruction, text)
        except Exception as e:
            logger.error("Model analysis request failed: %s", e)
            raise AnalysisRequestError(cause=e) from e

        return self.parse_response(raw)

    def parse_response(self, raw: Optional[str]) -> AnalysisResult:
        """Validate a raw model response into an ``AnalysisResult``.

        Risk levels are re-derived from scores so the thresholds hold for
        delegated results too. Missing counts are filled in locally.
        """
        if not raw or not raw.strip():
            raise AnalysisRequestError("analysis request failed: empty response")

        try:
            data = json.loads(_strip_code_fence(raw))
        except json.JSONDecodeError as e:
            raise AnalysisRequestError("analysis request failed: response is not JSON", e) from e

        if not isinstance(data, dict):
            raise AnalysisRequestError("analysis request failed: response is not a JSON object")

        categories = data.get("categories")
        if not isinstance(categories, list):
            raise AnalysisRequestError("analysis request failed: categories must be a list")
        for category in categories:
            if not isinstance(category, dict):
                raise AnalysisRequestError("analysis request failed: category is not a JSON object")
            category["score"] = _score_value(category.get("score"), "category score")
            category["riskLevel"] = RiskLevel.from_score(category["score"]).value
        data.setdefault("detectedCount", sum(1 for c in categories if c["score"] > 0))

        data["overallRiskScore"] = _score_value(data.get("overallRiskScore"), "overallRiskScore")
        data["overallRiskLevel"] = RiskLevel.from_score(data["overallRiskScore"]).value
        data.setdefault("totalCategories", len(self.engine.taxonomy))
        data.setdefault("recommendations", [])

        try:
            return AnalysisResult.model_validate(data)
        except ValidationError as e:
            raise AnalysisRequestError("analysis request failed: unexpected response shape", e) from e


def _score_value(value, field: str) -> int:
    # bool is an int subclass but never a score
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise AnalysisRequestError(f"analysis request failed: {field} must be a number, got {value!r}")
    return int(value)


def _strip_code_fence(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()
