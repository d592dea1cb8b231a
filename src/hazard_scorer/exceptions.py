"""Exceptions raised by the hazard scorer."""

from typing import Optional


class HazardScorerError(Exception):
    """Base class for hazard scorer errors."""


class TaxonomyError(HazardScorerError):
    """Raised when taxonomy data is missing or malformed."""


class AnalysisRequestError(HazardScorerError):
    """Raised when an externally delegated analysis cannot be completed.

    The caller is expected to show the message and offer a retry.
    """

    def __init__(self, message: str = "analysis request failed", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
