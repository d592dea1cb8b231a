"""JSON report export.

Reports are the ``AnalysisResult`` structure verbatim, with camelCase
field names (``overallRiskScore``, ``userWeight``...). ``recommendations``
is omitted when absent.
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

from .schema import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_REPORT_NAME = "hazard_report.json"


def to_dict(result: AnalysisResult) -> dict[str, Any]:
    """Serialize a result to a JSON-compatible dict."""
    data = result.model_dump(mode="json", by_alias=True)
    if data.get("recommendations") is None:
        data.pop("recommendations", None)
    return data


def to_json(result: AnalysisResult, indent: int = 2) -> str:
    """Serialize a result to a JSON string."""
    return json.dumps(to_dict(result), indent=indent, ensure_ascii=False)


def save_report(result: AnalysisResult, path: Union[str, Path] = DEFAULT_REPORT_NAME) -> Path:
    """Write a result to ``path`` (a directory gets the default file name)."""
    path = Path(path)
    if path.is_dir():
        path = path / DEFAULT_REPORT_NAME
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        f.write(to_json(result))
        f.write("\n")

    logger.info("Hazard report saved to %s", path)
    return path


def load_report(path: Union[str, Path]) -> AnalysisResult:
    """Read a previously exported report."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return AnalysisResult.model_validate(data)
