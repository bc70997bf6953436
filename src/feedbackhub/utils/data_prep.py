"""Data preparation for export."""

import datetime
import json
from enum import Enum
from typing import Any, Dict, Optional

from ..core.models import FeedbackQuery, OrchestrationResult
from ..core.report import Report


def to_jsonable(obj: Any) -> Any:
    """json.dump ``default`` hook for the types FeedbackHub hands around."""
    if isinstance(obj, datetime.datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def prepare_export(
    report: Report,
    query: Optional[FeedbackQuery] = None,
    orchestration: Optional[OrchestrationResult] = None,
) -> Dict[str, Any]:
    """Prepare a report for JSON export."""
    export_data = report.to_dict()
    export_data["metadata"] = {
        "export_timestamp": None,  # Will be set by caller
        "version": "1.0.0",
    }
    if query is not None:
        export_data["query"] = {
            "sources": list(query.sources),
            "identifiers": dict(query.identifiers),
            "limit": query.limit,
            "timeRangeDays": query.time_range_days,
        }
    if orchestration is not None:
        export_data["collection"] = orchestration.to_dict()
    return export_data


def export_to_json(data: Dict[str, Any], filename: str) -> None:
    """Export data to JSON file."""
    # Add timestamp
    data.setdefault("metadata", {})["export_timestamp"] = datetime.datetime.now().isoformat()

    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=to_jsonable)


def load_report(filename: str) -> Report:
    """Load a report previously written by ``export_to_json``."""
    with open(filename, 'r', encoding='utf-8') as f:
        return Report.from_dict(json.load(f))
