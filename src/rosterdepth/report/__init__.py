"""Report serialization (comparison CSV and JSON summary)."""

from .export import build_report, comparison_to_csv, report_to_json
from .schemas import DepthReport

__all__ = [
    "DepthReport",
    "build_report",
    "comparison_to_csv",
    "report_to_json",
]
