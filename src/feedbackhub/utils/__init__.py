"""Utility modules for FeedbackHub."""

from .data_prep import export_to_json, load_report, prepare_export

__all__ = [
    "export_to_json",
    "load_report",
    "prepare_export",
]
