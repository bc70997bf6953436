"""FeedbackHub - multi-source feedback collection and correlation engine."""

__version__ = "1.0.0"
__author__ = "FeedbackHub Team"

from .core.models import *
from .core.config import settings
from .pipeline import FeedbackPipeline, build_pipeline

__all__ = [
    "settings",
    "FeedbackPipeline",
    "build_pipeline",
]
