"""Services for FeedbackHub."""

from .adapters import SourceAdapter
from .brightdata_client import BrightDataClient
from .orchestrator import FallbackOrchestrator, build_adapters
from .reddit_client import RedditAdapter
from .storage import DiskCacheStorage, FileStorage
from .synthetic import SyntheticGenerator

__all__ = [
    "SourceAdapter",
    "BrightDataClient",
    "RedditAdapter",
    "SyntheticGenerator",
    "FallbackOrchestrator",
    "build_adapters",
    "FileStorage",
    "DiskCacheStorage",
]
