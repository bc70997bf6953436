"""Error taxonomy for FeedbackHub."""

from typing import Optional


class FeedbackHubError(Exception):
    """Base class for all FeedbackHub errors."""


class SourceError(FeedbackHubError):
    """An error scoped to a single feedback source."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        message = super().__str__()
        return f"[{self.source}] {message}" if self.source else message


class FetchError(SourceError):
    """Transport, timeout or auth failure inside an adapter."""


class EmptyResultError(SourceError):
    """A valid call that returned zero items."""


class ParseError(SourceError):
    """Malformed adapter payload."""


class AggregationError(FeedbackHubError):
    """Malformed item encountered while merging source results."""


class ConfigurationError(FeedbackHubError):
    """Invalid run configuration. Fatal to the whole run."""
