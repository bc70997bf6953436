"""Constants and configuration values for FeedbackHub."""

# Source Constants
class SourceConstants:
    """Constants related to feedback sources."""

    # Canonical source identifiers
    GOOGLE_PLAY = "google_play"
    APP_STORE = "app_store"
    GOOGLE_REVIEWS = "google_reviews"
    TRUSTPILOT = "trustpilot"
    GLASSDOOR = "glassdoor"
    REDDIT = "reddit"

    # Star-rated sources count as "reviews", everything else as "social"
    REVIEW_SOURCES = frozenset({
        "google_play", "app_store", "google_reviews", "trustpilot",
        "glassdoor", "indeed", "producthunt", "g2",
    })

    # Query identifier key each source expects (appId | companyName | searchQuery)
    IDENTIFIER_KINDS = {
        "google_play": "appId",
        "app_store": "appId",
        "google_reviews": "searchQuery",
        "trustpilot": "companyName",
        "glassdoor": "companyName",
        "reddit": "searchQuery",
    }

    DEFAULT_LIMIT = 50  # items per source
    BRIGHT_DATA_MAX_LIMIT = 100  # dataset collectors cap per trigger
    REDDIT_MAX_LIMIT = 100  # submissions per search call

# Orchestration Constants
class OrchestrationConstants:
    """Constants for the fetch / retry / fallback loop."""

    MAX_RETRY_ATTEMPTS = 3  # real attempts per source before fallback
    RETRY_BASE_DELAY = 1.0  # base delay for exponential backoff
    RETRY_BACKOFF = 2.0  # waits capped at 10x this
    ATTEMPT_TIMEOUT = 30.0  # seconds per adapter call
    REQUEST_TIMEOUT = 30  # seconds per vendor HTTP request
    RUN_DEADLINE = 300.0  # seconds for a whole orchestration run
    MAX_WORKERS = 8  # concurrent source tasks

# Analysis Constants
class AnalysisConstants:
    """Thresholds used by the analyzers and the correlator."""

    # Sentiment
    RATING_POSITIVE_THRESHOLD = 3.5  # "threshold" rule
    RATING_BANDED_POSITIVE = 3  # "banded" rule: rating > 3 is positive
    RATING_BANDED_NEGATIVE = 2  # "banded" rule: rating <= 2 is negative

    # Issues
    MAX_ISSUE_EXAMPLES = 3
    MAX_EXAMPLE_LENGTH = 100  # chars before truncation
    EXAMPLE_RATING_CEILING = 3  # examples preferred from ratings <= this

    # Trends
    TREND_RISING_FACTOR = 1.2
    TREND_FALLING_FACTOR = 0.8

    # Correlation rules
    PERFORMANCE_SOURCE_THRESHOLD = 10  # items per source, strictly greater
    PERFORMANCE_MIN_SOURCES = 2
    COMPETITOR_THRESHOLD = 15
    FEATURE_DEMAND_THRESHOLD = 5

    CRITICAL_CONFIDENCE = 0.92
    COMPETITOR_CONFIDENCE = 0.85
    FEATURE_CONFIDENCE = 0.88

    # Health score
    HEALTH_RATING_WEIGHT = 0.4
    HEALTH_REVIEW_SENTIMENT_WEIGHT = 0.3
    HEALTH_SOCIAL_SENTIMENT_WEIGHT = 0.3
    HEALTH_DEFAULT_RATING = 3.0
    HEALTH_DEFAULT_POSITIVE_RATIO = 0.5
    HEALTH_QUICK_WIN_THRESHOLD = 70

    # Viral content
    VIRAL_ENGAGEMENT_THRESHOLD = 100
    MAX_VIRAL_ITEMS = 5
    MAX_VIRAL_TEXT_LENGTH = 200

# Mock Data Constants
class MockDataConstants:
    """Constants for synthetic fallback generation."""

    MOCK_ITEM_COUNT = 10  # synthetic items per failed source
    POSITIVE_MOCK_RATIO = 0.4
    NEGATIVE_MOCK_RATIO = 0.3
    NEUTRAL_MOCK_RATIO = 0.3
    MOCK_SPAN_DAYS = 30  # synthetic timestamps spread over this window

# File and Path Constants
class FileConstants:
    """Constants for file operations."""

    OUTPUT_DIR = "output"
    CACHE_DIR = "cache/raw_payloads"
    ANALYSIS_RULES_FILE = "config/analysis_rules.yaml"
    CACHE_TTL_HOURS = 24
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
