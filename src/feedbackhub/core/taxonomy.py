"""Keyword taxonomies for the rule-based analyzers."""

import logging
import os
from typing import Any, Dict, List, Optional

import yaml

from .constants import AnalysisConstants

logger = logging.getLogger(__name__)


# Sentiment lexicon (whole-word matches)
POSITIVE_WORDS = [
    "love", "loved", "loves", "great", "excellent", "amazing", "perfect", "best",
    "fantastic", "wonderful", "awesome",
]

NEGATIVE_WORDS = [
    "hate", "hated", "hates", "terrible", "worst", "awful", "horrible", "bad",
    "poor", "disappointing", "disappointed", "broken", "sucks", "useless",
]

# Issue categories -> keywords (case-insensitive substring matches)
ISSUE_CATEGORIES: Dict[str, List[str]] = {
    "Performance Issues": ["slow", "lag", "freeze", "crash", "performance", "loading"],
    "Battery Drain": ["battery", "drain", "power", "consumption"],
    "UI/UX Problems": ["confusing", "hard to use", "interface", "design", "navigation"],
    "Bugs": ["bug", "broken", "error", "glitch", "not working"],
    "Missing Features": ["missing", "need", "want", "should have", "feature request"],
    "Price Concerns": ["expensive", "price", "cost", "subscription", "money"],
    "Customer Support": ["support", "help", "response", "contact", "service"],
}

PERFORMANCE_CATEGORY = "Performance Issues"

# Topics tracked over time
TREND_TOPICS = ["performance", "features", "price", "support", "design"]

# Candidate features and the phrases that signal a request for them
FEATURE_VOCABULARY = ["dark mode", "offline", "export", "integration", "api", "dashboard"]
REQUEST_INTENT_KEYWORDS = ["need", "want", "wish", "should have", "missing", "add"]

COMPETITOR_KEYWORDS = ["competitor", "competitors", "switched to", "switching to", "alternative"]


DEFAULT_ANALYSIS_RULES: Dict[str, Any] = {
    "performance_crisis": {
        "per_source_threshold": AnalysisConstants.PERFORMANCE_SOURCE_THRESHOLD,
        "min_sources": AnalysisConstants.PERFORMANCE_MIN_SOURCES,
        "confidence": AnalysisConstants.CRITICAL_CONFIDENCE,
    },
    "competitive_pressure": {
        "threshold": AnalysisConstants.COMPETITOR_THRESHOLD,
        "confidence": AnalysisConstants.COMPETITOR_CONFIDENCE,
        "keywords": COMPETITOR_KEYWORDS,
    },
    "feature_demand": {
        "threshold": AnalysisConstants.FEATURE_DEMAND_THRESHOLD,
        "confidence": AnalysisConstants.FEATURE_CONFIDENCE,
        "features": FEATURE_VOCABULARY,
        "intent_keywords": REQUEST_INTENT_KEYWORDS,
    },
}


def slugify(category: str) -> str:
    """Turn an issue category name into a tag-friendly slug."""
    out = []
    for ch in category.lower():
        if ch.isalnum():
            out.append(ch)
        elif out and out[-1] != "_":
            out.append("_")
    return "".join(out).strip("_")


def load_analysis_rules(path: Optional[str] = None) -> Dict[str, Any]:
    """Load correlation rule overrides from YAML, merged onto the defaults."""
    rules = {name: dict(values) for name, values in DEFAULT_ANALYSIS_RULES.items()}
    if not path:
        return rules
    if not os.path.exists(path):
        logger.debug(f"Analysis rules file not found at {path}, using defaults")
        return rules

    try:
        with open(path, "r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load analysis rules from {path}: {e}. Using defaults.")
        return rules

    for name, values in overrides.items():
        if name not in rules:
            logger.warning(f"Ignoring unknown analysis rule '{name}' in {path}")
            continue
        if isinstance(values, dict):
            rules[name].update(values)
    return rules
