"""Cross-source insight correlation."""

import logging
import re
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

from ..core.models import FeedbackItem
from ..core.report import Evidence, Insight, InsightType
from ..core.taxonomy import ISSUE_CATEGORIES, PERFORMANCE_CATEGORY, load_analysis_rules

logger = logging.getLogger(__name__)


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


class InsightCorrelator:
    """
    Applies fixed heuristic rules to the whole feed.

    Each rule carries its own confidence. Thresholds come from
    ``config/analysis_rules.yaml`` when present, otherwise from the built-in
    defaults.
    """

    def __init__(self, rules: Optional[Dict[str, Dict[str, Any]]] = None,
                 performance_keywords: Optional[Sequence[str]] = None):
        self.rules = rules or load_analysis_rules()
        self.performance_keywords = list(performance_keywords or ISSUE_CATEGORIES[PERFORMANCE_CATEGORY])

    def correlate(self, items: Sequence[FeedbackItem]) -> List[Insight]:
        insights = []
        for rule in (self._performance_crisis, self._competitive_pressure, self._feature_demand):
            insight = rule(items)
            if insight is not None:
                logger.info(f"Insight [{insight.type.value}] {insight.title}")
                insights.append(insight)

        insights.sort(key=lambda insight: (insight.type.rank, -len(insight.evidence)))
        return insights

    def _performance_crisis(self, items: Sequence[FeedbackItem]) -> Optional[Insight]:
        rule = self.rules["performance_crisis"]
        per_source = Counter(
            item.source for item in items
            if _contains_any(item.text.lower(), self.performance_keywords)
        )
        qualifying = [
            (source, count) for source, count in per_source.most_common()
            if count > rule["per_source_threshold"]
        ]
        if len(qualifying) < rule["min_sources"]:
            return None

        return Insight(
            type=InsightType.CRITICAL,
            title="Performance Crisis Detected",
            description=(
                f"Performance issues are damaging brand reputation across "
                f"{len(qualifying)} channels"
            ),
            evidence=[
                Evidence(source=source, summary=f"{count} items mention performance issues")
                for source, count in qualifying
            ],
            recommendation="Emergency performance optimization sprint required",
            expected_impact="Prevent 30% user churn, improve rating by 1.2 stars",
            confidence=rule["confidence"],
        )

    def _competitive_pressure(self, items: Sequence[FeedbackItem]) -> Optional[Insight]:
        rule = self.rules["competitive_pressure"]
        mentions = [item for item in items if _contains_any(item.text.lower(), rule["keywords"])]
        if len(mentions) <= rule["threshold"]:
            return None

        by_source = Counter(item.source for item in mentions)
        return Insight(
            type=InsightType.WARNING,
            title="Losing Ground to Competitors",
            description="Users frequently comparing unfavorably to competitors",
            evidence=[
                Evidence(source=source, summary=f"{count} mentions of competitors")
                for source, count in by_source.most_common()
            ],
            recommendation="Conduct competitive analysis and feature parity assessment",
            expected_impact="Reduce customer churn by 20%",
            confidence=rule["confidence"],
        )

    def _feature_demand(self, items: Sequence[FeedbackItem]) -> Optional[Insight]:
        rule = self.rules["feature_demand"]
        intent = re.compile(r"\b(" + "|".join(re.escape(k) for k in rule["intent_keywords"]) + ")", re.IGNORECASE)

        requests: Dict[str, Counter] = {}
        for feature in rule["features"]:
            pattern = re.compile(r"\b" + re.escape(feature) + r"\b", re.IGNORECASE)
            hits = Counter(
                item.source for item in items
                if pattern.search(item.text) and intent.search(item.text)
            )
            if sum(hits.values()) > rule["threshold"]:
                requests[feature] = hits

        if not requests:
            return None

        # Highest combined count wins; vocabulary order breaks ties
        top_feature = max(requests, key=lambda feature: sum(requests[feature].values()))
        hits = requests[top_feature]
        return Insight(
            type=InsightType.OPPORTUNITY,
            title="High-Demand Feature Identified",
            description=f"Users consistently requesting: {top_feature}",
            evidence=[
                Evidence(source=source, summary=f"{count} requests for {top_feature}")
                for source, count in hits.most_common()
            ],
            recommendation=f"Prioritize development of {top_feature}",
            expected_impact="Increase user satisfaction by 35%, potential 15% revenue growth",
            confidence=rule["confidence"],
        )
