"""Analysis result and report models for FeedbackHub."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .models import Sentiment, parse_datetime


class InsightType(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    OPPORTUNITY = "opportunity"

    @property
    def rank(self) -> int:
        return _INSIGHT_RANK[self]


_INSIGHT_RANK = {InsightType.CRITICAL: 0, InsightType.WARNING: 1, InsightType.OPPORTUNITY: 2}


class TrendDirection(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


@dataclass
class Evidence:
    """One (source, summary) pair backing an insight."""
    source: str
    summary: str

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "summary": self.summary}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Evidence":
        return cls(source=data["source"], summary=data["summary"])


@dataclass
class Insight:
    """A correlated, evidence-backed finding."""
    type: InsightType
    title: str
    description: str
    evidence: List[Evidence]
    recommendation: str
    expected_impact: str
    confidence: float

    def __post_init__(self):
        self.type = InsightType(self.type)
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Insight confidence must be within [0, 1], got {self.confidence}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "evidence": [e.to_dict() for e in self.evidence],
            "recommendation": self.recommendation,
            "expectedImpact": self.expected_impact,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Insight":
        return cls(
            type=InsightType(data["type"]),
            title=data["title"],
            description=data["description"],
            evidence=[Evidence.from_dict(e) for e in data.get("evidence", [])],
            recommendation=data["recommendation"],
            expected_impact=data["expectedImpact"],
            confidence=float(data["confidence"]),
        )


@dataclass
class Action:
    """A prioritized recommendation. Priority 1 is the most urgent."""
    priority: int
    action: str
    impact: str
    effort: str
    timeline: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "priority": self.priority,
            "action": self.action,
            "impact": self.impact,
            "effort": self.effort,
            "timeline": self.timeline,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Action":
        return cls(
            priority=int(data["priority"]),
            action=data["action"],
            impact=data["impact"],
            effort=data["effort"],
            timeline=data["timeline"],
        )


@dataclass
class Issue:
    """A recurring complaint category and how often it shows up."""
    category: str
    count: int
    examples: List[str] = field(default_factory=list)
    source_counts: Dict[str, int] = field(default_factory=dict)
    sentiment: Sentiment = Sentiment.NEUTRAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "count": self.count,
            "examples": list(self.examples),
            "sourceCounts": dict(self.source_counts),
            "sentiment": self.sentiment.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        return cls(
            category=data["category"],
            count=int(data["count"]),
            examples=list(data.get("examples", [])),
            source_counts=dict(data.get("sourceCounts", {})),
            sentiment=Sentiment(data.get("sentiment", "neutral")),
        )


@dataclass
class Trend:
    topic: str
    direction: TrendDirection
    old_rate: float
    recent_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topic": self.topic,
            "trend": self.direction.value,
            "oldRate": self.old_rate,
            "recentRate": self.recent_rate,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trend":
        return cls(
            topic=data["topic"],
            direction=TrendDirection(data["trend"]),
            old_rate=float(data["oldRate"]),
            recent_rate=float(data["recentRate"]),
        )


@dataclass
class SentimentBreakdown:
    positive: int = 0
    negative: int = 0
    neutral: int = 0
    mixed: int = 0

    @property
    def total(self) -> int:
        return self.positive + self.negative + self.neutral + self.mixed

    def positive_ratio(self) -> Optional[float]:
        """Share of positive items, or None when there is nothing to measure."""
        if self.total == 0:
            return None
        return self.positive / self.total

    def to_dict(self) -> Dict[str, int]:
        return {
            "positive": self.positive,
            "negative": self.negative,
            "neutral": self.neutral,
            "mixed": self.mixed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SentimentBreakdown":
        return cls(
            positive=int(data.get("positive", 0)),
            negative=int(data.get("negative", 0)),
            neutral=int(data.get("neutral", 0)),
            mixed=int(data.get("mixed", 0)),
        )


@dataclass
class ViralItem:
    """A highly engaged item worth reacting to."""
    source: str
    text: str
    engagement: int
    sentiment: Optional[Sentiment]
    suggestion: str
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "text": self.text,
            "engagement": self.engagement,
            "sentiment": self.sentiment.value if self.sentiment else None,
            "suggestion": self.suggestion,
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViralItem":
        sentiment = data.get("sentiment")
        return cls(
            source=data["source"],
            text=data["text"],
            engagement=int(data["engagement"]),
            sentiment=Sentiment(sentiment) if sentiment else None,
            suggestion=data["suggestion"],
            url=data.get("url"),
        )


@dataclass
class ReportSummary:
    total_feedback: int
    real_data_percentage: int
    real_reviews_percentage: int
    source_breakdown: Dict[str, int]
    sentiment_breakdown: SentimentBreakdown
    real_data_sources: List[str]
    mock_data_sources: List[str]
    health_score: int
    average_rating: Optional[float] = None
    velocity: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFeedback": self.total_feedback,
            "realDataPercentage": self.real_data_percentage,
            "realReviewsPercentage": self.real_reviews_percentage,
            "sourceBreakdown": dict(self.source_breakdown),
            "sentimentBreakdown": self.sentiment_breakdown.to_dict(),
            "realDataSources": list(self.real_data_sources),
            "mockDataSources": list(self.mock_data_sources),
            "healthScore": self.health_score,
            "averageRating": self.average_rating,
            "velocity": dict(self.velocity),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportSummary":
        average_rating = data.get("averageRating")
        return cls(
            total_feedback=int(data["totalFeedback"]),
            real_data_percentage=int(data["realDataPercentage"]),
            real_reviews_percentage=int(data.get("realReviewsPercentage", 0)),
            source_breakdown={k: int(v) for k, v in data.get("sourceBreakdown", {}).items()},
            sentiment_breakdown=SentimentBreakdown.from_dict(data.get("sentimentBreakdown", {})),
            real_data_sources=list(data.get("realDataSources", [])),
            mock_data_sources=list(data.get("mockDataSources", [])),
            health_score=int(data.get("healthScore", 0)),
            average_rating=float(average_rating) if average_rating is not None else None,
            velocity={k: float(v) for k, v in data.get("velocity", {}).items()},
        )


@dataclass
class Report:
    """Final output of one analysis run, handed to the dashboard/API."""
    summary: ReportSummary
    insights: List[Insight] = field(default_factory=list)
    recommendations: List[Action] = field(default_factory=list)
    issues: List[Issue] = field(default_factory=list)
    trends: List[Trend] = field(default_factory=list)
    viral_content: List[ViralItem] = field(default_factory=list)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "insights": [i.to_dict() for i in self.insights],
            "recommendations": [a.to_dict() for a in self.recommendations],
            "issues": [i.to_dict() for i in self.issues],
            "trends": [t.to_dict() for t in self.trends],
            "viralContent": [v.to_dict() for v in self.viral_content],
            "generatedAt": self.generated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Report":
        return cls(
            summary=ReportSummary.from_dict(data["summary"]),
            insights=[Insight.from_dict(i) for i in data.get("insights", [])],
            recommendations=[Action.from_dict(a) for a in data.get("recommendations", [])],
            issues=[Issue.from_dict(i) for i in data.get("issues", [])],
            trends=[Trend.from_dict(t) for t in data.get("trends", [])],
            viral_content=[ViralItem.from_dict(v) for v in data.get("viralContent", [])],
            generated_at=parse_datetime(data["generatedAt"]) if data.get("generatedAt") else datetime.now(timezone.utc),
        )

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, payload: str) -> "Report":
        return cls.from_dict(json.loads(payload))
