"""
Dashboard insights over already-classified complaints.

Aggregates priority, sentiment, department and urgency keyword counts,
average classifier confidence, and threshold-triggered recommendations.
"""

import json
import math
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
from dataclasses import dataclass, field

from civic_triage.classification.complaint_classifier import BatchItemResult, ClassificationResult
from civic_triage.core.config import get_config
from civic_triage.core.logger import get_logger

logger = get_logger(__name__)

SENTIMENT_LABELS = ("Positive", "Neutral", "Negative")

CRITICAL_RECOMMENDATION = ("High number of critical complaints detected. "
                           "Consider increasing response team capacity.")
NEGATIVE_RECOMMENDATION = ("Majority of complaints show negative sentiment. "
                           "Review communication and response strategies.")
CONFIDENCE_RECOMMENDATION = ("AI classification confidence is low. "
                             "Consider improving keyword dictionaries and training data.")

@dataclass
class ClassifiedComplaint:
    """A stored complaint together with its classification"""
    id: Any = None
    priority: Optional[str] = None
    sentiment: Optional[str] = None
    department: Optional[str] = None
    urgency_keywords: List[str] = field(default_factory=list)
    confidence: Optional[float] = None
    category: Optional[str] = None
    status: Optional[str] = None
    submitted_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "ClassifiedComplaint":
        """
        Build from a storage row or an API payload.

        Accepts snake_case storage names (``urgency_keywords`` as a list or
        a JSON string, ``ai_confidence``) and camelCase front-end names.
        Batch output items (``{"id": ..., "analysis": {...}}``) are unwrapped;
        fields on the outer record take precedence.

        Raises:
            ValueError: if keywords or timestamps cannot be parsed
        """
        nested = record.get("analysis")
        if isinstance(nested, Mapping) and "priority" in nested:
            outer = {key: value for key, value in record.items() if key != "analysis"}
            record = {**nested, **outer}

        keywords = _first(record, "urgency_keywords", "urgencyKeywords")
        confidence = _first(record, "ai_confidence", "confidence")

        return cls(
            id=record.get("id"),
            priority=record.get("priority"),
            sentiment=record.get("sentiment"),
            department=_first(record, "department", "department_name"),
            urgency_keywords=_parse_keywords(keywords),
            confidence=float(confidence) if confidence is not None else None,
            category=record.get("category"),
            status=record.get("status"),
            submitted_at=_parse_datetime(_first(record, "submitted_at", "submittedAt")),
            last_updated=_parse_datetime(_first(record, "last_updated", "lastUpdated", "updated_at"))
        )

    @classmethod
    def from_result(cls, result: ClassificationResult, id: Any = None) -> "ClassifiedComplaint":
        """Build from a classifier result"""
        return cls(
            id=id,
            priority=result.priority.value,
            sentiment=result.sentiment.value,
            department=result.department,
            urgency_keywords=list(result.urgency_keywords),
            confidence=result.confidence
        )

@dataclass
class ComplaintInsights:
    """Aggregate statistics for the dashboard"""
    total_complaints: int = 0
    critical_count: int = 0
    high_priority_count: int = 0
    sentiment_distribution: Dict[str, int] = field(
        default_factory=lambda: {label: 0 for label in SENTIMENT_LABELS}
    )
    top_urgency_keywords: Dict[str, int] = field(default_factory=dict)
    department_distribution: Dict[str, int] = field(default_factory=dict)
    avg_confidence: float = 0.0
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalComplaints": self.total_complaints,
            "criticalCount": self.critical_count,
            "highPriorityCount": self.high_priority_count,
            "sentimentDistribution": dict(self.sentiment_distribution),
            "topUrgencyKeywords": dict(self.top_urgency_keywords),
            "departmentDistribution": dict(self.department_distribution),
            "avgConfidence": self.avg_confidence,
            "recommendations": list(self.recommendations),
        }

class InsightGenerator:
    """
    Builds dashboard insights from classified complaints.

    Recommendation thresholds default to the configured values:
    critical share 0.1, negative share 0.6, minimum average confidence 0.7.
    Share thresholds are strict (a share equal to the threshold does not
    trigger).
    """

    def __init__(self,
                 critical_share_threshold: Optional[float] = None,
                 negative_share_threshold: Optional[float] = None,
                 min_avg_confidence: Optional[float] = None):
        config = get_config()
        self.critical_share_threshold = _default(critical_share_threshold, config.CRITICAL_SHARE_THRESHOLD)
        self.negative_share_threshold = _default(negative_share_threshold, config.NEGATIVE_SHARE_THRESHOLD)
        self.min_avg_confidence = _default(min_avg_confidence, config.MIN_AVG_CONFIDENCE)

    def generate_insights(self, complaints: Iterable[Any]) -> ComplaintInsights:
        records = _coerce_all(complaints)
        insights = ComplaintInsights(total_complaints=len(records))

        keyword_counts: Dict[str, int] = {}
        department_counts: Dict[str, int] = {}
        total_confidence = 0.0

        for complaint in records:
            # Priority counts
            if complaint.priority == "Critical":
                insights.critical_count += 1
            if complaint.priority == "High":
                insights.high_priority_count += 1

            if complaint.sentiment in insights.sentiment_distribution:
                insights.sentiment_distribution[complaint.sentiment] += 1

            if complaint.department:
                department_counts[complaint.department] = department_counts.get(complaint.department, 0) + 1

            for keyword in complaint.urgency_keywords:
                keyword_counts[keyword] = keyword_counts.get(keyword, 0) + 1

            if complaint.confidence:
                total_confidence += complaint.confidence

        insights.top_urgency_keywords = keyword_counts
        insights.department_distribution = department_counts
        insights.avg_confidence = total_confidence / len(records) if records else 0.0
        insights.recommendations = self._recommendations(insights)

        logger.info(f"Generated insights for {insights.total_complaints} complaints: "
                    f"{insights.critical_count} critical, "
                    f"{len(insights.recommendations)} recommendations")

        return insights

    def _recommendations(self, insights: ComplaintInsights) -> List[str]:
        recommendations = []
        total = insights.total_complaints

        if insights.critical_count > total * self.critical_share_threshold:
            recommendations.append(CRITICAL_RECOMMENDATION)

        if insights.sentiment_distribution["Negative"] > total * self.negative_share_threshold:
            recommendations.append(NEGATIVE_RECOMMENDATION)

        if insights.avg_confidence < self.min_avg_confidence:
            recommendations.append(CONFIDENCE_RECOMMENDATION)

        return recommendations


def average_response_days(complaints: Iterable[Any]) -> int:
    """Mean days from submission to last update over resolved complaints"""
    resolved = [
        c for c in _coerce_all(complaints)
        if c.status == "Resolved" and c.submitted_at and c.last_updated
    ]
    if not resolved:
        return 0

    total_seconds = sum((c.last_updated - c.submitted_at).total_seconds() for c in resolved)
    days = total_seconds / len(resolved) / 86400
    # Half-up rounding
    return math.floor(days + 0.5)


def top_categories(complaints: Iterable[Any], limit: int = 5) -> List[Dict[str, Any]]:
    """Most frequent categories, most common first (ties keep first-seen order)"""
    counts = Counter(c.category for c in _coerce_all(complaints))
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [{"category": category, "count": count} for category, count in ranked[:limit]]


def urgency_trends(complaints: Iterable[Any], today: date, days: int = 7) -> List[Dict[str, Any]]:
    """Per-day critical/high/total counts for the ``days`` days ending at ``today``"""
    if isinstance(today, datetime):
        today = today.date()

    records = _coerce_all(complaints)
    trends = []

    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_complaints = [c for c in records if c.submitted_at and c.submitted_at.date() == day]
        trends.append({
            "date": day.isoformat(),
            "critical": sum(1 for c in day_complaints if c.priority == "Critical"),
            "high": sum(1 for c in day_complaints if c.priority == "High"),
            "total": len(day_complaints)
        })

    return trends


def _coerce(complaint: Any) -> ClassifiedComplaint:
    if isinstance(complaint, ClassifiedComplaint):
        return complaint
    if isinstance(complaint, ClassificationResult):
        return ClassifiedComplaint.from_result(complaint)
    if isinstance(complaint, BatchItemResult):
        return ClassifiedComplaint.from_result(complaint.result, id=complaint.id)
    if isinstance(complaint, Mapping):
        return ClassifiedComplaint.from_dict(complaint)
    raise ValueError(f"Cannot read a classified complaint from {type(complaint).__name__}")


def _coerce_all(complaints: Iterable[Any]) -> Sequence[ClassifiedComplaint]:
    return [_coerce(c) for c in complaints]


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _default(value: Optional[float], fallback: float) -> float:
    return fallback if value is None else value


def _parse_keywords(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid urgency keyword list: {value!r}") from e
    if not isinstance(value, list):
        raise ValueError(f"Urgency keywords must be a list, got {type(value).__name__}")
    return [str(keyword) for keyword in value]


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse to a naive datetime; offset-aware values are converted to UTC"""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(f"Invalid timestamp: {value!r}") from e

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
