#!/usr/bin/env python3
"""
Insight aggregation: counts, distributions, recommendations, trends
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from civic_triage.analytics import (
    ClassifiedComplaint,
    InsightGenerator,
    average_response_days,
    top_categories,
    urgency_trends
)
from civic_triage.analytics.insights import (
    CONFIDENCE_RECOMMENDATION,
    CRITICAL_RECOMMENDATION,
    NEGATIVE_RECOMMENDATION
)
from civic_triage.classification import ComplaintClassifier, SentimentScorer
from civic_triage.core.logger import get_logger

logger = get_logger(__name__)


def complaint(priority="Low", sentiment="Neutral", department="Public Works",
              keywords=None, confidence=0.9, **extra):
    record = {
        "priority": priority,
        "sentiment": sentiment,
        "department": department,
        "urgency_keywords": keywords if keywords is not None else [],
        "ai_confidence": confidence,
    }
    record.update(extra)
    return record


class TestInsightGenerator:

    @classmethod
    def setup_class(cls):
        cls.generator = InsightGenerator()
        logger.info("Testing insight aggregation")

    def test_critical_share_recommendation(self):
        complaints = [complaint(priority="Critical")] * 2 + [complaint()] * 8
        insights = self.generator.generate_insights(complaints)

        assert insights.total_complaints == 10
        assert insights.critical_count == 2
        assert insights.recommendations == [CRITICAL_RECOMMENDATION]

    def test_share_threshold_is_strict(self):
        complaints = [complaint(priority="Critical")] * 2 + [complaint()] * 8
        generator = InsightGenerator(critical_share_threshold=0.2)

        assert CRITICAL_RECOMMENDATION not in generator.generate_insights(complaints).recommendations

    def test_negative_sentiment_recommendation(self):
        complaints = [complaint(sentiment="Negative")] * 7 + [complaint(sentiment="Positive")] * 3
        insights = self.generator.generate_insights(complaints)

        assert insights.sentiment_distribution == {"Positive": 3, "Neutral": 0, "Negative": 7}
        assert NEGATIVE_RECOMMENDATION in insights.recommendations

        six_of_ten = [complaint(sentiment="Negative")] * 6 + [complaint()] * 4
        assert NEGATIVE_RECOMMENDATION not in self.generator.generate_insights(six_of_ten).recommendations

    def test_low_confidence_recommendation(self):
        complaints = [complaint(confidence=0.5), complaint(confidence=0.8)]
        insights = self.generator.generate_insights(complaints)

        assert insights.avg_confidence == pytest.approx(0.65)
        assert insights.recommendations == [CONFIDENCE_RECOMMENDATION]

    def test_missing_confidence_counts_as_zero(self):
        complaints = [complaint(confidence=0.9), complaint(confidence=None)]
        insights = self.generator.generate_insights(complaints)

        assert insights.avg_confidence == pytest.approx(0.45)

    def test_distributions(self):
        complaints = [
            complaint(priority="High", department="Sanitation", keywords=["overflowing", "toxic"]),
            complaint(priority="High", department="Sanitation", keywords='["toxic"]'),
            complaint(department="Fire Department", keywords=None),
            complaint(department=None, sentiment="Mixed"),
        ]
        insights = self.generator.generate_insights(complaints)

        assert insights.high_priority_count == 2
        assert insights.department_distribution == {"Sanitation": 2, "Fire Department": 1}
        assert insights.top_urgency_keywords == {"overflowing": 1, "toxic": 2}
        assert insights.sentiment_distribution["Neutral"] == 3

    def test_empty_collection(self):
        insights = self.generator.generate_insights([])

        assert insights.total_complaints == 0
        assert insights.avg_confidence == 0
        # 0 < 0.7 still triggers the confidence recommendation
        assert insights.recommendations == [CONFIDENCE_RECOMMENDATION]

    def test_to_dict_keys(self):
        data = self.generator.generate_insights([complaint()]).to_dict()

        assert set(data) == {
            "totalComplaints", "criticalCount", "highPriorityCount",
            "sentimentDistribution", "topUrgencyKeywords",
            "departmentDistribution", "avgConfidence", "recommendations"
        }

    def test_invalid_keyword_json(self):
        with pytest.raises(ValueError):
            self.generator.generate_insights([complaint(keywords="[not json")])


class TestClassifiedComplaint:

    def test_camel_case_payload(self):
        record = ClassifiedComplaint.from_dict({
            "id": "7",
            "priority": "Critical",
            "urgencyKeywords": ["fire"],
            "confidence": 0.75,
            "submittedAt": "2026-10-01T08:00:00Z",
            "lastUpdated": "2026-10-03T08:00:00Z",
        })

        assert record.urgency_keywords == ["fire"]
        assert record.confidence == 0.75
        assert (record.last_updated - record.submitted_at).days == 2

    def test_invalid_timestamp(self):
        with pytest.raises(ValueError):
            ClassifiedComplaint.from_dict({"submitted_at": "yesterday"})

    def test_batch_item_payload_is_unwrapped(self):
        record = ClassifiedComplaint.from_dict({
            "id": 3,
            "analysis": {
                "priority": "High",
                "sentiment": "Negative",
                "department": "Sanitation",
                "urgencyKeywords": ["overflowing"],
                "confidence": 0.8,
                "analysis": {"textLength": 40, "wordCount": 7},
            },
        })

        assert record.id == 3
        assert record.priority == "High"
        assert record.department == "Sanitation"
        assert record.urgency_keywords == ["overflowing"]
        assert record.confidence == 0.8

    def test_result_metrics_are_not_unwrapped(self):
        record = ClassifiedComplaint.from_dict(complaint(priority="Critical", analysis={"textLength": 12}))

        assert record.priority == "Critical"

    def test_aware_timestamps_become_naive_utc(self):
        record = ClassifiedComplaint.from_dict({
            "submitted_at": "2026-10-01T10:00:00+02:00",
            "last_updated": datetime(2026, 10, 2, 8, 0, tzinfo=timezone(timedelta(hours=-4))),
        })

        assert record.submitted_at == datetime(2026, 10, 1, 8, 0)
        assert record.last_updated == datetime(2026, 10, 2, 12, 0)

    @pytest.mark.parametrize("value", ["not a record", 42, None])
    def test_unsupported_input_raises(self, value):
        with pytest.raises(ValueError):
            InsightGenerator().generate_insights([value])


class TestDashboardHelpers:

    def test_average_response_days(self):
        complaints = [
            complaint(status="Resolved", submitted_at=datetime(2026, 10, 1), last_updated=datetime(2026, 10, 3)),
            complaint(status="Resolved", submitted_at=datetime(2026, 10, 1), last_updated=datetime(2026, 10, 6)),
            complaint(status="In Progress", submitted_at=datetime(2026, 9, 1), last_updated=datetime(2026, 10, 6)),
        ]

        # mean of 2 and 5 days is 3.5, rounded half up
        assert average_response_days(complaints) == 4
        assert average_response_days([complaint(status="Submitted")]) == 0

    def test_average_response_days_mixed_offsets(self):
        complaints = [
            complaint(status="Resolved", submitted_at="2026-10-01T00:00:00Z", last_updated=datetime(2026, 10, 3)),
            complaint(status="Resolved", submitted_at=datetime(2026, 10, 1), last_updated="2026-10-03T00:00:00+00:00"),
        ]

        assert average_response_days(complaints) == 2

    def test_top_categories(self):
        complaints = (
            [complaint(category="Noise")] * 3
            + [complaint(category="Traffic")] * 1
            + [complaint(category="Sanitation")] * 3
        )

        assert top_categories(complaints, limit=2) == [
            {"category": "Noise", "count": 3},
            {"category": "Sanitation", "count": 3},
        ]

    def test_urgency_trends(self):
        complaints = [
            complaint(priority="Critical", submitted_at=datetime(2026, 10, 18, 9, 30)),
            complaint(priority="High", submitted_at=datetime(2026, 10, 18, 11, 0)),
            complaint(priority="Low", submitted_at=datetime(2026, 10, 12, 14, 0)),
            complaint(priority="Critical", submitted_at=datetime(2026, 10, 1, 8, 0)),
        ]
        trends = urgency_trends(complaints, today=date(2026, 10, 18))

        assert len(trends) == 7
        assert trends[0] == {"date": "2026-10-12", "critical": 0, "high": 0, "total": 1}
        assert trends[-1] == {"date": "2026-10-18", "critical": 1, "high": 1, "total": 2}
        assert sum(day["total"] for day in trends) == 3


class TestClassifierOutput:
    """Insights fed directly from the classifier"""

    @classmethod
    def setup_class(cls):
        cls.classifier = ComplaintClassifier(sentiment_scorer=SentimentScorer(overrides={}))
        cls.items = [
            {"id": "a", "title": "Urgent gas leak", "description": "dangerous, immediate help"},
            {"id": "b", "title": "Faded bench paint", "description": "in the park"},
            {"id": "c", "title": "Faded bench paint", "description": "in the park"},
        ]
        cls.batch = cls.classifier.classify_many(cls.items)
        cls.generator = InsightGenerator()
        logger.info("Testing insights over classifier output")

    def expected_departments(self):
        counts = {}
        for item in self.batch:
            counts[item.result.department] = counts.get(item.result.department, 0) + 1
        return counts

    def check(self, insights):
        assert insights.total_complaints == 3
        assert insights.critical_count == 1
        assert insights.department_distribution == self.expected_departments()
        assert sum(insights.sentiment_distribution.values()) == 3
        assert "gas leak" in insights.top_urgency_keywords
        assert insights.avg_confidence == pytest.approx(
            sum(item.result.confidence for item in self.batch) / 3
        )

    def test_batch_items(self):
        self.check(self.generator.generate_insights(self.batch))

    def test_batch_item_dicts(self):
        self.check(self.generator.generate_insights([item.to_dict() for item in self.batch]))

    def test_classification_results(self):
        insights = self.generator.generate_insights([item.result for item in self.batch])

        self.check(insights)
        assert insights.avg_confidence > 0
