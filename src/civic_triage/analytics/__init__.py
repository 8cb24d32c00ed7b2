"""
Civic Triage Analytics Module

Dashboard insights over classified complaints
"""

from .insights import (
    ClassifiedComplaint,
    ComplaintInsights,
    InsightGenerator,
    average_response_days,
    top_categories,
    urgency_trends
)

__all__ = [
    "ClassifiedComplaint",
    "ComplaintInsights",
    "InsightGenerator",
    "average_response_days",
    "top_categories",
    "urgency_trends"
]
