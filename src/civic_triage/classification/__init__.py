"""
Civic Triage Classification Module

Keyword-based priority, sentiment and department classification
"""

from .vocabulary import Vocabulary, DEFAULT_VOCABULARY
from .sentiment import SentimentScorer
from .complaint_classifier import (
    BatchItemResult,
    ClassificationInput,
    ClassificationResult,
    ComplaintClassifier,
    ComplaintSuggestion,
    Priority,
    PriorityScore,
    Sentiment,
    TextAnalysis,
    get_complaint_classifier
)
from .batch_processor import BatchClassifier, BatchRunResult

__all__ = [
    "Vocabulary",
    "DEFAULT_VOCABULARY",
    "SentimentScorer",
    "BatchItemResult",
    "ClassificationInput",
    "ClassificationResult",
    "ComplaintClassifier",
    "ComplaintSuggestion",
    "Priority",
    "PriorityScore",
    "Sentiment",
    "TextAnalysis",
    "get_complaint_classifier",
    "BatchClassifier",
    "BatchRunResult"
]
