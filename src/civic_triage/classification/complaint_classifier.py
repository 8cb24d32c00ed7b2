"""
Complaint Classification Module

Rule-based triage of citizen complaints: priority, sentiment, department
routing, urgency keywords, tags and a confidence score, all derived from
keyword lookups over the lowercased title and description.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from dataclasses import dataclass, field, asdict

from civic_triage.core.config import get_config
from civic_triage.core.logger import get_logger
from civic_triage.preprocessing.normalizer import TextNormalizer
from .sentiment import SentimentScorer
from .vocabulary import Vocabulary, DEFAULT_VOCABULARY

logger = get_logger(__name__)

FALLBACK_ERROR = "Analysis failed, using defaults"
BASE_CONFIDENCE = 0.5

class Priority(str, Enum):
    """Ordinal severity of a complaint"""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

class Sentiment(str, Enum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"

_PRIORITY_RANK = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.CRITICAL: 3,
}

# (tier, minimum score, minimum urgency matches), checked in order
PRIORITY_THRESHOLDS = (
    (Priority.CRITICAL, 12, 4),
    (Priority.HIGH, 8, 3),
    (Priority.MEDIUM, 4, 1),
)

@dataclass(frozen=True)
class ClassificationInput:
    """Title/description pair submitted for classification"""
    title: str = ""
    description: str = ""
    id: Any = None

    def __post_init__(self):
        object.__setattr__(self, "title", _as_text(self.title))
        object.__setattr__(self, "description", _as_text(self.description))

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "ClassificationInput":
        return cls(
            title=record.get("title"),
            description=record.get("description"),
            id=record.get("id")
        )

    @classmethod
    def coerce(cls, item: Any) -> "ClassificationInput":
        """Accept an input instance, a mapping or any object with title/description attributes"""
        if isinstance(item, cls):
            return item
        if isinstance(item, Mapping):
            return cls.from_dict(item)
        return cls(
            title=getattr(item, "title", None),
            description=getattr(item, "description", None),
            id=getattr(item, "id", None)
        )

@dataclass(frozen=True)
class PriorityScore:
    """Components of the weighted priority score"""
    urgency_matches: int
    sentiment_score: float
    keyword_density: float
    length_factor: float
    score: float

@dataclass(frozen=True)
class TextAnalysis:
    """Diagnostic metrics attached to every result"""
    text_length: int = 0
    word_count: int = 0
    urgency_score: int = 0
    sentiment_score: float = 0.0
    priority_score: float = 0.0
    error: Optional[str] = None

@dataclass(frozen=True)
class ClassificationResult:
    """Result of complaint classification"""
    priority: Priority
    sentiment: Sentiment
    department: str
    urgency_keywords: Tuple[str, ...]
    tags: Tuple[str, ...]
    confidence: float
    analysis: TextAnalysis = field(default_factory=TextAnalysis)

    @property
    def is_fallback(self) -> bool:
        return self.analysis.error is not None

    def to_dict(self) -> Dict[str, Any]:
        analysis = {
            "textLength": self.analysis.text_length,
            "wordCount": self.analysis.word_count,
            "urgencyScore": self.analysis.urgency_score,
            "sentimentScore": self.analysis.sentiment_score,
            "priorityScore": self.analysis.priority_score,
        }
        if self.analysis.error is not None:
            analysis["error"] = self.analysis.error

        return {
            "priority": self.priority.value,
            "sentiment": self.sentiment.value,
            "department": self.department,
            "urgencyKeywords": list(self.urgency_keywords),
            "tags": list(self.tags),
            "confidence": self.confidence,
            "analysis": analysis,
        }

@dataclass(frozen=True)
class ComplaintSuggestion:
    """Live suggestions shown while a complaint is being written"""
    priority: Priority
    sentiment: Sentiment
    suggested_department: str
    urgency_keywords: Tuple[str, ...]
    suggested_tags: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["priority"] = self.priority.value
        data["sentiment"] = self.sentiment.value
        data["urgency_keywords"] = list(self.urgency_keywords)
        data["suggested_tags"] = list(self.suggested_tags)
        return data

@dataclass(frozen=True)
class BatchItemResult:
    id: Any
    result: ClassificationResult

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "analysis": self.result.to_dict()}

class ComplaintClassifier:
    """
    Deterministic keyword-based complaint classifier.

    Holds no mutable state: every call reads only the injected vocabulary
    and sentiment lexicon, so a single instance can be shared across
    threads. Any internal failure degrades to the default result.
    """

    def __init__(self,
                 vocabulary: Optional[Vocabulary] = None,
                 sentiment_scorer: Optional[SentimentScorer] = None,
                 normalizer: Optional[TextNormalizer] = None,
                 urgency_keyword_limit: Optional[int] = None,
                 tag_limit: Optional[int] = None):
        config = get_config()
        self.vocabulary = vocabulary or DEFAULT_VOCABULARY
        self.sentiment_scorer = sentiment_scorer or SentimentScorer()
        self.normalizer = normalizer or TextNormalizer()
        self.urgency_keyword_limit = (urgency_keyword_limit if urgency_keyword_limit is not None
                                      else config.URGENCY_KEYWORD_LIMIT)
        self.tag_limit = tag_limit if tag_limit is not None else config.TAG_LIMIT

        if self.urgency_keyword_limit < 1:
            raise ValueError(f"urgency_keyword_limit must be positive, got {self.urgency_keyword_limit}")
        if self.tag_limit < 1:
            raise ValueError(f"tag_limit must be positive, got {self.tag_limit}")

    def default_result(self, error: Optional[str] = None) -> ClassificationResult:
        """Result used for empty input and on internal failure"""
        return ClassificationResult(
            priority=Priority.LOW,
            sentiment=Sentiment.NEUTRAL,
            department=self.vocabulary.fallback_department,
            urgency_keywords=(),
            tags=(),
            confidence=BASE_CONFIDENCE,
            analysis=TextAnalysis(error=error)
        )

    def classify(self, title: Optional[str], description: Optional[str]) -> ClassificationResult:
        """
        Classify a complaint from its title and description.

        Never raises: empty input yields the default result, and any error
        inside the scoring steps is logged and replaced by the default
        result with ``analysis.error`` set.
        """
        try:
            complaint = ClassificationInput(title=title, description=description)
            corpus = self.normalizer.build_corpus(complaint.title, complaint.description)
            stats = self.normalizer.get_stats(corpus)

            if stats.is_empty:
                return self.default_result()

            priority_score = self._score_priority(corpus)
            priority = self._priority_from_score(priority_score)
            sentiment = self._sentiment_from_score(priority_score.sentiment_score)
            department = self._classify_department(corpus)
            urgency_keywords = self._extract_urgency_keywords(corpus)
            tags = self._extract_tags(corpus)
            confidence = self._calculate_confidence(corpus, urgency_keywords, department)

            logger.debug(f"Classified complaint: priority={priority.value}, "
                         f"department={department}, confidence={confidence:.2f}")

            return ClassificationResult(
                priority=priority,
                sentiment=sentiment,
                department=department,
                urgency_keywords=urgency_keywords,
                tags=tags,
                confidence=confidence,
                analysis=TextAnalysis(
                    text_length=stats.text_length,
                    word_count=stats.word_count,
                    urgency_score=len(urgency_keywords),
                    sentiment_score=priority_score.sentiment_score,
                    priority_score=priority_score.score
                )
            )

        except Exception as e:
            logger.error(f"Complaint analysis failed: {e}")
            return self.default_result(error=FALLBACK_ERROR)

    def classify_many(self, items: Iterable[Any]) -> List[BatchItemResult]:
        """Classify each item independently, preserving input order"""
        results = []
        for item in items:
            complaint = ClassificationInput.coerce(item)
            results.append(BatchItemResult(
                id=complaint.id,
                result=self.classify(complaint.title, complaint.description)
            ))
        return results

    def suggest(self, title: Optional[str], description: Optional[str]) -> Optional[ComplaintSuggestion]:
        """Suggestions for a complaint being composed; None until both fields have text"""
        if not title or not description:
            return None

        result = self.classify(title, description)
        return ComplaintSuggestion(
            priority=result.priority,
            sentiment=result.sentiment,
            suggested_department=result.department,
            urgency_keywords=result.urgency_keywords,
            suggested_tags=result.tags
        )

    # Individual steps, each taking the raw title/description pair

    def priority_score(self, title: str, description: str) -> PriorityScore:
        return self._score_priority(self.normalizer.build_corpus(title, description))

    def analyze_priority(self, title: str, description: str) -> Priority:
        return self._priority_from_score(self.priority_score(title, description))

    def analyze_sentiment(self, title: str, description: str) -> Sentiment:
        corpus = self.normalizer.build_corpus(title, description)
        return self._sentiment_from_score(self.sentiment_scorer.score(corpus))

    def department_scores(self, title: str, description: str) -> Dict[str, float]:
        return self._department_scores(self.normalizer.build_corpus(title, description))

    def classify_department(self, title: str, description: str) -> str:
        return self._classify_department(self.normalizer.build_corpus(title, description))

    def extract_urgency_keywords(self, title: str, description: str) -> Tuple[str, ...]:
        return self._extract_urgency_keywords(self.normalizer.build_corpus(title, description))

    def extract_tags(self, title: str, description: str) -> Tuple[str, ...]:
        return self._extract_tags(self.normalizer.build_corpus(title, description))

    def calculate_confidence(self, title: str, description: str) -> float:
        corpus = self.normalizer.build_corpus(title, description)
        return self._calculate_confidence(
            corpus, self._extract_urgency_keywords(corpus), self._classify_department(corpus)
        )

    # Corpus-level implementation

    def _score_priority(self, corpus: str) -> PriorityScore:
        weights = self.vocabulary.priority_weights
        urgency_matches = sum(1 for term in self.vocabulary.urgency_terms if term in corpus)
        sentiment_score = self.sentiment_scorer.score(corpus)

        word_count = len(self.normalizer.tokenize(corpus))
        keyword_density = urgency_matches / word_count if word_count else 0.0
        length_factor = min(len(corpus) / 500, 1)

        score = 0.0
        score += urgency_matches * weights['urgency_keywords']
        score += (abs(sentiment_score) / 10) * weights['sentiment_score']
        score += keyword_density * 100 * weights['keyword_density']
        score += length_factor * weights['length_factor']

        return PriorityScore(
            urgency_matches=urgency_matches,
            sentiment_score=sentiment_score,
            keyword_density=keyword_density,
            length_factor=length_factor,
            score=score
        )

    def _priority_from_score(self, priority_score: PriorityScore) -> Priority:
        for tier, min_score, min_matches in PRIORITY_THRESHOLDS:
            if priority_score.score >= min_score or priority_score.urgency_matches >= min_matches:
                return tier
        return Priority.LOW

    def _sentiment_from_score(self, score: float) -> Sentiment:
        # Bands collapse to > 1 / < -1 (the +-3 bands map to the same labels)
        if score > 1:
            return Sentiment.POSITIVE
        if score < -1:
            return Sentiment.NEGATIVE
        return Sentiment.NEUTRAL

    def _department_scores(self, corpus: str) -> Dict[str, float]:
        stemmed_corpus = self.normalizer.stem_corpus(corpus)
        scores = {}

        for department, terms in self.vocabulary.department_terms.items():
            score = 0
            for term in terms:
                # Exact match gets higher score
                if term in corpus:
                    score += 2
                # Stemmed match gets lower score
                if self.normalizer.stem(term) in stemmed_corpus:
                    score += 1
            scores[department] = score * self.vocabulary.importance(department)

        return scores

    def _classify_department(self, corpus: str) -> str:
        best_match = self.vocabulary.fallback_department
        max_score = 0

        # Strictly greater, so ties keep the earlier department
        for department, score in self._department_scores(corpus).items():
            if score > max_score:
                max_score = score
                best_match = department

        return best_match

    def _extract_urgency_keywords(self, corpus: str) -> Tuple[str, ...]:
        matches = [term for term in self.vocabulary.urgency_terms if term in corpus]
        return tuple(matches[:self.urgency_keyword_limit])

    def _extract_tags(self, corpus: str) -> Tuple[str, ...]:
        candidates = [term for terms in self.vocabulary.department_terms.values() for term in terms]
        candidates.extend(self.vocabulary.urgency_terms)
        candidates.extend(self.vocabulary.location_terms)

        # dict preserves discovery order while de-duplicating
        tags = dict.fromkeys(term for term in candidates if term in corpus)
        return tuple(list(tags)[:self.tag_limit])

    def _calculate_confidence(self, corpus: str, urgency_keywords: Tuple[str, ...], department: str) -> float:
        confidence = BASE_CONFIDENCE

        department_terms = self.vocabulary.department_terms.get(department, ())
        matched_terms = [term for term in department_terms if term in corpus]

        confidence += min(len(matched_terms) / 3, 1) * 0.3
        confidence += min(len(urgency_keywords) / 2, 1) * 0.2
        confidence += min(len(corpus) / 200, 1) * 0.1

        return max(0.0, min(confidence, 1.0))


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def get_complaint_classifier() -> ComplaintClassifier:
    """Get singleton complaint classifier instance"""
    if not hasattr(get_complaint_classifier, '_instance'):
        get_complaint_classifier._instance = ComplaintClassifier()
    return get_complaint_classifier._instance
