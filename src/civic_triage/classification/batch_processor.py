"""
Batch classification coordinator.

Classifies complaint collections in chunks, optionally across a thread
pool, and reports run statistics.
"""

import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence
from dataclasses import dataclass, field

from civic_triage.core.config import get_config
from civic_triage.core.logger import get_logger
from .complaint_classifier import (
    BatchItemResult, ClassificationInput, ComplaintClassifier, get_complaint_classifier
)

logger = get_logger(__name__)

@dataclass
class BatchRunResult:
    """Result of a batch classification run"""
    results: List[BatchItemResult] = field(default_factory=list)
    total: int = 0
    priority_counts: Dict[str, int] = field(default_factory=dict)
    department_counts: Dict[str, int] = field(default_factory=dict)
    fallbacks: int = 0
    duration_seconds: float = 0.0

    def to_list(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.results]

class BatchClassifier:
    """
    Classifies complaints in fixed-size chunks.

    Items share no state, so chunks may be fanned out to a thread pool;
    results always come back in input order.
    """

    def __init__(self,
                 classifier: Optional[ComplaintClassifier] = None,
                 batch_size: Optional[int] = None,
                 max_workers: Optional[int] = None):
        self.config = get_config()
        self.classifier = classifier or get_complaint_classifier()
        self.batch_size = batch_size if batch_size is not None else self.config.BATCH_SIZE
        self.max_workers = max_workers if max_workers is not None else self.config.MAX_WORKERS
        self.progress_callback: Optional[Callable[[int, int], None]] = None

        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

    def set_progress_callback(self, callback: Callable[[int, int], None]):
        """Set callback receiving (processed, total) after every chunk"""
        self.progress_callback = callback

    def _classify_item(self, complaint: ClassificationInput) -> BatchItemResult:
        return BatchItemResult(
            id=complaint.id,
            result=self.classifier.classify(complaint.title, complaint.description)
        )

    def _process_chunk(self, chunk: List[ClassificationInput],
                       executor: Optional[ThreadPoolExecutor]) -> List[BatchItemResult]:
        if executor is None:
            return [self._classify_item(complaint) for complaint in chunk]
        return list(executor.map(self._classify_item, chunk))

    def run(self, items: Sequence[Any]) -> BatchRunResult:
        """Classify all items and collect statistics"""
        start_time = time.monotonic()
        complaints = [ClassificationInput.coerce(item) for item in items]
        total = len(complaints)

        logger.info(f"Starting batch classification: {total} complaints, "
                    f"batch_size={self.batch_size}, workers={self.max_workers}")

        results: List[BatchItemResult] = []
        executor = ThreadPoolExecutor(max_workers=self.max_workers) if self.max_workers > 1 else None

        try:
            for i in range(0, total, self.batch_size):
                chunk = complaints[i:i + self.batch_size]
                results.extend(self._process_chunk(chunk, executor))

                if self.progress_callback:
                    self.progress_callback(len(results), total)
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        priority_counts = Counter(item.result.priority.value for item in results)
        department_counts = Counter(item.result.department for item in results)
        fallbacks = sum(1 for item in results if item.result.is_fallback)
        duration = time.monotonic() - start_time

        if fallbacks:
            logger.warning(f"{fallbacks}/{total} complaints fell back to default classification")

        logger.info(f"Completed batch classification: {total} complaints in {duration:.2f}s")

        return BatchRunResult(
            results=results,
            total=total,
            priority_counts=dict(priority_counts),
            department_counts=dict(department_counts),
            fallbacks=fallbacks,
            duration_seconds=duration
        )
