"""
Lexical sentiment scoring backed by the AFINN-165 word list.
"""

import re
from typing import Dict, Optional

from afinn import Afinn

from civic_triage.core.logger import get_logger

logger = get_logger(__name__)

WORD_PATTERN = re.compile(r"[\w']+")

class SentimentScorer:
    """
    Signed lexical sentiment score of a text.

    The score is the sum of per-word polarity weights from the AFINN
    lexicon: positive words add, negative words subtract, unknown words
    contribute 0. Pass ``overrides`` to replace the lexicon entirely.
    """

    def __init__(self, language: str = "en", overrides: Optional[Dict[str, float]] = None):
        self.language = language
        self.overrides = dict(overrides) if overrides is not None else None
        self._afinn = None

        if self.overrides is None:
            logger.debug(f"Loading AFINN lexicon for language={self.language}")
            self._afinn = Afinn(language=self.language)

    def score(self, text: str) -> float:
        """Sum of polarity weights over the words of ``text``"""
        if not text:
            return 0.0

        if self.overrides is not None:
            return float(sum(self.overrides.get(word, 0) for word in WORD_PATTERN.findall(text.lower())))

        return float(self._afinn.score(text))
