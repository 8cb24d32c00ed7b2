"""
Text normalization for complaint submissions.

Builds the lowercased analysis corpus from a title/description pair and
provides the tokenization and stemming used by the lexical scorers.
"""

import re
from typing import List, Optional
from dataclasses import dataclass

from nltk.stem.porter import PorterStemmer

from civic_triage.core.logger import get_logger

logger = get_logger(__name__)

@dataclass
class CorpusStats:
    """Statistics about an analysis corpus"""
    text_length: int = 0
    word_count: int = 0
    is_empty: bool = True

class TextNormalizer:
    """
    Corpus builder for complaint text.

    Matching downstream is plain substring containment, so the corpus is
    only joined and lowercased. No punctuation or whitespace is removed.
    """

    def __init__(self, separator: str = " "):
        self.separator = separator
        self.stemmer = PorterStemmer()
        self.whitespace_pattern = re.compile(r'\s+')

    def build_corpus(self, title: Optional[str], description: Optional[str]) -> str:
        """Join title and description and lowercase the result"""
        return f"{title or ''}{self.separator}{description or ''}".lower()

    def tokenize(self, corpus: str) -> List[str]:
        """Split on runs of whitespace, dropping empty tokens"""
        if not corpus:
            return []

        return [token for token in self.whitespace_pattern.split(corpus) if token]

    def stem(self, term: str) -> str:
        """Porter-stem a single term (multi-word terms are stemmed as one unit)"""
        if not term:
            return term

        return self.stemmer.stem(term)

    def stem_corpus(self, corpus: str) -> str:
        """
        Stem every space-separated token of the corpus.

        Tokens are split on single spaces and re-joined with single spaces so
        that multi-word vocabulary terms can still be found as substrings.
        """
        return " ".join(self.stem(word) for word in corpus.split(" "))

    def get_stats(self, corpus: str) -> CorpusStats:
        """Compute length and word count of a corpus"""
        words = self.tokenize(corpus)
        return CorpusStats(
            text_length=len(corpus),
            word_count=len(words),
            is_empty=not corpus.strip()
        )
