"""
Civic Triage Preprocess Module

Corpus construction, tokenization and stemming
"""

from .normalizer import TextNormalizer, CorpusStats

__all__ = [
    "TextNormalizer",
    "CorpusStats"
]
