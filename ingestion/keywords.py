"""
Keyword Extractor

Ranks content words by frequency weighted by word length, ignoring
French, English and Spanish stopwords.
"""

import logging
import math
import re
from typing import AbstractSet, Dict, List

from .statistics import LATIN_LETTER

logger = logging.getLogger(__name__)

DEFAULT_MAX_KEYWORDS = 8
MIN_KEYWORD_LENGTH = 4
LONG_WORD_LENGTH = 5
LONG_WORD_BOOST = 1.2

STOPWORDS: AbstractSet[str] = frozenset({
    # French
    'le', 'de', 'un', 'à', 'être', 'et', 'en', 'avoir', 'que', 'pour',
    'dans', 'ce', 'il', 'une', 'sur', 'avec', 'ne', 'se', 'pas', 'tout',
    'plus', 'par', 'grand', 'ou', 'son', 'sa', 'ses', 'du', 'des', 'la',
    'les', 'au', 'aux', 'cette', 'ces', 'cet', 'mon', 'ma', 'mes', 'ton',
    'ta', 'tes', 'notre', 'nos', 'votre', 'vos', 'leur', 'leurs', 'qui',
    'quoi', 'dont', 'où', 'quand', 'comme', 'sans', 'sous', 'après',
    'avant', 'pendant', 'depuis', 'jusqu', 'vers', 'chez', 'entre',
    # English
    'the', 'be', 'to', 'of', 'and', 'a', 'in', 'that', 'have', 'it', 'for',
    'not', 'on', 'with', 'he', 'as', 'you', 'do', 'at', 'this', 'but', 'his',
    'by', 'from', 'they', 'she', 'or', 'an', 'will', 'my', 'one', 'all', 'would',
    # Spanish
    'el', 'que', 'y', 'es', 'no', 'te', 'lo', 'da', 'su', 'por', 'con',
    'para', 'tiene', 'las',
})

_NON_WORD = re.compile(r"[^\w\s]")
_NUMERIC = re.compile(r"^\d+$")


class KeywordExtractor:
    """Extracts the most relevant words of a document."""

    def __init__(self, stopwords: AbstractSet[str] = STOPWORDS):
        self.stopwords = frozenset(stopwords)

    def _is_candidate(self, word: str) -> bool:
        return (
            len(word) >= MIN_KEYWORD_LENGTH
            and word not in self.stopwords
            and not _NUMERIC.match(word)
            and LATIN_LETTER.search(word) is not None
        )

    def candidates(self, text: str) -> List[str]:
        """Lowercased candidate tokens in document order."""
        cleaned = _NON_WORD.sub(" ", text.lower())
        return [word for word in cleaned.split() if self._is_candidate(word)]

    @staticmethod
    def score(word: str, frequency: int) -> float:
        boost = LONG_WORD_BOOST if len(word) > LONG_WORD_LENGTH else 1.0
        return frequency * math.log(len(word) + 1) * boost

    def extract_keywords(self, text: str, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> List[str]:
        """
        Extract keywords ordered by descending relevance.

        Args:
            text: Document text
            max_keywords: Maximum number of keywords to return

        Returns:
            At most `max_keywords` keywords; ties keep first-seen order
        """
        if not text or max_keywords <= 0:
            return []

        frequencies: Dict[str, int] = {}
        for word in self.candidates(text):
            frequencies[word] = frequencies.get(word, 0) + 1

        ranked = sorted(
            frequencies.items(),
            key=lambda item: self.score(item[0], item[1]),
            reverse=True
        )
        keywords = [word for word, _ in ranked[:max_keywords]]

        logger.debug(f"Extracted {len(keywords)} keywords from {len(frequencies)} candidates")
        return keywords


def extract_keywords(text: str, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> List[str]:
    """Convenience function to extract keywords with the default stopwords."""
    return KeywordExtractor().extract_keywords(text, max_keywords)
