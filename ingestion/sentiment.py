"""
Sentiment Analyzer

Lexicon-based overall tone of a document. Counts positive and negative
cue words; the dominant polarity wins with confidence equal to its share
of all cue hits.
"""

import logging
import re
from typing import AbstractSet

from .models import Sentiment

logger = logging.getLogger(__name__)

POSITIVE_WORDS: AbstractSet[str] = frozenset({
    'bon', 'bonne', 'bien', 'excellent', 'excellente', 'magnifique', 'parfait',
    'parfaite', 'super', 'génial', 'géniale', 'formidable',
    'good', 'great', 'excellent', 'wonderful', 'perfect', 'beautiful', 'amazing',
})

NEGATIVE_WORDS: AbstractSet[str] = frozenset({
    'mauvais', 'mauvaise', 'mal', 'terrible', 'horrible', 'nul', 'nulle',
    'catastrophique', 'affreux', 'affreuse',
    'bad', 'awful', 'horrible', 'terrible', 'dreadful', 'poor',
})

NEUTRAL = Sentiment()

_TOKEN = re.compile(r"\w+")


class SentimentAnalyzer:
    """Scores document tone from cue-word counts."""

    def __init__(
        self,
        positive_words: AbstractSet[str] = POSITIVE_WORDS,
        negative_words: AbstractSet[str] = NEGATIVE_WORDS
    ):
        self.positive_words = frozenset(positive_words)
        self.negative_words = frozenset(negative_words)

    def analyze(self, text: str) -> Sentiment:
        """
        Analyze the tone of a text.

        Returns:
            Sentiment; neutral with confidence 0.5 when no cue word occurs
        """
        if not text:
            return NEUTRAL

        positive = negative = 0
        for token in _TOKEN.findall(text.lower()):
            if token in self.positive_words:
                positive += 1
            if token in self.negative_words:
                negative += 1

        total = positive + negative
        if total == 0 or positive == negative:
            return NEUTRAL

        label = 'positive' if positive > negative else 'negative'
        confidence = max(positive, negative) / total
        logger.debug(f"Sentiment {label} ({positive} positive / {negative} negative cues)")
        return Sentiment(sentiment=label, confidence=round(confidence, 3))
