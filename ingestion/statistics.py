"""
Text Statistics

Word, sentence and paragraph counts plus language-aware reading time
for normalized document text.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from .language import LanguageDetector, reading_speed

logger = logging.getLogger(__name__)

# Latin letters including the accented Latin-1 range and œ/æ
LATIN_LETTER = re.compile(r"[a-zA-ZÀ-ÖØ-öø-ÿŒœ]")

SENTENCE_DELIMITERS = re.compile(r"[.!?。！？]+")
PARAGRAPH_SEPARATOR = re.compile(r"\n\s*\n")

MIN_SENTENCE_LENGTH = 5
MIN_PARAGRAPH_LENGTH = 10


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class TextStats:
    """Statistics describing a document's text."""
    character_count: int
    word_count: int
    sentence_count: int
    paragraph_count: int
    average_words_per_sentence: int
    average_words_per_paragraph: int
    reading_time_minutes: int
    detected_language: str

    def to_dict(self) -> Dict:
        """Convert to the camelCase shape stored with documents."""
        return {
            'characterCount': self.character_count,
            'wordCount': self.word_count,
            'sentenceCount': self.sentence_count,
            'paragraphCount': self.paragraph_count,
            'averageWordsPerSentence': self.average_words_per_sentence,
            'averageWordsPerParagraph': self.average_words_per_paragraph,
            'readingTimeMinutes': self.reading_time_minutes,
            'detectedLanguage': self.detected_language,
        }


@dataclass(frozen=True)
class IntegrityReport:
    """Content loss between an original and a processed text."""
    is_valid: bool
    char_loss_percentage: float
    word_loss_percentage: float
    original_stats: TextStats
    processed_stats: TextStats

    def to_dict(self) -> Dict:
        return {
            'isValid': self.is_valid,
            'charLossPercentage': self.char_loss_percentage,
            'wordLossPercentage': self.word_loss_percentage,
        }


class TextStatistics:
    """Computes statistics for normalized text."""

    def __init__(
        self,
        detector: Optional[LanguageDetector] = None,
        max_loss_percentage: float = 5.0
    ):
        self.detector = detector or LanguageDetector()
        self.max_loss_percentage = max_loss_percentage

    @staticmethod
    def words(text: str) -> List[str]:
        """Whitespace tokens containing at least one Latin letter."""
        if not text:
            return []
        return [token for token in text.split() if LATIN_LETTER.search(token)]

    def count_words(self, text: str) -> int:
        return len(self.words(text))

    @staticmethod
    def sentences(text: str) -> List[str]:
        return [
            fragment for fragment in SENTENCE_DELIMITERS.split(text)
            if len(fragment.strip()) > MIN_SENTENCE_LENGTH and LATIN_LETTER.search(fragment)
        ]

    @staticmethod
    def paragraphs(text: str) -> List[str]:
        return [
            fragment for fragment in PARAGRAPH_SEPARATOR.split(text)
            if len(fragment.strip()) > MIN_PARAGRAPH_LENGTH
        ]

    def compute_stats(self, text: str) -> TextStats:
        """
        Compute statistics for a text.

        Args:
            text: Normalized text

        Returns:
            TextStats; all counts are zero for empty text
        """
        text = text or ""
        word_count = self.count_words(text)
        sentence_count = len(self.sentences(text))
        paragraph_count = len(self.paragraphs(text))
        language = self.detector.detect(text)

        return TextStats(
            character_count=len(text),
            word_count=word_count,
            sentence_count=sentence_count,
            paragraph_count=paragraph_count,
            average_words_per_sentence=(
                round_half_up(word_count / sentence_count) if sentence_count else 0
            ),
            average_words_per_paragraph=(
                round_half_up(word_count / paragraph_count) if paragraph_count else 0
            ),
            reading_time_minutes=math.ceil(word_count / reading_speed(language)),
            detected_language=language,
        )

    def check_integrity(self, original: str, processed: str) -> IntegrityReport:
        """
        Measure how much content a cleaning step removed.

        Args:
            original: Text before processing
            processed: Text after processing

        Returns:
            IntegrityReport; valid when both losses stay under the threshold
        """
        original_stats = self.compute_stats(original)
        processed_stats = self.compute_stats(processed)

        char_loss = self._loss(original_stats.character_count, processed_stats.character_count)
        word_loss = self._loss(original_stats.word_count, processed_stats.word_count)

        report = IntegrityReport(
            is_valid=char_loss < self.max_loss_percentage and word_loss < self.max_loss_percentage,
            char_loss_percentage=round(char_loss, 2),
            word_loss_percentage=round(word_loss, 2),
            original_stats=original_stats,
            processed_stats=processed_stats,
        )

        if not report.is_valid:
            logger.warning(
                f"Normalization removed {report.char_loss_percentage}% of characters "
                f"and {report.word_loss_percentage}% of words"
            )
        return report

    @staticmethod
    def _loss(before: int, after: int) -> float:
        if before == 0:
            return 0.0
        return (before - after) / before * 100


def compute_stats(text: str) -> TextStats:
    """Convenience function to compute statistics with default settings."""
    return TextStatistics().compute_stats(text)
