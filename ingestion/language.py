"""
Language Detector

Lightweight language guessing from a text sample using marker words,
distinctive accented characters and function-word clusters. Used to pick
reading speeds and exposed in document statistics.
"""

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Pattern, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "fr"

MIN_SAMPLE_CHARS = 500
MAX_SAMPLE_CHARS = 2000

WORD_WEIGHT = 2
CHAR_WEIGHT = 1
PATTERN_WEIGHT = 3

# Words per minute
READING_SPEEDS: Mapping[str, int] = MappingProxyType({
    "fr": 200,
    "en": 220,
    "es": 190,
    "it": 185,
    "de": 180,
})
DEFAULT_READING_SPEED = 200


@dataclass(frozen=True)
class LanguageProfile:
    """Lexical cues identifying a language."""
    code: str
    words: Tuple[str, ...]
    chars: Tuple[str, ...] = ()
    patterns: Tuple[Pattern, ...] = field(default=())

    def score(self, sample: str) -> int:
        """Weighted hit count of this profile's cues in a lowercased sample."""
        total = 0
        for word in self.words:
            total += len(re.findall(rf"\b{re.escape(word)}\b", sample)) * WORD_WEIGHT
        for char in self.chars:
            total += sample.count(char) * CHAR_WEIGHT
        for pattern in self.patterns:
            total += len(pattern.findall(sample)) * PATTERN_WEIGHT
        return total


DEFAULT_PROFILES: Tuple[LanguageProfile, ...] = (
    LanguageProfile(
        code="fr",
        words=("le", "de", "et", "à", "un", "il", "être", "avoir", "que", "pour",
               "dans", "ce", "son", "une", "sur", "avec", "ne", "se", "pas", "tout"),
        chars=("à", "é", "è", "ê", "ë", "ç", "ù", "û", "ü", "ô", "ö", "î", "ï", "â", "ä", "ÿ"),
        patterns=(re.compile(r"\b(?:les?|des?|du|aux?|ces?|cette|son|sa|ses)\b"),),
    ),
    LanguageProfile(
        code="en",
        words=("the", "be", "to", "of", "and", "a", "in", "that", "have", "it",
               "for", "not", "on", "with", "he", "as", "you", "do", "at"),
        patterns=(re.compile(r"\b(?:the|and|that|with|have|this|will|your|from|they)\b"),),
    ),
    LanguageProfile(
        code="es",
        words=("el", "de", "que", "y", "a", "en", "un", "es", "se", "no",
               "te", "lo", "le", "da", "su", "por", "son", "con", "para", "una"),
        chars=("á", "é", "í", "ó", "ú", "ñ", "ü"),
        patterns=(re.compile(r"\b(?:que|con|por|para|esta|este|son|las|los)\b"),),
    ),
    LanguageProfile(
        code="it",
        words=("il", "di", "che", "e", "la", "per", "una", "in", "con", "non",
               "da", "su", "un", "le", "si", "ma", "come", "del", "della"),
        chars=("à", "è", "é", "ì", "í", "ò", "ó", "ù", "ú"),
        patterns=(re.compile(r"\b(?:che|con|per|della|degli|sono|dalla|nella)\b"),),
    ),
    LanguageProfile(
        code="de",
        words=("der", "die", "und", "in", "den", "von", "zu", "das", "mit", "sich",
               "des", "auf", "für", "ist", "im", "dem", "nicht", "ein", "eine"),
        chars=("ä", "ö", "ü", "ß"),
        patterns=(re.compile(r"\b(?:der|die|und|den|von|das|mit|für|ist|ein|eine)\b"),),
    ),
)


class LanguageDetector:
    """Guesses the language of a document from its opening text."""

    def __init__(
        self,
        profiles: Sequence[LanguageProfile] = DEFAULT_PROFILES,
        default_language: str = DEFAULT_LANGUAGE,
        sample_chars: int = 1000
    ):
        """
        Initialize the detector.

        Args:
            profiles: Language profiles, in tie-break order
            default_language: Returned when no profile scores above zero
            sample_chars: Prefix length inspected (clamped to 500..2000)
        """
        self.profiles = tuple(profiles)
        self.default_language = default_language
        self.sample_chars = self._clamp(sample_chars)

    @staticmethod
    def _clamp(sample_chars: int) -> int:
        return max(MIN_SAMPLE_CHARS, min(MAX_SAMPLE_CHARS, sample_chars))

    def detect(self, text: str, sample_chars: Optional[int] = None) -> str:
        """
        Detect the language of a text.

        Args:
            text: Text to inspect
            sample_chars: Override of the sample length

        Returns:
            Language code such as 'fr' or 'en'
        """
        if not text:
            return self.default_language

        limit = self._clamp(sample_chars) if sample_chars else self.sample_chars
        sample = text[:limit].lower()

        best_score = 0
        detected = self.default_language
        for profile in self.profiles:
            score = profile.score(sample)
            if score > best_score:
                best_score = score
                detected = profile.code

        logger.debug(f"Detected language '{detected}' (score {best_score})")
        return detected

    def scores(self, text: str) -> dict:
        """Per-language scores for a text sample (diagnostics)."""
        sample = text[:self.sample_chars].lower()
        return {profile.code: profile.score(sample) for profile in self.profiles}


def reading_speed(language: str) -> int:
    """Reading speed in words per minute for a language code."""
    return READING_SPEEDS.get(language, DEFAULT_READING_SPEED)


def detect_language(text: str) -> str:
    """Convenience function to detect a language with default profiles."""
    return LanguageDetector().detect(text)
