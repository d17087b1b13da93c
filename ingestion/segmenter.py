"""
Structure Segmenter

Splits normalized document text into chapters using multilingual heading
patterns, falling back to paragraph-respecting size-based sections when
no heading style occurs often enough.
"""

import logging
import re
from typing import List, Optional, Pattern, Sequence, Tuple

from .models import Section
from .statistics import PARAGRAPH_SEPARATOR, TextStatistics

logger = logging.getLogger(__name__)

DEFAULT_TARGET_SIZE = 2500
MIN_HEADING_MATCHES = 2
INTRODUCTION_TITLE = "Introduction"

# Roman numerals only in capitals, so words like "did" or "civil" never count
_NUMERAL = r"(?:\d+|(?-i:[IVXLCDM]+))\b"

_FLAGS = re.IGNORECASE | re.MULTILINE


def _keyword_heading(keywords: str, numeral: str = _NUMERAL, gap: str = r"\s+") -> Pattern:
    """
    Heading made of a keyword and a number.

    It either starts a line, or follows a finished sentence and ends the
    line (a heading glued to the previous paragraph by the PDF text layer).
    """
    return re.compile(
        rf"^(?:{keywords}){gap}{numeral}"
        rf"|(?<=[.!?] )(?:{keywords}){gap}{numeral}(?=[ \t]*$)",
        _FLAGS
    )


HEADING_PATTERNS: Tuple[Pattern, ...] = (
    # French
    _keyword_heading("CHAPITRE|PARTIE|SECTION|LIVRE"),
    _keyword_heading(r"Ch\.|Chap\.", numeral=r"\d+\b", gap=r"[ \t]*"),
    # English
    _keyword_heading("CHAPTER|PART|SECTION|BOOK"),
    # Spanish
    _keyword_heading("CAPÍTULO|PARTE|SECCIÓN|LIBRO"),
    # Italian
    _keyword_heading("CAPITOLO|PARTE|SEZIONE|LIBRO"),
    # German
    _keyword_heading("KAPITEL|TEIL|ABSCHNITT|BUCH"),
    # Plain numbering
    re.compile(r"^(?:\d+\.|\d+[ \t]+[-–—]|\d+[ \t]*-)", re.MULTILINE),
    re.compile(r"^[IVX]+\.[ \t]+", re.MULTILINE),
    # Decorative banners
    re.compile(r"^\*+[ \t]*.+?[ \t]*\*+$", re.MULTILINE),
    re.compile(r"^={3,}.*={3,}$", re.MULTILINE),
    re.compile(r"^-{3,}.*-{3,}$", re.MULTILINE),
)


class StructureSegmenter:
    """
    Decomposes a document into sections.

    Heading patterns are tried in priority order and the first one
    matching at least twice defines the chapters. Otherwise paragraphs
    are packed into sections of roughly `target_size` characters.
    """

    def __init__(
        self,
        patterns: Sequence[Pattern] = HEADING_PATTERNS,
        target_size: int = DEFAULT_TARGET_SIZE,
        statistics: Optional[TextStatistics] = None
    ):
        """
        Initialize the segmenter.

        Args:
            patterns: Heading patterns in priority order
            target_size: Target characters per size-based section
            statistics: Used for per-section word counts
        """
        if target_size <= 0:
            raise ValueError("target_size must be positive")

        self.patterns = tuple(patterns)
        self.target_size = target_size
        self.statistics = statistics or TextStatistics()

    def segment(self, text: str) -> List[Section]:
        """
        Split text into sections.

        Args:
            text: Normalized document text

        Returns:
            Sections with ids 1..n; empty only for blank text
        """
        if not text or not text.strip():
            return []

        matches, pattern = self._find_headings(text)
        if not matches:
            return self.split_by_size(text)

        logger.info(f"Detected {len(matches)} chapters with pattern: {pattern.pattern}")
        return self._split_on_headings(text, matches)

    def _find_headings(self, text: str) -> Tuple[List[re.Match], Optional[Pattern]]:
        """Return the matches of the first pattern matching often enough."""
        for pattern in self.patterns:
            matches = list(pattern.finditer(text))
            if len(matches) >= MIN_HEADING_MATCHES:
                return matches, pattern
        return [], None

    def _split_on_headings(self, text: str, matches: List[re.Match]) -> List[Section]:
        sections = []

        preamble = text[:matches[0].start()]
        if preamble.strip():
            sections.append(self._make_section(
                len(sections) + 1, INTRODUCTION_TITLE, preamble, 0, matches[0].start()
            ))

        for i, match in enumerate(matches):
            start = match.start()
            end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
            sections.append(self._make_section(
                len(sections) + 1, match.group(0).strip(), text[start:end], start, end
            ))

        return sections

    def split_by_size(self, text: str) -> List[Section]:
        """
        Pack whole paragraphs into sections of about `target_size` characters.

        A paragraph is never split; a paragraph longer than the target
        becomes a section on its own.
        """
        sections = []
        chunk_start = chunk_end = None

        for start, end in self._paragraph_spans(text):
            if chunk_start is not None and end - chunk_start > self.target_size:
                sections.append(self._make_size_section(len(sections) + 1, text, chunk_start, chunk_end))
                chunk_start = start
            elif chunk_start is None:
                chunk_start = start
            chunk_end = end

        if chunk_start is not None:
            sections.append(self._make_size_section(len(sections) + 1, text, chunk_start, chunk_end))

        logger.info(f"Split text into {len(sections)} size-based sections")
        return sections

    @staticmethod
    def _paragraph_spans(text: str) -> List[Tuple[int, int]]:
        """Offsets of the non-blank paragraphs between blank-line separators."""
        spans = []
        position = 0
        for separator in PARAGRAPH_SEPARATOR.finditer(text):
            spans.append((position, separator.start()))
            position = separator.end()
        spans.append((position, len(text)))
        return [(start, end) for start, end in spans if text[start:end].strip()]

    def _make_size_section(self, section_id: int, text: str, start: int, end: int) -> Section:
        content = text[start:end]
        return Section(
            id=section_id,
            title=f"Section {section_id}",
            content=content,
            start_index=start,
            end_index=end,
            word_count=self.statistics.count_words(content),
            character_count=len(content),
        )

    def _make_section(self, section_id: int, title: str, raw: str, start: int, end: int) -> Section:
        content = raw.strip()
        return Section(
            id=section_id,
            title=title,
            content=content,
            start_index=start,
            end_index=end,
            word_count=self.statistics.count_words(content),
            character_count=len(content),
        )


def segment_text(text: str, target_size: int = DEFAULT_TARGET_SIZE) -> List[Section]:
    """Convenience function to segment text with default patterns."""
    return StructureSegmenter(target_size=target_size).segment(text)
