"""
Text Normalizer

Cleans raw extracted text while preserving paragraph and line structure.
Accented Latin characters are never touched; only control characters,
line-ending variants, redundant spacing and (for PDFs) page artifacts
are removed.
"""

import logging
import re
from typing import List

logger = logging.getLogger(__name__)

# Letters a line-break rejoin may happen between
LOWER_LETTERS = "a-zàâäéèêëïîôöùûüÿçñáíóúýìòœæß"

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_SPACE_RUN = re.compile(r"[ \t]+")
_TRAILING_SPACE = re.compile(r"[ \t]+$", re.MULTILINE)
_NEWLINE_RUN = re.compile(r"\n{4,}")
_PAGE_NUMBER_LINE = re.compile(r"^[ \t]*\d+[ \t]*$", re.MULTILINE)
_HYPHENATED_BREAK = re.compile(
    rf"(?<=[{LOWER_LETTERS}])-[ \t]*\n[ \t]*(?=[{LOWER_LETTERS}])", re.IGNORECASE
)
_MID_SENTENCE_BREAK = re.compile(
    rf"(?<=[{LOWER_LETTERS},])[ \t]*\n[ \t]*(?=[{LOWER_LETTERS}])"
)


class TextNormalizer:
    """
    Normalizes extracted document text.

    The plain variant is used for TXT uploads, the PDF variant also
    strips page numbers, running headers/footers and line-wrapping
    artifacts left by the PDF text layer.
    """

    def __init__(self, max_header_length: int = 30):
        """
        Initialize the normalizer.

        Args:
            max_header_length: Longest line considered a running header/footer
        """
        self.max_header_length = max_header_length

    def normalize(self, raw: str, pdf: bool = False) -> str:
        """
        Normalize raw text.

        Args:
            raw: Text as produced by an extractor
            pdf: Apply PDF artifact cleanup as well

        Returns:
            Normalized text (empty string for empty input); normalizing
            the result again, with the same `pdf` flag, changes nothing
        """
        if not raw:
            return ""

        text = _CONTROL_CHARS.sub("", raw)
        text = text.replace("\ufeff", "").replace("\u00a0", " ")
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = _SPACE_RUN.sub(" ", text)

        if pdf:
            text = self._clean_pdf_artifacts(text)

        text = _TRAILING_SPACE.sub("", text)
        text = _NEWLINE_RUN.sub("\n\n\n", text)
        return text.strip()

    def normalize_pdf(self, raw: str) -> str:
        """Normalize text extracted from a PDF."""
        return self.normalize(raw, pdf=True)

    def preserve_formatting(self, text: str) -> str:
        """
        Minimal cleanup for plain-text files.

        Keeps intentional interior spacing (indentation, aligned columns)
        and only drops control characters, trailing spaces and excessive
        blank lines.
        """
        if not text:
            return ""

        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = _CONTROL_CHARS.sub("", text)
        text = _TRAILING_SPACE.sub("", text)
        text = _NEWLINE_RUN.sub("\n\n\n", text)
        return text.strip()

    def _clean_pdf_artifacts(self, text: str) -> str:
        """Remove page numbers, repair wrapped lines, then drop doubled headers."""
        text = _PAGE_NUMBER_LINE.sub("", text)

        text = _HYPHENATED_BREAK.sub("", text)
        text = _MID_SENTENCE_BREAK.sub(" ", text)

        lines = [line.strip() for line in text.split("\n")]
        return "\n".join(self._drop_doubled_short_lines(lines))

    def _drop_doubled_short_lines(self, lines: List[str]) -> List[str]:
        """Drop a short line when the next line is identical (header over header)."""
        kept = [
            line for line, following in zip(lines, lines[1:] + [None])
            if not (line and len(line) <= self.max_header_length and line == following)
        ]
        if len(kept) < len(lines):
            logger.debug(f"Dropped {len(lines) - len(kept)} doubled header/footer lines")
        return kept


def normalize_text(raw: str, pdf: bool = False) -> str:
    """Convenience function to normalize text with default settings."""
    return TextNormalizer().normalize(raw, pdf=pdf)
