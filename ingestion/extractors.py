"""
File Extractors

Turns uploaded bytes into plain text. PDFs are read with PyMuPDF, plain
text files are decoded as UTF-8 (BOM aware) with a latin-1 fallback.
"""

import logging
import math
from typing import Any, Dict, Optional

import fitz  # PyMuPDF

from .exceptions import ExtractionError
from .models import SUPPORTED_FORMATS, ExtractedText
from .normalizer import TextNormalizer

logger = logging.getLogger(__name__)

WORDS_PER_PAGE = 250

_SIZE_UNITS = ('B', 'KB', 'MB', 'GB')


def format_file_size(size: int) -> str:
    """Human readable file size, e.g. 1536 -> '1.5 KB'."""
    if size <= 0:
        return '0 B'
    value = float(size)
    exponent = 0
    while value >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[exponent]}"


class FileExtractor:
    """Base class for format-specific extractors."""

    format = ""

    def extract(self, content: bytes, filename: str = "") -> ExtractedText:
        raise NotImplementedError


class PdfExtractor(FileExtractor):
    """Extracts page text and document metadata from PDF files."""

    format = "pdf"

    def extract(self, content: bytes, filename: str = "") -> ExtractedText:
        """
        Extract text from PDF bytes.

        Args:
            content: Raw PDF bytes
            filename: Original file name, used in log messages

        Returns:
            ExtractedText with pages joined by newlines

        Raises:
            ExtractionError: If the PDF is unreadable, encrypted, or has no text layer
        """
        if not content:
            raise ExtractionError(f"Empty PDF file: {filename or '<upload>'}")

        try:
            doc = fitz.open(stream=content, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise ExtractionError(f"Unreadable PDF {filename or '<upload>'}: {e}") from e

        with doc:
            if doc.needs_pass:
                raise ExtractionError(f"PDF is password protected: {filename or '<upload>'}")

            pages = [page.get_text() for page in doc]
            metadata = self._metadata(doc, len(content))

        text = "\n".join(pages)
        if not text.strip():
            raise ExtractionError(
                f"No text found in {filename or 'PDF'}; scanned documents are not supported"
            )

        logger.info(f"Extracted {len(text)} chars from {len(pages)} PDF pages")
        return ExtractedText(text=text, page_count=len(pages), metadata=metadata)

    @staticmethod
    def _metadata(doc: Any, size: int) -> Dict[str, Any]:
        info = doc.metadata or {}
        return {
            'title': info.get('title') or None,
            'author': info.get('author') or None,
            'subject': info.get('subject') or None,
            'creator': info.get('creator') or None,
            'producer': info.get('producer') or None,
            'creationDate': info.get('creationDate') or None,
            'modificationDate': info.get('modDate') or None,
            'version': info.get('format') or None,
            'pages': len(doc),
            'fileSize': size,
            'fileSizeHuman': format_file_size(size),
        }


class TextFileExtractor(FileExtractor):
    """Decodes plain text files."""

    format = "txt"

    def __init__(self, normalizer: Optional[TextNormalizer] = None):
        self.normalizer = normalizer or TextNormalizer()

    def extract(self, content: bytes, filename: str = "") -> ExtractedText:
        try:
            text = content.decode("utf-8-sig")
            encoding = "utf-8"
        except UnicodeDecodeError:
            logger.debug(f"{filename or 'Text file'} is not UTF-8, decoding as latin-1")
            text = content.decode("latin-1")
            encoding = "latin-1"

        text = self.normalizer.preserve_formatting(text)
        if not text:
            raise ExtractionError(f"Text file is empty: {filename or '<upload>'}")

        page_count = max(1, math.ceil(len(text.split()) / WORDS_PER_PAGE))
        return ExtractedText(
            text=text,
            page_count=page_count,
            metadata={
                'encoding': encoding,
                'fileSize': len(content),
                'fileSizeHuman': format_file_size(len(content)),
            }
        )


EXTRACTORS = {
    PdfExtractor.format: PdfExtractor,
    TextFileExtractor.format: TextFileExtractor,
}


def extractor_for(file_format: str) -> FileExtractor:
    """
    Get the extractor for a file format.

    Raises:
        ExtractionError: If the format is not supported
    """
    normalized = (file_format or "").lower().lstrip(".")
    if normalized not in SUPPORTED_FORMATS:
        raise ExtractionError(
            f"Unsupported file format: {file_format!r}. Supported: {', '.join(SUPPORTED_FORMATS)}"
        )
    return EXTRACTORS[normalized]()
