"""
Document Ingestion

Turns uploaded books and documents (PDF or plain text) into structured,
searchable records: normalized text, chapters, statistics, keywords,
sentiment and a summary.

Main Components:
- PdfExtractor / TextFileExtractor: Get text out of uploaded files
- TextNormalizer: Clean extracted text and repair PDF artifacts
- StructureSegmenter: Multilingual chapter detection with size-based fallback
- TextStatistics: Counts, reading time and language detection
- Summarizer: Hosted model summaries with an extractive fallback
- IngestionPipeline: Complete orchestration pipeline

Usage:
    from ingestion import create_pipeline, ingest_file

    # Quick ingestion
    document = ingest_file("book.pdf")

    # Full pipeline with a store
    pipeline = create_pipeline()
    document = pipeline.ingest_and_store(raw, JsonDocumentStore("./data/documents"))
"""

from .exceptions import (
    IngestionError,
    ExtractionError,
    IngestionCancelled,
    ConfigurationError,
    ModelClientError
)

from .models import (
    RawDocument,
    ExtractedText,
    Section,
    Sentiment,
    ReadingProgress,
    Document
)

from .normalizer import TextNormalizer, normalize_text
from .language import LanguageDetector, detect_language
from .statistics import TextStatistics, TextStats, IntegrityReport, compute_stats
from .segmenter import StructureSegmenter, segment_text
from .keywords import KeywordExtractor, extract_keywords
from .sentiment import SentimentAnalyzer

from .summarizer import (
    Summarizer,
    SummaryConfig,
    SummaryResult,
    SummaryProvenance,
    summarize_text
)

from .model_client import HuggingFaceSummarizationClient, RemoteSummary
from .extractors import PdfExtractor, TextFileExtractor, extractor_for
from .store import DocumentStore, JsonDocumentStore

from .config import IngestionConfig, ConfigManager, get_config

from .pipeline import (
    IngestionPipeline,
    create_pipeline,
    ingest_file
)

__version__ = "1.0.0"

__all__ = [
    # Errors
    "IngestionError",
    "ExtractionError",
    "IngestionCancelled",
    "ConfigurationError",
    "ModelClientError",

    # Models
    "RawDocument",
    "ExtractedText",
    "Section",
    "Sentiment",
    "ReadingProgress",
    "Document",

    # Text analysis
    "TextNormalizer",
    "normalize_text",
    "LanguageDetector",
    "detect_language",
    "TextStatistics",
    "TextStats",
    "IntegrityReport",
    "compute_stats",
    "StructureSegmenter",
    "segment_text",
    "KeywordExtractor",
    "extract_keywords",
    "SentimentAnalyzer",

    # Summarization
    "Summarizer",
    "SummaryConfig",
    "SummaryResult",
    "SummaryProvenance",
    "summarize_text",
    "HuggingFaceSummarizationClient",
    "RemoteSummary",

    # Extraction and storage
    "PdfExtractor",
    "TextFileExtractor",
    "extractor_for",
    "DocumentStore",
    "JsonDocumentStore",

    # Pipeline
    "IngestionConfig",
    "ConfigManager",
    "get_config",
    "IngestionPipeline",
    "create_pipeline",
    "ingest_file"
]
