"""
Ingestion Pipeline

Main orchestrator that turns an uploaded file into a Document: extraction,
normalization, then segmentation, statistics, keywords, sentiment and
summarization running side by side. Extraction failures abort the run;
every later stage degrades to a default value and is logged.
"""

import logging
import re
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar, Union

from .config import IngestionConfig
from .exceptions import ExtractionError, IngestionCancelled
from .extractors import extractor_for
from .keywords import KeywordExtractor
from .language import LanguageDetector
from .model_client import HuggingFaceSummarizationClient
from .models import SUPPORTED_FORMATS, Document, RawDocument
from .normalizer import TextNormalizer
from .segmenter import StructureSegmenter
from .sentiment import NEUTRAL, SentimentAnalyzer
from .statistics import TextStatistics, TextStats
from .store import DocumentStore
from .summarizer import SummaryProvenance, SummaryResult, SummaryValidator, Summarizer

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown author"
UNTITLED = "Untitled"
UNAVAILABLE_SUMMARY = "Summary unavailable. Document ready for reading."
CANCEL_POLL_INTERVAL = 0.1

T = TypeVar("T")


def extract_title_from_filename(filename: str) -> str:
    """Readable title from a file name, e.g. 'my_book-v2.pdf' -> 'My Book V2'."""
    stem = Path(filename or "").stem
    title = re.sub(r"[-_]", " ", stem)
    title = re.sub(r"\s+", " ", title).strip()
    title = re.sub(r"\b\w", lambda m: m.group(0).upper(), title)
    return title or UNTITLED


class IngestionPipeline:
    """
    Main pipeline for ingesting documents.

    Coordinates extraction, normalization and the analysis stages with
    graceful degradation and cooperative cancellation.
    """

    def __init__(
        self,
        config: Optional[IngestionConfig] = None,
        normalizer: Optional[TextNormalizer] = None,
        statistics: Optional[TextStatistics] = None,
        segmenter: Optional[StructureSegmenter] = None,
        keyword_extractor: Optional[KeywordExtractor] = None,
        sentiment_analyzer: Optional[SentimentAnalyzer] = None,
        summarizer: Optional[Summarizer] = None
    ):
        """
        Initialize the pipeline.

        Args:
            config: Ingestion configuration
            normalizer..summarizer: Optional component overrides
        """
        self.config = config or IngestionConfig()
        processing = self.config.processing

        self.normalizer = normalizer or TextNormalizer()
        self.statistics = statistics or TextStatistics(
            detector=LanguageDetector(default_language=processing.default_language),
            max_loss_percentage=processing.max_integrity_loss
        )
        self.segmenter = segmenter or StructureSegmenter(
            target_size=processing.segment_target_size,
            statistics=self.statistics
        )
        self.keyword_extractor = keyword_extractor or KeywordExtractor()
        self.sentiment_analyzer = sentiment_analyzer or SentimentAnalyzer()

        self.client = None
        if summarizer is None:
            summarizer = self._build_summarizer()
        self.summarizer = summarizer

        logger.info("Ingestion pipeline initialized")

    def _build_summarizer(self) -> Summarizer:
        models = self.config.models
        api_key = self.config.apis.huggingface_api_key
        if api_key:
            self.client = HuggingFaceSummarizationClient(
                api_key=api_key,
                api_url=models.api_url,
                timeout=models.timeout,
                health_check_model=models.fallback_model
            )

        return Summarizer(
            client=self.client,
            primary_model=models.primary_model,
            fallback_model=models.fallback_model,
            validator=SummaryValidator(self.config.processing.validation_threshold),
            max_input_chars=self.config.processing.max_model_input_chars
        )

    def ingest(
        self,
        raw: RawDocument,
        title: Optional[str] = None,
        author: Optional[str] = None,
        description: str = "",
        cancel_event: Optional[threading.Event] = None
    ) -> Document:
        """
        Ingest an uploaded document.

        Args:
            raw: Uploaded file content
            title: Document title; defaults to a title derived from the file name
            author: Document author; defaults to the PDF author metadata
            description: Free text description
            cancel_event: Set by the caller to abort between stages

        Returns:
            Assembled Document (not yet stored)

        Raises:
            ExtractionError: If the upload yields no usable text
            IngestionCancelled: If cancel_event was set
        """
        cancel_event = cancel_event or threading.Event()
        start_time = time.time()
        processing = self.config.processing

        self._check_cancelled(cancel_event, "extraction")
        if raw.size > processing.max_upload_bytes:
            raise ExtractionError(
                f"File too large: {raw.size} bytes (max {processing.max_upload_bytes})"
            )

        extracted = extractor_for(raw.format).extract(raw.content, raw.filename)
        if len(extracted.text.strip()) < processing.min_text_length:
            raise ExtractionError(
                f"Extracted text too short ({len(extracted.text.strip())} chars, "
                f"minimum {processing.min_text_length})"
            )

        self._check_cancelled(cancel_event, "normalization")
        text = self.normalizer.normalize(extracted.text, pdf=raw.format == "pdf")
        if len(text.strip()) < processing.min_text_length:
            raise ExtractionError(
                f"Text too short after cleanup ({len(text.strip())} chars, "
                f"minimum {processing.min_text_length})"
            )
        integrity = self._guard(
            "integrity check",
            lambda: self.statistics.check_integrity(extracted.text, text),
            lambda: None
        )

        self._check_cancelled(cancel_event, "analysis")
        results = self._analyze(text, cancel_event)

        self._check_cancelled(cancel_event, "assembly")
        summary: SummaryResult = results['summary']
        stats: TextStats = results['stats']

        metadata: Dict[str, Any] = dict(extracted.metadata)
        metadata['detectedLanguage'] = stats.detected_language
        if integrity is not None:
            metadata['integrity'] = integrity.to_dict()
        metadata['processingTimeSeconds'] = round(time.time() - start_time, 3)

        document = Document(
            title=title or extract_title_from_filename(raw.filename),
            author=author or extracted.metadata.get('author') or UNKNOWN_AUTHOR,
            description=description or "",
            original_file_name=raw.filename,
            file_type=raw.format,
            file_size=raw.size,
            extracted_text=text,
            summary=summary.text,
            summary_provenance=summary.provenance.value,
            chapters=results['chapters'],
            keywords=results['keywords'],
            stats=stats,
            sentiment=results['sentiment'],
            total_pages=extracted.page_count,
            metadata=metadata,
        )

        logger.info(
            f"Ingested '{document.title}': {len(document.chapters)} sections, "
            f"{stats.word_count} words, summary from {document.summary_provenance} "
            f"in {metadata['processingTimeSeconds']}s"
        )
        return document

    def _stages(self, text: str, cancel_event: threading.Event) -> Dict[str, tuple]:
        """Analysis stages as name -> (work, fallback)."""
        max_keywords = self.config.processing.max_keywords
        return {
            'chapters': (
                lambda: self.segmenter.segment(text),
                lambda: self.segmenter.split_by_size(text)
            ),
            'stats': (
                lambda: self.statistics.compute_stats(text),
                lambda: TextStats(0, 0, 0, 0, 0, 0, 0, self.config.processing.default_language)
            ),
            'keywords': (
                lambda: self.keyword_extractor.extract_keywords(text, max_keywords),
                lambda: []
            ),
            'sentiment': (
                lambda: self.sentiment_analyzer.analyze(text),
                lambda: NEUTRAL
            ),
            'summary': (
                lambda: self.summarizer.summarize_with_provenance(text, cancel_event=cancel_event),
                lambda: SummaryResult(UNAVAILABLE_SUMMARY, SummaryProvenance.UNAVAILABLE)
            ),
        }

    def _analyze(self, text: str, cancel_event: threading.Event) -> Dict[str, Any]:
        stages = self._stages(text, cancel_event)

        if not self.config.processing.parallel_stages:
            results = {}
            for name, (work, fallback) in stages.items():
                self._check_cancelled(cancel_event, name)
                results[name] = self._guard(name, work, fallback)
            return results

        executor = ThreadPoolExecutor(
            max_workers=self.config.processing.max_workers,
            thread_name_prefix="ingestion"
        )
        cancelled = False
        try:
            futures: Dict[str, Future] = {
                name: executor.submit(self._guard, name, work, fallback)
                for name, (work, fallback) in stages.items()
            }

            pending = set(futures.values())
            while pending:
                _, pending = wait(pending, timeout=CANCEL_POLL_INTERVAL, return_when=FIRST_COMPLETED)
                if cancel_event.is_set():
                    cancelled = True
                    raise IngestionCancelled("Ingestion cancelled during analysis")

            return {name: future.result() for name, future in futures.items()}
        finally:
            executor.shutdown(wait=not cancelled, cancel_futures=True)
            if cancelled:
                self.summarizer.abort_remote()

    @staticmethod
    def _guard(stage: str, work: Callable[[], T], fallback: Callable[[], T]) -> T:
        try:
            return work()
        except Exception as e:
            logger.error(f"Stage '{stage}' failed, using default: {e}")
            return fallback()

    @staticmethod
    def _check_cancelled(cancel_event: threading.Event, stage: str):
        if cancel_event.is_set():
            logger.info(f"Ingestion cancelled before {stage}")
            raise IngestionCancelled(f"Ingestion cancelled before {stage}")

    def ingest_file(
        self,
        path: Union[str, Path],
        title: Optional[str] = None,
        author: Optional[str] = None,
        description: str = "",
        cancel_event: Optional[threading.Event] = None
    ) -> Document:
        """
        Ingest a file from disk; the format is taken from the suffix.

        Raises:
            FileNotFoundError: If the file does not exist
            ExtractionError: For unsupported suffixes, oversized files or unusable text
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        file_format = path.suffix.lower().lstrip(".")
        if file_format not in SUPPORTED_FORMATS:
            raise ExtractionError(
                f"Unsupported file type '{path.suffix}'. Supported: {', '.join(SUPPORTED_FORMATS)}"
            )

        size = path.stat().st_size
        if size > self.config.processing.max_upload_bytes:
            raise ExtractionError(
                f"File too large: {size} bytes (max {self.config.processing.max_upload_bytes})"
            )

        logger.info(f"Ingesting {path}")
        raw = RawDocument(content=path.read_bytes(), format=file_format, filename=path.name)
        return self.ingest(raw, title, author, description, cancel_event)

    def ingest_and_store(
        self,
        raw: RawDocument,
        store: DocumentStore,
        title: Optional[str] = None,
        author: Optional[str] = None,
        description: str = "",
        cancel_event: Optional[threading.Event] = None
    ) -> Document:
        """Ingest a document and hand it to a store; the returned document carries its id."""
        document = self.ingest(raw, title, author, description, cancel_event)
        document.id = store.create(document)
        return document

    def close(self):
        if self.client is not None:
            self.client.close()


def create_pipeline(config: Optional[IngestionConfig] = None) -> IngestionPipeline:
    """
    Create an ingestion pipeline.

    Args:
        config: Configuration; defaults are used when omitted

    Returns:
        Configured IngestionPipeline
    """
    return IngestionPipeline(config)


def ingest_file(path: Union[str, Path], config: Optional[IngestionConfig] = None, **kwargs) -> Document:
    """Convenience function to ingest a single file."""
    pipeline = create_pipeline(config)
    try:
        return pipeline.ingest_file(path, **kwargs)
    finally:
        pipeline.close()
