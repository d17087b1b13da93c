"""
Document Summarizer

Produces a summary for every non-empty document. Summary providers are
tried in order: the hosted primary model, the hosted fallback model, and
finally a local extractive summary that always succeeds. Abstractive
output is checked against the source vocabulary and replaced by the
extractive summary when too much of it is not grounded in the text.
"""

import logging
import math
import re
import threading
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Any, Dict, List, Optional, Sequence, Tuple, Union

from .model_client import HuggingFaceSummarizationClient
from .statistics import SENTENCE_DELIMITERS

logger = logging.getLogger(__name__)

PRIMARY_MODEL = "facebook/bart-large-cnn"
FALLBACK_MODEL = "sshleifer/distilbart-cnn-12-6"

MAX_MODEL_INPUT_CHARS = 4000
MAX_REMOTE_LENGTH = 500
MIN_REMOTE_LENGTH = 20
VALIDATION_THRESHOLD = 0.7

MIN_SUMMARY_SENTENCE_LENGTH = 20
MIN_SUMMARY_SENTENCE_WORDS = 5
MAX_SENTENCE_POOL = 30
MIN_SUMMARY_LENGTH = 50

INVALID_INPUT_SUMMARY = "Empty text - unable to generate a summary."

SENTENCE_ENDERS = ('.', '!', '?', '。', '！', '？')

COMMON_WORDS: AbstractSet[str] = frozenset({
    'le', 'de', 'et', 'à', 'un', 'il', 'être', 'avoir', 'que', 'pour', 'dans', 'ce',
    'son', 'sa', 'ses', 'the', 'be', 'to', 'of', 'and', 'a', 'in', 'that', 'have',
    'it', 'for', 'not', 'on', 'with', 'est', 'sont', 'était', 'sera', 'fait', 'dit',
    'peut', 'doit', 'très', 'plus', 'moins', 'is', 'are', 'was', 'will', 'can',
    'could', 'should', 'would', 'has', 'had', 'do', 'does',
})

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED_CHARS = re.compile(r"[^\w\s.,;:!?()\[\]\"'\-]")
_MISSING_SENTENCE_SPACE = re.compile(r"([.!?])\s*([A-Z])")
_DOUBLE_PERIOD = re.compile(r"\.\s*\.")
_WORD = re.compile(r"\w+")


class SummaryProvenance(Enum):
    """Where a returned summary came from."""
    REMOTE = "remote"
    REMOTE_FALLBACK_MODEL = "remote_fallback_model"
    EXTRACTIVE = "extractive"
    EXTRACTIVE_AFTER_REJECTION = "extractive_after_rejection"
    INVALID_INPUT = "invalid_input"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class SummaryConfig:
    """Summary length bounds for a document size band."""
    max_length: int
    min_length: int
    target_sentence_count: int


SUMMARY_BANDS: Tuple[Tuple[float, SummaryConfig], ...] = (
    (5000, SummaryConfig(max_length=80, min_length=30, target_sentence_count=2)),
    (20000, SummaryConfig(max_length=150, min_length=60, target_sentence_count=4)),
    (50000, SummaryConfig(max_length=300, min_length=120, target_sentence_count=6)),
    (math.inf, SummaryConfig(max_length=500, min_length=200, target_sentence_count=8)),
)


def select_summary_config(text_length: int) -> SummaryConfig:
    """Pick the summary configuration for a text of the given length."""
    for upper_bound, config in SUMMARY_BANDS:
        if text_length < upper_bound:
            return config
    return SUMMARY_BANDS[-1][1]


@dataclass(frozen=True)
class SummaryResult:
    """A summary together with its provenance."""
    text: str
    provenance: SummaryProvenance
    model: Optional[str] = None


@dataclass(frozen=True)
class ProviderFailure:
    """A summary provider could not produce a candidate."""
    provider: str
    reason: str


@dataclass(frozen=True)
class SummaryRequest:
    """Input shared by all providers for one summarize call."""
    text: str
    model_input: str
    config: SummaryConfig
    max_length: int

    def remote_parameters(self) -> Dict[str, Any]:
        max_length = min(self.max_length, MAX_REMOTE_LENGTH)
        return {
            "max_length": max_length,
            "min_length": min(max(self.config.min_length, MIN_REMOTE_LENGTH), max_length),
            "do_sample": False,
            "early_stopping": True,
            "length_penalty": 2.0,
            "repetition_penalty": 1.2,
            "no_repeat_ngram_size": 3,
        }


def preprocess_text(text: str, max_chars: int = MAX_MODEL_INPUT_CHARS) -> str:
    """
    Prepare text for a hosted model.

    Collapses whitespace, drops unusual symbols, and truncates to
    `max_chars` preferring a sentence end past 70% of the limit, then a
    word boundary past 80%, then a hard cut.
    """
    cleaned = _DISALLOWED_CHARS.sub("", _WHITESPACE.sub(" ", text)).strip()
    if len(cleaned) <= max_chars:
        return cleaned

    truncated = cleaned[:max_chars]

    cut_point = max(truncated.rfind(ender) for ender in SENTENCE_ENDERS)
    if cut_point > max_chars * 0.7:
        return truncated[:cut_point + 1]

    last_space = truncated.rfind(" ")
    if last_space > max_chars * 0.8:
        return truncated[:last_space] + "..."
    return truncated + "..."


def postprocess_summary(summary: str) -> str:
    """Normalize spacing in model output."""
    processed = _WHITESPACE.sub(" ", summary.strip())
    processed = _MISSING_SENTENCE_SPACE.sub(r"\1 \2", processed)
    return re.sub(r"\.\s*$", ".", processed)


class SummaryValidator:
    """Rejects summaries whose vocabulary is not grounded in the source text."""

    def __init__(
        self,
        threshold: float = VALIDATION_THRESHOLD,
        common_words: AbstractSet[str] = COMMON_WORDS
    ):
        self.threshold = threshold
        self.common_words = frozenset(common_words)

    def valid_ratio(self, summary: str, source: str) -> float:
        summary_words = _WORD.findall(summary.lower())
        if not summary_words:
            return 0.0

        source_words = set(_WORD.findall(source.lower()))
        valid = [word for word in summary_words if self._is_valid(word, source_words)]
        return len(valid) / len(summary_words)

    def _is_valid(self, word: str, source_words: AbstractSet[str]) -> bool:
        return (
            len(word) <= 2
            or word in self.common_words
            or word in source_words
            or (word.endswith('s') and word[:-1] in source_words)
            or word + 's' in source_words
        )

    def is_grounded(self, summary: str, source: str) -> bool:
        return self.valid_ratio(summary, source) >= self.threshold


class ExtractiveSummarizer:
    """Builds a summary from verbatim source sentences spread across the text."""

    def simple_summary(self, text: str, sentence_count: int = 3) -> str:
        """
        Select representative sentences.

        The opening sentence is always kept; the others are taken at a
        regular stride through the candidate pool.

        Args:
            text: Source text
            sentence_count: Number of sentences wanted

        Returns:
            Summary text, or a length-based placeholder when the text has
            no usable sentences
        """
        if not text or not text.strip():
            return INVALID_INPUT_SUMMARY

        sentence_count = max(1, sentence_count)
        pool = self._candidate_sentences(text)[:min(MAX_SENTENCE_POOL, sentence_count * 6)]

        if not pool:
            return f"{self._size_label(text)} document. Content available for full reading."

        if len(pool) >= sentence_count:
            selected = [pool[0]]
            step = len(pool) // sentence_count
            index = 1
            while index < sentence_count and index * step < len(pool):
                candidate = pool[min(index * step, len(pool) - 1)]
                if candidate not in selected:
                    selected.append(candidate)
                index += 1
        else:
            selected = pool

        summary = _WHITESPACE.sub(" ", ". ".join(selected) + ".")
        summary = _DOUBLE_PERIOD.sub(".", summary)

        if len(summary) < MIN_SUMMARY_LENGTH:
            return (
                f"Automatic summary: {self._size_label(text)} document containing text content. "
                "Full reading recommended for more details."
            )
        return summary

    @staticmethod
    def _candidate_sentences(text: str) -> List[str]:
        sentences = (sentence.strip() for sentence in SENTENCE_DELIMITERS.split(text))
        return [
            sentence for sentence in sentences
            if len(sentence) > MIN_SUMMARY_SENTENCE_LENGTH
            and len(sentence.split()) >= MIN_SUMMARY_SENTENCE_WORDS
        ]

    @staticmethod
    def _size_label(text: str) -> str:
        return f"{math.ceil(len(text) / 1000)}k-character"


class SummaryProvider:
    """A source of candidate summaries."""

    name = "provider"
    remote = False

    def generate(self, request: SummaryRequest) -> Union[SummaryResult, ProviderFailure]:
        raise NotImplementedError

    def abort(self):
        """Stop outstanding work; local providers have none."""


class RemoteModelProvider(SummaryProvider):
    """Abstractive summary from a hosted model."""

    remote = True

    def __init__(
        self,
        client: HuggingFaceSummarizationClient,
        model: str,
        provenance: SummaryProvenance = SummaryProvenance.REMOTE
    ):
        self.client = client
        self.model = model
        self.provenance = provenance
        self.name = f"remote:{model}"

    def abort(self):
        self.client.abort()

    def generate(self, request: SummaryRequest) -> Union[SummaryResult, ProviderFailure]:
        result = self.client.summarize(request.model_input, request.remote_parameters(), self.model)
        if not result.ok:
            return ProviderFailure(self.name, result.error or "empty response")

        return SummaryResult(
            text=postprocess_summary(result.text),
            provenance=self.provenance,
            model=self.model
        )


class ExtractiveProvider(SummaryProvider):
    """Local extractive summary; never fails."""

    name = "extractive"

    def __init__(self, extractive: Optional[ExtractiveSummarizer] = None):
        self.extractive = extractive or ExtractiveSummarizer()

    def generate(self, request: SummaryRequest) -> SummaryResult:
        return SummaryResult(
            text=self.extractive.simple_summary(request.text, request.config.target_sentence_count),
            provenance=SummaryProvenance.EXTRACTIVE
        )


class Summarizer:
    """
    Orchestrates summary providers for a document.

    With a configured client the chain is primary model, fallback model,
    extractive; without one only the extractive provider runs.
    """

    def __init__(
        self,
        client: Optional[HuggingFaceSummarizationClient] = None,
        primary_model: str = PRIMARY_MODEL,
        fallback_model: str = FALLBACK_MODEL,
        validator: Optional[SummaryValidator] = None,
        extractive: Optional[ExtractiveSummarizer] = None,
        max_input_chars: int = MAX_MODEL_INPUT_CHARS,
        providers: Optional[Sequence[SummaryProvider]] = None
    ):
        """
        Initialize the summarizer.

        Args:
            client: Hosted model client; None or unconfigured means local only
            primary_model: First hosted model tried
            fallback_model: Hosted model tried when the primary fails
            validator: Grounding check applied to remote summaries
            extractive: Local extractive summarizer
            max_input_chars: Truncation limit for model input
            providers: Explicit provider chain (overrides the default chain)
        """
        self.validator = validator or SummaryValidator()
        self.extractive = extractive or ExtractiveSummarizer()
        self.max_input_chars = max_input_chars

        if providers is None:
            providers = []
            if client is not None and client.configured:
                providers.append(RemoteModelProvider(client, primary_model, SummaryProvenance.REMOTE))
                providers.append(RemoteModelProvider(
                    client, fallback_model, SummaryProvenance.REMOTE_FALLBACK_MODEL
                ))
            else:
                logger.warning("No summarization API key configured, using extractive summaries")
        self.providers = [p for p in providers if not isinstance(p, ExtractiveProvider)]
        self.providers.append(ExtractiveProvider(self.extractive))

    @property
    def has_remote(self) -> bool:
        return any(provider.remote for provider in self.providers)

    def abort_remote(self):
        """Abort hosted-model requests, e.g. when an ingestion is cancelled."""
        for provider in self.providers:
            if provider.remote:
                provider.abort()

    def summarize(
        self,
        text: str,
        custom_max_length: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> str:
        """Summarize text; always returns a non-empty string."""
        return self.summarize_with_provenance(text, custom_max_length, cancel_event).text

    def summarize_with_provenance(
        self,
        text: str,
        custom_max_length: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> SummaryResult:
        """
        Summarize text and report which provider produced the summary.

        Args:
            text: Document text
            custom_max_length: Overrides the band's max_length
            cancel_event: When set, remaining hosted-model attempts are skipped

        Returns:
            SummaryResult with non-empty text
        """
        if not text or not text.strip():
            logger.warning("Invalid text for summarization")
            return SummaryResult(INVALID_INPUT_SUMMARY, SummaryProvenance.INVALID_INPUT)

        config = select_summary_config(len(text))
        request = SummaryRequest(
            text=text,
            model_input=preprocess_text(text, self.max_input_chars) if self.has_remote else text,
            config=config,
            max_length=custom_max_length or config.max_length
        )
        logger.info(f"Summarizing {len(text)} chars with config {config}")

        for provider in self.providers:
            if provider.remote and cancel_event is not None and cancel_event.is_set():
                logger.info(f"Skipping {provider.name}: ingestion cancelled")
                continue

            try:
                outcome = provider.generate(request)
            except Exception as e:
                logger.error(f"Summary provider {provider.name} raised: {e}")
                continue

            if isinstance(outcome, ProviderFailure):
                logger.warning(f"Summary provider {outcome.provider} failed: {outcome.reason}")
                continue

            if provider.remote and not self.validator.is_grounded(outcome.text, text):
                logger.warning(f"Summary from {provider.name} looks hallucinated, using extractive summary")
                return SummaryResult(
                    self._extractive(request),
                    SummaryProvenance.EXTRACTIVE_AFTER_REJECTION
                )

            if outcome.text and outcome.text.strip():
                return outcome

        return SummaryResult(self._extractive(request), SummaryProvenance.EXTRACTIVE)

    def _extractive(self, request: SummaryRequest) -> str:
        return self.extractive.simple_summary(request.text, request.config.target_sentence_count)

    def simple_summary(self, text: str, sentence_count: int = 3) -> str:
        return self.extractive.simple_summary(text, sentence_count)


def summarize_text(text: str, api_key: Optional[str] = None, custom_max_length: Optional[int] = None) -> str:
    """Convenience function to summarize text, optionally with a hosted model."""
    client = HuggingFaceSummarizationClient(api_key) if api_key else None
    return Summarizer(client=client).summarize(text, custom_max_length)
