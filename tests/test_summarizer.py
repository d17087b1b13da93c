"""
Tests for the summarizer: provider chain, grounding validation,
text preparation and the extractive fallback.
"""

import threading

import pytest
from unittest.mock import Mock

from ingestion.model_client import HuggingFaceSummarizationClient, RemoteSummary
from ingestion.summarizer import (
    FALLBACK_MODEL,
    INVALID_INPUT_SUMMARY,
    PRIMARY_MODEL,
    ExtractiveSummarizer,
    ProviderFailure,
    SummaryProvenance,
    SummaryProvider,
    SummaryResult,
    SummaryValidator,
    Summarizer,
    postprocess_summary,
    preprocess_text,
    select_summary_config,
    summarize_text,
)

SENTENCES = [f"This is sentence number {i} with enough words" for i in range(10)]
SOURCE_TEXT = ". ".join(SENTENCES) + "."


@pytest.fixture
def client():
    client = Mock(spec=HuggingFaceSummarizationClient)
    client.configured = True
    return client


class TestSummaryConfig:
    """Test cases for length bands."""

    @pytest.mark.parametrize("length, max_length, sentences", [
        (100, 80, 2),
        (4999, 80, 2),
        (5000, 150, 4),
        (20000, 300, 6),
        (60000, 500, 8),
    ])
    def test_bands(self, length, max_length, sentences):
        config = select_summary_config(length)
        assert config.max_length == max_length
        assert config.target_sentence_count == sentences


class TestTextPreparation:
    """Test cases for model input and output cleanup."""

    def test_whitespace_and_symbols(self):
        assert preprocess_text("Hello   @world\n#1  café") == "Hello world 1 café"

    def test_short_text_untouched(self):
        assert preprocess_text("A short text.") == "A short text."

    def test_truncates_at_sentence_end(self):
        text = " ".join(["This sentence is exactly forty chars."] * 200)
        result = preprocess_text(text)

        assert len(result) <= 4000
        assert result.endswith(".")
        assert len(result) > 4000 * 0.7

    def test_truncates_at_word_boundary(self):
        text = " ".join(["word"] * 2000)
        result = preprocess_text(text)

        assert result.endswith("word...")
        assert len(result) <= 4003

    def test_hard_cut(self):
        result = preprocess_text("x" * 5000)
        assert result == "x" * 4000 + "..."

    def test_postprocess(self):
        assert postprocess_summary("  Hello.World   again.  ") == "Hello. World again."


class TestSummaryValidator:
    """Test cases for the grounding check."""

    def setup_method(self):
        self.validator = SummaryValidator()

    def test_grounded_summary_accepted(self):
        assert self.validator.is_grounded("This is sentence number three.", SOURCE_TEXT)

    def test_invented_summary_rejected(self):
        summary = "Quantum zebras orchestrate volcanic symphonies tonight"
        assert not self.validator.is_grounded(summary, SOURCE_TEXT)
        assert self.validator.valid_ratio(summary, SOURCE_TEXT) == 0.0

    def test_plural_variants_accepted(self):
        source = "The library holds many books and one map."
        assert self.validator.valid_ratio("book maps", source) == 1.0

    def test_common_words_accepted(self):
        assert self.validator.valid_ratio("the and should would", "unrelated") == 1.0

    def test_empty_summary_rejected(self):
        assert not self.validator.is_grounded("", SOURCE_TEXT)


class TestExtractiveSummarizer:
    """Test cases for simple_summary."""

    def setup_method(self):
        self.extractive = ExtractiveSummarizer()

    def test_spread_selection(self):
        summary = self.extractive.simple_summary(SOURCE_TEXT, 3)
        assert summary == f"{SENTENCES[0]}. {SENTENCES[3]}. {SENTENCES[6]}."

    def test_fewer_sentences_than_requested(self):
        text = f"{SENTENCES[0]}. {SENTENCES[1]}."
        assert self.extractive.simple_summary(text, 4) == f"{SENTENCES[0]}. {SENTENCES[1]}."

    def test_no_usable_sentences(self):
        summary = self.extractive.simple_summary("Hi. Ok. Yes.", 3)
        assert "1k-character" in summary

    def test_short_result_placeholder(self):
        summary = self.extractive.simple_summary("Only five words are here.", 1)
        assert summary.startswith("Automatic summary:")

    def test_empty_text(self):
        assert self.extractive.simple_summary("", 3) == INVALID_INPUT_SUMMARY

    def test_sentences_are_verbatim(self):
        summary = self.extractive.simple_summary(SOURCE_TEXT, 2)
        for sentence in summary.rstrip(".").split(". "):
            assert sentence in SOURCE_TEXT


class TestSummarizer:
    """Test cases for the provider chain."""

    def test_empty_input(self):
        result = Summarizer().summarize_with_provenance("")

        assert result.text == INVALID_INPUT_SUMMARY
        assert result.provenance == SummaryProvenance.INVALID_INPUT
        assert Summarizer().summarize("   ") == INVALID_INPUT_SUMMARY

    def test_without_client_uses_extractive(self):
        result = Summarizer().summarize_with_provenance(SOURCE_TEXT)

        assert result.provenance == SummaryProvenance.EXTRACTIVE
        assert result.text.startswith(SENTENCES[0])

    def test_unconfigured_client_uses_extractive(self, client):
        client.configured = False
        result = Summarizer(client=client).summarize_with_provenance(SOURCE_TEXT)

        assert result.provenance == SummaryProvenance.EXTRACTIVE
        client.summarize.assert_not_called()

    def test_primary_model_summary(self, client):
        client.summarize.return_value = RemoteSummary(
            text="This is sentence number one.", model=PRIMARY_MODEL
        )
        result = Summarizer(client=client).summarize_with_provenance(SOURCE_TEXT)

        assert result.provenance == SummaryProvenance.REMOTE
        assert result.model == PRIMARY_MODEL
        assert result.text == "This is sentence number one."

        text, params, model = client.summarize.call_args[0]
        assert model == PRIMARY_MODEL
        assert params["max_length"] == 80
        assert params["min_length"] == 30
        assert params["do_sample"] is False
        assert params["no_repeat_ngram_size"] == 3

    def test_fallback_model_after_failure(self, client):
        client.summarize.side_effect = [
            RemoteSummary(error="Model is loading", model=PRIMARY_MODEL),
            RemoteSummary(text="This is sentence number two.", model=FALLBACK_MODEL),
        ]
        result = Summarizer(client=client).summarize_with_provenance(SOURCE_TEXT)

        assert result.provenance == SummaryProvenance.REMOTE_FALLBACK_MODEL
        assert result.model == FALLBACK_MODEL
        assert client.summarize.call_count == 2

    def test_all_remote_failures_use_extractive(self, client):
        client.summarize.return_value = RemoteSummary(error="timeout")
        result = Summarizer(client=client).summarize_with_provenance(SOURCE_TEXT)

        assert result.provenance == SummaryProvenance.EXTRACTIVE
        assert result.text

    def test_hallucinated_summary_rejected(self, client):
        client.summarize.return_value = RemoteSummary(
            text="Quantum zebras orchestrate volcanic symphonies tonight.", model=PRIMARY_MODEL
        )
        result = Summarizer(client=client).summarize_with_provenance(SOURCE_TEXT)

        assert result.provenance == SummaryProvenance.EXTRACTIVE_AFTER_REJECTION
        assert "zebras" not in result.text
        assert result.text.startswith(SENTENCES[0])

    def test_custom_max_length_capped(self, client):
        client.summarize.return_value = RemoteSummary(text="This is sentence number one.")
        Summarizer(client=client).summarize(SOURCE_TEXT, custom_max_length=1000)

        params = client.summarize.call_args[0][1]
        assert params["max_length"] == 500

    def test_small_custom_max_length_bounds_min_length(self, client):
        client.summarize.return_value = RemoteSummary(text="This is sentence number one.")
        Summarizer(client=client).summarize(SOURCE_TEXT, custom_max_length=25)

        params = client.summarize.call_args[0][1]
        assert params["max_length"] == 25
        assert params["min_length"] == 25

    def test_cancelled_skips_remote(self, client):
        cancel_event = threading.Event()
        cancel_event.set()
        result = Summarizer(client=client).summarize_with_provenance(SOURCE_TEXT, cancel_event=cancel_event)

        assert result.provenance == SummaryProvenance.EXTRACTIVE
        client.summarize.assert_not_called()

    def test_abort_remote_reaches_client(self, client):
        Summarizer(client=client).abort_remote()

        assert client.abort.called

    def test_abort_remote_without_client(self):
        summarizer = Summarizer()
        summarizer.abort_remote()

        assert summarizer.summarize(SOURCE_TEXT)

    def test_raising_provider_is_skipped(self):
        class BrokenProvider(SummaryProvider):
            name = "broken"

            def generate(self, request):
                raise RuntimeError("boom")

        result = Summarizer(providers=[BrokenProvider()]).summarize_with_provenance(SOURCE_TEXT)
        assert result.provenance == SummaryProvenance.EXTRACTIVE

    def test_custom_provider_chain(self):
        class FailingProvider(SummaryProvider):
            name = "failing"

            def generate(self, request):
                return ProviderFailure(self.name, "unavailable")

        class FixedProvider(SummaryProvider):
            name = "fixed"

            def generate(self, request):
                return SummaryResult("Fixed summary.", SummaryProvenance.REMOTE, "fixed-model")

        summarizer = Summarizer(providers=[FailingProvider(), FixedProvider()])
        result = summarizer.summarize_with_provenance(SOURCE_TEXT)

        assert result.text == "Fixed summary."
        assert result.model == "fixed-model"

    def test_model_input_is_preprocessed(self, client):
        client.summarize.return_value = RemoteSummary(text="This is sentence number one.")
        long_text = SOURCE_TEXT + " " + "filler words here. " * 400
        Summarizer(client=client).summarize(long_text)

        model_input = client.summarize.call_args[0][0]
        assert len(model_input) <= 4003

    def test_convenience_function(self):
        assert summarize_text(SOURCE_TEXT).startswith(SENTENCES[0])
