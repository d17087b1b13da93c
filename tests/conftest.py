"""
Pytest configuration and shared fixtures for the ingestion test suite.

Test Structure:
- test_normalizer.py: Text cleanup and PDF artifact removal
- test_language.py / test_statistics.py: Language detection and counts
- test_segmenter.py: Chapter detection and size-based sections
- test_keywords.py / test_sentiment.py: Lexical analysis
- test_summarizer.py / test_model_client.py: Summary providers and API client
- test_extractors.py / test_store.py: File extraction and persistence
- test_pipeline.py / test_config.py / test_cli.py: Orchestration and entry points
"""

import pytest
import fitz  # PyMuPDF

ENV_VARS = (
    "HUGGINGFACE_API_KEY",
    "HUGGINGFACE_API_URL",
    "INGESTION_STORE_DIR",
    "INGESTION_DEBUG",
)

BOOK_TEXT = (
    "Chapter 1\n"
    "The old lighthouse keeper watched the stormy ocean every night. "
    "His lighthouse guided many ships safely through the dangerous rocks.\n\n"
    "Chapter 2\n"
    "One winter morning a small boat appeared near the lighthouse. "
    "The keeper rowed out and rescued the tired fishermen from the freezing water.\n"
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment variables out of the tests."""
    for name in ENV_VARS:
        # setenv first so monkeypatch restores the original state afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def book_text():
    return BOOK_TEXT


@pytest.fixture
def make_pdf():
    """Factory building PDF bytes with one page per entry of `pages`."""
    def _make_pdf(pages, metadata=None):
        doc = fitz.open()
        for page_text in pages:
            page = doc.new_page()
            if page_text:
                page.insert_text((72, 72), page_text, fontsize=11)
        if metadata:
            doc.set_metadata(metadata)
        data = doc.tobytes()
        doc.close()
        return data
    return _make_pdf


@pytest.fixture
def book_pdf(make_pdf):
    pages = [
        "Chapter 1\nThe old lighthouse keeper watched the ocean.\n"
        "His lighthouse guided many ships through the rocks.",
        "Chapter 2\nOne winter morning a small boat appeared.\n"
        "The keeper rowed out and rescued the fishermen.",
    ]
    return make_pdf(pages, {"author": "Jane Doe", "title": "The Lighthouse"})
