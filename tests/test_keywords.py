"""
Tests for keyword extraction.
"""

from ingestion.keywords import KeywordExtractor, extract_keywords


class TestKeywordExtractor:
    """Test cases for KeywordExtractor."""

    def setup_method(self):
        self.extractor = KeywordExtractor()

    def test_frequency_and_length_ranking(self):
        keywords = self.extractor.extract_keywords("the the the dictionary dictionary algorithm", 2)
        assert keywords == ["dictionary", "algorithm"]

    def test_stopwords_and_short_words_excluded(self):
        keywords = self.extractor.extract_keywords("pour dans avec cette leur cat dog garden")
        assert keywords == ["garden"]

    def test_numbers_excluded(self):
        assert self.extractor.extract_keywords("2024 2024 1999 history") == ["history"]

    def test_punctuation_stripped_and_lowercased(self):
        keywords = self.extractor.extract_keywords("Ocean! ocean, OCEAN. Harbor")
        assert keywords == ["ocean", "harbor"]

    def test_longer_words_boosted(self):
        assert self.extractor.extract_keywords("apple banana") == ["banana", "apple"]

    def test_ties_keep_first_seen_order(self):
        assert self.extractor.extract_keywords("cherry orange") == ["cherry", "orange"]
        assert self.extractor.extract_keywords("orange cherry") == ["orange", "cherry"]

    def test_limit_respected(self):
        text = "alpha bravo charlie delta echo foxtrot golf hotel india juliet"
        assert len(self.extractor.extract_keywords(text)) == 8
        assert len(self.extractor.extract_keywords(text, 3)) == 3

    def test_accented_words(self):
        assert self.extractor.extract_keywords("château château forêt") == ["château", "forêt"]

    def test_degenerate_input(self):
        assert self.extractor.extract_keywords("") == []
        assert self.extractor.extract_keywords("some words here", 0) == []
        assert self.extractor.extract_keywords("... !!! ???") == []

    def test_custom_stopwords(self):
        extractor = KeywordExtractor(stopwords={"lighthouse"})
        assert extractor.extract_keywords("lighthouse lighthouse keeper") == ["keeper"]

    def test_convenience_function(self):
        assert extract_keywords("keyword keyword other", 1) == ["keyword"]
