"""
Tests for the text normalizer: generic cleanup, PDF artifact removal
and the plain-text variant.
"""

import pytest

from ingestion.normalizer import TextNormalizer, normalize_text


class TestTextNormalizer:
    """Test cases for TextNormalizer."""

    def setup_method(self):
        self.normalizer = TextNormalizer()

    def test_empty_input(self):
        assert self.normalizer.normalize("") == ""
        assert self.normalizer.normalize("", pdf=True) == ""
        assert self.normalizer.normalize("   \n\n  ") == ""

    def test_line_endings_unified(self):
        assert self.normalizer.normalize("Hello\r\nWorld\rAgain") == "Hello\nWorld\nAgain"

    def test_control_characters_removed(self):
        assert self.normalizer.normalize("abc\x00def\x07ghi") == "abcdefghi"

    def test_bom_and_nbsp(self):
        assert self.normalizer.normalize("\ufeffHello\u00a0world") == "Hello world"

    def test_spaces_and_tabs_collapsed(self):
        assert self.normalizer.normalize("a   b\t\tc") == "a b c"

    def test_trailing_spaces_stripped(self):
        assert self.normalizer.normalize("line one   \nline two") == "line one\nline two"

    def test_blank_line_runs_capped(self):
        assert self.normalizer.normalize("a\n\n\n\n\n\nb") == "a\n\n\nb"
        assert self.normalizer.normalize("a\n\nb") == "a\n\nb"

    def test_accents_preserved(self):
        text = "L'été à Paris, ça déçoit rarement. Où êtes-vous ? Straße, niño, Œuvre."
        assert self.normalizer.normalize(text) == text

    @pytest.mark.parametrize("raw", [
        "Hello  world\r\n\r\n\r\n\r\n\r\nNext\tparagraph   ",
        "\ufeffTitle\n\n\n\n\nBody text   here",
        "  indented\n\tline\n",
    ])
    def test_idempotent(self, raw):
        once = self.normalizer.normalize(raw)
        assert self.normalizer.normalize(once) == once

    def test_pdf_page_numbers_removed(self):
        result = self.normalizer.normalize_pdf("First page text.\n12\nSecond page text.")
        assert "12" not in result
        assert "First page text." in result
        assert "Second page text." in result

    def test_pdf_hyphenated_words_rejoined(self):
        result = self.normalizer.normalize("The experi-\nment worked.", pdf=True)
        assert result == "The experiment worked."

    def test_pdf_mid_sentence_breaks_rejoined(self):
        assert self.normalizer.normalize("the quick brown\nfox jumps", pdf=True) == "the quick brown fox jumps"
        assert self.normalizer.normalize("apples,\noranges", pdf=True) == "apples, oranges"

    def test_pdf_sentence_boundaries_kept(self):
        text = "End of a line\nNew sentence starts here."
        assert self.normalizer.normalize(text, pdf=True) == text

    def test_pdf_doubled_header_lines_dropped(self):
        raw = (
            "Content of page one is long enough.\n"
            "My Book Title\n"
            "My Book Title\n"
            "Content of page two is long enough."
        )
        result = self.normalizer.normalize(raw, pdf=True)
        assert result == (
            "Content of page one is long enough.\n"
            "My Book Title\n"
            "Content of page two is long enough."
        )

    def test_pdf_repeated_dialogue_lines_kept(self):
        raw = (
            "He knocked on the door.\n"
            "Yes.\n"
            "She asked if he was sure.\n"
            "Yes.\n"
            "Then they left together."
        )
        assert self.normalizer.normalize(raw, pdf=True) == raw

    @pytest.mark.parametrize("raw", [
        "ab\ncd.\nab cd.",
        "a-\nb-\nc",
        "Title\nTitle\nbody text,\nwraps here\n12\nTitle",
        "Heading\nHeading\nHeading\nNext part starts here.",
    ])
    def test_pdf_idempotent(self, raw):
        once = self.normalizer.normalize(raw, pdf=True)
        assert self.normalizer.normalize(once, pdf=True) == once

    def test_pdf_chained_hyphen_breaks_rejoined(self):
        assert self.normalizer.normalize("a-\nb-\nc", pdf=True) == "abc"

    def test_pdf_long_repeated_lines_kept(self):
        line = "This repeated line is far longer than any running header."
        result = self.normalizer.normalize(f"{line}\n{line}", pdf=True)
        assert result.count(line) == 2

    def test_generic_variant_keeps_page_numbers(self):
        assert self.normalizer.normalize("Text\n12\nMore") == "Text\n12\nMore"

    def test_preserve_formatting_keeps_interior_spacing(self):
        text = "Name      Value\n  indented   line   \r\nlast\x00"
        assert self.normalizer.preserve_formatting(text) == "Name      Value\n  indented   line\nlast"

    def test_preserve_formatting_empty(self):
        assert self.normalizer.preserve_formatting("") == ""

    def test_convenience_function(self):
        assert normalize_text("a  b") == "a b"
        assert normalize_text("word-\nbreak", pdf=True) == "wordbreak"
