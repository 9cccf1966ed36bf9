"""
Text Normalisation Tests
"""
from doctext.extractor.cleanup import clean_extracted_text, clean_ocr_text


class TestCleanExtractedText:
    """Test text-layer cleanup"""

    def test_collapses_whitespace(self):
        """Should collapse whitespace runs, newlines included, and trim"""
        assert clean_extracted_text("  one \t two\n\n\n\nthree  ") == "one two three"

    def test_splits_camel_case(self):
        """Should insert a space between lowercase and uppercase letters"""
        assert clean_extracted_text("annualReport") == "annual Report"

    def test_splits_sentences(self):
        """Should insert a space after sentence punctuation before a capital"""
        assert clean_extracted_text("Done.Next step!Then?Yes") == "Done. Next step! Then? Yes"

    def test_splits_letters_and_digits(self):
        """Should separate lowercase letters from digits and digits from capitals"""
        assert clean_extracted_text("page12") == "page 12"
        assert clean_extracted_text("12Units") == "12 Units"

    def test_empty(self):
        assert clean_extracted_text("") == ""
        assert clean_extracted_text(" \n ") == ""


class TestCleanOcrText:
    """Test OCR cleanup and character-confusion fixes"""

    def test_pipe_becomes_capital_i(self):
        """Should read a pipe next to letters as I"""
        assert clean_ocr_text("H|") == "HI"
        assert clean_ocr_text("|nvoice total") == "Invoice total"

    def test_zero_in_words(self):
        """Should read zero as O at the start or inside a word"""
        assert clean_ocr_text("0ct") == "Oct"
        assert clean_ocr_text("C0st") == "COst"

    def test_one_in_words(self):
        """Should read one as lowercase l after word splitting"""
        assert clean_ocr_text("ca1m") == "ca lm"
        assert clean_ocr_text("A1so") == "Also"

    def test_one_at_word_start(self):
        """Should read a leading one as lowercase l"""
        assert clean_ocr_text("1ist") == "list"

    def test_numbers_rewritten(self):
        """Should rewrite every zero and one, plain numbers included"""
        assert clean_ocr_text("Invoice 2010 of 100") == "Invoice 2OlO of lOO"

    def test_split_before_confusion_fixes(self):
        """Should split at a digit before reading it as a letter"""
        assert clean_ocr_text("0FFICE") == "O FFICE"

    def test_numbers_kept_when_fixes_disabled(self):
        assert clean_ocr_text("Invoice 2010 of 100", fix_confusions=False) == "Invoice 2010 of 100"

    def test_confusion_fixes_optional(self):
        """Should keep digits and pipes when confusion fixes are disabled"""
        assert clean_ocr_text("H| 0FFICE", fix_confusions=False) == "H| 0 FFICE"

    def test_normalises_whitespace(self):
        """Should collapse whitespace like the text-layer cleanup"""
        assert clean_ocr_text("  first\n\n\n\nsecond   line ") == "first second line"

    def test_empty(self):
        assert clean_ocr_text("") == ""
