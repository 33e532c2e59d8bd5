"""Unit tests for NGramGenerator and locale-aware lowercasing."""

from __future__ import annotations

import pytest

from taskvault.search.ngrams import NGramGenerator, lowercase


class TestGetNgrams:
    def test_trigrams_of_two_words(self):
        assert NGramGenerator(3, 1).get_ngrams("Buy milk") == {"buy", "mil", "ilk"}

    def test_word_shorter_than_n_is_kept_whole(self):
        assert NGramGenerator(3, 1).get_ngrams("go to it") == {"go", "to", "it"}

    def test_min_word_length_filters_short_words(self):
        assert NGramGenerator(3, 3).get_ngrams("a to milk") == {"mil", "ilk"}

    def test_duplicates_collapse(self):
        assert NGramGenerator(3, 1).get_ngrams("aaaa aaa") == {"aaa"}

    def test_punctuation_splits_words(self):
        assert NGramGenerator(3, 1).get_ngrams("e-mail, (draft)") == {
            "e",
            "mai",
            "ail",
            "dra",
            "raf",
            "aft",
        }

    def test_digits_included_by_default(self):
        assert NGramGenerator(3, 1).get_ngrams("Q3 2026") == {"q3", "202", "026"}

    def test_digits_can_be_treated_as_separators(self):
        generator = NGramGenerator(3, 1, include_digits=False)
        assert generator.get_ngrams("Q3 report2026") == {"q", "rep", "epo", "por", "ort"}

    def test_combining_marks_stay_in_word(self):
        text = "cafe\u0301"  # decomposed e-acute
        assert NGramGenerator(3, 1).get_ngrams(text) == {"caf", "afe", "fe\u0301"}

    def test_non_latin_letters(self):
        assert NGramGenerator(2, 1).get_ngrams("Привет") == {"пр", "ри", "ив", "ве", "ет"}

    @pytest.mark.parametrize("text", ["", None, "   ", "!!! ..."])
    def test_empty_input(self, text):
        assert NGramGenerator().get_ngrams(text) == set()

    def test_lowercasing_can_be_disabled(self):
        assert NGramGenerator(3, 1, lowercase=False).get_ngrams("ABC") == {"ABC"}

    def test_invalid_n(self):
        with pytest.raises(ValueError):
            NGramGenerator(0)


class TestLowercase:
    def test_default_locale(self):
        assert lowercase("ISTANBUL") == "istanbul"

    def test_turkish_dotless_i(self):
        assert lowercase("ISPARTA", "tr") == "ısparta"

    def test_turkish_dotted_capital_i(self):
        assert lowercase("İZMİR", "tr-TR") == "izmir"

    def test_generator_uses_locale(self):
        assert NGramGenerator(3, 1, locale="tr").get_ngrams("IRMAK") == {"ırm", "rma", "mak"}
