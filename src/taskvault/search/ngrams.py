"""N-gram extraction for the full-text search index."""

from __future__ import annotations

import unicodedata

# Languages whose dotted/dotless I do not follow the default case mapping
_TURKIC_LANGUAGES = frozenset(("tr", "az"))


def _is_word_char(char: str, include_digits: bool) -> bool:
    category = unicodedata.category(char)
    if category[0] in ("L", "M"):
        return True
    return include_digits and category == "Nd"


def lowercase(text: str, locale: str | None = None) -> str:
    """Lowercase *text* using the case rules of *locale*.

    Only Turkish and Azerbaijani differ from the default mapping: 'I' maps
    to dotless 'ı' and 'İ' to plain 'i'.
    """
    language = (locale or "").replace("_", "-").split("-")[0].lower()
    if language in _TURKIC_LANGUAGES:
        text = text.replace("I", "ı").replace("İ", "i")
    return text.lower()


class NGramGenerator:
    """Splits text into words and words into overlapping n-grams.

    A word is a maximal run of letters and combining marks (and decimal
    digits unless disabled). Each word at least ``min_word_length`` long
    yields every substring of length ``n``; words shorter than ``n`` yield
    themselves once.

    Args:
        n: Length of the generated n-grams
        min_word_length: Words shorter than this are ignored
        locale: Locale used for lowercasing (e.g. ``"tr"``)
        include_digits: Treat decimal digits as word characters
        lowercase: Lowercase the text before splitting
    """

    def __init__(
        self,
        n: int = 3,
        min_word_length: int = 1,
        locale: str | None = None,
        include_digits: bool = True,
        lowercase: bool = True,
    ):
        if n < 1:
            raise ValueError("n must be at least 1")
        self.n = n
        self.min_word_length = max(1, min_word_length)
        self.locale = locale
        self.include_digits = include_digits
        self.lowercase = lowercase

    def words(self, text: str | None) -> list[str]:
        """Split *text* into words, lowercased when enabled."""
        if not text:
            return []
        if self.lowercase:
            text = lowercase(text, self.locale)

        words: list[str] = []
        current: list[str] = []
        for char in text:
            if _is_word_char(char, self.include_digits):
                current.append(char)
            elif current:
                words.append("".join(current))
                current = []
        if current:
            words.append("".join(current))
        return words

    def get_ngrams(self, text: str | None) -> set[str]:
        """Return the set of n-grams contained in *text*."""
        ngrams: set[str] = set()
        for word in self.words(text):
            if len(word) < self.min_word_length:
                continue
            if len(word) <= self.n:
                ngrams.add(word)
                continue
            for i in range(len(word) - self.n + 1):
                ngrams.add(word[i : i + self.n])
        return ngrams
