"""N-gram search over task text."""

from .ngrams import NGramGenerator, lowercase

__all__ = ["NGramGenerator", "lowercase"]
