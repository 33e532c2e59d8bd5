"""taskvault - local task store with a mutation pipeline and n-gram search."""

__version__ = "0.3.0"
