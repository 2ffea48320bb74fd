"""Contract-verification harness for the fuzzy product-matching search service."""

__version__ = "0.1.0"
