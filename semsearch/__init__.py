"""semsearch: semantic search over a small document corpus."""

__version__ = "0.1.0"
