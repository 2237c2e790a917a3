"""codechunk: structural code and text chunking for knowledge-base ingestion."""

__version__ = "0.1.0"
