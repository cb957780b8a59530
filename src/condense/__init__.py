"""condense - adaptive hierarchical document summarization."""

__version__ = "0.1.0"
