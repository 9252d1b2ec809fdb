"""Turn clipboard content into Markdown notes."""

__version__ = "0.1.0"
