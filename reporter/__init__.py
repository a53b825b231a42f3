"""Cross-platform system report generator."""

__version__ = "1.0.0"
