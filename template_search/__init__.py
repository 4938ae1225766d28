"""Template and suggestion search on top of OpenSearch."""

__version__ = "0.1.0"
