from typing import Optional


class SearchServiceError(Exception):
    """
    Base error for the search service.

    Carries the attempted operation and target index so callers can log
    and retry on their side.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        index: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.index = index

    def __str__(self) -> str:
        context = [
            f"{key}={value}"
            for key, value in (("operation", self.operation), ("index", self.index))
            if value
        ]
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class ConfigurationError(SearchServiceError):
    """Missing or invalid connection parameters. Fatal at startup."""


class SchemaError(SearchServiceError):
    """Index creation failed for a reason other than 'already exists'."""


class TransportError(SearchServiceError):
    """OpenSearch unreachable or returned an invalid response."""


class DocumentNotFoundError(SearchServiceError):
    """The addressed document id is not present in the index."""


class InvalidSearchRequest(SearchServiceError, ValueError):
    """Malformed search request, rejected before any engine call."""
