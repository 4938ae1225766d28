from .documents import Document, SuggestionDocument, TemplateDocument
from .search import SearchRequest, SearchResults

__all__ = [
    "Document",
    "SearchRequest",
    "SearchResults",
    "SuggestionDocument",
    "TemplateDocument",
]
