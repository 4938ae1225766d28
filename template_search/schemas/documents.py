from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Document(BaseModel):
    """
    Fields shared by every indexed document.

    `score` and `highlights` only exist on the in-memory copy returned from
    a search; they are never sent to the index.
    """

    id: str = Field(..., min_length=1, frozen=True)
    deleted: bool = False
    last_modified: Optional[datetime] = None

    score: Optional[float] = None
    highlights: Dict[str, List[str]] = Field(default_factory=dict)

    def to_source(self) -> Dict[str, Any]:
        """Body stored in OpenSearch for this document."""
        return self.model_dump(mode="json", exclude={"score", "highlights"})


class TemplateDocument(Document):
    title: Optional[str] = None
    description: Optional[str] = None
    uri: Optional[str] = None
    author: Optional[str] = None
    author_uri: Optional[str] = None
    author_id: Optional[str] = None
    school_district: Optional[str] = None
    afmc_code: Optional[str] = None
    code: Optional[str] = None
    css_class: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    types: List[str] = Field(default_factory=list)
    ins_template_id: Optional[str] = None
    ins_author: Optional[str] = None
    ins_afmc_code: Optional[str] = None
    ins_author_url: Optional[str] = None
    featured: bool = False


class SuggestionDocument(Document):
    value: str
    value_type: Optional[str] = None
