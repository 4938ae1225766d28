from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

from ..config import IndexNames
from .analysis import (
    CODE_NORMALIZER,
    FILTER_ANALYZER,
    SEARCH_ANALYZER,
    SUGGESTION_ANALYZER,
    IndexAnalysis,
    suggestion_analysis,
    template_analysis,
)

TEMPLATES = "templates"
SUGGESTIONS = "suggestions"
KINDS = (TEMPLATES, SUGGESTIONS)


def _suggest_text() -> Dict[str, Any]:
    return {"type": "text", "analyzer": SUGGESTION_ANALYZER}


def _keyword() -> Dict[str, Any]:
    return {"type": "keyword"}


def _common_properties() -> Dict[str, Any]:
    return {
        "id": _keyword(),
        "deleted": {"type": "boolean"},
        "last_modified": {"type": "date"},
    }


def template_mappings() -> Dict[str, Any]:
    return {
        "properties": {
            **_common_properties(),
            "title": _suggest_text(),
            "description": _suggest_text(),
            "author": _suggest_text(),
            "school_district": _suggest_text(),
            "ins_author": _suggest_text(),
            "code": {
                **_suggest_text(),
                "fields": {
                    "raw": {"type": "keyword", "normalizer": CODE_NORMALIZER},
                },
            },
            "css_class": _suggest_text(),
            # indexed verbatim, searched with synonym expansion
            "tags": {
                "type": "text",
                "analyzer": FILTER_ANALYZER,
                "search_analyzer": SEARCH_ANALYZER,
            },
            "types": _keyword(),
            "uri": _keyword(),
            "author_uri": _keyword(),
            "author_id": _keyword(),
            "afmc_code": _keyword(),
            "ins_template_id": _keyword(),
            "ins_afmc_code": _keyword(),
            "ins_author_url": _keyword(),
            "featured": {"type": "boolean"},
        }
    }


def suggestion_mappings() -> Dict[str, Any]:
    return {
        "properties": {
            **_common_properties(),
            "value": _suggest_text(),
            "value_type": _keyword(),
        }
    }


class IndexDefinition(BaseModel):
    """Everything needed to create one index in a single call."""

    model_config = ConfigDict(frozen=True)

    kind: str
    name: str
    mappings: Dict[str, Any]
    analysis: IndexAnalysis

    def create_body(self) -> Dict[str, Any]:
        return {
            "settings": self.analysis.to_settings(),
            "mappings": self.mappings,
        }


def build_index_definitions(names: IndexNames) -> Dict[str, IndexDefinition]:
    return {
        TEMPLATES: IndexDefinition(
            kind=TEMPLATES,
            name=names.template,
            mappings=template_mappings(),
            analysis=template_analysis(),
        ),
        SUGGESTIONS: IndexDefinition(
            kind=SUGGESTIONS,
            name=names.suggestion,
            mappings=suggestion_mappings(),
            analysis=suggestion_analysis(),
        ),
    }
