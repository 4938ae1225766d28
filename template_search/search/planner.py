"""
Turns a SearchRequest into a QueryPlan.

Template search has two branches:

1. A query shaped like a template code (ABC-12-34) is first looked up
   exactly on `code.raw`, newest first. The caller runs that plan and only
   falls back when it returns nothing.
2. Otherwise a weighted multi-field match over tags, title, author,
   css_class and description, optionally narrowed by a tag filter that
   requires every filter token.

Every plan excludes soft-deleted documents with a hard filter.
"""

import re
from typing import List, Optional

from ..config import FieldBoosts
from ..errors import InvalidSearchRequest
from ..schemas.search import SearchRequest
from .analysis import FILTER_ANALYZER, SUGGESTION_ANALYZER
from .query import (
    SCORE,
    Bool,
    Clause,
    FieldBoost,
    Highlight,
    Match,
    MatchAll,
    MultiMatch,
    QueryPlan,
    SortKey,
    Term,
)

CODE_PATTERN = re.compile(r"^[a-z]{3}-\d+-\d+$", re.IGNORECASE)

# index.max_result_window default
MAX_RESULT_WINDOW = 10000

NOT_DELETED = Term(field="deleted", value=False)
HIGHLIGHT = Highlight(fields=("*",), pre_tag="<b>", post_tag="</b>")
# last sort key, keeps pages stable when score and date tie
BY_ID = SortKey(field="id", descending=False)


def validate_request(request: SearchRequest) -> None:
    """
    Reject requests the engine would refuse or misinterpret.

    Pydantic already enforces these on parsed bodies; this also covers
    requests built with `model_construct` or mutated after validation.
    """
    if request.page_size is None or request.page_size < 1:
        raise InvalidSearchRequest(f"page_size must be positive, got {request.page_size}")
    if request.current_page is None or request.current_page < 0:
        raise InvalidSearchRequest(
            f"current_page must not be negative, got {request.current_page}"
        )
    if request.min_score is None or request.min_score < 0:
        raise InvalidSearchRequest(
            f"min_score must not be negative, got {request.min_score}"
        )
    if request.offset + request.page_size > MAX_RESULT_WINDOW:
        raise InvalidSearchRequest(
            f"page {request.current_page} of size {request.page_size} is beyond "
            f"the {MAX_RESULT_WINDOW} hit result window"
        )


def normalize_query(query: Optional[str]) -> str:
    if query is None:
        return ""
    return query.strip()


def normalize_filter(filter_text: Optional[str]) -> str:
    if filter_text is None:
        return ""
    return filter_text.strip()


def is_code_query(query: str) -> bool:
    return bool(CODE_PATTERN.match(query))


def plan_suggestions(request: SearchRequest, field: str = "value") -> QueryPlan:
    validate_request(request)

    match = Match(
        field=field,
        text=normalize_query(request.query).lower(),
        analyzer=SUGGESTION_ANALYZER,
    )
    return QueryPlan(
        query=Bool(must=(match,), filter=(NOT_DELETED,)),
        sort=(SortKey(field=SCORE), BY_ID),
        size=request.page_size,
        offset=request.offset,
        min_score=request.min_score,
        highlight=HIGHLIGHT,
    )


def plan_code_lookup(request: SearchRequest) -> Optional[QueryPlan]:
    """Exact code plan, or None when the query does not look like a code."""
    validate_request(request)

    query = normalize_query(request.query)
    if not is_code_query(query):
        return None

    return QueryPlan(
        query=Bool(must=(Term(field="code.raw", value=query),), filter=(NOT_DELETED,)),
        sort=(SortKey(field="last_modified"), BY_ID),
        size=request.page_size,
        offset=request.offset,
    )


def template_fields(boosts: FieldBoosts) -> List[FieldBoost]:
    return [
        FieldBoost(field="tags", boost=boosts.tags),
        FieldBoost(field="title", boost=boosts.title),
        FieldBoost(field="author", boost=boosts.author),
        FieldBoost(field="css_class", boost=boosts.css_class),
        FieldBoost(field="description", boost=boosts.description),
    ]


def plan_templates(request: SearchRequest, boosts: Optional[FieldBoosts] = None) -> QueryPlan:
    validate_request(request)
    boosts = boosts or FieldBoosts()

    query = normalize_query(request.query)
    filter_text = normalize_filter(request.filter)

    must: List[Clause] = []
    if query:
        must.append(
            MultiMatch(fields=tuple(template_fields(boosts)), text=query, minimum_should_match=1)
        )
    if filter_text:
        must.append(
            Match(field="tags", text=filter_text, analyzer=FILTER_ANALYZER, require_all=True)
        )
    if not must:
        must.append(MatchAll())

    return QueryPlan(
        query=Bool(must=tuple(must), filter=(NOT_DELETED,)),
        sort=(SortKey(field=SCORE), SortKey(field="last_modified"), BY_ID),
        size=request.page_size,
        offset=request.offset,
        min_score=request.min_score,
        highlight=HIGHLIGHT,
    )
