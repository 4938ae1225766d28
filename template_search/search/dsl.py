from typing import Any, Dict

from .query import (
    Bool,
    Clause,
    Highlight,
    Match,
    MatchAll,
    MultiMatch,
    QueryPlan,
    SortKey,
    Term,
)


def _boosted(field: str, boost: float) -> str:
    if boost == 1:
        return field
    # 12.0 -> "tags^12", 2.5 -> "tags^2.5"
    return f"{field}^{boost:g}"


def render_clause(clause: Clause) -> Dict[str, Any]:
    """Translate one query-tree node into OpenSearch query DSL."""
    if isinstance(clause, MatchAll):
        return {"match_all": {}}

    if isinstance(clause, Term):
        return {"term": {clause.field: {"value": clause.value}}}

    if isinstance(clause, Match):
        body: Dict[str, Any] = {"query": clause.text}
        if clause.analyzer:
            body["analyzer"] = clause.analyzer
        if clause.require_all:
            body["operator"] = "and"
        return {"match": {clause.field: body}}

    if isinstance(clause, MultiMatch):
        return {
            "multi_match": {
                "query": clause.text,
                "fields": [_boosted(f.field, f.boost) for f in clause.fields],
                "minimum_should_match": clause.minimum_should_match,
            }
        }

    if isinstance(clause, Bool):
        return {
            "bool": {
                "must": [render_clause(c) for c in clause.must],
                "filter": [render_clause(c) for c in clause.filter],
            }
        }

    raise TypeError(f"Unsupported query clause: {clause!r}")


def render_sort(key: SortKey) -> Dict[str, Any]:
    return {key.field: {"order": "desc" if key.descending else "asc"}}


def render_highlight(highlight: Highlight) -> Dict[str, Any]:
    return {
        "pre_tags": [highlight.pre_tag],
        "post_tags": [highlight.post_tag],
        "fields": {field: {} for field in highlight.fields},
    }


def render_plan(plan: QueryPlan) -> Dict[str, Any]:
    """Full search request body for a plan."""
    body: Dict[str, Any] = {
        "query": render_clause(plan.query),
        "from": plan.offset,
        "track_total_hits": True,
    }
    if plan.size is not None:
        body["size"] = plan.size
    if plan.sort:
        body["sort"] = [render_sort(key) for key in plan.sort]
    if plan.min_score is not None:
        body["min_score"] = plan.min_score
    if plan.highlight is not None:
        body["highlight"] = render_highlight(plan.highlight)
    return body
