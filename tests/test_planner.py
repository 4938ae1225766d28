import pytest

from template_search.config import FieldBoosts
from template_search.errors import InvalidSearchRequest
from template_search.schemas.search import SearchRequest
from template_search.search.planner import (
    BY_ID,
    NOT_DELETED,
    is_code_query,
    normalize_query,
    plan_code_lookup,
    plan_suggestions,
    plan_templates,
)
from template_search.search.query import Match, MatchAll, MultiMatch, SortKey, Term

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("query", ["ABC-12-34", "abc-1-2", "XyZ-123-4567"])
def test_code_pattern_matches(query):
    assert is_code_query(query)


@pytest.mark.parametrize("query", ["", "AB-12-34", "ABC-12", "ABC-12-34 card", "A1C-12-34"])
def test_code_pattern_rejects(query):
    assert not is_code_query(query)


def test_normalize_query_treats_blank_as_empty():
    assert normalize_query(None) == ""
    assert normalize_query(" ") == ""
    assert normalize_query("  card ") == "card"


def test_code_lookup_plan_is_exact_term_newest_first():
    plan = plan_code_lookup(SearchRequest(query=" ABC-12-34 "))

    assert plan.must == [Term(field="code.raw", value="ABC-12-34")]
    assert plan.filters == [NOT_DELETED]
    assert plan.sort == (SortKey(field="last_modified", descending=True), BY_ID)
    assert plan.min_score is None


def test_code_lookup_plan_absent_for_free_text():
    assert plan_code_lookup(SearchRequest(query="birthday card")) is None


def test_no_query_no_filter_is_match_all():
    plan = plan_templates(SearchRequest(query="", filter=None))

    assert plan.must == [MatchAll()]
    assert plan.filters == [NOT_DELETED]


def test_single_space_query_is_match_all():
    plan = plan_templates(SearchRequest(query=" "))

    assert plan.must == [MatchAll()]


def test_filter_only_requires_every_tag():
    plan = plan_templates(SearchRequest(query="", filter="holiday seasonal"))

    assert len(plan.must) == 1
    clause = plan.must[0]
    assert isinstance(clause, Match)
    assert clause.field == "tags"
    assert clause.text == "holiday seasonal"
    assert clause.require_all is True


def test_query_only_is_weighted_multi_match():
    plan = plan_templates(SearchRequest(query="fathers day card"))

    assert len(plan.must) == 1
    clause = plan.must[0]
    assert isinstance(clause, MultiMatch)
    assert clause.text == "fathers day card"
    assert clause.minimum_should_match == 1
    assert {f.field: f.boost for f in clause.fields} == {
        "tags": 12,
        "title": 10,
        "author": 4,
        "css_class": 1,
        "description": 7,
    }


def test_query_and_filter_both_required():
    plan = plan_templates(SearchRequest(query="card", filter="holiday"))

    kinds = [type(c) for c in plan.must]
    assert kinds == [MultiMatch, Match]
    assert plan.filters == [NOT_DELETED]


def test_template_plan_sorts_by_score_then_recency_and_pages():
    request = SearchRequest(query="card", page_size=18, current_page=2, min_score=0.1)
    plan = plan_templates(request)

    assert [k.field for k in plan.sort] == ["_score", "last_modified", "id"]
    assert [k.descending for k in plan.sort] == [True, True, False]
    assert plan.size == 18
    assert plan.offset == 36
    assert plan.min_score == 0.1
    assert plan.highlight.pre_tag == "<b>"
    assert plan.highlight.post_tag == "</b>"


def test_custom_boosts_flow_into_plan():
    plan = plan_templates(SearchRequest(query="card"), FieldBoosts(tags=3))

    assert plan.must[0].fields[0].boost == 3


def test_suggestion_plan_lowercases_and_uses_prefix_analyzer():
    plan = plan_suggestions(SearchRequest(query=" Birth ", page_size=20, min_score=0.5))

    clause = plan.must[0]
    assert clause == Match(field="value", text="birth", analyzer="suggestionAnalyzer")
    assert plan.filters == [NOT_DELETED]
    assert [k.field for k in plan.sort] == ["_score", "id"]
    assert plan.min_score == 0.5


@pytest.mark.parametrize(
    "fields",
    [
        {"page_size": 0},
        {"page_size": -3},
        {"current_page": -1},
        {"min_score": -0.5},
        {"page_size": 100, "current_page": 100},
    ],
)
def test_malformed_requests_rejected(fields):
    values = {"query": "card", "filter": None, "page_size": 20, "current_page": 0, "min_score": 0.0}
    values.update(fields)
    request = SearchRequest.model_construct(**values)

    with pytest.raises(InvalidSearchRequest):
        plan_templates(request)
    with pytest.raises(InvalidSearchRequest):
        plan_suggestions(request)
