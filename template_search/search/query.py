"""
Engine-agnostic query tree.

The planner builds these values; only `search.dsl` knows how they look on
the wire.
"""

from typing import List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class MatchAll(_Node):
    kind: Literal["match_all"] = "match_all"


class Term(_Node):
    """Exact, unanalyzed value on one field."""

    kind: Literal["term"] = "term"
    field: str
    value: Union[str, bool, int, float]


class Match(_Node):
    kind: Literal["match"] = "match"
    field: str
    text: str
    analyzer: Optional[str] = None
    require_all: bool = False


class FieldBoost(_Node):
    field: str
    boost: float = 1.0


class MultiMatch(_Node):
    kind: Literal["multi_match"] = "multi_match"
    fields: Tuple[FieldBoost, ...]
    text: str
    minimum_should_match: int = 1


class Bool(_Node):
    """MUST clauses are scored; FILTER clauses only exclude."""

    kind: Literal["bool"] = "bool"
    must: Tuple["Clause", ...] = ()
    filter: Tuple["Clause", ...] = ()


Clause = Union[MatchAll, Term, Match, MultiMatch, Bool]
Bool.model_rebuild()

SCORE = "_score"


class SortKey(_Node):
    field: str
    descending: bool = True


class Highlight(_Node):
    fields: Tuple[str, ...] = ("*",)
    pre_tag: str = "<b>"
    post_tag: str = "</b>"


class QueryPlan(_Node):
    query: Bool
    sort: Tuple[SortKey, ...] = ()
    size: Optional[int] = None
    offset: int = 0
    min_score: Optional[float] = None
    highlight: Optional[Highlight] = None

    @property
    def must(self) -> List[Clause]:
        return list(self.query.must)

    @property
    def filters(self) -> List[Clause]:
        return list(self.query.filter)
