"""
Text analysis settings for the template and suggestion indexes.

Everything here is a pure value: no client, no I/O. The schema manager
sends `IndexAnalysis.to_settings()` along with the mappings when an index
is created, and never touches it again unless the index is recreated.
"""

from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

SUGGESTION_ANALYZER = "suggestionAnalyzer"
FILTER_ANALYZER = "filterAnalyzer"
SEARCH_ANALYZER = "searchAnalyzer"

EDGE_NGRAM_FILTER = "edgeNGramFilter"
SYNONYM_FILTER = "templateSynonyms"
EDGE_NGRAM_TOKENIZER = "edgeNGramTokenizer"
CODE_NORMALIZER = "codeNormalizer"

# Seasonal and holiday terms; plural and singular index the same way.
TEMPLATE_SYNONYMS: Tuple[str, ...] = (
    "valentines,valentine",
    "fathers,father",
    "mothers,mother",
    "grandparents,grandparent",
    "veterans,veteran",
    "presidents,president",
    "patricks,patrick",
)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class TokenFilter(_Frozen):
    name: str
    type: str
    params: Dict[str, Any] = Field(default_factory=dict)

    def to_dsl(self) -> Dict[str, Any]:
        return {"type": self.type, **self.params}


class Tokenizer(_Frozen):
    name: str
    type: str
    params: Dict[str, Any] = Field(default_factory=dict)

    def to_dsl(self) -> Dict[str, Any]:
        return {"type": self.type, **self.params}


class AnalyzerConfig(_Frozen):
    """A named pipeline: one tokenizer followed by ordered token filters."""

    name: str
    tokenizer: str
    filters: Tuple[str, ...] = ()

    def to_dsl(self) -> Dict[str, Any]:
        return {
            "type": "custom",
            "tokenizer": self.tokenizer,
            "filter": list(self.filters),
        }


class Normalizer(_Frozen):
    """Keyword-level filters applied to a whole value, e.g. for term lookups."""

    name: str
    filters: Tuple[str, ...] = ()

    def to_dsl(self) -> Dict[str, Any]:
        return {"type": "custom", "filter": list(self.filters)}


class IndexAnalysis(_Frozen):
    analyzers: Tuple[AnalyzerConfig, ...]
    token_filters: Tuple[TokenFilter, ...] = ()
    tokenizers: Tuple[Tokenizer, ...] = ()
    normalizers: Tuple[Normalizer, ...] = ()

    def analyzer(self, name: str) -> AnalyzerConfig:
        for analyzer in self.analyzers:
            if analyzer.name == name:
                return analyzer
        raise KeyError(name)

    def to_settings(self) -> Dict[str, Any]:
        analysis: Dict[str, Any] = {
            "analyzer": {a.name: a.to_dsl() for a in self.analyzers},
            "filter": {f.name: f.to_dsl() for f in self.token_filters},
            "tokenizer": {t.name: t.to_dsl() for t in self.tokenizers},
        }
        if self.normalizers:
            analysis["normalizer"] = {n.name: n.to_dsl() for n in self.normalizers}
        return {"analysis": analysis}


def edge_ngram_filter(min_gram: int = 1, max_gram: int = 15) -> TokenFilter:
    return TokenFilter(
        name=EDGE_NGRAM_FILTER,
        type="edge_ngram",
        params={"min_gram": min_gram, "max_gram": max_gram},
    )


def edge_ngram_tokenizer(token_chars: List[str]) -> Tokenizer:
    # Declared for field-level overrides; no analyzer below uses it yet.
    return Tokenizer(
        name=EDGE_NGRAM_TOKENIZER,
        type="edge_ngram",
        params={"min_gram": 1, "max_gram": 12, "token_chars": list(token_chars)},
    )


def suggestion_analyzer() -> AnalyzerConfig:
    return AnalyzerConfig(
        name=SUGGESTION_ANALYZER,
        tokenizer="standard",
        filters=("lowercase", EDGE_NGRAM_FILTER),
    )


def suggestion_analysis() -> IndexAnalysis:
    """Prefix matching for autocomplete."""
    return IndexAnalysis(
        analyzers=(suggestion_analyzer(),),
        token_filters=(edge_ngram_filter(),),
        tokenizers=(edge_ngram_tokenizer(["digit", "letter", "whitespace"]),),
    )


def template_analysis() -> IndexAnalysis:
    """
    Three analyzers for templates:

    - suggestionAnalyzer: prefix matching on title, description, author, code
    - filterAnalyzer: case and accent insensitive tag filtering
    - searchAnalyzer: tag search with holiday synonym expansion
    """
    return IndexAnalysis(
        analyzers=(
            suggestion_analyzer(),
            AnalyzerConfig(
                name=FILTER_ANALYZER,
                tokenizer="whitespace",
                filters=("lowercase", "asciifolding"),
            ),
            AnalyzerConfig(
                name=SEARCH_ANALYZER,
                tokenizer="letter",
                filters=("lowercase", "asciifolding", SYNONYM_FILTER),
            ),
        ),
        token_filters=(
            edge_ngram_filter(),
            TokenFilter(
                name=SYNONYM_FILTER,
                type="synonym",
                params={"synonyms": list(TEMPLATE_SYNONYMS)},
            ),
        ),
        tokenizers=(
            edge_ngram_tokenizer(
                ["digit", "letter", "whitespace", "symbol", "punctuation"]
            ),
        ),
        normalizers=(
            Normalizer(name=CODE_NORMALIZER, filters=("lowercase",)),
        ),
    )
