"""Query DSL models — the supported clause grammar as a tagged union.

Each clause model carries a ``kind`` literal so the compiler can match on the
variant instead of probing dictionary keys.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class MatchAll(BaseModel):
    kind: Literal["match_all"] = "match_all"


class Match(BaseModel):
    kind: Literal["match"] = "match"
    field: str
    value: str


class MatchPhrase(BaseModel):
    kind: Literal["match_phrase"] = "match_phrase"
    field: str
    value: str


class MultiMatch(BaseModel):
    kind: Literal["multi_match"] = "multi_match"
    fields: list[str] = Field(default_factory=list)
    value: str = ""


class Term(BaseModel):
    kind: Literal["term"] = "term"
    field: str
    value: str


class Terms(BaseModel):
    kind: Literal["terms"] = "terms"
    field: str
    values: list[str] = Field(default_factory=list)


class Range(BaseModel):
    """Range bounds keep their JSON type: numbers are emitted verbatim, strings quoted."""

    kind: Literal["range"] = "range"
    field: str
    gte: Any = None
    gt: Any = None
    lte: Any = None
    lt: Any = None


class Exists(BaseModel):
    kind: Literal["exists"] = "exists"
    field: str


class Prefix(BaseModel):
    kind: Literal["prefix"] = "prefix"
    field: str
    value: str


class Wildcard(BaseModel):
    kind: Literal["wildcard"] = "wildcard"
    field: str
    value: str


class Bool(BaseModel):
    kind: Literal["bool"] = "bool"
    must: list[QueryClause] = Field(default_factory=list)
    filter: list[QueryClause] = Field(default_factory=list)
    should: list[QueryClause] = Field(default_factory=list)
    must_not: list[QueryClause] = Field(default_factory=list)


class Ids(BaseModel):
    kind: Literal["ids"] = "ids"
    values: list[str] = Field(default_factory=list)


class QueryString(BaseModel):
    kind: Literal["query_string"] = "query_string"
    query: str = ""
    fields: list[str] | None = None


class Unknown(BaseModel):
    """Any clause outside the supported grammar, or a malformed one."""

    kind: Literal["unknown"] = "unknown"
    name: str | None = None


QueryClause = Annotated[
    Union[
        MatchAll,
        Match,
        MatchPhrase,
        MultiMatch,
        Term,
        Terms,
        Range,
        Exists,
        Prefix,
        Wildcard,
        Bool,
        Ids,
        QueryString,
        Unknown,
    ],
    Field(discriminator="kind"),
]

Bool.model_rebuild()


class SearchRequest(BaseModel):
    """A parsed ``_search``/``_count`` body."""

    model_config = {"populate_by_name": True}

    query: QueryClause = Field(default_factory=MatchAll)
    size: int = Field(default=10, description="Number of hits; passed through uninterpreted")
    from_: int = Field(default=0, alias="from", description="Hit offset; passed through uninterpreted")


class CompiledQuery(BaseModel):
    """A YQL condition plus the paging parameters carried beside it."""

    model_config = {"populate_by_name": True}

    condition: str
    size: int = 10
    from_: int = Field(default=0, alias="from")
