"""Query compiler — typed clause tree to a YQL condition string.

Translation summary (``esc`` = :func:`escape`):

==============  ================================================================
Clause          Condition
==============  ================================================================
match_all       ``true``
match           ``field contains "esc(v)"``
match_phrase    ``field contains phrase("esc(v)")``
multi_match     OR of ``f contains "esc(q)"``; no fields -> ``true``
term            ``field matches "esc(v)"``
terms           OR of ``field matches "esc(v)"``; no values -> ``false``
range           AND of bounds (gte over gt, lte over lt); no bounds -> ``true``
exists          ``(field matches "*" OR field > 0 OR field < 0)``
prefix          ``field matches "esc(v)*"``
wildcard        ``field matches "esc(v)"``
bool            AND of (AND must), (AND filter), (OR should), !(x) per must_not
ids             OR of ``documentid contains "esc(id)"``; no ids -> ``false``
query_string    OR of ``f contains "esc(q)"``, else ``default contains "esc(q)"``
anything else   ``true``
==============  ================================================================

Every function here is pure and total.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import Any

from vespabridge.core.query.parser import literal, parse_clause
from vespabridge.models.query import (
    Bool,
    CompiledQuery,
    Exists,
    Ids,
    Match,
    MatchPhrase,
    MultiMatch,
    Prefix,
    QueryClause,
    QueryString,
    Range,
    SearchRequest,
    Term,
    Terms,
    Wildcard,
)

TRUE = "true"
FALSE = "false"

_NUMBER = re.compile(r"-?\d+(\.\d+)?([eE][+-]?\d+)?")


def escape(value: str) -> str:
    """Escape a string literal for YQL: backslashes first, then double quotes."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _quoted(value: str) -> str:
    return f'"{escape(value)}"'


def _any_of(conditions: list[str], empty: str) -> str:
    if not conditions:
        return empty
    return "(" + " OR ".join(conditions) + ")"


def _all_of(conditions: list[str]) -> str:
    return "(" + " AND ".join(conditions) + ")"


def _range_operand(value: Any) -> str:
    """Numbers are emitted verbatim; anything else becomes an escaped quoted literal."""
    if isinstance(value, bool):
        return literal(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and math.isfinite(value):
        return repr(value)
    text = literal(value)
    return text if _NUMBER.fullmatch(text) else _quoted(text)


def _compile_match(clause: Match) -> str:
    return f"{clause.field} contains {_quoted(clause.value)}"


def _compile_match_phrase(clause: MatchPhrase) -> str:
    return f"{clause.field} contains phrase({_quoted(clause.value)})"


def _compile_multi_match(clause: MultiMatch) -> str:
    return _any_of([f"{field} contains {_quoted(clause.value)}" for field in clause.fields], TRUE)


def _compile_term(clause: Term) -> str:
    return f"{clause.field} matches {_quoted(clause.value)}"


def _compile_terms(clause: Terms) -> str:
    return _any_of([f"{clause.field} matches {_quoted(value)}" for value in clause.values], FALSE)


def _compile_range(clause: Range) -> str:
    parts: list[str] = []
    if clause.gte is not None:
        parts.append(f"{clause.field} >= {_range_operand(clause.gte)}")
    elif clause.gt is not None:
        parts.append(f"{clause.field} > {_range_operand(clause.gt)}")
    if clause.lte is not None:
        parts.append(f"{clause.field} <= {_range_operand(clause.lte)}")
    elif clause.lt is not None:
        parts.append(f"{clause.field} < {_range_operand(clause.lt)}")
    return _all_of(parts) if parts else TRUE


def _compile_exists(clause: Exists) -> str:
    # No generic existence predicate in YQL: a string field matches "*", a
    # numeric field is non-zero. Zero-valued numerics and booleans are missed.
    field = clause.field
    return f'({field} matches "*" OR {field} > 0 OR {field} < 0)'


def _compile_prefix(clause: Prefix) -> str:
    return f'{clause.field} matches "{escape(clause.value)}*"'


def _compile_wildcard(clause: Wildcard) -> str:
    return f"{clause.field} matches {_quoted(clause.value)}"


def _compile_bool(clause: Bool) -> str:
    groups: list[str] = []
    if clause.must:
        groups.append(_all_of([compile_clause(c) for c in clause.must]))
    if clause.filter:
        groups.append(_all_of([compile_clause(c) for c in clause.filter]))
    if clause.should:
        groups.append(_any_of([compile_clause(c) for c in clause.should], TRUE))
    groups.extend(f"!({compile_clause(c)})" for c in clause.must_not)
    return _all_of(groups) if groups else TRUE


def _compile_ids(clause: Ids) -> str:
    return _any_of([f"documentid contains {_quoted(doc_id)}" for doc_id in clause.values], FALSE)


def _compile_query_string(clause: QueryString) -> str:
    if not clause.fields:
        return f"default contains {_quoted(clause.query)}"
    return _any_of([f"{field} contains {_quoted(clause.query)}" for field in clause.fields], TRUE)


_COMPILERS: dict[str, Callable[[Any], str]] = {
    "match_all": lambda _clause: TRUE,
    "match": _compile_match,
    "match_phrase": _compile_match_phrase,
    "multi_match": _compile_multi_match,
    "term": _compile_term,
    "terms": _compile_terms,
    "range": _compile_range,
    "exists": _compile_exists,
    "prefix": _compile_prefix,
    "wildcard": _compile_wildcard,
    "bool": _compile_bool,
    "ids": _compile_ids,
    "query_string": _compile_query_string,
    "unknown": lambda _clause: TRUE,
}


def compile_clause(clause: QueryClause | dict[str, Any]) -> str:
    """Compile a clause (typed, or raw JSON) to a YQL condition.

    Never raises; the result is never empty.
    """
    if isinstance(clause, dict):
        clause = parse_clause(clause)
    return _COMPILERS[clause.kind](clause)


def compile_request(request: SearchRequest) -> CompiledQuery:
    """Compile a search request; ``size``/``from`` are carried beside the condition."""
    return CompiledQuery(condition=compile_clause(request.query), size=request.size, from_=request.from_)


def build_yql(condition: str) -> str:
    """Wrap a condition in the full YQL statement."""
    return f"select * from sources * where {condition}"
