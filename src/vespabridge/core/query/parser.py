"""Query DSL parser — raw request JSON to the typed clause union.

This is the only place that inspects which key a clause object carries.
Parsing is total: shapes outside the supported grammar, or malformed bodies
of supported clauses, become :class:`Unknown` rather than raising.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from vespabridge.models.query import (
    Bool,
    Exists,
    Ids,
    Match,
    MatchAll,
    MatchPhrase,
    MultiMatch,
    Prefix,
    QueryClause,
    QueryString,
    Range,
    SearchRequest,
    Term,
    Terms,
    Unknown,
    Wildcard,
)


def literal(value: Any) -> str:
    """Render a JSON scalar the way it appears in the request."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _field_and_value(body: Any, inner_key: str) -> tuple[str, str] | None:
    """Split ``{field: value}`` or ``{field: {inner_key: value}}``."""
    if not isinstance(body, dict) or not body:
        return None
    field = next(iter(body))
    value = body[field]
    if isinstance(value, dict):
        if inner_key not in value:
            return None
        value = value[inner_key]
    return str(field), literal(value)


def _parse_match(body: Any) -> QueryClause:
    parsed = _field_and_value(body, "query")
    return Match(field=parsed[0], value=parsed[1]) if parsed else Unknown(name="match")


def _parse_match_phrase(body: Any) -> QueryClause:
    parsed = _field_and_value(body, "query")
    return MatchPhrase(field=parsed[0], value=parsed[1]) if parsed else Unknown(name="match_phrase")


def _parse_multi_match(body: Any) -> QueryClause:
    if not isinstance(body, dict):
        return Unknown(name="multi_match")
    return MultiMatch(
        fields=[str(f) for f in _as_list(body.get("fields"))],
        value=literal(body.get("query")),
    )


def _parse_term(body: Any) -> QueryClause:
    parsed = _field_and_value(body, "value")
    return Term(field=parsed[0], value=parsed[1]) if parsed else Unknown(name="term")


def _parse_terms(body: Any) -> QueryClause:
    if not isinstance(body, dict) or not body:
        return Unknown(name="terms")
    field = next(iter(body))
    return Terms(field=str(field), values=[literal(v) for v in _as_list(body[field])])


def _parse_range(body: Any) -> QueryClause:
    if not isinstance(body, dict) or not body:
        return Unknown(name="range")
    field = next(iter(body))
    bounds = body[field] if isinstance(body[field], dict) else {}
    return Range(
        field=str(field),
        gte=bounds.get("gte"),
        gt=bounds.get("gt"),
        lte=bounds.get("lte"),
        lt=bounds.get("lt"),
    )


def _parse_exists(body: Any) -> QueryClause:
    if not isinstance(body, dict) or not body.get("field"):
        return Unknown(name="exists")
    return Exists(field=str(body["field"]))


def _parse_prefix(body: Any) -> QueryClause:
    parsed = _field_and_value(body, "value")
    return Prefix(field=parsed[0], value=parsed[1]) if parsed else Unknown(name="prefix")


def _parse_wildcard(body: Any) -> QueryClause:
    parsed = _field_and_value(body, "value")
    return Wildcard(field=parsed[0], value=parsed[1]) if parsed else Unknown(name="wildcard")


def _parse_bool(body: Any) -> QueryClause:
    if not isinstance(body, dict):
        return Unknown(name="bool")
    return Bool(
        must=[parse_clause(c) for c in _as_list(body.get("must"))],
        filter=[parse_clause(c) for c in _as_list(body.get("filter"))],
        should=[parse_clause(c) for c in _as_list(body.get("should"))],
        must_not=[parse_clause(c) for c in _as_list(body.get("must_not"))],
    )


def _parse_ids(body: Any) -> QueryClause:
    if not isinstance(body, dict):
        return Unknown(name="ids")
    return Ids(values=[literal(v) for v in _as_list(body.get("values"))])


def _parse_query_string(body: Any) -> QueryClause:
    if not isinstance(body, dict):
        return Unknown(name="query_string")
    fields = body.get("fields")
    return QueryString(
        query=literal(body.get("query")),
        fields=[str(f) for f in _as_list(fields)] if fields is not None else None,
    )


# Probe order when a clause object carries more than one key.
_PARSERS: dict[str, Callable[[Any], QueryClause]] = {
    "match_all": lambda _body: MatchAll(),
    "match": _parse_match,
    "match_phrase": _parse_match_phrase,
    "multi_match": _parse_multi_match,
    "term": _parse_term,
    "terms": _parse_terms,
    "range": _parse_range,
    "exists": _parse_exists,
    "prefix": _parse_prefix,
    "wildcard": _parse_wildcard,
    "bool": _parse_bool,
    "ids": _parse_ids,
    "query_string": _parse_query_string,
}


def parse_clause(raw: Any) -> QueryClause:
    """Parse one query clause object.

    Args:
        raw: A decoded JSON value, normally ``{"<clause>": {...}}``.

    Returns:
        The matching clause variant, or ``Unknown`` for anything else.
    """
    if not isinstance(raw, dict) or not raw:
        return Unknown()
    for name, parser in _PARSERS.items():
        if name in raw:
            return parser(raw[name])
    return Unknown(name=str(next(iter(raw))))


def _coerce_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def parse_search_request(body: dict[str, Any] | None) -> SearchRequest:
    """Parse a ``_search``/``_count`` body; a missing body or query means match_all."""
    if not body:
        return SearchRequest()
    query = parse_clause(body["query"]) if "query" in body else MatchAll()
    return SearchRequest(
        query=query,
        size=_coerce_int(body.get("size"), 10),
        from_=_coerce_int(body.get("from"), 0),
    )
