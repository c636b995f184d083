"""Query DSL to YQL translation."""

from vespabridge.core.query.compiler import build_yql, compile_clause, compile_request, escape
from vespabridge.core.query.parser import parse_clause, parse_search_request

__all__ = [
    "build_yql",
    "compile_clause",
    "compile_request",
    "escape",
    "parse_clause",
    "parse_search_request",
]
