"""Response translator — Vespa result envelopes to OpenSearch search and count bodies.

A Vespa query response looks like::

    {
      "timing": {"searchtime": 0.004},
      "root": {
        "coverage": {"documents": 42, ...},
        "children": [{"id": "id:ns:doc::1", "relevance": 0.8, "fields": {...}}]
      }
    }

Anything missing or malformed degrades to an empty result instead of failing.
"""

from __future__ import annotations

import math
from typing import Any

from vespabridge.models.search import SHARDS_PLACEHOLDER, SearchHit, SearchResult


def _as_int(value: Any) -> int:
    """Parse a count that may arrive as a number or numeric string; 0 on failure."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    # NaN and infinities cannot be rendered as JSON.
    return parsed if math.isfinite(parsed) else default


def _root(envelope: dict[str, Any] | None) -> dict[str, Any]:
    root = (envelope or {}).get("root")
    return root if isinstance(root, dict) else {}


def total_count(envelope: dict[str, Any] | None) -> int:
    """Document count from ``root.coverage.documents``."""
    coverage = _root(envelope).get("coverage")
    if not isinstance(coverage, dict):
        return 0
    return _as_int(coverage.get("documents", 0))


def _took_ms(envelope: dict[str, Any] | None) -> int:
    timing = (envelope or {}).get("timing")
    if not isinstance(timing, dict):
        return 0
    millis = _as_float(timing.get("searchtime"), 0.0) * 1000
    return int(millis) if math.isfinite(millis) else 0


def to_search_result(envelope: dict[str, Any] | None, index: str = "default") -> SearchResult:
    """Reshape a Vespa query response into a :class:`SearchResult`.

    Args:
        envelope: Decoded Vespa response body.
        index: Index name to report on each hit.

    Returns:
        The translated result; pure, never raises on shape problems.
    """
    children = _root(envelope).get("children")
    hits: list[SearchHit] = []
    if isinstance(children, list):
        for child in children:
            if not isinstance(child, dict):
                continue
            source = child.get("fields")
            hits.append(
                SearchHit(
                    index=index,
                    id=None if child.get("id") is None else str(child["id"]),
                    score=_as_float(child.get("relevance", 1.0), 1.0),
                    source=source if isinstance(source, dict) else None,
                )
            )

    return SearchResult(
        took=_took_ms(envelope),
        total_count=total_count(envelope),
        hits=hits,
    )


def to_search_response(envelope: dict[str, Any] | None, index: str = "default") -> dict[str, Any]:
    """Translate and render the ``_search`` response body."""
    return to_search_result(envelope, index).to_opensearch()


def to_count_response(envelope: dict[str, Any] | None) -> dict[str, Any]:
    """Render the ``_count`` response body."""
    return {"count": total_count(envelope), "_shards": dict(SHARDS_PLACEHOLDER)}
