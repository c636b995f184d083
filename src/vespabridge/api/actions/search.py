"""Read-path actions: ``_search``, ``_count`` and ``_mget``.

Each accepts an optional index segment; without one the configured default
namespace is used. Backend failures surface as 500 here, unlike the
single-document actions.
"""

from __future__ import annotations

import logging
from typing import Any

from vespabridge.api.routing import ActionContext, ProxyRequest, ProxyResponse
from vespabridge.core.query import build_yql, compile_request, parse_search_request
from vespabridge.core.translator import to_count_response, to_search_response
from vespabridge.exceptions import DownstreamError, ValidationError
from vespabridge.transport.exceptions import TransportError

logger = logging.getLogger(__name__)


def _target_index(request: ProxyRequest, ctx: ActionContext) -> str:
    return request.segment(1) if len(request.segments) == 3 else ctx.default_index


def search(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``GET|POST [/{index}]/_search``; an empty body means match_all."""
    index = _target_index(request, ctx)
    compiled = compile_request(parse_search_request(request.json_object()))
    yql = build_yql(compiled.condition)
    logger.debug("Search on %s: %s (size=%d, from=%d)", index, yql, compiled.size, compiled.from_)

    try:
        envelope = ctx.transport.search(yql, hits=compiled.size, offset=compiled.from_)
    except TransportError as e:
        logger.warning("Search on %s failed: %s", index, e.reason)
        raise DownstreamError(f"Failed to execute search: {e.reason}") from e
    return ProxyResponse(status=200, body=to_search_response(envelope, index))


def count(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``GET|POST [/{index}]/_count``."""
    index = _target_index(request, ctx)
    compiled = compile_request(parse_search_request(request.json_object()))

    try:
        envelope = ctx.transport.count(build_yql(compiled.condition))
    except TransportError as e:
        logger.warning("Count on %s failed: %s", index, e.reason)
        raise DownstreamError(f"Failed to execute count: {e.reason}") from e
    return ProxyResponse(status=200, body=to_count_response(envelope))


def _mget_doc(index: str, doc_id: str, found: dict[str, Any] | None) -> dict[str, Any]:
    if found is None:
        return {"_index": index, "_id": doc_id, "found": False}
    return {
        "_index": index,
        "_id": doc_id,
        "_version": 1,
        "found": True,
        "_source": found.get("fields"),
    }


def mget(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``GET|POST [/{index}]/_mget`` with body ``{"ids": [...]}``."""
    index = _target_index(request, ctx)
    body = request.json_object()
    ids = body.get("ids") if body else None
    if not isinstance(ids, list):
        raise ValidationError("Request body with 'ids' field is required")

    doc_ids = [str(doc_id) for doc_id in ids]
    try:
        found = ctx.transport.multi_get(index, ctx.document_type, doc_ids)
    except TransportError as e:
        logger.warning("Multi-get on %s failed: %s", index, e.reason)
        raise DownstreamError(f"Failed to execute mget: {e.reason}") from e
    return ProxyResponse(status=200, body={"docs": [_mget_doc(index, doc_id, doc) for doc_id, doc in found]})
