"""Single-document actions under ``/{index}/_doc``, ``_create`` and ``_update``.

Reads, deletes and partial updates report any backend failure as 404.
Writes (POST/PUT) report 404 only when the backend says the document is
missing and 500 for every other backend failure.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from vespabridge.api.routing import ActionContext, ProxyRequest, ProxyResponse
from vespabridge.exceptions import NotFoundError, ValidationError
from vespabridge.models.search import WRITE_SHARDS
from vespabridge.transport.exceptions import TransportError

logger = logging.getLogger(__name__)


def _write_result(index: str, doc_id: str, result: str) -> dict[str, Any]:
    return {
        "_index": index,
        "_id": doc_id,
        "_version": 1,
        "result": result,
        "_shards": dict(WRITE_SHARDS),
    }


def _required_body(request: ProxyRequest) -> dict[str, Any]:
    body = request.json_object()
    if body is None:
        raise ValidationError("Request body is required")
    return body


def index_document(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``POST /{index}/_doc[/{id}]`` and ``POST /{index}/_create[/{id}]``.

    A missing id is generated. The result is ``created`` for a generated id
    and ``updated`` for a supplied one, since the backend cannot tell
    whether a document with that id already existed.
    """
    index = request.segment(1)
    supplied_id = request.segment(3)
    body = _required_body(request)

    doc_id = supplied_id or str(uuid.uuid4())
    ctx.transport.insert(index, ctx.document_type, doc_id, body)
    return ProxyResponse(
        status=201,
        body=_write_result(index, doc_id, "created" if supplied_id is None else "updated"),
    )


def put_document(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``PUT /{index}/_doc/{id}`` and ``PUT /{index}/_create/{id}``."""
    index = request.segment(1)
    doc_id = request.segment(3)
    body = _required_body(request)

    ctx.transport.update(index, ctx.document_type, doc_id, body)
    return ProxyResponse(status=200, body=_write_result(index, doc_id, "updated"))


def get_document(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``GET /{index}/_doc/{id}``."""
    index = request.segment(1)
    doc_id = request.segment(3)

    try:
        document = ctx.transport.get(index, ctx.document_type, doc_id)
    except TransportError as e:
        logger.debug("Document %s/%s not readable: %s", index, doc_id, e.reason)
        return ProxyResponse(status=404, body={"_index": index, "_id": doc_id, "found": False})

    source = document.get("fields")
    return ProxyResponse(
        status=200,
        body={
            "_index": index,
            "_id": doc_id,
            "_version": 1,
            "found": True,
            "_source": source if isinstance(source, dict) else {},
        },
    )


def delete_document(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``DELETE /{index}/_doc/{id}``."""
    index = request.segment(1)
    doc_id = request.segment(3)

    try:
        ctx.transport.delete(index, ctx.document_type, doc_id)
    except TransportError as e:
        raise NotFoundError(e.reason) from e
    return ProxyResponse(status=200, body=_write_result(index, doc_id, "deleted"))


def update_document(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``POST /{index}/_update/{id}``: merge ``doc`` (or the whole body) into the stored fields."""
    index = request.segment(1)
    doc_id = request.segment(3)
    body = _required_body(request)

    try:
        ctx.transport.partial_update(index, ctx.document_type, doc_id, body)
    except TransportError as e:
        raise NotFoundError(e.reason) from e
    return ProxyResponse(status=200, body=_write_result(index, doc_id, "updated"))
