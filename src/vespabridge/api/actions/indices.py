"""Index lifecycle actions backed by the index metadata store.

None of these touch the backend: index creation, mappings and settings are
bookkeeping only, and are forgotten on restart.
"""

from __future__ import annotations

from typing import Any

from vespabridge.api.routing import ActionContext, ProxyRequest, ProxyResponse
from vespabridge.exceptions import ValidationError
from vespabridge.models.search import WRITE_SHARDS

_ACKNOWLEDGED: dict[str, Any] = {"acknowledged": True}


def _object_or_none(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def create_index(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``PUT /{index}`` with an optional ``{settings, mappings}`` body."""
    name = request.segment(1)
    body = request.json_object() or {}

    ctx.store.create(name, _object_or_none(body.get("settings")), _object_or_none(body.get("mappings")))
    return ProxyResponse(status=200, body={"acknowledged": True, "shards_acknowledged": True, "index": name})


def get_index(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``GET /{index}``."""
    name = request.segment(1)
    return ProxyResponse(status=200, body={name: ctx.store.get(name).model_dump()})


def delete_index(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``DELETE /{index}``."""
    ctx.store.delete(request.segment(1))
    return ProxyResponse(status=200, body=dict(_ACKNOWLEDGED))


def index_exists(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``HEAD /{index}``: status only, never a body."""
    return ProxyResponse(status=200 if ctx.store.exists(request.segment(1)) else 404)


def get_mapping(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``GET /{index}/_mapping``."""
    name = request.segment(1)
    return ProxyResponse(status=200, body={name: {"mappings": ctx.store.get(name).mappings}})


def put_mapping(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``PUT /{index}/_mapping``; the body replaces the stored mappings."""
    name = request.segment(1)
    body = request.json_object()
    if body is None:
        raise ValidationError("Request body is required")
    ctx.store.update_mapping(name, body)
    return ProxyResponse(status=200, body=dict(_ACKNOWLEDGED))


def get_settings(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``GET /{index}/_settings``."""
    name = request.segment(1)
    return ProxyResponse(status=200, body={name: {"settings": ctx.store.get(name).settings}})


def put_settings(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``PUT /{index}/_settings``; accepts ``{"settings": {...}}`` or a bare settings object and merges it."""
    name = request.segment(1)
    body = request.json_object()
    if body is None:
        raise ValidationError("Request body is required")
    wrapped = _object_or_none(body.get("settings"))
    ctx.store.update_settings(name, wrapped if wrapped is not None and len(body) == 1 else body)
    return ProxyResponse(status=200, body=dict(_ACKNOWLEDGED))


def refresh(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``POST [/{index}]/_refresh``; writes are visible on completion, so this only acknowledges."""
    return ProxyResponse(status=200, body={"_shards": dict(WRITE_SHARDS)})
