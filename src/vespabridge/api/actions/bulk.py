"""``POST|PUT [/{index}]/_bulk``."""

from __future__ import annotations

from vespabridge.api.routing import ActionContext, ProxyRequest, ProxyResponse


def bulk(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """Run an NDJSON batch; the index segment, when present, is the default ``_index``."""
    default_index = request.segment(1) if len(request.segments) == 3 else None
    result = ctx.bulk.process(request.body, default_index)
    return ProxyResponse(status=200, body=result.to_opensearch())
