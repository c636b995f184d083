"""Cluster-level actions: root descriptor, health, state and ``_cat/indices``.

The backend has no notion of OpenSearch cluster state, so these responses
are synthesized from the index metadata store: one green node, one primary
shard per registered index.
"""

from __future__ import annotations

import uuid
from typing import Any

from vespabridge import __version__
from vespabridge.api.routing import ActionContext, ProxyRequest, ProxyResponse
from vespabridge.exceptions import IndexNotFoundError

CLUSTER_NAME = "vespa-cluster"

# Stable for the lifetime of the process, like the metadata it describes.
_CLUSTER_UUID = str(uuid.uuid4())


def root(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``GET /``: the service descriptor clients fetch on connect."""
    return ProxyResponse(
        status=200,
        body={
            "name": "vespabridge",
            "cluster_name": CLUSTER_NAME,
            "cluster_uuid": _CLUSTER_UUID,
            "version": {
                "distribution": "vespabridge",
                "number": __version__,
                "build_flavor": "_na_",
                "build_type": "_na_",
                "build_hash": "_na_",
                "build_snapshot": False,
                "lucene_version": "_na_",
                "minimum_wire_compatibility_version": "7.17.0",
                "minimum_index_compatibility_version": "7.0.0",
            },
            "tagline": "You Know, for Search",
        },
    )


def cluster_health(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``GET /_cluster/health[/{index}]``."""
    shards = len(ctx.store.list_all())
    return ProxyResponse(
        status=200,
        body={
            "cluster_name": CLUSTER_NAME,
            "status": "green",
            "timed_out": False,
            "number_of_nodes": 1,
            "number_of_data_nodes": 1,
            "active_primary_shards": shards,
            "active_shards": shards,
            "relocating_shards": 0,
            "initializing_shards": 0,
            "unassigned_shards": 0,
            "delayed_unassigned_shards": 0,
            "number_of_pending_tasks": 0,
            "number_of_in_flight_fetch": 0,
            "task_max_waiting_in_queue_millis": 0,
            "active_shards_percent_as_number": 100.0,
        },
    )


def cluster_state(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``GET /_cluster/state``."""
    indices = {name: meta.model_dump() for name, meta in ctx.store.list_all().items()}
    return ProxyResponse(
        status=200,
        body={
            "cluster_name": CLUSTER_NAME,
            "cluster_uuid": _CLUSTER_UUID,
            "version": 1,
            "state_uuid": str(uuid.uuid4()),
            "master_node": "node1",
            "metadata": {
                "cluster_uuid": _CLUSTER_UUID,
                "templates": {},
                "indices": indices,
            },
        },
    )


def _cat_row(name: str, index_uuid: str) -> dict[str, Any]:
    return {
        "health": "green",
        "status": "open",
        "index": name,
        "uuid": index_uuid,
        "pri": "1",
        "rep": "0",
        "docs.count": "0",
        "docs.deleted": "0",
        "store.size": "0b",
        "pri.store.size": "0b",
    }


def cat_indices(request: ProxyRequest, ctx: ActionContext) -> ProxyResponse:
    """``GET /_cat/indices[/{index}]``; the optional segment filters to one index."""
    entries = ctx.store.list_all()
    wanted = request.segment(3)
    if wanted is not None:
        if wanted not in entries:
            raise IndexNotFoundError(wanted)
        entries = {wanted: entries[wanted]}
    rows = [_cat_row(name, meta.uuid) for name, meta in sorted(entries.items())]
    return ProxyResponse(status=200, body={"indices": rows})
