"""Action tables — the ordered ``(name, predicate, handler)`` entries per HTTP method.

Order matters: the first matching entry wins, and fixed ``_``-prefixed
paths are listed before the generic index-name patterns.
"""

from __future__ import annotations

from vespabridge.api.actions import bulk, cluster, documents, indices, matchers, search
from vespabridge.api.routing import Action

_SEARCH = Action("search", matchers.endpoint("_search"), search.search)
_COUNT = Action("count", matchers.endpoint("_count"), search.count)
_MGET = Action("mget", matchers.endpoint("_mget"), search.mget)
_BULK = Action("bulk", matchers.endpoint("_bulk"), bulk.bulk)

ROUTES: dict[str, list[Action]] = {
    "GET": [
        Action("root", matchers.root, cluster.root),
        Action("cluster_health", matchers.meta("_cluster", "health", optional_tail=True), cluster.cluster_health),
        Action("cluster_state", matchers.meta("_cluster", "state"), cluster.cluster_state),
        Action("cat_indices", matchers.meta("_cat", "indices", optional_tail=True), cluster.cat_indices),
        _SEARCH,
        _COUNT,
        _MGET,
        Action("indices", matchers.index, indices.get_index),
        Action("mapping", matchers.index_endpoint("_mapping"), indices.get_mapping),
        Action("settings", matchers.index_endpoint("_settings"), indices.get_settings),
        Action("document", matchers.index_document("_doc"), documents.get_document),
    ],
    "POST": [
        _BULK,
        _SEARCH,
        _COUNT,
        _MGET,
        Action("update", matchers.index_document("_update"), documents.update_document),
        Action("refresh", matchers.endpoint("_refresh"), indices.refresh),
        Action("document", matchers.index_document("_doc", "_create", id_optional=True), documents.index_document),
    ],
    "PUT": [
        _BULK,
        Action("indices", matchers.index, indices.create_index),
        Action("mapping", matchers.index_endpoint("_mapping"), indices.put_mapping),
        Action("settings", matchers.index_endpoint("_settings"), indices.put_settings),
        Action("document", matchers.index_document("_doc", "_create"), documents.put_document),
    ],
    "DELETE": [
        Action("indices", matchers.index, indices.delete_index),
        Action("document", matchers.index_document("_doc"), documents.delete_document),
    ],
    "HEAD": [
        Action("indices", matchers.index, indices.index_exists),
    ],
}

__all__ = ["ROUTES"]
