"""Vespa transport — Document and query API access over ``httpx``.

Talks to a Vespa container through the `Document v1 API`_ for single
document writes and reads, and the `Query API`_ for YQL searches.

.. _Document v1 API: https://docs.vespa.ai/en/reference/document-v1-api-reference.html
.. _Query API: https://docs.vespa.ai/en/reference/query-api-reference.html

Usage::

    transport = VespaTransport(endpoint="http://localhost:8080/")
    transport.insert("books", "doc", "1", {"title": "Dune"})
    envelope = transport.search('select * from sources * where true', hits=10, offset=0)
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from vespabridge.transport.base import TransportClient
from vespabridge.transport.exceptions import (
    ConfigurationError,
    ConnectionError,
    DocumentNotFoundError,
    QueryError,
)

logger = logging.getLogger(__name__)


def flatten_fields(document: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested objects into dotted field names.

    ``{"a": {"b": 1}, "c": 2}`` becomes ``{"a.b": 1, "c": 2}``. Lists are kept
    as values.
    """
    flattened: dict[str, Any] = {}
    for key, value in document.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flattened.update(flatten_fields(value, path))
        else:
            flattened[path] = value
    return flattened


class VespaTransport(TransportClient):
    """Blocking transport for a Vespa container endpoint.

    A single ``httpx.Client`` is created lazily and shared by all request
    threads; httpx clients are thread-safe and pool connections.

    Args:
        endpoint: Base URL of the Vespa container, e.g. ``"http://localhost:8080/"``.
        timeout: HTTP request timeout in seconds.
        client: Optional preconfigured ``httpx.Client``.

    Raises:
        ConfigurationError: If ``endpoint`` is not an absolute http(s) URL.
    """

    def __init__(
        self,
        endpoint: str = "http://localhost:8080/",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        try:
            url = httpx.URL(endpoint)
        except httpx.InvalidURL:
            url = None
        if url is None or url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(
                f"Vespa endpoint must be an absolute http(s) URL, got {endpoint!r}. "
                "Set it via backend.endpoint"
            )
        self._endpoint = endpoint if endpoint.endswith("/") else endpoint + "/"
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._endpoint,
                timeout=httpx.Timeout(self._timeout),
                headers={"Content-Type": "application/json"},
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    # ── Documents ────────────────────────────────────────────────────────

    @staticmethod
    def _document_path(namespace: str, doc_type: str, doc_id: str) -> str:
        parts = [quote(part, safe="") for part in (namespace, doc_type, doc_id)]
        return "/document/v1/{}/{}/docid/{}".format(*parts)

    def _send(self, method: str, namespace: str, doc_type: str, doc_id: str, action: str, **kwargs: Any) -> dict[str, Any]:
        label = f"[{namespace}][{doc_type}][{doc_id}]"
        try:
            resp = self.client.request(method, self._document_path(namespace, doc_type, doc_id), **kwargs)
        except httpx.HTTPError as e:
            raise ConnectionError(f"{label} Failed to {action} the doc: {e}") from e

        if resp.status_code == 404:
            raise DocumentNotFoundError(f"{label} The doc is not found.")
        if resp.status_code != 200:
            raise QueryError(f"{label} Failed to {action} the doc. The response is {resp.status_code}")
        try:
            return dict(resp.json())
        except ValueError as e:
            raise QueryError(f"{label} Failed to parse the response: {e}") from e

    def insert(self, namespace: str, doc_type: str, doc_id: str, document: dict[str, Any]) -> dict[str, Any]:
        body = {"fields": flatten_fields(document)}
        return self._send("POST", namespace, doc_type, doc_id, "insert", json=body)

    def get(self, namespace: str, doc_type: str, doc_id: str) -> dict[str, Any]:
        return self._send("GET", namespace, doc_type, doc_id, "get")

    def update(self, namespace: str, doc_type: str, doc_id: str, document: dict[str, Any]) -> dict[str, Any]:
        # Document v1 PUT is a partial update; each field is assigned outright.
        fields = {name: {"assign": value} for name, value in flatten_fields(document).items()}
        return self._send("PUT", namespace, doc_type, doc_id, "update", json={"fields": fields})

    def delete(self, namespace: str, doc_type: str, doc_id: str) -> dict[str, Any]:
        return self._send("DELETE", namespace, doc_type, doc_id, "delete")

    # ── Search ───────────────────────────────────────────────────────────

    def search(self, yql: str, hits: int, offset: int) -> dict[str, Any]:
        logger.debug("Vespa search: %s (hits=%d, offset=%d)", yql, hits, offset)
        params = {"yql": yql, "hits": hits, "offset": offset}
        try:
            resp = self.client.get("/search/", params=params)
        except httpx.HTTPError as e:
            raise ConnectionError(f"Failed to execute search: {e}") from e

        if resp.status_code != 200:
            raise QueryError(f"Search failed with status: {resp.status_code}")
        try:
            return dict(resp.json())
        except ValueError as e:
            raise QueryError(f"Failed to parse search response: {e}") from e
