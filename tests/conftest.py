"""Shared test fixtures and configuration."""

from __future__ import annotations

import threading
from typing import Any

import pytest

from vespabridge.config.settings import Settings
from vespabridge.core.metadata import IndexMetadataStore
from vespabridge.transport.base import TransportClient
from vespabridge.transport.exceptions import DocumentNotFoundError, TransportError


class InMemoryTransport(TransportClient):
    """Transport double that keeps documents in a dict and records every call.

    ``search_envelope`` is returned by :meth:`search`; set ``failure`` to make
    every subsequent call raise it.
    """

    def __init__(self) -> None:
        self.documents: dict[tuple[str, str, str], dict[str, Any]] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.search_envelope: dict[str, Any] = {"root": {"coverage": {"documents": 0}, "children": []}}
        self.failure: TransportError | None = None
        self.closed = False
        self._lock = threading.Lock()

    def _record(self, *call: Any) -> None:
        with self._lock:
            self.calls.append(call)
        if self.failure is not None:
            raise self.failure

    def close(self) -> None:
        self.closed = True

    def insert(self, namespace: str, doc_type: str, doc_id: str, document: dict[str, Any]) -> dict[str, Any]:
        self._record("insert", namespace, doc_type, doc_id, document)
        self.documents[(namespace, doc_type, doc_id)] = dict(document)
        return {"id": f"id:{namespace}:{doc_type}::{doc_id}"}

    def get(self, namespace: str, doc_type: str, doc_id: str) -> dict[str, Any]:
        self._record("get", namespace, doc_type, doc_id)
        key = (namespace, doc_type, doc_id)
        if key not in self.documents:
            raise DocumentNotFoundError(f"[{namespace}][{doc_type}][{doc_id}] The doc is not found.")
        return {"id": f"id:{namespace}:{doc_type}::{doc_id}", "fields": dict(self.documents[key])}

    def update(self, namespace: str, doc_type: str, doc_id: str, document: dict[str, Any]) -> dict[str, Any]:
        self._record("update", namespace, doc_type, doc_id, document)
        key = (namespace, doc_type, doc_id)
        self.documents[key] = {**self.documents.get(key, {}), **document}
        return {"id": f"id:{namespace}:{doc_type}::{doc_id}"}

    def delete(self, namespace: str, doc_type: str, doc_id: str) -> dict[str, Any]:
        self._record("delete", namespace, doc_type, doc_id)
        self.documents.pop((namespace, doc_type, doc_id), None)
        return {"id": f"id:{namespace}:{doc_type}::{doc_id}"}

    def search(self, yql: str, hits: int, offset: int) -> dict[str, Any]:
        self._record("search", yql, hits, offset)
        return self.search_envelope


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        observability={"log_level": "warning", "log_format": "console"},
    )


@pytest.fixture
def transport() -> InMemoryTransport:
    return InMemoryTransport()


@pytest.fixture
def store() -> IndexMetadataStore:
    return IndexMetadataStore()


@pytest.fixture
def sample_envelope() -> dict[str, Any]:
    """A Vespa query response with two hits."""
    return {
        "timing": {"querytime": 0.002, "summaryfetchtime": 0.001, "searchtime": 0.004},
        "root": {
            "id": "toplevel",
            "relevance": 1.0,
            "fields": {"totalCount": 2},
            "coverage": {"coverage": 100, "documents": 2, "full": True, "nodes": 1},
            "children": [
                {
                    "id": "id:books:doc::1",
                    "relevance": 0.83,
                    "source": "content",
                    "fields": {"title": "Dune", "year": 1965},
                },
                {
                    "id": "id:books:doc::2",
                    "relevance": 0.41,
                    "source": "content",
                    "fields": {"title": "Dune Messiah", "year": 1969},
                },
            ],
        },
    }
