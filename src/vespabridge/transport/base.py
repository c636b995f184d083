"""Base transport interface — the narrow contract the core uses to reach the backend.

Every backend transport must implement this interface. The transport is
responsible for:
  1. Writing, reading and deleting single documents
  2. Executing condition queries with paging parameters
  3. Owning connection and timeout policy

Calls are blocking; the hosting runtime runs each request on its own worker
thread, so implementations must be safe to share between threads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from vespabridge.transport.exceptions import ConnectionError, TransportError


class TransportClient(ABC):
    """Abstract base class for backend transports.

    Documents are addressed by ``(namespace, doc_type, doc_id)``; the
    namespace is the client-facing index name and ``doc_type`` is the fixed
    document type configured for the deployment.
    """

    @abstractmethod
    def close(self) -> None:
        """Release pooled connections."""

    @abstractmethod
    def insert(self, namespace: str, doc_type: str, doc_id: str, document: dict[str, Any]) -> dict[str, Any]:
        """Create or replace a document.

        Raises:
            TransportError: If the backend rejects the write.
        """

    @abstractmethod
    def get(self, namespace: str, doc_type: str, doc_id: str) -> dict[str, Any]:
        """Fetch a document envelope (``{"id": ..., "fields": {...}}``).

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """

    @abstractmethod
    def update(self, namespace: str, doc_type: str, doc_id: str, document: dict[str, Any]) -> dict[str, Any]:
        """Overwrite the given fields of an existing document."""

    @abstractmethod
    def delete(self, namespace: str, doc_type: str, doc_id: str) -> dict[str, Any]:
        """Remove a document."""

    @abstractmethod
    def search(self, yql: str, hits: int, offset: int) -> dict[str, Any]:
        """Run a YQL statement and return the raw result envelope."""

    def count(self, yql: str) -> dict[str, Any]:
        """Run a YQL statement without fetching any hits."""
        return self.search(yql, hits=0, offset=0)

    def multi_get(self, namespace: str, doc_type: str, doc_ids: list[str]) -> list[tuple[str, dict[str, Any] | None]]:
        """Fetch several documents, yielding ``None`` for each one that cannot be read.

        Ids are fetched one after another in the given order.

        Raises:
            ConnectionError: If the backend is unreachable; per-document
                failures never raise.
        """
        found: list[tuple[str, dict[str, Any] | None]] = []
        for doc_id in doc_ids:
            try:
                found.append((doc_id, self.get(namespace, doc_type, doc_id)))
            except ConnectionError:
                raise
            except TransportError:
                found.append((doc_id, None))
        return found

    def partial_update(
        self,
        namespace: str,
        doc_type: str,
        doc_id: str,
        partial: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge ``partial`` into the stored document and write the result back.

        ``partial`` may wrap the changed fields in a ``doc`` key, as the
        OpenSearch update API does; otherwise it is merged as-is.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        existing = self.get(namespace, doc_type, doc_id)
        fields = dict(existing.get("fields") or {})
        changes = partial.get("doc") if isinstance(partial.get("doc"), dict) else partial
        fields.update(changes)
        return self.update(namespace, doc_type, doc_id, fields)
