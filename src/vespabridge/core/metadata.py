"""Index Metadata Store — in-memory emulation of index lifecycle.

The backend's schemas are static, so index settings, mappings and UUIDs are
kept here. The store lives exactly as long as the process: after a restart it
is empty, and every index-level call for a previously created index reports
``IndexNotFoundError`` even though the backend may still hold its documents.

The store is owned by the application and passed to every action; it is the
only state shared between concurrent requests.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable
from typing import Any

from vespabridge.exceptions import IndexNotFoundError
from vespabridge.models.index import IndexMetadata

logger = logging.getLogger(__name__)


class IndexMetadataStore:
    """Thread-safe registry of index name -> :class:`IndexMetadata`.

    Reads return deep copies so callers never alias stored state.
    Read-modify-write sequences go through :meth:`compute`, which holds the
    lock for the whole update.

    Example:
        >>> store = IndexMetadataStore()
        >>> _ = store.create("books", {"number_of_shards": 1})
        >>> _ = store.update_settings("books", {"refresh_interval": "1s"})
        >>> store.get("books").settings
        {'number_of_shards': 1, 'refresh_interval': '1s'}
    """

    def __init__(self) -> None:
        self._entries: dict[str, IndexMetadata] = {}
        self._lock = threading.RLock()

    def create(
        self,
        name: str,
        settings: dict[str, Any] | None = None,
        mappings: dict[str, Any] | None = None,
    ) -> IndexMetadata:
        """Register ``name`` with a fresh UUID, replacing any previous entry."""
        metadata = IndexMetadata(settings=copy.deepcopy(settings or {}), mappings=copy.deepcopy(mappings or {}))
        with self._lock:
            if name in self._entries:
                logger.info("Overwriting metadata of existing index: %s", name)
            self._entries[name] = metadata
        return metadata.model_copy(deep=True)

    def exists(self, name: str) -> bool:
        with self._lock:
            return name in self._entries

    def get(self, name: str) -> IndexMetadata:
        """Return a copy of the metadata.

        Raises:
            IndexNotFoundError: If ``name`` is not registered.
        """
        with self._lock:
            metadata = self._entries.get(name)
            if metadata is None:
                raise IndexNotFoundError(name)
            return metadata.model_copy(deep=True)

    def delete(self, name: str) -> None:
        """Remove ``name``.

        Raises:
            IndexNotFoundError: If ``name`` is not registered.
        """
        with self._lock:
            if self._entries.pop(name, None) is None:
                raise IndexNotFoundError(name)

    def compute(self, name: str, updater: Callable[[IndexMetadata], IndexMetadata]) -> IndexMetadata:
        """Atomically replace the entry for ``name`` with ``updater(current)``.

        ``updater`` receives a private copy and runs under the store lock, so
        concurrent writers to the same index cannot lose each other's changes.

        Raises:
            IndexNotFoundError: If ``name`` is not registered.
        """
        with self._lock:
            current = self._entries.get(name)
            if current is None:
                raise IndexNotFoundError(name)
            updated = updater(current.model_copy(deep=True))
            self._entries[name] = updated
            return updated.model_copy(deep=True)

    def update_mapping(self, name: str, mappings: dict[str, Any]) -> IndexMetadata:
        """Replace the mappings of ``name``."""
        return self.compute(name, lambda meta: meta.model_copy(update={"mappings": copy.deepcopy(mappings)}))

    def update_settings(self, name: str, partial: dict[str, Any]) -> IndexMetadata:
        """Merge ``partial`` into the settings of ``name``."""
        return self.compute(name, lambda meta: meta.model_copy(update={"settings": {**meta.settings, **copy.deepcopy(partial)}}))

    def list_all(self) -> dict[str, IndexMetadata]:
        """Snapshot of every entry; mutating it does not affect the store."""
        with self._lock:
            return {name: meta.model_copy(deep=True) for name, meta in self._entries.items()}
