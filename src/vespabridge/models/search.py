"""Search response models — the client-facing result envelope."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

SHARDS_PLACEHOLDER: dict[str, int] = {"total": 1, "successful": 1, "skipped": 0, "failed": 0}
"""Fixed single-shard, all-successful ``_shards`` block."""

WRITE_SHARDS: dict[str, int] = {"total": 1, "successful": 1, "failed": 0}
"""``_shards`` block of single-document writes and refresh."""


class SearchHit(BaseModel):
    """One translated hit."""

    index: str = Field(description="Index name reported as ``_index``")
    id: str | None = Field(default=None, description="Backend document id")
    score: float = Field(default=1.0, description="Backend relevance")
    source: dict[str, Any] | None = Field(default=None, description="Document fields")

    def to_opensearch(self) -> dict[str, Any]:
        return {"_index": self.index, "_id": self.id, "_score": self.score, "_source": self.source}


class SearchResult(BaseModel):
    """A backend result reshaped into the OpenSearch search envelope."""

    took: int = Field(default=0, description="Backend search time in ms")
    total_count: int = Field(default=0, description="Number of matching documents")
    relation: str = Field(default="eq", description="Total hits relation")
    max_score: float = Field(default=1.0, description="Highest score in the page")
    hits: list[SearchHit] = Field(default_factory=list, description="Hits in backend order")

    def to_opensearch(self) -> dict[str, Any]:
        """Render the ``_search`` response body."""
        return {
            "took": self.took,
            "timed_out": False,
            "_shards": dict(SHARDS_PLACEHOLDER),
            "hits": {
                "total": {"value": self.total_count, "relation": self.relation},
                "max_score": self.max_score,
                "hits": [hit.to_opensearch() for hit in self.hits],
            },
        }
