"""Bulk request and per-item result models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, Field


class BulkOpType(str, Enum):
    """The operation named by a bulk metadata line."""

    INDEX = "index"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class BulkOperation(BaseModel):
    """One bulk record: a metadata line plus its optional document line."""

    op: BulkOpType
    index: str | None = Field(default=None, description="``_index`` from metadata; None falls back to the URL index")
    id: str | None = Field(default=None, description="``_id`` from metadata")
    document: dict[str, Any] | None = Field(default=None, description="Document line; None for delete")


class BulkItemSuccess(BaseModel):
    outcome: Literal["success"] = "success"
    op: str
    index: str | None
    id: str
    version: int = 1
    result: str
    status: int

    def to_opensearch(self) -> dict[str, Any]:
        return {
            self.op: {
                "_index": self.index,
                "_id": self.id,
                "_version": self.version,
                "result": self.result,
                "status": self.status,
            }
        }


class BulkItemError(BaseModel):
    outcome: Literal["error"] = "error"
    op: str
    type: str
    reason: str
    status: int = 400

    def to_opensearch(self) -> dict[str, Any]:
        return {self.op: {"error": {"type": self.type, "reason": self.reason}, "status": self.status}}


BulkItemResult = Union[BulkItemSuccess, BulkItemError]


class BulkBatchResult(BaseModel):
    """Ordered item results of one bulk request."""

    took: int = 0
    items: list[BulkItemResult] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(isinstance(item, BulkItemError) for item in self.items)

    def to_opensearch(self) -> dict[str, Any]:
        """Render the ``_bulk`` response body."""
        return {
            "took": self.took,
            "errors": self.has_errors,
            "items": [item.to_opensearch() for item in self.items],
        }
