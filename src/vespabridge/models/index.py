"""Index metadata model."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class IndexMetadata(BaseModel):
    """Emulated index state: the backend has no per-index settings or mappings."""

    uuid: str = Field(default_factory=lambda: str(uuid4()), description="Generated at creation")
    settings: dict[str, Any] = Field(default_factory=dict, description="Index settings as supplied")
    mappings: dict[str, Any] = Field(default_factory=dict, description="Index mappings as supplied")
