"""Path predicates shared by the action tables.

Segments follow :func:`vespabridge.api.routing.split_path`: position 0 is
always the empty string before the leading ``/``.
"""

from __future__ import annotations

from collections.abc import Sequence

from vespabridge.api.routing import Predicate, is_index_name


def root(segments: Sequence[str]) -> bool:
    return len(segments) == 0


def meta(*names: str, optional_tail: bool = False) -> Predicate:
    """``/{names[0]}/{names[1]}...``, optionally followed by one more segment."""
    lengths = {len(names) + 1, len(names) + 2} if optional_tail else {len(names) + 1}

    def _matches(segments: Sequence[str]) -> bool:
        return len(segments) in lengths and tuple(segments[1 : len(names) + 1]) == names

    return _matches


def endpoint(name: str) -> Predicate:
    """``/{name}`` or ``/{index}/{name}``."""

    def _matches(segments: Sequence[str]) -> bool:
        if len(segments) == 2:
            return segments[1] == name
        return len(segments) == 3 and is_index_name(segments[1]) and segments[2] == name

    return _matches


def index(segments: Sequence[str]) -> bool:
    """``/{index}``."""
    return len(segments) == 2 and is_index_name(segments[1])


def index_endpoint(name: str) -> Predicate:
    """``/{index}/{name}``."""

    def _matches(segments: Sequence[str]) -> bool:
        return len(segments) == 3 and is_index_name(segments[1]) and segments[2] == name

    return _matches


def index_document(*names: str, id_optional: bool = False) -> Predicate:
    """``/{index}/{one of names}/{id}``; with ``id_optional`` the id may be absent."""

    def _matches(segments: Sequence[str]) -> bool:
        if len(segments) < 3 or not is_index_name(segments[1]) or segments[2] not in names:
            return False
        if len(segments) == 3:
            return id_optional
        return len(segments) == 4 and bool(segments[3])

    return _matches
