"""Router / Dispatcher — maps ``(method, path)`` to exactly one action.

Each HTTP method has an ordered table of :class:`Action` entries. The first
entry whose predicate accepts the path segments handles the request. Fixed
meta-segment matchers (``_cluster``, ``_cat``, ``_search`` ...) are declared
before generic index-name matchers, so a path such as ``/_search`` is never
mistaken for an index called ``_search``.

The dispatcher is independent of the web framework: it receives the method,
raw path and body bytes and returns a :class:`ProxyResponse`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from vespabridge.core.bulk import BulkProcessor
from vespabridge.core.metadata import IndexMetadataStore
from vespabridge.exceptions import BridgeError, ParseError, RoutingError, decamelize, error_envelope
from vespabridge.transport.base import TransportClient

logger = logging.getLogger(__name__)


def split_path(path: str) -> list[str]:
    """Split a path on ``/`` keeping the leading empty segment.

    Trailing empty segments are dropped, so ``"/"`` gives ``[]``, ``"/idx"``
    gives ``["", "idx"]`` and ``"/idx/_doc/"`` gives ``["", "idx", "_doc"]``.
    """
    segments = path.split("/")
    while segments and segments[-1] == "":
        segments.pop()
    return segments


def is_index_name(segment: str) -> bool:
    """Index names are non-empty and never begin with ``_``."""
    return bool(segment) and not segment.startswith("_")


def parse_json_body(body: bytes) -> Any | None:
    """Decode a JSON body; an empty or whitespace-only body yields ``None``.

    Raises:
        ParseError: If the body is not valid UTF-8 JSON.
    """
    if not body or not body.strip():
        return None
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(f"Failed to parse request body: {e}") from e


# ── Request / response values ────────────────────────────────────────────


@dataclass(frozen=True)
class ProxyRequest:
    """An inbound request after prefix stripping."""

    method: str
    path: str
    segments: list[str]
    body: bytes = b""

    def segment(self, position: int) -> str | None:
        """Path segment at ``position`` (1 is the first name after ``/``), or None."""
        return self.segments[position] if len(self.segments) > position else None

    def json_object(self) -> dict[str, Any] | None:
        """Decoded body, which must be a JSON object when present.

        Raises:
            ParseError: If the body is malformed or not an object.
        """
        value = parse_json_body(self.body)
        if value is not None and not isinstance(value, dict):
            raise ParseError("Failed to parse request body: expected a JSON object")
        return value


@dataclass
class ProxyResponse:
    """Status plus a JSON-serializable body; ``None`` means no body at all."""

    status: int
    body: Any = None


@dataclass(frozen=True)
class ActionContext:
    """Everything an action may touch, passed explicitly on every call."""

    transport: TransportClient
    store: IndexMetadataStore
    document_type: str = "doc"
    default_index: str = "default"
    bulk: BulkProcessor = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "bulk", BulkProcessor(self.transport, self.document_type))


Predicate = Callable[[Sequence[str]], bool]
Handler = Callable[[ProxyRequest, ActionContext], ProxyResponse]


class Action(NamedTuple):
    """One routing table entry."""

    name: str
    matches: Predicate
    handler: Handler


# ── Dispatcher ───────────────────────────────────────────────────────────


class Dispatcher:
    """Selects and runs the action for a request.

    Args:
        context: Shared dependencies handed to every action.
        routes: Ordered action table per upper-case HTTP method.
        path_prefix: Prefix stripped from the path before matching.
    """

    def __init__(
        self,
        context: ActionContext,
        routes: Mapping[str, Sequence[Action]],
        path_prefix: str = "",
    ) -> None:
        self.context = context
        self._routes = {method.upper(): list(actions) for method, actions in routes.items()}
        self._path_prefix = path_prefix

    def strip_prefix(self, path: str) -> str:
        if not self._path_prefix:
            return path
        if len(path) <= len(self._path_prefix):
            return "/"
        return path[len(self._path_prefix) :]

    def resolve(self, method: str, segments: Sequence[str]) -> Action | None:
        """Return the first action of ``method`` whose predicate matches."""
        for action in self._routes.get(method.upper(), ()):
            if action.matches(segments):
                return action
        return None

    def handle(self, method: str, path: str, body: bytes = b"") -> ProxyResponse:
        """Route and execute a request.

        Never raises: routing misses render 405, escaped :class:`BridgeError`
        instances render their own status, anything else renders 500.
        """
        method = method.upper()
        path = self.strip_prefix(path)
        segments = split_path(path)
        logger.debug("%s %s", method, path)

        action = self.resolve(method, segments)
        if action is None:
            error = RoutingError(method, path)
            logger.info("No action for %s %s", method, path)
            return ProxyResponse(status=error.status, body=error_envelope(error))

        request = ProxyRequest(method=method, path=path, segments=segments, body=body)
        try:
            return action.handler(request, self.context)
        except BridgeError as e:
            logger.info("%s %s failed in %s: %s", method, path, action.name, e.reason)
            return ProxyResponse(status=e.status, body=error_envelope(e))
        except Exception as e:
            logger.exception("Unexpected error in action %s for %s %s", action.name, method, path)
            error = BridgeError(str(e) or type(e).__name__)
            error.error_type = decamelize(type(e).__name__)
            return ProxyResponse(status=error.status, body=error_envelope(error))
