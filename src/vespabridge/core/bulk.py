"""Bulk Processor — NDJSON batch parsing and sequential execution.

A bulk body is a sequence of records. Each record is one metadata line such as
``{"index": {"_index": "books", "_id": "1"}}`` followed, except for
``delete``, by one document line. Pairing is driven by a two-state machine
whose state is the pending operation:

- With nothing pending, a line is read as metadata. ``delete`` yields a record
  at once; other operations become pending.
- With an operation pending, the next line is its document and the record is
  yielded.

Blank lines never advance the machine. Framing problems (a line that is not a
JSON object, or a metadata line naming no known operation) fail the whole
request; everything else is reported per item.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Iterable, Iterator
from typing import Any

from vespabridge.exceptions import BridgeError, ParseError, ValidationError, decamelize
from vespabridge.models.bulk import (
    BulkBatchResult,
    BulkItemError,
    BulkItemResult,
    BulkItemSuccess,
    BulkOperation,
    BulkOpType,
)
from vespabridge.transport.base import TransportClient

logger = logging.getLogger(__name__)

_OP_TYPES = {op.value: op for op in BulkOpType}


def _decode_line(line: str, line_number: int) -> dict[str, Any]:
    try:
        value = json.loads(line)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse bulk request: line [{line_number}]: {e.msg}") from e
    if not isinstance(value, dict):
        raise ParseError(f"Failed to parse bulk request: line [{line_number}] is not a JSON object")
    return value


def _metadata_to_operation(metadata: dict[str, Any], line_number: int) -> BulkOperation:
    if len(metadata) != 1:
        raise ParseError(f"Malformed action/metadata line [{line_number}], expected a single action")
    action, params = next(iter(metadata.items()))
    op = _OP_TYPES.get(action)
    if op is None:
        raise ParseError(f"Malformed action/metadata line [{line_number}], unknown action [{action}]")
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise ParseError(f"Malformed action/metadata line [{line_number}], expected an object for [{action}]")

    index = params.get("_index")
    doc_id = params.get("_id")
    return BulkOperation(
        op=op,
        index=None if index is None else str(index),
        id=None if doc_id is None else str(doc_id),
    )


def _split_lines(body: str) -> list[str]:
    # Only "\n" separates records; other Unicode line breaks may sit raw inside JSON strings.
    return [line[:-1] if line.endswith("\r") else line for line in body.split("\n")]


def parse_operations(lines: Iterable[str]) -> Iterator[BulkOperation]:
    """Pair metadata and document lines into operations, in input order.

    Raises:
        ParseError: If a line cannot be framed.
    """
    pending: BulkOperation | None = None

    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        value = _decode_line(line, line_number)

        if pending is None:
            operation = _metadata_to_operation(value, line_number)
            if operation.op is BulkOpType.DELETE:
                yield operation
            else:
                pending = operation
        else:
            yield pending.model_copy(update={"document": value})
            pending = None

    if pending is not None:
        # Metadata line at end of body with no document line.
        yield pending.model_copy(update={"document": {}})


def execute_operation(
    operation: BulkOperation,
    default_index: str | None,
    transport: TransportClient,
    doc_type: str,
) -> BulkItemResult:
    """Run one operation against the transport and describe the outcome.

    Never raises: validation and transport failures become error items.
    """
    op = operation.op.value
    try:
        index = operation.index or default_index
        if not index:
            raise ValidationError("index is missing")

        if operation.op in (BulkOpType.INDEX, BulkOpType.CREATE):
            doc_id = operation.id or str(uuid.uuid4())
            transport.insert(index, doc_type, doc_id, operation.document or {})
            return BulkItemSuccess(op=op, index=index, id=doc_id, result="created", status=201)

        if not operation.id:
            raise ValidationError(f"Document ID is required for {op}")
        if operation.op is BulkOpType.UPDATE:
            transport.update(index, doc_type, operation.id, operation.document or {})
            return BulkItemSuccess(op=op, index=index, id=operation.id, result="updated", status=200)
        transport.delete(index, doc_type, operation.id)
        return BulkItemSuccess(op=op, index=index, id=operation.id, result="deleted", status=200)
    except BridgeError as e:
        logger.info("Bulk %s item failed: %s", op, e.reason)
        return BulkItemError(op=op, type=e.type, reason=e.reason)
    except Exception as e:
        logger.warning("Bulk %s item failed unexpectedly", op, exc_info=True)
        return BulkItemError(op=op, type=decamelize(type(e).__name__), reason=str(e))


class BulkProcessor:
    """Executes bulk bodies against a transport, one item at a time.

    Items are executed strictly in input order and results are reported in
    the same order; there is no parallelism across items.

    Args:
        transport: Backend transport used for every item.
        doc_type: Fixed backend document type.
    """

    def __init__(self, transport: TransportClient, doc_type: str) -> None:
        self._transport = transport
        self._doc_type = doc_type

    def process(self, body: bytes | str, default_index: str | None = None) -> BulkBatchResult:
        """Parse and execute a bulk body.

        Framing is validated for the whole body before any item executes.

        Args:
            body: Raw NDJSON request body.
            default_index: Index from the URL path, used when a record has no ``_index``.

        Returns:
            Ordered per-item results.

        Raises:
            ParseError: If the body cannot be framed into records.
        """
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(f"Failed to parse bulk request: {e}") from e

        start = time.monotonic()
        operations = list(parse_operations(_split_lines(body)))
        items = [
            execute_operation(operation, default_index, self._transport, self._doc_type)
            for operation in operations
        ]
        took_ms = int((time.monotonic() - start) * 1000)

        result = BulkBatchResult(took=took_ms, items=items)
        logger.debug("Bulk request: %d items, errors=%s", len(items), result.has_errors)
        return result
