"""Tests for NDJSON bulk parsing and execution."""

from __future__ import annotations

import json

import pytest

from vespabridge.core.bulk import BulkProcessor, execute_operation, parse_operations
from vespabridge.exceptions import ParseError
from vespabridge.models.bulk import BulkItemError, BulkItemSuccess, BulkOperation, BulkOpType
from vespabridge.transport.exceptions import QueryError


def ndjson(*lines: dict) -> str:
    return "\n".join(json.dumps(line) for line in lines) + "\n"


@pytest.fixture
def processor(transport) -> BulkProcessor:
    return BulkProcessor(transport, "doc")


# ── Framing ──────────────────────────────────────────────────────────────────


class TestParseOperations:
    def test_pairs_metadata_with_document(self) -> None:
        ops = list(parse_operations(['{"index":{"_index":"t","_id":"1"}}', '{"a":1}']))
        assert ops == [BulkOperation(op=BulkOpType.INDEX, index="t", id="1", document={"a": 1})]

    def test_delete_needs_no_document_line(self) -> None:
        ops = list(
            parse_operations(
                [
                    '{"delete":{"_index":"t","_id":"1"}}',
                    '{"index":{"_index":"t","_id":"2"}}',
                    '{"b":2}',
                ]
            )
        )
        assert [op.op for op in ops] == [BulkOpType.DELETE, BulkOpType.INDEX]
        assert ops[0].document is None
        assert ops[1].document == {"b": 2}

    def test_blank_line_between_metadata_and_document(self) -> None:
        ops = list(parse_operations(['{"index":{"_id":"1"}}', "", "   ", '{"a":1}', ""]))
        assert len(ops) == 1
        assert ops[0].document == {"a": 1}

    def test_blank_lines_do_not_shift_pairing(self) -> None:
        lines = ['{"delete":{"_id":"1"}}', "", '{"index":{"_id":"2"}}', '{"a":1}', "", '{"update":{"_id":"3"}}', '{"b":2}']
        ops = list(parse_operations(lines))
        assert [(op.op, op.id) for op in ops] == [
            (BulkOpType.DELETE, "1"),
            (BulkOpType.INDEX, "2"),
            (BulkOpType.UPDATE, "3"),
        ]
        assert ops[2].document == {"b": 2}

    def test_trailing_metadata_without_document(self) -> None:
        ops = list(parse_operations(['{"index":{"_id":"1"}}']))
        assert ops[0].document == {}

    def test_numeric_id_stringified(self) -> None:
        ops = list(parse_operations(['{"delete":{"_id":7}}']))
        assert ops[0].id == "7"

    def test_invalid_json_line(self) -> None:
        with pytest.raises(ParseError, match="line \\[2\\]"):
            list(parse_operations(['{"index":{}}', "{not json"]))

    def test_non_object_line(self) -> None:
        with pytest.raises(ParseError):
            list(parse_operations(["[1, 2]"]))

    def test_unknown_action(self) -> None:
        with pytest.raises(ParseError, match="unknown action \\[upsert\\]"):
            list(parse_operations(['{"upsert":{"_id":"1"}}']))

    def test_multiple_actions_on_one_line(self) -> None:
        with pytest.raises(ParseError):
            list(parse_operations(['{"index":{}, "delete":{}}']))


# ── Single-item execution ────────────────────────────────────────────────────


class TestExecuteOperation:
    def test_index_generates_missing_id(self, transport) -> None:
        result = execute_operation(BulkOperation(op=BulkOpType.INDEX, index="t", document={"a": 1}), None, transport, "doc")
        assert isinstance(result, BulkItemSuccess)
        assert result.id
        assert transport.documents[("t", "doc", result.id)] == {"a": 1}

    def test_url_index_is_fallback(self, transport) -> None:
        result = execute_operation(BulkOperation(op=BulkOpType.CREATE, id="1", document={}), "books", transport, "doc")
        assert isinstance(result, BulkItemSuccess)
        assert result.index == "books"
        assert result.status == 201

    def test_missing_index(self, transport) -> None:
        result = execute_operation(BulkOperation(op=BulkOpType.INDEX, id="1", document={}), None, transport, "doc")
        assert isinstance(result, BulkItemError)
        assert result.type == "validation_error"
        assert transport.calls == []

    def test_transport_failure_becomes_item_error(self, transport) -> None:
        transport.failure = QueryError("backend said no")
        result = execute_operation(BulkOperation(op=BulkOpType.DELETE, index="t", id="1"), None, transport, "doc")
        assert isinstance(result, BulkItemError)
        assert result.type == "query_error"
        assert result.reason == "backend said no"
        assert result.status == 400

    def test_unexpected_failure_becomes_item_error(self, transport, monkeypatch: pytest.MonkeyPatch) -> None:
        def _boom(*args: object) -> None:
            raise KeyError("fields")

        monkeypatch.setattr(transport, "update", _boom)
        result = execute_operation(BulkOperation(op=BulkOpType.UPDATE, index="t", id="1", document={}), None, transport, "doc")
        assert isinstance(result, BulkItemError)
        assert result.type == "key_error"


# ── Whole batches ────────────────────────────────────────────────────────────


class TestBulkProcessor:
    def test_single_index_record(self, processor: BulkProcessor) -> None:
        result = processor.process(ndjson({"index": {"_index": "t", "_id": "1"}}, {"a": 1}))
        body = result.to_opensearch()
        assert body["errors"] is False
        assert body["items"] == [
            {"index": {"_index": "t", "_id": "1", "_version": 1, "result": "created", "status": 201}}
        ]

    def test_delete_without_id(self, processor: BulkProcessor, transport) -> None:
        body = processor.process(ndjson({"delete": {"_index": "t"}})).to_opensearch()
        assert body["errors"] is True
        assert len(body["items"]) == 1
        item = body["items"][0]["delete"]
        assert item["status"] == 400
        assert item["error"]["type"] == "validation_error"
        assert "Document ID is required" in item["error"]["reason"]
        assert transport.calls == []

    def test_partial_failure_keeps_siblings(self, processor: BulkProcessor, transport) -> None:
        body = processor.process(
            ndjson(
                {"index": {"_index": "t", "_id": "1"}},
                {"a": 1},
                {"update": {"_index": "t"}},
                {"b": 2},
                {"delete": {"_index": "t", "_id": "1"}},
            )
        ).to_opensearch()

        assert body["errors"] is True
        assert list(body["items"][0]) == ["index"]
        assert "error" in body["items"][1]["update"]
        assert body["items"][2] == {"delete": {"_index": "t", "_id": "1", "_version": 1, "result": "deleted", "status": 200}}
        assert [call[0] for call in transport.calls] == ["insert", "delete"]

    def test_items_in_input_order(self, processor: BulkProcessor, transport) -> None:
        lines = []
        for i in range(5):
            lines.extend([{"create": {"_index": "t", "_id": str(i)}}, {"n": i}])
        body = processor.process(ndjson(*lines)).to_opensearch()
        assert [item["create"]["_id"] for item in body["items"]] == ["0", "1", "2", "3", "4"]
        assert [call[3] for call in transport.calls] == ["0", "1", "2", "3", "4"]

    def test_update_result(self, processor: BulkProcessor) -> None:
        body = processor.process(ndjson({"update": {"_index": "t", "_id": "9"}}, {"doc": {"a": 1}})).to_opensearch()
        assert body["items"][0]["update"]["result"] == "updated"
        assert body["items"][0]["update"]["status"] == 200

    def test_bytes_body_with_default_index(self, processor: BulkProcessor, transport) -> None:
        result = processor.process(ndjson({"index": {"_id": "1"}}, {"a": 1}).encode(), default_index="books")
        assert not result.has_errors
        assert ("books", "doc", "1") in transport.documents

    def test_framing_error_executes_nothing(self, processor: BulkProcessor, transport) -> None:
        body = ndjson({"index": {"_index": "t", "_id": "1"}}, {"a": 1}) + "{broken\n"
        with pytest.raises(ParseError):
            processor.process(body)
        assert transport.calls == []

    def test_invalid_utf8(self, processor: BulkProcessor) -> None:
        with pytest.raises(ParseError):
            processor.process(b"\xff\xfe{}")

    def test_empty_body(self, processor: BulkProcessor) -> None:
        body = processor.process("").to_opensearch()
        assert body["items"] == []
        assert body["errors"] is False

    def test_unicode_line_separators_inside_strings(self, processor: BulkProcessor, transport) -> None:
        document = {"a": "x\u2028y\u2029z\x85"}
        body = json.dumps({"index": {"_index": "t", "_id": "1"}}) + "\n" + json.dumps(document, ensure_ascii=False) + "\n"
        result = processor.process(body.encode("utf-8"))
        assert len(result.items) == 1
        assert not result.has_errors
        assert transport.documents[("t", "doc", "1")] == document

    def test_crlf_line_endings(self, processor: BulkProcessor, transport) -> None:
        body = '{"index":{"_index":"t","_id":"1"}}\r\n{"a":1}\r\n{"delete":{"_index":"t","_id":"2"}}\r\n'
        result = processor.process(body)
        assert [type(item) for item in result.items] == [BulkItemSuccess, BulkItemSuccess]
        assert transport.documents[("t", "doc", "1")] == {"a": 1}
