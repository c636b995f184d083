"""Tests for the Vespa to OpenSearch response translator."""

from __future__ import annotations

import json
from typing import Any

import pytest

from vespabridge.core.translator import to_count_response, to_search_response, to_search_result, total_count


class TestSearchResponse:
    def test_hits_reshaped(self, sample_envelope: dict[str, Any]) -> None:
        body = to_search_response(sample_envelope, "books")
        assert body["timed_out"] is False
        assert body["took"] == 4
        assert body["hits"]["total"] == {"value": 2, "relation": "eq"}
        assert body["hits"]["max_score"] == 1.0
        assert body["hits"]["hits"][0] == {
            "_index": "books",
            "_id": "id:books:doc::1",
            "_score": 0.83,
            "_source": {"title": "Dune", "year": 1965},
        }

    def test_hit_order_preserved(self, sample_envelope: dict[str, Any]) -> None:
        result = to_search_result(sample_envelope)
        assert [hit.id for hit in result.hits] == ["id:books:doc::1", "id:books:doc::2"]
        assert result.hits[0].index == "default"

    def test_shards_placeholder(self, sample_envelope: dict[str, Any]) -> None:
        shards = to_search_response(sample_envelope)["_shards"]
        assert shards == {"total": 1, "successful": 1, "skipped": 0, "failed": 0}

    def test_no_root(self) -> None:
        body = to_search_response({})
        assert body["hits"]["total"]["value"] == 0
        assert body["hits"]["hits"] == []

    def test_none_envelope(self) -> None:
        assert to_search_response(None)["hits"]["hits"] == []

    def test_no_children(self) -> None:
        body = to_search_response({"root": {"coverage": {"documents": 3}}})
        assert body["hits"]["total"]["value"] == 3
        assert body["hits"]["hits"] == []

    def test_malformed_children_skipped(self) -> None:
        body = to_search_response({"root": {"children": ["junk", {"id": "x", "relevance": "n/a"}]}})
        assert len(body["hits"]["hits"]) == 1
        assert body["hits"]["hits"][0]["_score"] == 1.0
        assert body["hits"]["hits"][0]["_source"] is None


class TestCounts:
    def test_numeric_string_documents(self) -> None:
        assert total_count({"root": {"coverage": {"documents": "17"}}}) == 17

    def test_unparseable_documents(self) -> None:
        assert total_count({"root": {"coverage": {"documents": "many"}}}) == 0

    @pytest.mark.parametrize("raw", ["NaN", "Infinity", "-Infinity", "1e400"])
    def test_non_finite_numbers_degrade(self, raw: str) -> None:
        envelope = json.loads(
            '{"timing": {"searchtime": ' + raw + '}, '
            '"root": {"coverage": {"documents": ' + raw + '}, '
            '"children": [{"id": "x", "relevance": ' + raw + '}]}}'
        )
        result = to_search_result(envelope)
        assert result.total_count == 0
        assert result.took == 0
        assert result.hits[0].score == 1.0
        json.dumps(to_search_response(envelope), allow_nan=False)

    def test_count_response(self, sample_envelope: dict[str, Any]) -> None:
        body = to_count_response(sample_envelope)
        assert body["count"] == 2
        assert body["_shards"]["successful"] == 1
