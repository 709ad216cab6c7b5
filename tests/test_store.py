"""Tests for record stores and the record schema."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from unigalaxy.conversion import ConversionPass, discover_sources
from unigalaxy.core.errors import ComponentNotFoundError
from unigalaxy.core.memory import InMemoryRecordStore
from unigalaxy.core.models import ComponentRecord, CorpusIndexEntry, PerformanceMetrics, normalize_platform
from unigalaxy.core.rules import RuleTable
from unigalaxy.core.store import JsonRecordStore

T0 = datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture
def written_store(tmp_path, snippet_tree) -> JsonRecordStore:
    report = ConversionPass(RuleTable.default(), now=T0).run(discover_sources(snippet_tree))
    store = JsonRecordStore(tmp_path / "data")
    store.write_report(report)
    return store


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class TestRecordSchema:
    def test_normalize_platform(self):
        assert normalize_platform("MP-WEIXIN") == "mp_weixin"
        assert normalize_platform(" app-plus ") == "app_plus"
        assert normalize_platform("h5") == "h5"

    def test_dict_round_trip(self, make_record):
        record = make_record(tags=["a", "b"])
        assert ComponentRecord.from_dict(record.to_dict()) == record

    def test_from_dict_normalizes_platform_keys(self):
        record = ComponentRecord.from_dict(
            {
                "id": "x_y",
                "platforms": {"MP-WEIXIN": True, "h5": False},
                "compatibility": {"mp-weixin": {"supported": True, "issues": ["i"]}},
            }
        )
        assert record.platforms == {"mp_weixin": True, "h5": False}
        assert record.compatibility["mp_weixin"].issues == ["i"]

    def test_from_dict_dedupes_tags(self):
        record = ComponentRecord.from_dict({"id": "x", "tags": ["a", "b", "a"]})
        assert record.tags == ["a", "b"]

    def test_invalid_complexity_means_no_performance(self):
        assert PerformanceMetrics.from_dict({"complexity": "extreme", "bundle_size": 3}) is None
        record = ComponentRecord.from_dict({"id": "x", "performance": {"complexity": "bogus"}})
        assert record.complexity is None

    def test_stub_keeps_identity_only(self):
        stub = ComponentRecord.stub(CorpusIndexEntry("a_b", "b", "buttons", "a"))
        assert (stub.id, stub.name, stub.category, stub.author) == ("a_b", "b", "buttons", "a")
        assert stub.performance is None
        assert stub.tags == []

    def test_event_descriptor_serialization(self, make_record):
        event = make_record().events[0].to_dict()
        assert event == {"name": "click", "description": "Tap handler", "parameters": ["event"]}


# ---------------------------------------------------------------------------
# JsonRecordStore
# ---------------------------------------------------------------------------


class TestJsonRecordStore:
    def test_layout(self, written_store):
        root = written_store.root
        assert (root / "metadata" / "component-index.json").is_file()
        assert (root / "components" / "buttons" / "bob_frost.json").is_file()
        index = json.loads((root / "metadata" / "component-index.json").read_text())
        assert index["total"] == 3
        assert index["categories"] == {"buttons": 2, "loaders": 1}
        authors = json.loads((root / "metadata" / "authors.json").read_text())
        assert authors == {"total": 3, "authors": ["alice", "bob", "carol"]}
        tags = json.loads((root / "metadata" / "tags.json").read_text())
        assert tags["tags"] == sorted(tags["tags"])

    def test_reopen_and_load(self, written_store):
        store = JsonRecordStore(written_store.root)
        assert [e.id for e in store.index()] == ["alice_glow-button", "bob_frost", "carol_spinner"]
        record = store.load("carol_spinner")
        assert record.category == "loaders"
        assert record.complexity == "medium"
        assert record.created_at == T0.isoformat()

    def test_unknown_id(self, written_store):
        with pytest.raises(ComponentNotFoundError) as exc:
            written_store.load("nobody_nothing")
        assert str(exc.value) == "Component nobody_nothing not found"
        assert written_store.get("nobody_nothing") is None

    def test_unreadable_record(self, written_store):
        (written_store.root / "components" / "buttons" / "bob_frost.json").write_text("{not json")
        store = JsonRecordStore(written_store.root)
        with pytest.raises(ComponentNotFoundError):
            store.load("bob_frost")

    def test_partial_report_merges_into_index(self, written_store, snippet_tree):
        loaders = discover_sources(snippet_tree, ["Loaders"])
        store = JsonRecordStore(written_store.root)
        store.write_report(ConversionPass(RuleTable.default(), previous=store.get).run(loaders))

        reopened = JsonRecordStore(written_store.root)
        assert [e.id for e in reopened.index()] == ["alice_glow-button", "bob_frost", "carol_spinner"]
        index = json.loads(reopened.index_path.read_text())
        assert index["categories"] == {"buttons": 2, "loaders": 1}
        tags = json.loads((reopened.root / "metadata" / "tags.json").read_text())["tags"]
        assert {"glow", "neon"} <= set(tags)

    def test_merge_skips_tags_of_unreadable_kept_record(self, written_store, snippet_tree):
        (written_store.root / "components" / "buttons" / "alice_glow-button.json").write_text("{")
        store = JsonRecordStore(written_store.root)
        store.write_report(
            ConversionPass(RuleTable.default()).run(discover_sources(snippet_tree, ["Loaders"]))
        )
        assert [e.id for e in store.index()] == ["alice_glow-button", "bob_frost", "carol_spinner"]
        tags = json.loads((store.root / "metadata" / "tags.json").read_text())["tags"]
        assert "neon" not in tags

    def test_missing_index_is_empty(self, tmp_path):
        assert JsonRecordStore(tmp_path / "empty").index() == []

    def test_corrupt_index_is_empty(self, tmp_path):
        (tmp_path / "metadata").mkdir()
        (tmp_path / "metadata" / "component-index.json").write_text("[1, 2")
        assert JsonRecordStore(tmp_path).index() == []


# ---------------------------------------------------------------------------
# InMemoryRecordStore
# ---------------------------------------------------------------------------


class TestInMemoryRecordStore:
    def test_index_keeps_insertion_order(self, memory_store, corpus_records):
        assert [e.id for e in memory_store.index()] == [r.id for r in corpus_records]

    def test_replace_keeps_position(self, make_record):
        store = InMemoryRecordStore([make_record("a_x"), make_record("b_y")])
        store.add(make_record("a_x", tags=["new"]))
        assert [e.id for e in store.index()] == ["a_x", "b_y"]
        assert store.load("a_x").tags == ["new"]

    def test_broken_entry(self):
        store = InMemoryRecordStore()
        store.add_broken(CorpusIndexEntry("a_b", "b", "buttons", "a"))
        assert [e.id for e in store.index()] == ["a_b"]
        with pytest.raises(ComponentNotFoundError):
            store.load("a_b")
