"""
Covenant Bot - Store Tests
==========================

Tests for the JSON document store to ensure data integrity.
"""

import json

import pytest

from src.core.database import JsonDocument, Store, _safe_json_loads


class TestJsonDocument:
    """Tests for whole-document persistence."""

    def test_missing_file_loads_empty(self, tmp_path):
        doc = JsonDocument("test", tmp_path / "missing.json")
        assert doc.read() == {}

    def test_mutate_writes_pretty_json(self, tmp_path):
        path = tmp_path / "doc.json"
        doc = JsonDocument("test", path)

        with doc.mutate() as data:
            data["1"] = {"value": 1}

        body = path.read_text(encoding="utf-8")
        assert json.loads(body) == {"1": {"value": 1}}
        assert "\n  " in body

    def test_failed_block_rolls_back(self, tmp_path):
        path = tmp_path / "doc.json"
        doc = JsonDocument("test", path)
        with doc.mutate() as data:
            data["keep"] = 1

        with pytest.raises(RuntimeError):
            with doc.mutate() as data:
                data["drop"] = 2
                raise RuntimeError("boom")

        assert doc.read() == {"keep": 1}
        assert json.loads(path.read_text(encoding="utf-8")) == {"keep": 1}

    def test_read_returns_snapshot(self):
        doc = JsonDocument("test")
        with doc.mutate() as data:
            data["a"] = {"list": [1]}

        snapshot = doc.read()
        snapshot["a"]["list"].append(2)
        assert doc.get("a") == {"list": [1]}

    def test_no_temp_files_left_behind(self, tmp_path):
        doc = JsonDocument("test", tmp_path / "doc.json")
        with doc.mutate() as data:
            data["x"] = 1
        assert [p.name for p in tmp_path.iterdir()] == ["doc.json"]

    def test_corrupt_file_loads_empty(self, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonDocument("test", path).read() == {}

    def test_safe_json_loads_rejects_non_object(self):
        assert _safe_json_loads("[1, 2]", "test") == {}
        assert _safe_json_loads("", "test") == {}
        assert _safe_json_loads('{"a": 1}', "test") == {"a": 1}


class TestStorePersistence:
    """Tests that a reloaded store sees what was written."""

    def test_reload_keeps_all_documents(self, tmp_path):
        data_dir = tmp_path / "data"
        store = Store(data_dir)
        store.append_warning(1, 9, "spam", 1000, "2024-01-01T00:00:01.000Z")
        store.create_marriage(1, 2, "2024-01-01T00:00:00.000Z")
        store.add_proposal(3, 4, 5, 2000)
        store.add_mute(6, 5, 9, "noise", 10, 3000)

        reloaded = Store(data_dir)
        assert reloaded.get_warning_record(1)["count"] == 1
        assert reloaded.get_marriage(2)["spouse"] == "1"
        assert reloaded.find_proposal_involving(4) is not None
        assert reloaded.get_mute(6)["unmuteTime"] == 3000 + 10 * 60 * 1000

    def test_file_names(self, disk_store):
        disk_store.append_warning(1, 9, "spam", 1000, "2024-01-01T00:00:01.000Z")
        disk_store.add_mute(6, 5, 9, "noise", 10, 3000)
        names = {p.name for p in disk_store.data_dir.iterdir()}
        assert {"warnings.json", "muted_members.json"} <= names

    def test_memory_store_writes_nothing(self, store):
        store.append_warning(1, 9, "spam", 1000, "2024-01-01T00:00:01.000Z")
        assert store.data_dir is None

    def test_transaction_is_reentrant(self, store):
        with store.transaction():
            with store.transaction():
                store.create_marriage(1, 2, "2024-01-01T00:00:00.000Z")
        assert store.is_married(1) and store.is_married(2)


class TestWarningDocument:
    """Tests for warning record operations."""

    def test_empty_record_not_persisted(self, store):
        record = store.get_warning_record(42)
        assert record == {"count": 0, "warnings": [], "lastWarning": None}
        assert "42" not in store.warnings

    def test_count_matches_list(self, store):
        for i in range(4):
            store.append_warning(1, 9, f"r{i}", 1000 + i, "2024-01-01T00:00:00.000Z")
        record = store.get_warning_record(1)
        assert record["count"] == len(record["warnings"]) == 4

    def test_colliding_ids_are_bumped(self, store):
        first, _ = store.append_warning(1, 9, "a", 5000, "2024-01-01T00:00:05.000Z")
        second, _ = store.append_warning(1, 9, "b", 5000, "2024-01-01T00:00:05.000Z")
        assert first["id"] == 5000
        assert second["id"] == 5001

    def test_remove_unknown_id_returns_none(self, store):
        store.append_warning(1, 9, "a", 5000, "2024-01-01T00:00:05.000Z")
        assert store.remove_warning(1, 12345) is None
        assert store.get_warning_record(1)["count"] == 1

    def test_clear_without_record(self, store):
        assert store.clear_warnings(77) == 0


class TestMuteDocument:
    """Tests for mute record operations."""

    def test_expired_boundary_is_inclusive(self, store):
        record = store.add_mute(1, 5, 9, "r", 1, 0)
        assert store.get_expired_mutes(record["unmuteTime"] - 1) == []
        assert [uid for uid, _ in store.get_expired_mutes(record["unmuteTime"])] == ["1"]

    def test_remove_mute(self, store):
        store.add_mute(1, 5, 9, "r", 1, 0)
        assert store.remove_mute(1) is True
        assert store.remove_mute(1) is False
        assert store.count_active_mutes() == 0

    def test_remove_mute_if_ignores_replaced_record(self, store):
        old = store.add_mute(1, 5, 9, "r", 1, 0)
        store.add_mute(1, 5, 9, "again", 5, 1000)

        assert store.is_current_mute(1, old) is False
        assert store.remove_mute_if(1, old) is False
        assert store.get_mute(1)["reason"] == "again"

    def test_remove_mute_if_matching_record(self, store):
        record = store.add_mute(1, 5, 9, "r", 1, 0)
        assert store.remove_mute_if(1, record) is True
        assert store.remove_mute_if(1, record) is False


class TestPendingDocument:
    """Tests for proposal and divorce request operations."""

    def test_proposal_id_format(self, store):
        proposal_id, record = store.add_proposal(10, 20, 5, 1234)
        assert proposal_id == "10_20_1234"
        assert record == {"proposer": "10", "target": "20", "timestamp": 1234, "guildId": "5"}

    def test_expire_requests_uses_strict_cutoff(self, store):
        store.add_proposal(10, 20, 5, 1000)
        store.add_divorce_request(30, 40, 5, 1000)
        assert store.expire_requests(1000) == ([], [])
        assert store.expire_requests(1001) == (["10_20_1000"], ["30_40_1000"])

    def test_find_matches_either_role(self, store):
        store.add_divorce_request(30, 40, 5, 1000)
        assert store.find_divorce_involving(40) is not None
        assert store.find_divorce_involving(99) is None
