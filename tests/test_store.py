"""Tests for the in-memory session store's merge semantics."""

import threading

from verifyhub.store import SessionStore


class TestSessionStore:

    def test_get_unknown_is_none(self):
        assert SessionStore().get("nope") is None

    def test_upsert_creates_then_merges(self):
        store = SessionStore()
        store.upsert("s1", {"status": "pending", "dob": None, "refCode": "VHC-ABCDEF"})
        merged = store.upsert("s1", {"status": "passed"})

        assert merged == {"status": "passed", "dob": None, "refCode": "VHC-ABCDEF"}
        assert store.get("s1") == merged

    def test_merge_only_touches_existing_records(self):
        store = SessionStore()
        assert store.merge("ghost", {"status": "passed"}) is None
        assert "ghost" not in store
        assert len(store) == 0

    def test_merge_keeps_fields_not_in_changes(self):
        store = SessionStore()
        store.upsert("s1", {"status": "failed", "dob": "2000-01-01", "age": 24})
        store.merge("s1", {"status": "passed"})
        assert store.get("s1") == {"status": "passed", "dob": "2000-01-01", "age": 24}

    def test_returned_records_are_copies(self):
        store = SessionStore()
        store.upsert("s1", {"status": "pending"})
        store.get("s1")["status"] = "passed"
        for _, record in store.all():
            record["status"] = "failed"
        assert store.get("s1")["status"] == "pending"

    def test_all_enumerates_every_record(self):
        store = SessionStore()
        for i in range(3):
            store.upsert(f"s{i}", {"n": i})
        assert sorted(store.all()) == [("s0", {"n": 0}), ("s1", {"n": 1}), ("s2", {"n": 2})]

    def test_concurrent_merges_keep_every_field(self):
        """Each thread writes its own key into the same record; none may be lost."""
        store = SessionStore()
        store.upsert("s1", {})

        def worker(i):
            for j in range(50):
                store.merge("s1", {f"t{i}_{j}": j})

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store.get("s1")) == 8 * 50
