import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import DocumentNotFoundError, DuplicateDocumentError, StoreUnavailableError
from app.core.store import matches_filters


class TestMatchesFilters:
    def test_equality_and_inequality(self):
        data = {"groupCode": "ABC123", "name": "x"}
        assert matches_filters(data, [("groupCode", "==", "ABC123")])
        assert not matches_filters(data, [("groupCode", "==", "ZZZ999")])
        assert matches_filters(data, [("groupCode", "!=", "ZZZ999")])

    def test_array_contains(self):
        data = {"members": ["a", "b"]}
        assert matches_filters(data, [("members", "array-contains", "a")])
        assert not matches_filters(data, [("members", "array-contains", "c")])

    def test_in(self):
        assert matches_filters({"occasion": "Birthday"}, [("occasion", "in", ["Birthday", "Wedding"])])

    def test_missing_field_never_matches(self):
        assert not matches_filters({}, [("groupCode", "!=", "ABC123")])

    def test_filters_are_anded(self):
        data = {"createdBy": "u1", "members": ["u1"]}
        assert matches_filters(data, [("createdBy", "==", "u1"), ("members", "array-contains", "u1")])
        assert not matches_filters(data, [("createdBy", "==", "u1"), ("members", "array-contains", "u2")])

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            matches_filters({"a": 1}, [("a", ">", 0)])


class TestSQLDocumentStore:
    def test_create_and_get(self, store):
        doc_id = store.create("groups", {"name": "Family", "members": ["u1"]})

        document = store.get("groups", doc_id)

        assert document["id"] == doc_id
        assert document["name"] == "Family"
        assert document["members"] == ["u1"]
        assert document["created_at"] is not None
        assert document["updated_at"] == document["created_at"]

    def test_writes_use_timezone_aware_timestamps(self, store, monkeypatch):
        written = []
        add = store.session.add

        def recording_add(row):
            written.append((row.created_at, row.updated_at))
            add(row)

        monkeypatch.setattr(store.session, "add", recording_add)

        doc_id = store.create("groups", {"name": "Family"})
        store.update("groups", doc_id, {"name": "Friends"})

        assert len(written) == 2
        for created_at, updated_at in written:
            assert created_at.tzinfo is not None
            assert updated_at.tzinfo is not None

    def test_get_missing_returns_none(self, store):
        assert store.get("groups", "missing") is None

    def test_get_is_scoped_to_collection(self, store):
        doc_id = store.create("groups", {"name": "Family"})
        assert store.get("notifications", doc_id) is None

    def test_query(self, store):
        store.create("groups", {"groupCode": "AAA111", "members": ["u1"]})
        store.create("groups", {"groupCode": "BBB222", "members": ["u1", "u2"]})
        store.create("notifications", {"members": ["u2"]})

        assert len(store.query("groups")) == 2
        assert [d["groupCode"] for d in store.query("groups", [("members", "array-contains", "u2")])] == ["BBB222"]
        assert store.query("groups", [("groupCode", "==", "CCC333")]) == []

    def test_query_equality_returns_only_exact_matches(self, store):
        store.create("groups", {"groupCode": "ABC123", "createdBy": "u1"})
        store.create("groups", {"groupCode": "ABC1234", "createdBy": "u1"})
        store.create("groups", {"groupCode": "abc123", "createdBy": "u2"})
        store.create("groups", {"name": "no code", "createdBy": "u1"})

        found = store.query("groups", [("groupCode", "==", "ABC123")])

        assert [d["groupCode"] for d in found] == ["ABC123"]
        assert len(store.query("groups", [("createdBy", "==", "u1")])) == 3

    def test_query_combines_equality_with_other_operators(self, store):
        store.create("groups", {"createdBy": "u1", "members": ["u1"], "maxMembers": 20})
        store.create("groups", {"createdBy": "u1", "members": ["u1", "u2"], "maxMembers": 5})

        found = store.query("groups", [("createdBy", "==", "u1"), ("members", "array-contains", "u2")])
        assert [d["maxMembers"] for d in found] == [5]

        # Non-string values are compared after loading
        assert [d["maxMembers"] for d in store.query("groups", [("maxMembers", "==", 20)])] == [20]

    def test_update_merges_and_refreshes_timestamp(self, store):
        doc_id = store.create("groups", {"name": "Family", "members": ["u1"]})
        before = store.get("groups", doc_id)

        store.update("groups", doc_id, {"members": ["u1", "u2"]})

        after = store.get("groups", doc_id)
        assert after["name"] == "Family"
        assert after["members"] == ["u1", "u2"]
        assert after["updated_at"] >= before["updated_at"]
        assert after["created_at"] == before["created_at"]

    def test_update_missing_raises(self, store):
        with pytest.raises(DocumentNotFoundError):
            store.update("groups", "missing", {"name": "x"})

    def test_unique_field_rejects_duplicates(self, store):
        store.create("groups", {"groupCode": "ABC123"}, unique_field="groupCode")

        with pytest.raises(DuplicateDocumentError):
            store.create("groups", {"groupCode": "ABC123"}, unique_field="groupCode")

        # The session stays usable after the rejected write
        assert len(store.query("groups")) == 1

    def test_unique_field_is_per_collection(self, store):
        store.create("groups", {"groupCode": "ABC123"}, unique_field="groupCode")
        store.create("archive", {"groupCode": "ABC123"}, unique_field="groupCode")

    def test_unique_field_requires_value(self, store):
        with pytest.raises(ValueError):
            store.create("groups", {"name": "x"}, unique_field="groupCode")

    def test_store_failures_are_wrapped(self, store, monkeypatch):
        def broken_exec(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(store.session, "exec", broken_exec)

        with pytest.raises(StoreUnavailableError):
            store.get("groups", "any")
        with pytest.raises(StoreUnavailableError):
            store.query("groups")
