import pytest

from document_store.delete_document import delete_document_records
from document_store.storage_sqlite import SQLiteStore


def test_save_document_appends_snapshots(store):
    store.save_document("doc-1", "Tech Pack", "v1", "text", "user-1")
    store.save_document("doc-1", "Tech Pack", "v2", "text", "user-1")

    documents = store.get_documents_by_id("doc-1")
    assert [d.content for d in documents] == ["v1", "v2"]
    assert store.get_latest_document("doc-1").content == "v2"
    assert store.get_latest_document("missing") is None


def test_load_versions_indexes_snapshots(store):
    for content in ("a", "b", "c"):
        store.save_document("doc-1", "Tech Pack", content, "text", "user-1")

    versions = store.load_versions("doc-1")
    assert len(versions) == 3
    assert versions.get(2).content == "c"
    assert versions.diff_pair(1) == ("a", "b")


def test_list_documents_groups_versions_by_owner(store):
    store.save_document("doc-1", "First", "a", "text", "user-1")
    store.save_document("doc-1", "First", "b", "text", "user-1")
    store.save_document("doc-2", "Second", "c", "text", "user-2")

    rows = store.list_documents(owner_id="user-1")
    assert [(r["document_id"], r["version_count"]) for r in rows] == [("doc-1", 2)]
    assert len(store.list_documents()) == 2


def test_save_document_rejects_missing_owner(store):
    with pytest.raises(ValueError):
        store.save_document("doc-1", "Tech Pack", "a", "text", "")


def test_messages_keep_insertion_order(store):
    store.insert_message("chat-1", "assistant", "welcome")
    store.insert_message("chat-1", "user", "hi")
    store.insert_message("chat-2", "user", "other")

    messages = store.get_messages_by_chat_id("chat-1")
    assert [(m.role, m.content) for m in messages] == [("assistant", "welcome"), ("user", "hi")]


def test_suggestions_round_trip(store):
    suggestion_id = store.save_suggestion("doc-1", "FABRIC", "Cotton poplin", "More precise fabric")
    suggestions = store.get_suggestions_by_document_id("doc-1")
    assert [s["suggestion_id"] for s in suggestions] == [suggestion_id]
    assert suggestions[0]["suggested_text"] == "Cotton poplin"


def test_delete_document_records(store):
    store.save_document("doc-1", "Tech Pack", "a", "text", "user-1")
    store.save_document("doc-1", "Tech Pack", "b", "text", "user-1")
    store.save_suggestion("doc-1", "a", "b")
    store.insert_message("chat-1", "user", "hi")

    deleted = delete_document_records(store.db_path, "doc-1", chat_id="chat-1")

    assert deleted == {"suggestions": 1, "messages": 1, "documents": 2}
    assert store.get_documents_by_id("doc-1") == []


def test_delete_document_records_missing_db(tmp_path):
    with pytest.raises(FileNotFoundError):
        delete_document_records(str(tmp_path / "missing.db"), "doc-1")


def test_ensure_schema_is_idempotent(tmp_path):
    store = SQLiteStore(tmp_path / "nested" / "techpacks.db")
    store.ensure_schema()
    store.ensure_schema()
    assert store.list_documents() == []
