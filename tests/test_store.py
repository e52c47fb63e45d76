"""Unit tests for embedding stores."""

from __future__ import annotations

import json

import pytest

from faceverify.interfaces import EmbeddingStore
from faceverify.store import InMemoryEmbeddingStore, JsonEmbeddingStore


@pytest.fixture
def store():
    return InMemoryEmbeddingStore()


def test_store_satisfies_protocol(store, tmp_path):
    assert isinstance(store, EmbeddingStore)
    assert isinstance(JsonEmbeddingStore(tmp_path / "e.json"), EmbeddingStore)


def test_put_and_get(store):
    confirmation = store.put("alice", [0.1, 0.2, 0.3])

    assert confirmation["user_id"] == "alice"
    assert confirmation["created_at"] == confirmation["updated_at"]
    assert store.get("alice") == [0.1, 0.2, 0.3]
    assert len(store) == 1


def test_get_missing(store):
    assert store.get("nobody") is None


def test_get_returns_copy(store):
    """Test that mutating a returned embedding does not touch the store."""
    store.put("alice", [0.1, 0.2])

    store.get("alice").append(9.9)

    assert store.get("alice") == [0.1, 0.2]


def test_update_keeps_created_at(store):
    first = store.put("alice", [0.1])
    second = store.put("alice", [0.2])

    assert second["created_at"] == first["created_at"]
    assert second["updated_at"] >= first["updated_at"]
    assert store.get("alice") == [0.2]


def test_delete(store):
    store.put("alice", [0.1])

    assert store.delete("alice")
    assert not store.delete("alice")
    assert store.get("alice") is None


def test_list_users(store):
    store.put("alice", [0.1])
    store.put("bob", [0.2])

    users = store.list_users()

    assert {u["user_id"] for u in users} == {"alice", "bob"}
    assert users[0]["created_at"] >= users[1]["created_at"]


def test_json_store_persists(tmp_path):
    """Test that a reopened JSON store sees earlier writes."""
    path = tmp_path / "data" / "embeddings.json"

    store = JsonEmbeddingStore(path)
    store.put("alice", [0.5, 0.25])

    assert path.exists()
    reopened = JsonEmbeddingStore(path)
    assert reopened.get("alice") == [0.5, 0.25]


def test_json_store_delete_persists(tmp_path):
    path = tmp_path / "embeddings.json"
    store = JsonEmbeddingStore(path)
    store.put("alice", [0.5])

    store.delete("alice")

    assert JsonEmbeddingStore(path).get("alice") is None
    assert json.loads(path.read_text()) == {}


def test_json_store_rejects_non_object(tmp_path):
    path = tmp_path / "embeddings.json"
    path.write_text("[1, 2, 3]")

    with pytest.raises(ValueError):
        JsonEmbeddingStore(path)
