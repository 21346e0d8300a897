"""Tests for the key-value progress store."""
import asyncio
import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest

from lingodeck.exceptions import StorageError
from lingodeck.services.keyvalue_store import (
    SESSIONS_KEY,
    FileKeyValueStorage,
    KeyValueProgressStore,
)


@pytest.fixture
async def kv_store(keyvalue_store_factory):
    """An opened key-value store."""
    store = keyvalue_store_factory()
    await store.open()
    await store.ensure_schema()
    yield store
    await store.close()


def blob_path(store: KeyValueProgressStore):
    return store.storage.directory / f"{SESSIONS_KEY}.json"


@pytest.mark.asyncio
async def test_blob_layout(kv_store: KeyValueProgressStore) -> None:
    """Test that sessions are stored as one JSON array under a single key."""
    session = await kv_store.record_attempt("สวัสดี", "Hello", True)

    records = json.loads(blob_path(kv_store).read_text(encoding="utf-8"))

    assert records == [
        {
            "id": session.id,
            "word": "สวัสดี",
            "translation": "Hello",
            "correct": True,
            "timestamp": session.timestamp.isoformat(),
        }
    ]


@pytest.mark.asyncio
async def test_id_derived_from_milliseconds(kv_store: KeyValueProgressStore, clock) -> None:
    """Test that the id is the creation time in milliseconds."""
    expected = int(clock.now.timestamp() * 1000)

    session = await kv_store.record_attempt("สวัสดี", "Hello", True)

    assert session.id == expected


@pytest.mark.asyncio
async def test_ids_unique_within_same_millisecond(tmp_path) -> None:
    """Test that writes sharing a millisecond still get distinct ids."""
    frozen = datetime(2024, 1, 1, tzinfo=UTC)
    store = KeyValueProgressStore(FileKeyValueStorage(tmp_path), clock=lambda: frozen)
    await store.open()

    sessions = [await store.record_attempt("สวัสดี", "Hello", True) for _ in range(3)]

    assert len({session.id for session in sessions}) == 3
    recent = await store.list_recent(3)
    assert [s.id for s in recent] == [s.id for s in reversed(sessions)]


@pytest.mark.asyncio
async def test_clear_all_removes_key(kv_store: KeyValueProgressStore) -> None:
    """Test that clearing deletes the blob entirely."""
    await kv_store.record_attempt("สวัสดี", "Hello", True)
    assert blob_path(kv_store).exists()

    await kv_store.clear_all()

    assert not blob_path(kv_store).exists()
    await kv_store.clear_all()


@pytest.mark.asyncio
async def test_corrupt_blob_reads_empty(kv_store: KeyValueProgressStore) -> None:
    """Test that unreadable state degrades reads to empty results."""
    blob_path(kv_store).write_text("{not json", encoding="utf-8")

    assert await kv_store.list_recent(20) == []
    assert await kv_store.list_word_stats() == []


@pytest.mark.asyncio
async def test_corrupt_blob_write_propagates(kv_store: KeyValueProgressStore) -> None:
    """Test that writes over unreadable state fail without replacing it."""
    blob_path(kv_store).write_text('{"word": "x"}', encoding="utf-8")

    with pytest.raises(StorageError):
        await kv_store.record_attempt("สวัสดี", "Hello", True)

    assert blob_path(kv_store).read_text(encoding="utf-8") == '{"word": "x"}'


@pytest.mark.asyncio
async def test_write_failure_propagates(kv_store: KeyValueProgressStore) -> None:
    """Test that I/O errors while writing surface as StorageError."""
    await kv_store.record_attempt("สวัสดี", "Hello", True)

    with patch.object(kv_store.storage, "set_item", AsyncMock(side_effect=OSError("disk full"))):
        with pytest.raises(StorageError):
            await kv_store.record_attempt("ขอบคุณ", "Thank you", True)

    recent = await kv_store.list_recent(20)
    assert [s.word for s in recent] == ["สวัสดี"]


@pytest.mark.asyncio
async def test_concurrent_writes_are_not_lost(kv_store: KeyValueProgressStore) -> None:
    """Test that interleaved record_attempt calls all persist."""
    original_get = kv_store.storage.get_item

    async def slow_get(key):
        value = await original_get(key)
        await asyncio.sleep(0)
        return value

    with patch.object(kv_store.storage, "get_item", side_effect=slow_get):
        await asyncio.gather(
            *(kv_store.record_attempt(f"word{i}", "t", True) for i in range(5))
        )

    assert len(await kv_store.list_recent(20)) == 5


@pytest.mark.asyncio
async def test_last_practiced_keeps_latest(kv_store: KeyValueProgressStore) -> None:
    """Test that an older session does not move last_practiced backwards."""
    await kv_store.record_attempt("สวัสดี", "Hello", True)
    latest = await kv_store.record_attempt("สวัสดี", "Hello", False)
    records = json.loads(blob_path(kv_store).read_text(encoding="utf-8"))
    records.append({**records[0], "id": latest.id + 1})
    blob_path(kv_store).write_text(json.dumps(records, ensure_ascii=False), encoding="utf-8")

    stats = await kv_store.list_word_stats()

    assert stats[0].total_attempts == 3
    assert stats[0].last_practiced == latest.timestamp


@pytest.mark.asyncio
async def test_storage_key_roundtrip(tmp_path) -> None:
    """Test the file-backed key-value storage primitives."""
    storage = FileKeyValueStorage(tmp_path / "kv")
    await storage.open()

    assert await storage.get_item("missing") is None
    await storage.set_item("greeting", "สวัสดี")
    assert await storage.get_item("greeting") == "สวัสดี"
    await storage.remove_item("greeting")
    assert await storage.get_item("greeting") is None
