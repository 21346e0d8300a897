"""Tests for the relational progress store."""
from unittest.mock import patch

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from lingodeck.exceptions import StorageError
from lingodeck.models.models import LearningSessionRecord
from lingodeck.services.relational_store import RelationalProgressStore


@pytest.fixture
async def relational_store(relational_store_factory):
    """An opened relational store."""
    store = relational_store_factory()
    await store.open()
    await store.ensure_schema()
    yield store
    await store.close()


@pytest.mark.asyncio
async def test_schema_has_table_and_indexes(relational_store: RelationalProgressStore) -> None:
    """Test that ensure_schema creates the sessions table with its indexes."""
    inspector = inspect(relational_store.engine)

    assert "learning_sessions" in inspector.get_table_names()
    columns = {column["name"] for column in inspector.get_columns("learning_sessions")}
    assert columns == {"id", "word", "translation", "correct", "timestamp"}
    indexes = {index["name"] for index in inspector.get_indexes("learning_sessions")}
    assert {"idx_word", "idx_timestamp"} <= indexes


@pytest.mark.asyncio
async def test_ensure_schema_twice_keeps_single_table(relational_store: RelationalProgressStore) -> None:
    """Test that declaring the schema again adds nothing and drops nothing."""
    await relational_store.record_attempt("สวัสดี", "Hello", True)

    await relational_store.ensure_schema()

    inspector = inspect(relational_store.engine)
    assert inspector.get_table_names().count("learning_sessions") == 1
    assert len(await relational_store.list_recent(10)) == 1


@pytest.mark.asyncio
async def test_ids_autoincrement(relational_store: RelationalProgressStore) -> None:
    """Test that ids are assigned by the database in insertion order."""
    first = await relational_store.record_attempt("สวัสดี", "Hello", True)
    second = await relational_store.record_attempt("ขอบคุณ", "Thank you", False)

    assert second.id > first.id


@pytest.mark.asyncio
async def test_record_uses_store_clock(relational_store: RelationalProgressStore, clock) -> None:
    """Test that the timestamp is set by the store."""
    expected = clock.now
    session = await relational_store.record_attempt("สวัสดี", "Hello", True)

    assert session.timestamp == expected


@pytest.mark.asyncio
async def test_read_failure_returns_empty(relational_store: RelationalProgressStore) -> None:
    """Test that database errors on reads degrade to empty results."""
    await relational_store.record_attempt("สวัสดี", "Hello", True)
    error = OperationalError("SELECT", {}, Exception("disk I/O error"))

    with patch.object(relational_store, "session_factory", side_effect=error):
        assert await relational_store.list_recent(10) == []
        assert await relational_store.list_word_stats() == []


@pytest.mark.asyncio
async def test_write_failure_propagates(relational_store: RelationalProgressStore) -> None:
    """Test that database errors on writes surface as StorageError."""
    error = OperationalError("INSERT", {}, Exception("database is locked"))

    with patch.object(relational_store, "session_factory", side_effect=error):
        with pytest.raises(StorageError):
            await relational_store.record_attempt("สวัสดี", "Hello", True)
        with pytest.raises(StorageError):
            await relational_store.clear_all()

    assert await relational_store.list_recent(10) == []


@pytest.mark.asyncio
async def test_clear_all_keeps_table(relational_store: RelationalProgressStore) -> None:
    """Test that clearing deletes rows but not the table."""
    await relational_store.record_attempt("สวัสดี", "Hello", True)

    await relational_store.clear_all()

    with relational_store.session_factory() as db:
        assert db.query(LearningSessionRecord).count() == 0
    assert "learning_sessions" in inspect(relational_store.engine).get_table_names()
