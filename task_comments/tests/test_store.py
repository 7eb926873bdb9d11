# tests/test_store.py
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from task_comments.models.comment import Comment
from task_comments.store.base import StoreError, build_store, parse_id
from task_comments.store.memory import InMemoryStore
from task_comments.store.sql import SQLAlchemyStore


def test_parse_id_normalizes_uuid():
    value = uuid.uuid4()
    assert parse_id(value.hex.upper()) == str(value)


@pytest.mark.parametrize("value", ["", "not-an-id", "507f1f77bcf86cd799439011"])
def test_parse_id_rejects_malformed(value):
    with pytest.raises(StoreError):
        parse_id(value)


def test_build_store_memory():
    assert isinstance(build_store("memory://"), InMemoryStore)


def test_build_store_sql(tmp_path):
    store = build_store(f"sqlite+aiosqlite:///{tmp_path / 'x.sqlite3'}")
    assert isinstance(store, SQLAlchemyStore)


@pytest.mark.asyncio
async def test_create_and_find_task(store):
    task = await store.create_task("Sample Task")
    assert task.title == "Sample Task"
    assert task.created_at.tzinfo is not None

    found = await store.find_task(task.id)
    assert found.id == task.id
    assert found.title == "Sample Task"


@pytest.mark.asyncio
async def test_find_task_missing(store):
    assert await store.find_task(str(uuid.uuid4())) is None


@pytest.mark.asyncio
async def test_comment_round_trip(store):
    task = await store.create_task("Sample Task")
    comment = await store.create_comment(task.id, "First")
    assert comment.task_id == task.id

    updated = await store.update_comment(comment.id, "Second")
    assert updated.text == "Second"
    assert updated.created_at == comment.created_at
    assert updated.task_id == task.id

    assert [c.text for c in await store.find_comments(task.id)] == ["Second"]

    deleted = await store.delete_comment(comment.id)
    assert deleted.id == comment.id
    assert await store.delete_comment(comment.id) is None
    assert await store.update_comment(comment.id, "Third") is None
    assert await store.find_comments(task.id) == []


@pytest.mark.asyncio
async def test_comments_are_not_cascaded(store):
    task_id = str(uuid.uuid4())
    comment = await store.create_comment(task_id, "Orphan")
    assert await store.find_comments(task_id) == [comment]


@pytest.mark.asyncio
async def test_malformed_ids_raise_store_error(store):
    with pytest.raises(StoreError):
        await store.find_comments("abc")
    with pytest.raises(StoreError):
        await store.delete_comment("abc")


@pytest.mark.asyncio
async def test_sql_connect_retries_operational_errors(tmp_path, monkeypatch):
    store = SQLAlchemyStore(f"sqlite+aiosqlite:///{tmp_path / 'retry.sqlite3'}")
    calls = []

    async def flaky_create_all(*args, **kwargs):
        calls.append(1)
        raise OperationalError("CREATE TABLE", {}, Exception("database is locked"))

    monkeypatch.setattr(store._create_schema.retry, "sleep", _no_sleep)
    monkeypatch.setattr(store, "_run_create_all", flaky_create_all)
    with pytest.raises(StoreError):
        await store.connect()
    assert len(calls) == 3
    await store.disconnect()


async def _no_sleep(seconds):
    return None


@pytest.mark.asyncio
@pytest.mark.parametrize("stamps", ["equal", "reversed"])
async def test_sql_listing_follows_insertion_order_not_timestamps(tmp_path, stamps):
    store = SQLAlchemyStore(f"sqlite+aiosqlite:///{tmp_path / 'order.sqlite3'}")
    await store.connect()
    task = await store.create_task("Sample Task")
    created = [await store.create_comment(task.id, f"Comment {i}") for i in range(4)]

    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    async with store.session_factory() as db:
        for i, comment in enumerate(created):
            offset = 0 if stamps == "equal" else len(created) - i
            await db.execute(
                update(Comment)
                .where(Comment.id == comment.id)
                .values(created_at=base + timedelta(seconds=offset))
            )
        await db.commit()

    listed = await store.find_comments(task.id)
    assert [c.id for c in listed] == [c.id for c in created]
    await store.disconnect()
