from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Any

import pytest

from facebook_api.core import db
from facebook_api.posts.repository import (
    InMemoryPostRepository,
    PostgresPostRepository,
    PostNotFoundError,
)
from facebook_api.posts.schemas import Post


def test_in_memory_save_assigns_id_and_timestamps(store) -> None:
    saved = asyncio.run(store.save(Post(author="alice", post_content="hi")))
    assert saved.id == 1
    assert saved.created_date is not None
    assert saved.created_date == saved.modified_date
    assert saved.author == "alice"


def test_in_memory_save_unknown_id_raises(store) -> None:
    with pytest.raises(PostNotFoundError) as excinfo:
        asyncio.run(store.save(Post(id=5, author="ghost")))
    assert excinfo.value.post_id == 5
    assert asyncio.run(store.find_all()) == []


def test_in_memory_update_keeps_created_date(store) -> None:
    created = asyncio.run(store.save(Post(author="alice")))
    changed = created.model_copy(update={"author": "bob", "created_date": datetime(2000, 1, 1)})
    updated = asyncio.run(store.save(changed))

    assert updated.id == created.id
    assert updated.author == "bob"
    assert updated.created_date == created.created_date
    assert updated.modified_date > created.modified_date


def test_in_memory_modified_date_never_goes_backwards() -> None:
    times = iter([datetime(2026, 1, 2), datetime(2026, 1, 1)])
    store = InMemoryPostRepository(clock=lambda: next(times))

    created = asyncio.run(store.save(Post(author="a")))
    updated = asyncio.run(store.save(created))
    assert updated.modified_date == created.modified_date
    assert updated.created_date <= updated.modified_date


def test_in_memory_returns_copies(store) -> None:
    created = asyncio.run(store.save(Post(author="alice")))
    created.author = "tampered"

    fetched = asyncio.run(store.find_by_id(created.id))
    assert fetched.author == "alice"

    fetched.author = "tampered again"
    assert asyncio.run(store.find_all())[0].author == "alice"


def test_in_memory_find_exists_delete(store) -> None:
    first = asyncio.run(store.save(Post(author="a")))
    second = asyncio.run(store.save(Post(author="b")))

    assert asyncio.run(store.find_by_id(99)) is None
    assert asyncio.run(store.exists_by_id(first.id)) is True
    assert [p.id for p in asyncio.run(store.find_all())] == [first.id, second.id]

    asyncio.run(store.delete_by_id(first.id))
    asyncio.run(store.delete_by_id(first.id))

    assert asyncio.run(store.exists_by_id(first.id)) is False
    assert [p.id for p in asyncio.run(store.find_all())] == [second.id]


class _FakeDb:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []
        self.one: dict[str, Any] | None = None
        self.many: list[dict[str, Any]] = []

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self.calls.append(("fetch_one", sql, args))
        return self.one

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self.calls.append(("fetch_all", sql, args))
        return self.many

    async def execute(self, sql: str, *args: Any) -> None:
        self.calls.append(("execute", sql, args))


@pytest.fixture
def fake_db(monkeypatch) -> _FakeDb:
    fake = _FakeDb()
    monkeypatch.setattr(db, "fetch_one", fake.fetch_one)
    monkeypatch.setattr(db, "fetch_all", fake.fetch_all)
    monkeypatch.setattr(db, "execute", fake.execute)
    return fake


def _row(post_id: int, when: datetime, **fields: Any) -> dict[str, Any]:
    row = {
        "id": post_id,
        "author": None,
        "post_content": None,
        "image_url": None,
        "created_date": when,
        "modified_date": when,
    }
    row.update(fields)
    return row


def test_postgres_insert_stamps_both_dates(fake_db) -> None:
    now = datetime(2026, 10, 19, 9, 30)
    fake_db.one = _row(1, now, author="alice")
    repo = PostgresPostRepository(clock=lambda: now)

    saved = asyncio.run(repo.save(Post(id=None, author="alice")))

    kind, sql, args = fake_db.calls[0]
    assert kind == "fetch_one"
    assert "INSERT INTO posts" in sql
    assert args == ("alice", None, None, now, now)
    assert saved.id == 1
    assert saved.author == "alice"


def test_postgres_update_unknown_id_raises(fake_db) -> None:
    fake_db.one = None
    repo = PostgresPostRepository()

    with pytest.raises(PostNotFoundError):
        asyncio.run(repo.save(Post(id=3, author="ghost")))

    _, sql, args = fake_db.calls[0]
    assert "UPDATE posts" in sql
    assert args[0] == 3


def test_postgres_update_sends_refreshed_modified_date(fake_db) -> None:
    created = datetime(2026, 10, 19, 9, 0)
    now = created + timedelta(minutes=5)
    fake_db.one = _row(4, created, author="b", modified_date=now)
    repo = PostgresPostRepository(clock=lambda: now)

    existing = Post(id=4, author="b", created_date=created, modified_date=created)
    updated = asyncio.run(repo.save(existing))

    _, _, args = fake_db.calls[0]
    assert args == (4, "b", None, None, now)
    assert updated.modified_date == now
    assert updated.created_date == created


def test_postgres_reads_map_rows_to_posts(fake_db) -> None:
    when = datetime(2026, 10, 19, 8, 0)
    fake_db.many = [_row(1, when, post_content="x"), _row(2, when, image_url="http://img")]
    repo = PostgresPostRepository()

    posts = asyncio.run(repo.find_all())
    assert [p.id for p in posts] == [1, 2]
    assert posts[0].post_content == "x"
    assert posts[1].image_url == "http://img"

    fake_db.one = None
    assert asyncio.run(repo.find_by_id(9)) is None
    assert asyncio.run(repo.exists_by_id(9)) is False

    fake_db.one = {"ok": 1}
    assert asyncio.run(repo.exists_by_id(1)) is True


def test_postgres_delete_issues_statement(fake_db) -> None:
    repo = PostgresPostRepository()
    asyncio.run(repo.delete_by_id(7))

    kind, sql, args = fake_db.calls[0]
    assert kind == "execute"
    assert "DELETE FROM posts" in sql
    assert args == (7,)


def test_postgres_ensure_table_creates_posts(fake_db) -> None:
    asyncio.run(PostgresPostRepository().ensure_table())

    kind, sql, args = fake_db.calls[0]
    assert kind == "execute"
    assert "CREATE TABLE IF NOT EXISTS posts" in sql
    assert "id BIGSERIAL PRIMARY KEY" in sql
    assert args == ()
