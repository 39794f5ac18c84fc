"""
Post persistence.

`PostRepository` is the storage port the service layer talks to. Two
implementations live here:
- `InMemoryPostRepository`: insertion-ordered dict (tests, `POSTS_STORAGE=memory`)
- `PostgresPostRepository`: raw SQL over the shared asyncpg pool in `core.db`

Both run the entity lifecycle hooks (`Post.on_create` / `Post.on_update`)
inside `save`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Protocol

from facebook_api.core import db

from .schemas import Post

Clock = Callable[[], datetime]

_POST_COLUMNS = "id, author, post_content, image_url, created_date, modified_date"


class PostNotFoundError(LookupError):
    def __init__(self, post_id: int) -> None:
        super().__init__(f"Post {post_id} does not exist.")
        self.post_id = post_id


def local_now() -> datetime:
    return datetime.now()


class PostRepository(Protocol):
    async def save(self, post: Post) -> Post:
        """
        Insert a transient post or overwrite the stored post with the same id.

        Raises `PostNotFoundError` when `post.id` is set but not stored.
        """
        ...

    async def find_by_id(self, post_id: int) -> Post | None: ...

    async def find_all(self) -> list[Post]: ...

    async def exists_by_id(self, post_id: int) -> bool: ...

    async def delete_by_id(self, post_id: int) -> None: ...


class InMemoryPostRepository:
    """
    Dict-backed store. Callers only ever receive copies of stored posts.

    None of the methods await, so each one runs to completion without
    interleaving with other requests on the event loop.
    """

    def __init__(self, *, clock: Clock = local_now) -> None:
        self._clock = clock
        self._posts: dict[int, Post] = {}
        self._next_id = 1

    async def save(self, post: Post) -> Post:
        now = self._clock()
        if post.id is None:
            stored = post.model_copy()
            stored.id = self._next_id
            self._next_id += 1
            stored.on_create(now)
        else:
            existing = self._posts.get(post.id)
            if existing is None:
                raise PostNotFoundError(post.id)
            stored = existing.model_copy(
                update={
                    "author": post.author,
                    "post_content": post.post_content,
                    "image_url": post.image_url,
                }
            )
            stored.on_update(now)

        self._posts[stored.id] = stored
        return stored.model_copy()

    async def find_by_id(self, post_id: int) -> Post | None:
        post = self._posts.get(post_id)
        return post.model_copy() if post is not None else None

    async def find_all(self) -> list[Post]:
        return [post.model_copy() for post in self._posts.values()]

    async def exists_by_id(self, post_id: int) -> bool:
        return post_id in self._posts

    async def delete_by_id(self, post_id: int) -> None:
        self._posts.pop(post_id, None)


def _row_to_post(row: dict[str, Any]) -> Post:
    return Post.model_validate(row)


class PostgresPostRepository:
    """
    `posts` table access. Each method is a single SQL statement.
    """

    def __init__(self, *, clock: Clock = local_now) -> None:
        self._clock = clock

    async def ensure_table(self) -> None:
        # Timestamps are naive local date-times, matching the JSON contract.
        await db.execute(
            """
            CREATE TABLE IF NOT EXISTS posts (
                id BIGSERIAL PRIMARY KEY,
                author TEXT,
                post_content TEXT,
                image_url TEXT,
                created_date TIMESTAMP NOT NULL,
                modified_date TIMESTAMP NOT NULL
            )
            """
        )

    async def save(self, post: Post) -> Post:
        if post.id is None:
            return await self._insert(post)
        return await self._update(post)

    async def _insert(self, post: Post) -> Post:
        stamped = post.model_copy()
        stamped.on_create(self._clock())
        row = await db.fetch_one(
            f"""
            INSERT INTO posts (author, post_content, image_url, created_date, modified_date)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {_POST_COLUMNS}
            """,
            stamped.author,
            stamped.post_content,
            stamped.image_url,
            stamped.created_date,
            stamped.modified_date,
        )
        if row is None:
            raise RuntimeError("Failed to insert post.")
        return _row_to_post(row)

    async def _update(self, post: Post) -> Post:
        stamped = post.model_copy()
        stamped.on_update(self._clock())
        # GREATEST keeps modified_date monotonic against the stored value too.
        row = await db.fetch_one(
            f"""
            UPDATE posts
            SET author = $2,
                post_content = $3,
                image_url = $4,
                modified_date = GREATEST(modified_date, $5)
            WHERE id = $1
            RETURNING {_POST_COLUMNS}
            """,
            post.id,
            stamped.author,
            stamped.post_content,
            stamped.image_url,
            stamped.modified_date,
        )
        if row is None:
            raise PostNotFoundError(post.id)
        return _row_to_post(row)

    async def find_by_id(self, post_id: int) -> Post | None:
        row = await db.fetch_one(
            f"""
            SELECT {_POST_COLUMNS}
            FROM posts
            WHERE id = $1
            """,
            post_id,
        )
        return _row_to_post(row) if row is not None else None

    async def find_all(self) -> list[Post]:
        rows = await db.fetch_all(
            f"""
            SELECT {_POST_COLUMNS}
            FROM posts
            ORDER BY id ASC
            """
        )
        return [_row_to_post(row) for row in rows]

    async def exists_by_id(self, post_id: int) -> bool:
        row = await db.fetch_one(
            """
            SELECT 1 AS ok
            FROM posts
            WHERE id = $1
            LIMIT 1
            """,
            post_id,
        )
        return row is not None

    async def delete_by_id(self, post_id: int) -> None:
        await db.execute(
            """
            DELETE FROM posts
            WHERE id = $1
            """,
            post_id,
        )
