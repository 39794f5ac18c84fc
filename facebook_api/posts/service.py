"""
Post business logic.

Not-found is an expected outcome here, so it is returned (`None` / `False`)
rather than raised; the router turns it into a 404.
"""

from __future__ import annotations

import logging

from .repository import PostNotFoundError, PostRepository
from .schemas import Post, PostPayload

logger = logging.getLogger(__name__)


async def create_post(payload: PostPayload, *, store: PostRepository) -> Post:
    post = Post(
        author=payload.author,
        post_content=payload.post_content,
        image_url=payload.image_url,
    )
    saved = await store.save(post)
    logger.info("post_created id=%s", saved.id)
    return saved


async def list_posts(*, store: PostRepository) -> list[Post]:
    return await store.find_all()


async def get_post(post_id: int, *, store: PostRepository) -> Post | None:
    return await store.find_by_id(post_id)


async def update_post(post_id: int, payload: PostPayload, *, store: PostRepository) -> Post | None:
    existing = await store.find_by_id(post_id)
    if existing is None:
        logger.info("post_update_missing id=%s", post_id)
        return None

    # Full replace of the mutable fields: omitted ones become None.
    existing.author = payload.author
    existing.post_content = payload.post_content
    existing.image_url = payload.image_url

    try:
        updated = await store.save(existing)
    except PostNotFoundError:
        # Deleted between the lookup and the write.
        logger.info("post_update_missing id=%s", post_id)
        return None
    logger.info("post_updated id=%s", updated.id)
    return updated


async def delete_post(post_id: int, *, store: PostRepository) -> bool:
    if not await store.exists_by_id(post_id):
        logger.info("post_delete_missing id=%s", post_id)
        return False

    await store.delete_by_id(post_id)
    logger.info("post_deleted id=%s", post_id)
    return True
