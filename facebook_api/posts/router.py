"""
FastAPI router for post endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Response, status

from . import schemas, service
from .dependencies import get_post_repository
from .repository import PostRepository

# Ids live in a BIGSERIAL column.
POST_ID_MIN = -(2**63)
POST_ID_MAX = 2**63 - 1

router = APIRouter()


@router.post("/api/posts", response_model=schemas.Post)
async def create_post(
    payload: schemas.PostPayload,
    store: PostRepository = Depends(get_post_repository),
) -> schemas.Post:
    """
    Create a post. Any `id` or timestamps in the body are ignored.
    """
    return await service.create_post(payload, store=store)


@router.get("/api/posts", response_model=list[schemas.Post])
async def list_posts(
    store: PostRepository = Depends(get_post_repository),
) -> list[schemas.Post]:
    return await service.list_posts(store=store)


@router.get("/api/posts/{post_id}", response_model=schemas.Post)
async def get_post(
    post_id: int = Path(..., ge=POST_ID_MIN, le=POST_ID_MAX),
    store: PostRepository = Depends(get_post_repository),
) -> schemas.Post | Response:
    post = await service.get_post(post_id, store=store)
    if post is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return post


@router.put("/api/posts/{post_id}", response_model=schemas.Post)
async def update_post(
    payload: schemas.PostPayload,
    post_id: int = Path(..., ge=POST_ID_MIN, le=POST_ID_MAX),
    store: PostRepository = Depends(get_post_repository),
) -> schemas.Post | Response:
    """
    Replace `author`, `postContent` and `imageUrl` of an existing post.
    """
    post = await service.update_post(post_id, payload, store=store)
    if post is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return post


@router.delete(
    "/api/posts/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_post(
    post_id: int = Path(..., ge=POST_ID_MIN, le=POST_ID_MAX),
    store: PostRepository = Depends(get_post_repository),
) -> Response:
    deleted = await service.delete_post(post_id, store=store)
    if not deleted:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
