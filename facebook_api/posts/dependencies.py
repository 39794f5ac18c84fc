"""
Storage wiring for post routes.
"""

from __future__ import annotations

import os

from fastapi import Request

from .repository import InMemoryPostRepository, PostgresPostRepository, PostRepository

STORAGE_BACKENDS = {"postgres", "memory"}


def storage_backend() -> str:
    backend = os.environ.get("POSTS_STORAGE", "postgres").strip().lower() or "postgres"
    if backend not in STORAGE_BACKENDS:
        raise RuntimeError(f"Unsupported POSTS_STORAGE value: {backend!r}.")
    return backend


def build_post_repository(backend: str) -> PostRepository:
    if backend == "memory":
        return InMemoryPostRepository()
    return PostgresPostRepository()


def get_post_repository(request: Request) -> PostRepository:
    repository = getattr(request.app.state, "post_repository", None)
    if repository is None:
        raise RuntimeError("Post repository is not initialized. It is set during app startup.")
    return repository
