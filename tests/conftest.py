from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from facebook_api.main import app
from facebook_api.posts.dependencies import get_post_repository
from facebook_api.posts.repository import InMemoryPostRepository


class TickingClock:
    """
    Returns a strictly increasing time on every call.
    """

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start or datetime(2026, 10, 19, 12, 0, 0)
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + self.step
        return now


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def store(clock: TickingClock) -> InMemoryPostRepository:
    return InMemoryPostRepository(clock=clock)


@pytest.fixture
def client(store: InMemoryPostRepository):
    # No `with`: lifespan (and its DB pool) does not run.
    app.dependency_overrides[get_post_repository] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
