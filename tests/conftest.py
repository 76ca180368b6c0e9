import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from dependencies import get_current_user, get_post_store
from main import app
from services.kv_map import InMemoryMap
from services.posts import PostStore

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TickingClock:
    """Returns a time one second later on every call"""

    def __init__(self, start: datetime = EPOCH):
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    counter = itertools.count(1)
    return PostStore(InMemoryMap(), clock=clock, id_factory=lambda: f"post-{next(counter)}")


@pytest.fixture
def client(store):
    def header_user(request: Request) -> str:
        return request.headers.get("X-User", "alice")

    with TestClient(app) as test_client:
        app.dependency_overrides[get_post_store] = lambda: store
        app.dependency_overrides[get_current_user] = header_user
        yield test_client
    app.dependency_overrides.clear()
