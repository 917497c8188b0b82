"""Pytest fixtures: in-memory stores with a controllable clock and ids."""
import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from chatrooms.core.config import Settings
from chatrooms.main import create_app
from chatrooms.models.models import MessagePayload, RoomPayload
from chatrooms.services.kv_store import InMemoryStore
from chatrooms.services.message_store import MessageStore
from chatrooms.services.room_store import RoomStore

ALICE = "alice-principal"
BOB = "bob-principal"
CAROL = "carol-principal"

JWT_SECRET = "test-secret"


class FakeClock:
    """Returns a fixed time until advanced."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float = 1) -> datetime:
        self.current += timedelta(seconds=seconds)
        return self.current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def rooms(clock, ids):
    return RoomStore(InMemoryStore(), now=clock, new_id=ids)


@pytest.fixture
def messages(rooms):
    return MessageStore(InMemoryStore(), rooms)


@pytest.fixture
def room(rooms):
    """A room owned by ALICE with BOB as a member."""
    created = rooms.create(RoomPayload(title="General", description="Chat", avatar="a.png"), ALICE).data
    return rooms.add_member(created.id, BOB, ALICE).data


@pytest.fixture
def settings():
    return Settings(STORE_BACKEND="memory", JWT_SECRET=JWT_SECRET)


@pytest.fixture
def client(settings):
    """FastAPI TestClient against a fresh app with its own in-memory stores."""
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


def as_user(principal: str) -> dict:
    return {"X-Principal": principal}


# ---------------------------------------------------------------------------
# Helpers: create resources via the API, return the JSON response dict
# ---------------------------------------------------------------------------
def create_test_room(client: TestClient, owner: str = ALICE, title: str = "Test Room") -> dict:
    """Helper: POST /rooms and return response JSON."""
    resp = client.post("/rooms", json={
        "title": title,
        "description": "A room for tests",
        "avatar": "https://example.com/avatar.png",
    }, headers=as_user(owner))
    assert resp.status_code == 201, resp.text
    return resp.json()


def send_test_message(client: TestClient, room_id: str, sender: str, text: str = "hi") -> dict:
    """Helper: POST /messages and return response JSON."""
    resp = client.post("/messages", json={"message": text, "room_id": room_id}, headers=as_user(sender))
    assert resp.status_code == 201, resp.text
    return resp.json()


def send(messages: MessageStore, room_id: str, sender: str, text: str = "hi"):
    result = messages.send(MessagePayload(message=text, room_id=room_id), sender)
    assert result.success, result.error
    return result.data
