# chatrooms/core/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from chatrooms.core.config import Settings
from chatrooms.core.logging import get_logger
from chatrooms.services.kv_store import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    RedisHashStore,
)
from chatrooms.services.message_store import MessageStore
from chatrooms.services.room_store import RoomStore

logger = get_logger(__name__)


@dataclass
class AppState:
    """Stores owned by one running application; built at startup, closed at shutdown."""

    rooms: RoomStore
    messages: MessageStore
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def close(self) -> None:
        self.messages.kv.close()
        self.rooms.kv.close()
        logger.info("Stores closed")


def open_backends(settings: Settings) -> tuple[KeyValueStore, KeyValueStore]:
    """Return (rooms backend, messages backend) for the configured STORE_BACKEND."""
    if settings.STORE_BACKEND == "file":
        return JsonFileStore(settings.rooms_path), JsonFileStore(settings.messages_path)

    if settings.STORE_BACKEND == "redis":
        prefix = settings.REDIS_KEY_PREFIX
        return (
            RedisHashStore.from_url(settings.redis_url, f"{prefix}:rooms"),
            RedisHashStore.from_url(settings.redis_url, f"{prefix}:messages"),
        )

    return InMemoryStore(), InMemoryStore()


def build_state(settings: Settings) -> AppState:
    rooms_kv, messages_kv = open_backends(settings)
    rooms = RoomStore(rooms_kv)
    messages = MessageStore(messages_kv, rooms)
    logger.info(f"✓ Stores ready (backend={settings.STORE_BACKEND})")
    return AppState(rooms=rooms, messages=messages)
