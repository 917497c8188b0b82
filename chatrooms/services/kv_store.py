# chatrooms/services/kv_store.py

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional, Protocol

import redis

from chatrooms.core.logging import get_logger

logger = get_logger(__name__)

Record = Dict[str, Any]


class KeyValueStore(Protocol):
    """
    Key -> JSON-compatible dict mapping that the room and message stores persist into.

    Implementations only need the four primitives below; all access
    control and consistency rules live in the stores built on top.
    """

    def get(self, key: str) -> Optional[Record]: ...

    def insert(self, key: str, value: Record) -> None: ...

    def remove(self, key: str) -> Optional[Record]: ...

    def values(self) -> List[Record]: ...

    def close(self) -> None: ...


# ============================================================================
# IN-MEMORY
# ============================================================================
class InMemoryStore:
    """Plain dict storage. Iteration follows insertion order."""

    def __init__(self) -> None:
        self._data: Dict[str, Record] = {}

    def get(self, key: str) -> Optional[Record]:
        return self._data.get(key)

    def insert(self, key: str, value: Record) -> None:
        self._data[key] = value

    def remove(self, key: str) -> Optional[Record]:
        return self._data.pop(key, None)

    def values(self) -> List[Record]:
        return list(self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def close(self) -> None:
        pass


# ============================================================================
# JSON FILE PERSISTENCE
# ============================================================================
class JsonFileStore(InMemoryStore):
    """
    In-memory mapping mirrored to a JSON file.

    The whole file is loaded on construction and rewritten after every
    insert/remove, so records survive restarts. Fine for a single
    instance; for multi-instance deployments use RedisHashStore.

    Storage Format (rooms.json):
        {
            "uuid-123": {
                "id": "uuid-123",
                "title": "Product Team",
                ...
            }
        }
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path
        self.load()

    def load(self) -> None:
        """
        Load records from disk.

        A missing file means a fresh store. An unreadable file is logged
        and the store starts empty; the next write replaces it.
        """
        if not os.path.exists(self.path):
            logger.info(f"No data file at {self.path}, starting empty")
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Load error for {self.path}: {e}")
            return

        if not isinstance(data, dict):
            logger.error(f"Load error for {self.path}: expected a JSON object")
            return

        self._data = data
        logger.info(f"✓ Loaded {len(self._data)} records from {self.path}")

    def save(self, data: Dict[str, Record]) -> None:
        """Rewrite the file with ``data``."""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Save error for {self.path}: {e}")
            raise

    # Changes are written to disk first and only then become visible, so a
    # failed write leaves both the file and memory as they were.
    def insert(self, key: str, value: Record) -> None:
        data = dict(self._data)
        data[key] = value
        self.save(data)
        self._data = data

    def remove(self, key: str) -> Optional[Record]:
        if key not in self._data:
            return None
        data = dict(self._data)
        removed = data.pop(key)
        self.save(data)
        self._data = data
        return removed


# ============================================================================
# REDIS HASH
# ============================================================================
class RedisHashStore:
    """
    One Redis hash per collection, one JSON-encoded field per record.

    Key layout:
        {prefix}:rooms     -> {room_id: room_json}
        {prefix}:messages  -> {message_id: message_json}
    """

    def __init__(self, client: redis.Redis, key: str) -> None:
        self.client = client
        self.key = key

    @classmethod
    def from_url(cls, url: str, key: str) -> "RedisHashStore":
        """Connect to Redis and verify the connection before returning the store."""
        client = redis.from_url(url, decode_responses=True)
        client.ping()
        logger.info(f"✓ Connected to Redis for hash '{key}'")
        return cls(client, key)

    def get(self, key: str) -> Optional[Record]:
        raw = self.client.hget(self.key, key)
        if raw is None:
            return None
        return json.loads(raw)

    def insert(self, key: str, value: Record) -> None:
        self.client.hset(self.key, key, json.dumps(value))

    def remove(self, key: str) -> Optional[Record]:
        existing = self.get(key)
        if existing is not None:
            self.client.hdel(self.key, key)
        return existing

    def values(self) -> List[Record]:
        return [json.loads(raw) for raw in self.client.hvals(self.key)]

    def __len__(self) -> int:
        return self.client.hlen(self.key)

    def close(self) -> None:
        self.client.close()
        logger.info(f"Redis connection for hash '{self.key}' closed")
