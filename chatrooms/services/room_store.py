# chatrooms/services/room_store.py

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, List

from chatrooms.core.logging import get_logger
from chatrooms.core.results import ServiceResult
from chatrooms.models.models import Room, RoomPayload
from chatrooms.services.kv_store import KeyValueStore

logger = get_logger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]
DeleteHook = Callable[[str], int]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    return str(uuid.uuid4())


# ============================================================================
# ROOM STORE
# ============================================================================
class RoomStore:
    """
    Owns room records and enforces who may change them.

    Every operation loads the room, checks the caller against it, applies
    the change and writes it back while holding ``self.lock``, so no other
    call observes a half-applied update. The lock is re-entrant and is
    also taken by MessageStore before it reads a room, which keeps the
    lock order rooms -> messages everywhere.

    Authorization:
        - update / add_member / delete: caller must equal ``room.owner``
        - list_for_caller: only rooms whose members include the caller
        - get: unrestricted

    Attributes:
        kv: Backend holding room_id -> room dict
        now: Clock used for created_at / updated_at
        new_id: Id factory for new rooms

    Usage:
        rooms = RoomStore(InMemoryStore())
        result = rooms.create(RoomPayload(title="General"), caller="alice")
        room = result.data
    """

    def __init__(
        self,
        kv: KeyValueStore,
        now: Clock = utc_now,
        new_id: IdFactory = new_uuid,
    ) -> None:
        self.kv = kv
        self.now = now
        self.new_id = new_id
        self.lock = threading.RLock()
        self._delete_hooks: List[DeleteHook] = []

    def add_delete_hook(self, hook: DeleteHook) -> None:
        """
        Register a callback run with the room id before a room is removed.

        Used by MessageStore to cascade-delete the room's messages. Hooks
        run while the room lock is held. If one raises, the room is kept
        so the delete can be retried.
        """
        self._delete_hooks.append(hook)

    # ------------------------------------------------------------------
    # persistence helpers
    # ------------------------------------------------------------------
    def _load(self, room_id: str) -> Room | None:
        data = self.kv.get(room_id)
        if data is None:
            return None
        return Room.model_validate(data)

    def _save(self, room: Room) -> None:
        self.kv.insert(room.id, room.model_dump(mode="json"))

    def count(self) -> int:
        with self.lock:
            return len(self.kv.values())

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    def list_for_caller(self, caller: str) -> ServiceResult[List[Room]]:
        """
        List the rooms the caller belongs to.

        Args:
            caller: Principal of the requesting user

        Returns:
            ServiceResult with every room whose members include the caller,
            in backend iteration order
        """
        with self.lock:
            rooms = [Room.model_validate(data) for data in self.kv.values()]
        return ServiceResult.ok([room for room in rooms if room.has_member(caller)])

    def get(self, room_id: str) -> ServiceResult[Room]:
        """
        Get a room by ID.

        Returns:
            ServiceResult with the Room, or NOT_FOUND
        """
        with self.lock:
            room = self._load(room_id)
        if room is None:
            return ServiceResult.not_found(f"A room with id={room_id} was not found.")
        return ServiceResult.ok(room)

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------
    def create(self, payload: RoomPayload, caller: str) -> ServiceResult[Room]:
        """
        Create a new room owned by the caller.

        The caller becomes the owner and the first member. ``updated_at``
        stays unset until the first update.

        Args:
            payload: Title, description and avatar
            caller: Principal creating the room

        Returns:
            ServiceResult with the newly created Room (never fails)
        """
        room = Room(
            id=self.new_id(),
            title=payload.title,
            description=payload.description,
            avatar=payload.avatar,
            owner=caller,
            members=[caller],
            created_at=self.now(),
            updated_at=None,
        )
        with self.lock:
            self._save(room)
        logger.info(f"✓ Created room {room.id} ({room.title!r}) for {caller}")
        return ServiceResult.ok(room)

    def update(self, room_id: str, payload: RoomPayload, caller: str) -> ServiceResult[Room]:
        """
        Overwrite title, description and avatar. Owner only.

        ``updated_at`` never moves backwards, even if the clock does.

        Returns:
            ServiceResult with the updated Room, NOT_FOUND or UNAUTHORIZED
        """
        with self.lock:
            room = self._load(room_id)
            if room is None:
                return ServiceResult.not_found(
                    f"Couldn't update a room with id={room_id}. Room not found."
                )
            if caller != room.owner:
                logger.warning(f"Rejected update of room {room_id} by non-owner {caller}")
                return ServiceResult.unauthorized("You are not authorized to update the room.")

            updated_at = max(self.now(), room.updated_at or room.created_at)
            updated = room.model_copy(
                update={
                    "title": payload.title,
                    "description": payload.description,
                    "avatar": payload.avatar,
                    "updated_at": updated_at,
                }
            )
            self._save(updated)

        logger.info(f"✓ Updated room {room_id}")
        return ServiceResult.ok(updated)

    def add_member(self, room_id: str, member: str, caller: str) -> ServiceResult[Room]:
        """
        Append a principal to the room's members. Owner only.

        No duplicate check is made: adding the same principal twice
        leaves two entries. Such appends are logged.

        Returns:
            ServiceResult with the updated Room, NOT_FOUND or UNAUTHORIZED
        """
        with self.lock:
            room = self._load(room_id)
            if room is None:
                return ServiceResult.not_found(
                    f"Couldn't update a room with id={room_id}. Room not found."
                )
            if caller != room.owner:
                logger.warning(f"Rejected add_member on room {room_id} by non-owner {caller}")
                return ServiceResult.unauthorized("You are not the owner of the room.")

            if room.has_member(member):
                logger.warning(f"{member} is already a member of room {room_id}, appending anyway")

            updated = room.model_copy(update={"members": [*room.members, member]})
            self._save(updated)

        logger.info(f"✓ Added {member} to room {room_id}")
        return ServiceResult.ok(updated)

    def delete(self, room_id: str, caller: str) -> ServiceResult[str]:
        """
        Delete a room and cascade to its messages. Owner only.

        Returns:
            ServiceResult with a confirmation text, NOT_FOUND or UNAUTHORIZED
        """
        with self.lock:
            room = self._load(room_id)
            if room is None:
                return ServiceResult.not_found(
                    f"couldn't delete a room with id={room_id}. Room not found"
                )
            if caller != room.owner:
                logger.warning(f"Rejected delete of room {room_id} by non-owner {caller}")
                return ServiceResult.unauthorized("You are not authorized to delete the room.")

            # messages first: a failure part-way leaves the room in place, never orphans
            purged = sum(hook(room_id) for hook in self._delete_hooks)
            self.kv.remove(room_id)

        logger.info(f"✓ Deleted room {room_id} and {purged} message(s)")
        return ServiceResult.ok("Successfully deleted the room.")
