# chatrooms/services/message_store.py

from __future__ import annotations

import threading
from typing import List

from chatrooms.core.logging import get_logger
from chatrooms.core.results import ServiceResult
from chatrooms.models.models import Message, MessagePayload, Room
from chatrooms.services.kv_store import KeyValueStore
from chatrooms.services.room_store import RoomStore

logger = get_logger(__name__)


# ============================================================================
# MESSAGE STORE
# ============================================================================
class MessageStore:
    """
    Owns messages, keyed by message id, each pointing back at its room.

    Messages are kept out of the room record so rooms do not grow with
    traffic and a message can be found or deleted by id directly. The
    room back-reference is only used for filtering; deleting a room
    purges its messages through a delete hook registered on RoomStore.

    Authorization:
        - send / list_for_room: caller must be a member of the room
        - delete / delete_at: caller must be the message sender

    Attributes:
        kv: Backend holding message_id -> message dict
        rooms: RoomStore used for room lookups and membership checks
    """

    def __init__(self, kv: KeyValueStore, rooms: RoomStore) -> None:
        self.kv = kv
        self.rooms = rooms
        self.now = rooms.now
        self.new_id = rooms.new_id
        self.lock = threading.RLock()
        rooms.add_delete_hook(self.purge_room)

    def _room_messages(self, room_id: str) -> List[Message]:
        messages = [Message.model_validate(data) for data in self.kv.values()]
        # sorted() is stable, so equal timestamps keep backend order
        return sorted(
            (m for m in messages if m.room_id == room_id),
            key=lambda m: m.created_at,
        )

    def _member_room(self, room_id: str, caller: str) -> ServiceResult[Room]:
        """Load a room and check the caller belongs to it."""
        found = self.rooms.get(room_id)
        if not found:
            return found
        if not found.data.has_member(caller):
            logger.warning(f"{caller} is not a member of room {room_id}")
            return ServiceResult.unauthorized("You don't belong to this room.")
        return found

    def count(self) -> int:
        with self.lock:
            return len(self.kv.values())

    def send(self, payload: MessagePayload, caller: str) -> ServiceResult[Message]:
        """
        Post a message to a room the caller belongs to.

        Args:
            payload: Message text and target room id
            caller: Principal sending the message

        Returns:
            ServiceResult with the stored Message, NOT_FOUND if the room
            does not exist or UNAUTHORIZED if the caller is not a member
        """
        with self.rooms.lock, self.lock:
            room = self._member_room(payload.room_id, caller)
            if not room:
                return ServiceResult.failure(room.error, room.error_code)

            message = Message(
                id=self.new_id(),
                message=payload.message,
                sender=caller,
                room_id=payload.room_id,
                created_at=self.now(),
            )
            self.kv.insert(message.id, message.model_dump(mode="json"))

        logger.info(f"✓ {caller} sent message {message.id} to room {payload.room_id}")
        return ServiceResult.ok(message)

    def list_for_room(self, room_id: str, caller: str) -> ServiceResult[List[Message]]:
        """
        List a room's messages, oldest first. Members only.

        Returns:
            ServiceResult with the messages, NOT_FOUND or UNAUTHORIZED
        """
        with self.rooms.lock, self.lock:
            room = self._member_room(room_id, caller)
            if not room:
                return ServiceResult.failure(room.error, room.error_code)
            return ServiceResult.ok(self._room_messages(room_id))

    def delete(self, message_id: str, caller: str) -> ServiceResult[str]:
        """
        Delete a message by id. Sender only.

        Returns:
            ServiceResult with a confirmation text, NOT_FOUND or UNAUTHORIZED
        """
        with self.lock:
            data = self.kv.get(message_id)
            if data is None:
                return ServiceResult.not_found(f"A message with id={message_id} was not found.")

            message = Message.model_validate(data)
            if caller != message.sender:
                logger.warning(f"Rejected delete of message {message_id} by {caller}")
                return ServiceResult.unauthorized("You are not authorized to delete this message.")

            self.kv.remove(message_id)

        logger.info(f"✓ Deleted message {message_id}")
        return ServiceResult.ok("Message deleted successfully")

    def delete_at(self, room_id: str, index: int, caller: str) -> ServiceResult[str]:
        """
        Delete the message at a position in the room's listing. Sender only.

        The position is resolved against list_for_room ordering at call
        time and the message is then removed by its id. There is no
        membership check, only the sender check.

        Returns:
            ServiceResult with a confirmation text, NOT_FOUND if the room
            does not exist, OUT_OF_BOUNDS or UNAUTHORIZED
        """
        with self.rooms.lock, self.lock:
            found = self.rooms.get(room_id)
            if not found:
                return ServiceResult.not_found(
                    f"couldn't delete a message with id={room_id}. message not found"
                )

            messages = self._room_messages(room_id)
            if index < 0 or index >= len(messages):
                return ServiceResult.out_of_bounds("MessageId is out of bounds.")

            return self.delete(messages[index].id, caller)

    def purge_room(self, room_id: str) -> int:
        """
        Remove every message that references ``room_id``.

        Registered as a RoomStore delete hook.

        Returns:
            Number of messages removed
        """
        with self.lock:
            doomed = [data["id"] for data in self.kv.values() if data.get("room_id") == room_id]
            for message_id in doomed:
                self.kv.remove(message_id)
        if doomed:
            logger.info(f"✓ Purged {len(doomed)} message(s) of room {room_id}")
        return len(doomed)
