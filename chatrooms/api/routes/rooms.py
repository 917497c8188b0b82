# chatrooms/api/routes/rooms.py

from typing import List

from fastapi import APIRouter, Depends, status

from chatrooms.api.utils import get_message_store, get_room_store, unwrap
from chatrooms.models.models import (
    Confirmation,
    MemberPayload,
    Message,
    Room,
    RoomPayload,
)
from chatrooms.services.auth_service import get_current_principal
from chatrooms.services.message_store import MessageStore
from chatrooms.services.room_store import RoomStore

router = APIRouter(prefix="/rooms", tags=["Rooms"])

# ============================================================================
# ROOM CRUD ENDPOINTS
# ============================================================================

@router.get("", response_model=List[Room])
def list_rooms(
    caller: str = Depends(get_current_principal),
    rooms: RoomStore = Depends(get_room_store),
):
    """
    List the rooms the caller is a member of.

    Returns:
        List[Room]: Rooms whose members include the caller
    """
    return unwrap(rooms.list_for_caller(caller))


@router.post("", response_model=Room, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomPayload,
    caller: str = Depends(get_current_principal),
    rooms: RoomStore = Depends(get_room_store),
):
    """
    Create a new room.

    The caller becomes owner and first member.

    Returns:
        Room: The newly created room
    """
    return unwrap(rooms.create(payload, caller))


@router.get("/{room_id}", response_model=Room)
def get_room(
    room_id: str,
    caller: str = Depends(get_current_principal),
    rooms: RoomStore = Depends(get_room_store),
):
    """
    Get details of a specific room.

    Raises:
        HTTPException: 404 if room not found
    """
    return unwrap(rooms.get(room_id))


@router.put("/{room_id}", response_model=Room)
def update_room(
    room_id: str,
    payload: RoomPayload,
    caller: str = Depends(get_current_principal),
    rooms: RoomStore = Depends(get_room_store),
):
    """
    Replace a room's title, description and avatar.

    Raises:
        HTTPException: 404 if room not found, 403 if caller is not the owner
    """
    return unwrap(rooms.update(room_id, payload, caller))


@router.post("/{room_id}/members", response_model=Room)
def add_member(
    room_id: str,
    payload: MemberPayload,
    caller: str = Depends(get_current_principal),
    rooms: RoomStore = Depends(get_room_store),
):
    """
    Add a member to a room.

    Raises:
        HTTPException: 404 if room not found, 403 if caller is not the owner
    """
    return unwrap(rooms.add_member(room_id, payload.member, caller))


@router.delete("/{room_id}", response_model=Confirmation)
def delete_room(
    room_id: str,
    caller: str = Depends(get_current_principal),
    rooms: RoomStore = Depends(get_room_store),
):
    """
    Delete a room.

    Side Effects:
        - Every message sent to the room is deleted with it

    Raises:
        HTTPException: 404 if room not found, 403 if caller is not the owner
    """
    return Confirmation(detail=unwrap(rooms.delete(room_id, caller)))


# ============================================================================
# ROOM MESSAGES
# ============================================================================

@router.get("/{room_id}/messages", response_model=List[Message])
def list_room_messages(
    room_id: str,
    caller: str = Depends(get_current_principal),
    messages: MessageStore = Depends(get_message_store),
):
    """
    List a room's messages, oldest first.

    Raises:
        HTTPException: 404 if room not found, 403 if caller is not a member
    """
    return unwrap(messages.list_for_room(room_id, caller))


@router.delete("/{room_id}/messages/{index}", response_model=Confirmation)
def delete_room_message_at(
    room_id: str,
    index: int,
    caller: str = Depends(get_current_principal),
    messages: MessageStore = Depends(get_message_store),
):
    """
    Delete the message at a position of the room's listing.

    Prefer DELETE /messages/{message_id}; positions shift as messages go.

    Raises:
        HTTPException: 404 if room not found, 400 if index is out of range,
            403 if caller did not send that message
    """
    return Confirmation(detail=unwrap(messages.delete_at(room_id, index, caller)))
