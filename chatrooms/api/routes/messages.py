# chatrooms/api/routes/messages.py

from fastapi import APIRouter, Depends, status

from chatrooms.api.utils import get_message_store, unwrap
from chatrooms.models.models import Confirmation, Message, MessagePayload
from chatrooms.services.auth_service import get_current_principal
from chatrooms.services.message_store import MessageStore

# ============================================================================
# MESSAGE ENDPOINTS
# ============================================================================

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("", response_model=Message, status_code=status.HTTP_201_CREATED)
def send_message(
    payload: MessagePayload,
    caller: str = Depends(get_current_principal),
    messages: MessageStore = Depends(get_message_store),
):
    """
    Send a message to a room.

    Flow:
        1. Load the room named by payload.room_id
        2. Check the caller is one of its members
        3. Store the message with the caller as sender

    Raises:
        HTTPException: 404 if room not found, 403 if caller is not a member
    """
    return unwrap(messages.send(payload, caller))


@router.delete("/{message_id}", response_model=Confirmation)
def delete_message(
    message_id: str,
    caller: str = Depends(get_current_principal),
    messages: MessageStore = Depends(get_message_store),
):
    """
    Delete a message by id. Only its sender may do this.

    Raises:
        HTTPException: 404 if message not found, 403 if caller is not the sender
    """
    return Confirmation(detail=unwrap(messages.delete(message_id, caller)))
