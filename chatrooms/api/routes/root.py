# chatrooms/api/routes/root.py

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root():
    """
    Root endpoint - API information.

    Returns basic info about the API and its endpoints.
    """
    return {
        "message": "Chat Rooms",
        "version": "1.0",
        "authorization": {
            "rooms": "owner may update, add members, delete",
            "messages": "members may send and list, sender may delete",
        },
        "endpoints": {
            "rooms": "/rooms",
            "room_members": "/rooms/{room_id}/members",
            "room_messages": "/rooms/{room_id}/messages",
            "messages": "/messages",
            "health": "/health",
        },
    }
