# chatrooms/api/routes/health.py

from fastapi import APIRouter, Request

router = APIRouter()

@router.get("/health")
def health(request: Request):
    """
    Health check endpoint.

    Returns current status and how many rooms and messages are stored.
    Used by container health probes and monitoring.

    Returns:
        dict: Status, backend, room count, message count
    """
    stores = request.app.state.stores
    return {
        "status": "healthy",
        "backend": request.app.state.settings.STORE_BACKEND,
        "rooms": stores.rooms.count(),
        "messages": stores.messages.count(),
    }
