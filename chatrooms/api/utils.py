# chatrooms/api/utils.py

from __future__ import annotations

from typing import TypeVar

from fastapi import HTTPException, Request, status

from chatrooms.core.results import ErrorCode, ServiceResult
from chatrooms.services.message_store import MessageStore
from chatrooms.services.room_store import RoomStore

T = TypeVar("T")

STATUS_BY_ERROR = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.OUT_OF_BOUNDS: status.HTTP_400_BAD_REQUEST,
}


def unwrap(result: ServiceResult[T]) -> T:
    """
    Return the result's data or raise the matching HTTPException.

    The store's error message is passed through verbatim as ``detail``.
    """
    if result.success:
        return result.data
    raise HTTPException(status_code=STATUS_BY_ERROR[result.error_code], detail=result.error)


def get_room_store(request: Request) -> RoomStore:
    return request.app.state.stores.rooms


def get_message_store(request: Request) -> MessageStore:
    return request.app.state.stores.messages
