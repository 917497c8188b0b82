# chatrooms/core/results.py
"""
Result wrapper returned by every store operation.

Expected failures (missing rooms, failed ownership or membership checks,
out-of-range positions) come back as a failed ServiceResult with an
ErrorCode. Exceptions are left for unexpected failures such as a backend
that cannot be reached.

Usage:
    result = rooms.get(room_id)
    if result.success:
        room = result.data
    else:
        print(f"{result.error} ({result.error_code})")
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorCode(str, enum.Enum):
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Success value or typed error.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Human-readable message if failed, meant to be shown verbatim
        error_code: Machine-readable ErrorCode if failed
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None

    @classmethod
    def ok(cls, data: T) -> ServiceResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode) -> ServiceResult[T]:
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def not_found(cls, error: str) -> ServiceResult[T]:
        return cls.failure(error, ErrorCode.NOT_FOUND)

    @classmethod
    def unauthorized(cls, error: str) -> ServiceResult[T]:
        return cls.failure(error, ErrorCode.UNAUTHORIZED)

    @classmethod
    def out_of_bounds(cls, error: str) -> ServiceResult[T]:
        return cls.failure(error, ErrorCode.OUT_OF_BOUNDS)

    def __bool__(self) -> bool:
        return self.success
