# chatrooms/models/models.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, List


class Room(BaseModel):
    id: str
    title: str
    description: str = ""
    avatar: str = ""
    owner: str
    members: List[str]
    created_at: datetime
    updated_at: Optional[datetime] = None

    def has_member(self, principal: str) -> bool:
        return principal in self.members


class RoomPayload(BaseModel):
    title: str
    description: str = ""
    avatar: str = ""


class MemberPayload(BaseModel):
    member: str = Field(..., min_length=1)


class Message(BaseModel):
    id: str
    message: str
    sender: str
    room_id: str
    created_at: datetime


class MessagePayload(BaseModel):
    message: str
    room_id: str


class Confirmation(BaseModel):
    detail: str
