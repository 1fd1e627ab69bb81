# services/communication/schemas/messages.py

from pydantic import Field
from datetime import datetime
from uuid import UUID

from shared.schemas import APIModel


class GroupMessageCreate(APIModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    is_important: bool = False


class GroupMessageOut(APIModel):
    id: UUID
    group_id: UUID
    author_id: UUID
    title: str
    content: str
    is_important: bool
    created_at: datetime
    likes: int = 0
    comments: int = 0


class MessageCommentCreate(APIModel):
    content: str = Field(min_length=1)


class MessageCommentOut(APIModel):
    id: UUID
    message_id: UUID
    author_id: UUID
    content: str
    created_at: datetime


class LikeStatus(APIModel):
    liked: bool
    likes: int
