# services/communication/controllers/message_service.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from services.academics.controllers.references import ensure_group, not_found
from services.activity_log.controllers.activity_service import record_activity, timestamp
from services.communication.models.messages import GroupMessage
from services.communication.schemas.messages import (
    GroupMessageCreate,
    GroupMessageOut,
    LikeStatus,
    MessageCommentCreate,
    MessageCommentOut,
)
from services.user_management.models.users import User
from shared.auth import require_permission
from shared.schemas import MessageResponse
from shared.storage import Storage, get_storage

router = APIRouter(prefix="/api", tags=["Group Messages"])


async def _with_counts(storage: Storage, message: GroupMessage) -> GroupMessageOut:
    likes = await storage.list_message_likes(message.id)
    comments = await storage.list_message_comments(message.id)
    return GroupMessageOut.model_validate(message).model_copy(
        update={"likes": len(likes), "comments": len(comments)}
    )


async def _get_message_or_404(storage: Storage, message_id: UUID) -> GroupMessage:
    message = await storage.get_group_message(message_id)
    if not message:
        raise not_found("Message")
    return message


# --- LIST GROUP MESSAGES ---
@router.get("/groups/{group_id}/messages", response_model=List[GroupMessageOut])
async def list_group_messages(
    group_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("messages:read")),
):
    await ensure_group(storage, group_id)
    messages = await storage.list_group_messages(group_id)
    return [await _with_counts(storage, message) for message in messages]


# --- POST GROUP MESSAGE ---
@router.post("/groups/{group_id}/messages", response_model=GroupMessageOut, status_code=status.HTTP_201_CREATED)
async def post_group_message(
    group_id: UUID,
    payload: GroupMessageCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("messages:write")),
):
    await ensure_group(storage, group_id)

    async with storage.transaction():
        message = await storage.create_group_message({
            **payload.model_dump(),
            "group_id": group_id,
            "author_id": current_user.id,
        })
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="post_message",
            entity_type="group_message",
            entity_id=message.id,
            details={"groupId": group_id, "title": message.title, "isImportant": message.is_important},
        )
    return GroupMessageOut.model_validate(message)


# --- DELETE GROUP MESSAGE ---
@router.delete("/messages/{message_id}", response_model=MessageResponse)
async def delete_group_message(
    message_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("messages:write")),
):
    async with storage.transaction():
        deleted = await storage.delete_group_message(message_id)
        if not deleted:
            raise not_found("Message")
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="delete_message",
            entity_type="group_message",
            entity_id=message_id,
            details={"deletedAt": timestamp()},
        )
    return MessageResponse(message="Message deleted successfully")


# --- COMMENTS ---
@router.get("/messages/{message_id}/comments", response_model=List[MessageCommentOut])
async def list_comments(
    message_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("messages:read")),
):
    await _get_message_or_404(storage, message_id)
    return await storage.list_message_comments(message_id)


@router.post("/messages/{message_id}/comments", response_model=MessageCommentOut, status_code=status.HTTP_201_CREATED)
async def add_comment(
    message_id: UUID,
    payload: MessageCommentCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("messages:react")),
):
    await _get_message_or_404(storage, message_id)

    async with storage.transaction():
        comment = await storage.create_message_comment({
            "message_id": message_id,
            "author_id": current_user.id,
            "content": payload.content,
        })
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="comment_message",
            entity_type="message_comment",
            entity_id=comment.id,
            details={"messageId": message_id},
        )
    return comment


# --- LIKE / UNLIKE (toggle) ---
@router.post("/messages/{message_id}/like", response_model=LikeStatus)
async def toggle_like(
    message_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("messages:react")),
):
    await _get_message_or_404(storage, message_id)

    async with storage.transaction():
        existing = await storage.get_message_like(message_id, current_user.id)
        if existing:
            await storage.delete_message_like(existing.id)
            action = "unlike_message"
        else:
            await storage.create_message_like({"message_id": message_id, "user_id": current_user.id})
            action = "like_message"
        await record_activity(
            storage,
            actor_id=current_user.id,
            action=action,
            entity_type="group_message",
            entity_id=message_id,
        )
        likes = await storage.list_message_likes(message_id)

    return LikeStatus(liked=existing is None, likes=len(likes))
