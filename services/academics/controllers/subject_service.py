# services/academics/controllers/subject_service.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from services.academics.controllers.references import ensure_subject, not_found
from services.academics.schemas.subjects import SubjectCreate, SubjectOut, SubjectUpdate
from services.activity_log.controllers.activity_service import record_activity, timestamp
from services.user_management.models.users import User
from shared.auth import require_permission
from shared.schemas import MessageResponse, changes_from
from shared.storage import Storage, get_storage

router = APIRouter(prefix="/api/subjects", tags=["Subjects"])


def _duplicate_code() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Subject with this code already exists"
    )


# --- LIST SUBJECTS ---
@router.get("", response_model=List[SubjectOut])
async def list_subjects(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("subjects:read")),
):
    return await storage.list_subjects()


# --- GET SUBJECT ---
@router.get("/{subject_id}", response_model=SubjectOut)
async def get_subject(
    subject_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("subjects:read")),
):
    return await ensure_subject(storage, subject_id)


# --- CREATE SUBJECT ---
@router.post("", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
async def create_subject(
    payload: SubjectCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("subjects:write")),
):
    if await storage.get_subject_by_code(payload.code):
        raise _duplicate_code()

    async with storage.transaction():
        subject = await storage.create_subject(payload.model_dump())
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="create_subject",
            entity_type="subject",
            entity_id=subject.id,
            details={"name": subject.name, "code": subject.code},
        )
    return subject


# --- UPDATE SUBJECT ---
@router.put("/{subject_id}", response_model=SubjectOut)
async def update_subject(
    subject_id: UUID,
    payload: SubjectUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("subjects:write")),
):
    subject = await ensure_subject(storage, subject_id)
    changes = changes_from(payload, nullable=("description",))

    if "code" in changes and changes["code"] != subject.code:
        if await storage.get_subject_by_code(changes["code"]):
            raise _duplicate_code()

    async with storage.transaction():
        subject = await storage.update_subject(subject_id, changes)
        if not subject:
            raise not_found("Subject")
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="update_subject",
            entity_type="subject",
            entity_id=subject_id,
            details={"updates": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
    return subject


# --- DELETE SUBJECT ---
@router.delete("/{subject_id}", response_model=MessageResponse)
async def delete_subject(
    subject_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("subjects:write")),
):
    async with storage.transaction():
        deleted = await storage.delete_subject(subject_id)
        if not deleted:
            raise not_found("Subject")
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="delete_subject",
            entity_type="subject",
            entity_id=subject_id,
            details={"deletedAt": timestamp()},
        )
    return MessageResponse(message="Subject deleted successfully")
