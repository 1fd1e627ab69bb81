# services/academics/controllers/grade_service.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from services.academics.controllers.references import ensure_group, ensure_subject, ensure_user, not_found
from services.academics.schemas.grades import GradeCreate, GradeOut, GradeUpdate, check_grade_bounds
from services.activity_log.controllers.activity_service import record_activity, timestamp
from services.user_management.models.users import User, UserRole
from shared.auth import require_permission
from shared.schemas import MessageResponse, changes_from
from shared.storage import Storage, get_storage

router = APIRouter(prefix="/api/grades", tags=["Grades"])


# --- LIST GRADES ---
@router.get("", response_model=List[GradeOut])
async def list_grades(
    student_id: Optional[UUID] = Query(None, alias="studentId"),
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("grades:read")),
):
    if student_id:
        return await storage.list_grades_by_student(student_id)
    return await storage.list_grades()


# --- GET GRADE ---
@router.get("/{grade_id}", response_model=GradeOut)
async def get_grade(
    grade_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("grades:read")),
):
    grade = await storage.get_grade(grade_id)
    if not grade:
        raise not_found("Grade")
    return grade


# --- CREATE GRADE ---
@router.post("", response_model=GradeOut, status_code=status.HTTP_201_CREATED)
async def create_grade(
    payload: GradeCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("grades:write")),
):
    await ensure_user(storage, payload.student_id, role=UserRole.STUDENT, label="Student")
    await ensure_subject(storage, payload.subject_id)
    await ensure_group(storage, payload.group_id)

    async with storage.transaction():
        grade = await storage.create_grade({**payload.model_dump(), "graded_by": current_user.id})
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="create_grade",
            entity_type="grade",
            entity_id=grade.id,
            details={
                "title": grade.title,
                "value": grade.grade_value,
                "maxValue": grade.max_value,
                "gradeType": grade.grade_type,
                "studentId": grade.student_id,
            },
        )
    return grade


# --- UPDATE GRADE ---
@router.put("/{grade_id}", response_model=GradeOut)
async def update_grade(
    grade_id: UUID,
    payload: GradeUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("grades:write")),
):
    grade = await storage.get_grade(grade_id)
    if not grade:
        raise not_found("Grade")

    changes = changes_from(payload, nullable=("description",))

    # Bounds are checked on the merged record, not just the sent fields
    try:
        check_grade_bounds(
            changes.get("grade_value", grade.grade_value),
            changes.get("max_value", grade.max_value),
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    async with storage.transaction():
        grade = await storage.update_grade(grade_id, changes)
        if not grade:
            raise not_found("Grade")
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="update_grade",
            entity_type="grade",
            entity_id=grade_id,
            details={"updates": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
    return grade


# --- DELETE GRADE ---
@router.delete("/{grade_id}", response_model=MessageResponse)
async def delete_grade(
    grade_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("grades:write")),
):
    async with storage.transaction():
        deleted = await storage.delete_grade(grade_id)
        if not deleted:
            raise not_found("Grade")
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="delete_grade",
            entity_type="grade",
            entity_id=grade_id,
            details={"deletedAt": timestamp()},
        )
    return MessageResponse(message="Grade deleted successfully")
