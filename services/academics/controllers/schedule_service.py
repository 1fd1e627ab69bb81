# services/academics/controllers/schedule_service.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from services.academics.controllers.references import ensure_group, ensure_subject, ensure_user, not_found
from services.academics.schemas.schedules import ScheduleCreate, ScheduleOut, ScheduleUpdate, check_time_range
from services.activity_log.controllers.activity_service import record_activity, timestamp
from services.user_management.models.users import User, UserRole
from shared.auth import require_permission
from shared.schemas import MessageResponse, changes_from
from shared.storage import Storage, get_storage

router = APIRouter(prefix="/api/schedules", tags=["Schedules"])


# --- LIST SCHEDULES ---
#  /api/schedules?groupId=...  or  /api/schedules?professorId=...
@router.get("", response_model=List[ScheduleOut])
async def list_schedules(
    group_id: Optional[UUID] = Query(None, alias="groupId"),
    professor_id: Optional[UUID] = Query(None, alias="professorId"),
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("schedules:read")),
):
    if group_id:
        return await storage.list_schedules_by_group(group_id)
    if professor_id:
        return await storage.list_schedules_by_professor(professor_id)
    return await storage.list_schedules()


# --- GET SCHEDULE ---
@router.get("/{schedule_id}", response_model=ScheduleOut)
async def get_schedule(
    schedule_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("schedules:read")),
):
    schedule = await storage.get_schedule(schedule_id)
    if not schedule:
        raise not_found("Schedule")
    return schedule


# --- CREATE SCHEDULE ---
@router.post("", response_model=ScheduleOut, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    payload: ScheduleCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("schedules:write")),
):
    """
    Add a weekly slot. Overlapping slots for the same room or professor are
    accepted; resolving conflicts is left to the people editing the timetable.
    """
    await ensure_group(storage, payload.group_id)
    await ensure_subject(storage, payload.subject_id)
    await ensure_user(storage, payload.professor_id, role=UserRole.PROFESSOR, label="Professor")

    async with storage.transaction():
        schedule = await storage.create_schedule(payload.model_dump())
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="create_schedule",
            entity_type="schedule",
            entity_id=schedule.id,
            details={
                "dayOfWeek": schedule.day_of_week,
                "startTime": schedule.start_time,
                "endTime": schedule.end_time,
                "groupId": schedule.group_id,
                "subjectId": schedule.subject_id,
            },
        )
    return schedule


# --- UPDATE SCHEDULE ---
@router.put("/{schedule_id}", response_model=ScheduleOut)
async def update_schedule(
    schedule_id: UUID,
    payload: ScheduleUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("schedules:write")),
):
    schedule = await storage.get_schedule(schedule_id)
    if not schedule:
        raise not_found("Schedule")

    changes = changes_from(payload, nullable=("room", "notes"))
    try:
        check_time_range(
            changes.get("start_time", schedule.start_time),
            changes.get("end_time", schedule.end_time),
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if "group_id" in changes:
        await ensure_group(storage, changes["group_id"])
    if "subject_id" in changes:
        await ensure_subject(storage, changes["subject_id"])
    if "professor_id" in changes:
        await ensure_user(storage, changes["professor_id"], role=UserRole.PROFESSOR, label="Professor")

    async with storage.transaction():
        schedule = await storage.update_schedule(schedule_id, changes)
        if not schedule:
            raise not_found("Schedule")
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="update_schedule",
            entity_type="schedule",
            entity_id=schedule_id,
            details={"updates": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
    return schedule


# --- DELETE SCHEDULE ---
@router.delete("/{schedule_id}", response_model=MessageResponse)
async def delete_schedule(
    schedule_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("schedules:write")),
):
    async with storage.transaction():
        deleted = await storage.delete_schedule(schedule_id)
        if not deleted:
            raise not_found("Schedule")
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="delete_schedule",
            entity_type="schedule",
            entity_id=schedule_id,
            details={"deletedAt": timestamp()},
        )
    return MessageResponse(message="Schedule deleted successfully")
