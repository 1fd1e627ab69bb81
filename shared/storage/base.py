# shared/storage/base.py
"""Storage contract shared by the in-memory and database backends.

Backends implement five primitives (``_get``, ``_find``, ``_insert``,
``_update``, ``_delete``) plus ``transaction``; every entity operation below
is written once on top of them, so both backends expose the same behaviour.
"""
import uuid
from abc import ABC, abstractmethod
from typing import Any, AsyncContextManager, Dict, List, Optional, Sequence, Tuple, Type

from sqlalchemy import UniqueConstraint

from shared.db import Base, utcnow
from services.user_management.models.users import User
from services.academics.models import Group, Subject, Material, Grade, Schedule
from services.communication.models import GroupMessage, MessageComment, MessageLike, Notification
from services.activity_log.models import ActivityLog

# (attribute, descending)
OrderBy = Sequence[Tuple[str, bool]]

USER_ORDER: OrderBy = (("first_name", False), ("last_name", False))
NAME_ORDER: OrderBy = (("name", False),)
NEWEST_FIRST: OrderBy = (("created_at", True),)
OLDEST_FIRST: OrderBy = (("created_at", False),)
GRADE_ORDER: OrderBy = (("graded_at", True),)
SCHEDULE_ORDER: OrderBy = (("day_of_week", False), ("start_time", False))


def column_keys(model: Type[Base]) -> List[str]:
    return [column.key for column in model.__table__.columns]


def build_record(model: Type[Base], data: Dict[str, Any]) -> Base:
    """Instantiate ``model`` with a fresh id, timestamps and column defaults."""
    record = model(**data)
    now = utcnow()
    record.id = uuid.uuid4()
    for key in ("created_at", "updated_at", "graded_at"):
        if key in model.__table__.columns:
            setattr(record, key, now)
    for column in model.__table__.columns:
        if getattr(record, column.key) is None and column.default is not None and column.default.is_scalar:
            setattr(record, column.key, column.default.arg)
    return record


def clone_record(record: Base) -> Base:
    model = type(record)
    return model(**{key: getattr(record, key) for key in column_keys(model)})


def _model_for_table(table) -> Type[Base]:
    for mapper in Base.registry.mappers:
        if mapper.local_table is table:
            return mapper.class_
    raise LookupError(f"No model mapped to table {table.name}")


def unique_keys(model: Type[Base]) -> List[Tuple[str, ...]]:
    keys = set()
    for constraint in model.__table__.constraints:
        if isinstance(constraint, UniqueConstraint):
            keys.add(tuple(column.key for column in constraint.columns))
    for column in model.__table__.columns:
        if column.unique:
            keys.add((column.key,))
    return sorted(keys)


def foreign_keys(model: Type[Base]) -> List[Tuple[str, Type[Base], str]]:
    """(local attribute, referenced model, referenced attribute) per foreign key."""
    refs = []
    for column in model.__table__.columns:
        for fk in column.foreign_keys:
            refs.append((column.key, _model_for_table(fk.column.table), fk.column.key))
    return refs


def dependents(model: Type[Base]) -> List[Tuple[Type[Base], str, Optional[str]]]:
    """(referencing model, referencing attribute, ON DELETE rule) for rows pointing at ``model``."""
    found = []
    for mapper in Base.registry.mappers:
        for column in mapper.local_table.columns:
            for fk in column.foreign_keys:
                if fk.column.table is model.__table__:
                    found.append((mapper.class_, column.key, fk.ondelete))
    return found


class Storage(ABC):
    # --- BACKEND PRIMITIVES ---

    @abstractmethod
    async def init(self) -> None:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...

    @abstractmethod
    def transaction(self) -> AsyncContextManager[None]:
        """Group the calls made inside the block into one unit of work."""

    @abstractmethod
    async def _get(self, model: Type[Base], record_id: uuid.UUID) -> Optional[Base]:
        ...

    @abstractmethod
    async def _find(self, model: Type[Base], filters: Dict[str, Any], order_by: OrderBy) -> List[Base]:
        ...

    @abstractmethod
    async def _insert(self, record: Base) -> Base:
        ...

    @abstractmethod
    async def _update(self, model: Type[Base], record_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Base]:
        ...

    @abstractmethod
    async def _delete(self, model: Type[Base], record_id: uuid.UUID) -> bool:
        ...

    async def _create(self, model: Type[Base], data: Dict[str, Any]) -> Base:
        return await self._insert(build_record(model, data))

    async def _modify(self, model: Type[Base], record_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Base]:
        changes = {key: value for key, value in changes.items() if key not in ("id", "created_at")}
        if "updated_at" in model.__table__.columns:
            changes["updated_at"] = utcnow()
        return await self._update(model, record_id, changes)

    async def _first(self, model: Type[Base], filters: Dict[str, Any]) -> Optional[Base]:
        rows = await self._find(model, filters, ())
        return rows[0] if rows else None

    # --- USERS ---

    async def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        return await self._get(User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self._first(User, {"email": email})

    async def list_users(self) -> List[User]:
        return await self._find(User, {}, USER_ORDER)

    async def create_user(self, data: Dict[str, Any]) -> User:
        return await self._create(User, data)

    async def update_user(self, user_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[User]:
        return await self._modify(User, user_id, changes)

    async def delete_user(self, user_id: uuid.UUID) -> bool:
        return await self._delete(User, user_id)

    # --- GROUPS ---

    async def list_groups(self) -> List[Group]:
        return await self._find(Group, {}, NAME_ORDER)

    async def get_group(self, group_id: uuid.UUID) -> Optional[Group]:
        return await self._get(Group, group_id)

    async def create_group(self, data: Dict[str, Any]) -> Group:
        return await self._create(Group, data)

    async def update_group(self, group_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Group]:
        return await self._modify(Group, group_id, changes)

    async def delete_group(self, group_id: uuid.UUID) -> bool:
        return await self._delete(Group, group_id)

    # --- SUBJECTS ---

    async def list_subjects(self) -> List[Subject]:
        return await self._find(Subject, {}, NAME_ORDER)

    async def get_subject(self, subject_id: uuid.UUID) -> Optional[Subject]:
        return await self._get(Subject, subject_id)

    async def get_subject_by_code(self, code: str) -> Optional[Subject]:
        return await self._first(Subject, {"code": code})

    async def create_subject(self, data: Dict[str, Any]) -> Subject:
        return await self._create(Subject, data)

    async def update_subject(self, subject_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Subject]:
        return await self._modify(Subject, subject_id, changes)

    async def delete_subject(self, subject_id: uuid.UUID) -> bool:
        return await self._delete(Subject, subject_id)

    # --- MATERIALS ---

    async def list_materials(self) -> List[Material]:
        return await self._find(Material, {}, NEWEST_FIRST)

    async def list_materials_by_group(self, group_id: uuid.UUID) -> List[Material]:
        return await self._find(Material, {"group_id": group_id}, NEWEST_FIRST)

    async def get_material(self, material_id: uuid.UUID) -> Optional[Material]:
        return await self._get(Material, material_id)

    async def create_material(self, data: Dict[str, Any]) -> Material:
        return await self._create(Material, data)

    async def update_material(self, material_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Material]:
        return await self._modify(Material, material_id, changes)

    async def delete_material(self, material_id: uuid.UUID) -> bool:
        return await self._delete(Material, material_id)

    # --- GRADES ---

    async def list_grades(self) -> List[Grade]:
        return await self._find(Grade, {}, GRADE_ORDER)

    async def list_grades_by_student(self, student_id: uuid.UUID) -> List[Grade]:
        return await self._find(Grade, {"student_id": student_id}, GRADE_ORDER)

    async def get_grade(self, grade_id: uuid.UUID) -> Optional[Grade]:
        return await self._get(Grade, grade_id)

    async def create_grade(self, data: Dict[str, Any]) -> Grade:
        return await self._create(Grade, data)

    async def update_grade(self, grade_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Grade]:
        return await self._modify(Grade, grade_id, changes)

    async def delete_grade(self, grade_id: uuid.UUID) -> bool:
        return await self._delete(Grade, grade_id)

    # --- SCHEDULES ---

    async def list_schedules(self) -> List[Schedule]:
        return await self._find(Schedule, {}, SCHEDULE_ORDER)

    async def list_schedules_by_group(self, group_id: uuid.UUID) -> List[Schedule]:
        return await self._find(Schedule, {"group_id": group_id}, SCHEDULE_ORDER)

    async def list_schedules_by_professor(self, professor_id: uuid.UUID) -> List[Schedule]:
        return await self._find(Schedule, {"professor_id": professor_id}, SCHEDULE_ORDER)

    async def get_schedule(self, schedule_id: uuid.UUID) -> Optional[Schedule]:
        return await self._get(Schedule, schedule_id)

    async def create_schedule(self, data: Dict[str, Any]) -> Schedule:
        return await self._create(Schedule, data)

    async def update_schedule(self, schedule_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Schedule]:
        return await self._modify(Schedule, schedule_id, changes)

    async def delete_schedule(self, schedule_id: uuid.UUID) -> bool:
        return await self._delete(Schedule, schedule_id)

    # --- ACTIVITY LOG (append-only) ---

    async def log_activity(self, data: Dict[str, Any]) -> ActivityLog:
        return await self._create(ActivityLog, data)

    async def list_activities(self) -> List[ActivityLog]:
        return await self._find(ActivityLog, {}, NEWEST_FIRST)

    async def list_user_activities(self, user_id: uuid.UUID) -> List[ActivityLog]:
        return await self._find(ActivityLog, {"user_id": user_id}, NEWEST_FIRST)

    # --- NOTIFICATIONS ---

    async def create_notification(self, data: Dict[str, Any]) -> Notification:
        return await self._create(Notification, data)

    async def get_notification(self, notification_id: uuid.UUID) -> Optional[Notification]:
        return await self._get(Notification, notification_id)

    async def list_user_notifications(self, user_id: uuid.UUID) -> List[Notification]:
        return await self._find(Notification, {"user_id": user_id}, NEWEST_FIRST)

    async def mark_notification_as_read(self, notification_id: uuid.UUID) -> bool:
        return await self._update(Notification, notification_id, {"is_read": True}) is not None

    # --- GROUP MESSAGES ---

    async def list_group_messages(self, group_id: uuid.UUID) -> List[GroupMessage]:
        return await self._find(GroupMessage, {"group_id": group_id}, NEWEST_FIRST)

    async def get_group_message(self, message_id: uuid.UUID) -> Optional[GroupMessage]:
        return await self._get(GroupMessage, message_id)

    async def create_group_message(self, data: Dict[str, Any]) -> GroupMessage:
        return await self._create(GroupMessage, data)

    async def delete_group_message(self, message_id: uuid.UUID) -> bool:
        return await self._delete(GroupMessage, message_id)

    async def list_message_comments(self, message_id: uuid.UUID) -> List[MessageComment]:
        return await self._find(MessageComment, {"message_id": message_id}, OLDEST_FIRST)

    async def create_message_comment(self, data: Dict[str, Any]) -> MessageComment:
        return await self._create(MessageComment, data)

    async def list_message_likes(self, message_id: uuid.UUID) -> List[MessageLike]:
        return await self._find(MessageLike, {"message_id": message_id}, OLDEST_FIRST)

    async def get_message_like(self, message_id: uuid.UUID, user_id: uuid.UUID) -> Optional[MessageLike]:
        return await self._first(MessageLike, {"message_id": message_id, "user_id": user_id})

    async def create_message_like(self, data: Dict[str, Any]) -> MessageLike:
        return await self._create(MessageLike, data)

    async def delete_message_like(self, like_id: uuid.UUID) -> bool:
        return await self._delete(MessageLike, like_id)
