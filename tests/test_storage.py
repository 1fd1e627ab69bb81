import uuid

import pytest

from services.academics.models import GradeType
from services.user_management.models.users import UserRole
from shared.config import Settings
from shared.errors import ConstraintViolation
from shared.seed import DEFAULT_SUBJECTS, seed_defaults
from shared.storage import MemoryStorage


async def _user(storage, email="eleve@ecole.com", role=UserRole.STUDENT, **extra):
    return await storage.create_user({
        "email": email,
        "password": "hash",
        "first_name": extra.pop("first_name", "Jean"),
        "last_name": extra.pop("last_name", "Dupont"),
        "role": role,
        **extra,
    })


async def _group(storage, name="6ème A", **extra):
    return await storage.create_group({"name": name, "academic_year": "2024-2025", **extra})


async def _subject(storage, code="MATH", name="Mathématiques"):
    return await storage.create_subject({"name": name, "code": code})


async def test_create_assigns_id_timestamps_and_defaults(storage):
    user = await _user(storage)

    assert isinstance(user.id, uuid.UUID)
    assert user.created_at is not None
    assert user.updated_at is not None
    assert user.is_active is True
    assert user.must_change_password is True

    fetched = await storage.get_user(user.id)
    assert fetched.email == "eleve@ecole.com"
    assert fetched.role == UserRole.STUDENT


async def test_get_unknown_id_returns_none(storage):
    assert await storage.get_user(uuid.uuid4()) is None
    assert await storage.get_group(uuid.uuid4()) is None


async def test_update_merges_fields(storage):
    group = await _group(storage)

    updated = await storage.update_group(group.id, {"name": "6ème B"})

    assert updated.name == "6ème B"
    assert updated.academic_year == "2024-2025"
    assert (await storage.get_group(group.id)).name == "6ème B"


async def test_update_refreshes_updated_at_and_keeps_id(storage):
    user = await _user(storage)

    updated = await storage.update_user(user.id, {"first_name": "Paul", "id": uuid.uuid4()})

    assert updated.id == user.id
    assert updated.first_name == "Paul"
    assert updated.updated_at >= user.updated_at
    assert updated.created_at == user.created_at


async def test_update_unknown_id_returns_none(storage):
    assert await storage.update_subject(uuid.uuid4(), {"name": "X"}) is None


async def test_delete_reports_whether_a_row_was_removed(storage):
    subject = await _subject(storage)

    assert await storage.delete_subject(subject.id) is True
    assert await storage.get_subject(subject.id) is None
    assert await storage.delete_subject(subject.id) is False


async def test_returned_records_are_detached(storage):
    group = await _group(storage)
    group.name = "changed locally"

    assert (await storage.get_group(group.id)).name == "6ème A"


async def test_users_sorted_by_first_then_last_name(storage):
    await _user(storage, "c@ecole.com", first_name="Zoé", last_name="Martin")
    await _user(storage, "b@ecole.com", first_name="Anna", last_name="Petit")
    await _user(storage, "a@ecole.com", first_name="Anna", last_name="Bernard")

    users = await storage.list_users()

    assert [(u.first_name, u.last_name) for u in users] == [
        ("Anna", "Bernard"), ("Anna", "Petit"), ("Zoé", "Martin"),
    ]


async def test_schedules_sorted_by_day_then_start_time(storage):
    group = await _group(storage)
    subject = await _subject(storage)
    professor = await _user(storage, "prof@ecole.com", role=UserRole.PROFESSOR)
    slots = [(2, "10:00", "11:00"), (1, "14:00", "15:00"), (1, "08:00", "09:00")]
    for day, start, end in slots:
        await storage.create_schedule({
            "group_id": group.id,
            "subject_id": subject.id,
            "professor_id": professor.id,
            "day_of_week": day,
            "start_time": start,
            "end_time": end,
        })

    schedules = await storage.list_schedules_by_group(group.id)

    assert [(s.day_of_week, s.start_time) for s in schedules] == [(1, "08:00"), (1, "14:00"), (2, "10:00")]
    assert len(await storage.list_schedules_by_professor(professor.id)) == 3
    assert await storage.list_schedules_by_group(uuid.uuid4()) == []


async def test_duplicate_email_is_a_constraint_violation(storage):
    await _user(storage)

    with pytest.raises(ConstraintViolation):
        await _user(storage)

    assert len(await storage.list_users()) == 1


async def test_duplicate_subject_code_on_update(storage):
    await _subject(storage, "MATH")
    french = await _subject(storage, "FR", "Français")

    with pytest.raises(ConstraintViolation):
        await storage.update_subject(french.id, {"code": "MATH"})

    assert (await storage.get_subject(french.id)).code == "FR"


async def test_missing_reference_is_a_constraint_violation(storage):
    subject = await _subject(storage)
    group = await _group(storage)
    professor = await _user(storage, "prof@ecole.com", role=UserRole.PROFESSOR)

    with pytest.raises(ConstraintViolation):
        await storage.create_grade({
            "student_id": uuid.uuid4(),
            "subject_id": subject.id,
            "group_id": group.id,
            "grade_value": 12,
            "max_value": 20,
            "grade_type": GradeType.EXAM,
            "title": "Contrôle",
            "graded_by": professor.id,
        })


async def test_deleting_a_group_cascades_to_its_dependents(storage):
    group = await _group(storage)
    subject = await _subject(storage)
    professor = await _user(storage, "prof@ecole.com", role=UserRole.PROFESSOR)
    await storage.create_material({
        "title": "Cours 1",
        "file_name": "cours1.pdf",
        "file_url": "https://files.ecole.com/cours1.pdf",
        "file_type": "application/pdf",
        "file_size": 1024,
        "group_id": group.id,
        "subject_id": subject.id,
        "uploaded_by": professor.id,
    })
    message = await storage.create_group_message({
        "group_id": group.id,
        "author_id": professor.id,
        "title": "Sortie",
        "content": "Sortie au musée vendredi",
    })
    await storage.create_message_comment({"message_id": message.id, "author_id": professor.id, "content": "Ok"})

    assert await storage.delete_group(group.id) is True

    assert await storage.list_materials_by_group(group.id) == []
    assert await storage.list_group_messages(group.id) == []
    assert await storage.list_message_comments(message.id) == []
    assert await storage.get_subject(subject.id) is not None


async def test_deleting_a_creator_nulls_created_by(storage):
    admin = await _user(storage, "admin@ecole.com", role=UserRole.ADMIN)
    group = await _group(storage, created_by=admin.id)

    await storage.delete_user(admin.id)

    assert (await storage.get_group(group.id)).created_by is None


async def test_one_like_per_user_and_message(storage):
    group = await _group(storage)
    professor = await _user(storage, "prof@ecole.com", role=UserRole.PROFESSOR)
    student = await _user(storage)
    message = await storage.create_group_message({
        "group_id": group.id, "author_id": professor.id, "title": "Info", "content": "Réunion",
    })

    like = await storage.create_message_like({"message_id": message.id, "user_id": student.id})
    with pytest.raises(ConstraintViolation):
        await storage.create_message_like({"message_id": message.id, "user_id": student.id})

    assert (await storage.get_message_like(message.id, student.id)).id == like.id
    assert await storage.delete_message_like(like.id) is True
    assert await storage.get_message_like(message.id, student.id) is None


async def test_notifications_are_scoped_to_their_user(storage):
    student = await _user(storage)
    other = await _user(storage, "autre@ecole.com")
    notification = await storage.create_notification({
        "user_id": student.id, "title": "Note", "message": "Nouvelle note disponible",
    })

    assert notification.is_read is False
    assert [n.id for n in await storage.list_user_notifications(student.id)] == [notification.id]
    assert await storage.list_user_notifications(other.id) == []

    assert await storage.mark_notification_as_read(notification.id) is True
    assert (await storage.get_notification(notification.id)).is_read is True
    assert await storage.mark_notification_as_read(uuid.uuid4()) is False


async def test_activity_log_survives_deleting_its_user(storage):
    user = await _user(storage)
    await storage.log_activity({
        "user_id": user.id, "action": "login", "entity_type": "user", "entity_id": user.id,
        "details": {"email": user.email},
    })

    await storage.delete_user(user.id)

    entries = await storage.list_user_activities(user.id)
    assert [entry.action for entry in entries] == ["login"]
    assert entries[0].details == {"email": "eleve@ecole.com"}


async def test_failed_transaction_rolls_back_on_the_database(storage):
    if isinstance(storage, MemoryStorage):
        pytest.skip("the in-memory backend does not roll back")

    with pytest.raises(RuntimeError):
        async with storage.transaction():
            await _group(storage)
            raise RuntimeError("boom")

    assert await storage.list_groups() == []


async def test_seeding_is_idempotent(storage):
    settings = Settings(default_admin_email="admin@ecole.com", default_admin_password="admin23")

    await seed_defaults(storage, settings)
    await seed_defaults(storage, settings)

    users = await storage.list_users()
    assert [u.email for u in users] == ["admin@ecole.com"]
    assert users[0].role == UserRole.ADMIN
    assert users[0].must_change_password is False
    codes = sorted(s.code for s in await storage.list_subjects())
    assert codes == sorted(s["code"] for s in DEFAULT_SUBJECTS)
