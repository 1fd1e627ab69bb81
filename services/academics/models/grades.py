# services/academics/models/grades.py
from sqlalchemy import Column, String, Text, Numeric, Enum, DateTime, ForeignKey, Index, Uuid
from shared.db import Base
from services.user_management.models.users import enum_values
import enum

DEFAULT_MAX_VALUE = 20.0


class GradeType(str, enum.Enum):
    EXAM = "exam"
    HOMEWORK = "homework"
    QUIZ = "quiz"
    PROJECT = "project"
    PARTICIPATION = "participation"


class Grade(Base):
    __tablename__ = "grades"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    student_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    subject_id = Column(Uuid(as_uuid=True), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    group_id = Column(Uuid(as_uuid=True), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    grade_value = Column(Numeric(5, 2, asdecimal=False), nullable=False)
    max_value = Column(Numeric(5, 2, asdecimal=False), nullable=False, default=DEFAULT_MAX_VALUE)
    grade_type = Column(
        Enum(GradeType, native_enum=False, length=50, values_callable=enum_values),
        nullable=False,
    )
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    graded_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    graded_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_grade_student", "student_id"),
        Index("idx_grade_group_subject", "group_id", "subject_id"),
    )
