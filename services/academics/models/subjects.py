# services/academics/models/subjects.py

from sqlalchemy import Column, String, Text, Boolean, DateTime, Uuid
from shared.db import Base

DEFAULT_SUBJECT_COLOR = "#3b82f6"


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    name = Column(String(100), nullable=False)  # e.g., "Mathématiques"
    code = Column(String(20), unique=True, nullable=False)  # e.g., "MATH"
    description = Column(Text, nullable=True)
    color = Column(String(7), nullable=False, default=DEFAULT_SUBJECT_COLOR)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False)
