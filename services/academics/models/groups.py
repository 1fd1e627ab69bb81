# services/academics/models/groups.py
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid
from shared.db import Base


class Group(Base):
    __tablename__ = "groups"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    name = Column(String(100), nullable=False)          # E.g., "6ème A"
    description = Column(Text, nullable=True)
    academic_year = Column(String(10), nullable=False)  # E.g., "2024-2025"
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
