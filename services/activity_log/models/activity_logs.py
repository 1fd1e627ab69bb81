# services/activity_log/models/activity_logs.py
from sqlalchemy import Column, String, DateTime, JSON, Index, Uuid
from shared.db import Base


class ActivityLog(Base):
    """Append-only audit trail.

    ``user_id`` and ``entity_id`` are plain columns rather than foreign keys so
    that removing a user or an entity never removes its history.
    """

    __tablename__ = "activity_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    user_id = Column(Uuid(as_uuid=True), nullable=False)
    action = Column(String(100), nullable=False)      # e.g. "create_user", "login"
    entity_type = Column(String(50), nullable=False)  # e.g. "user", "schedule"
    entity_id = Column(Uuid(as_uuid=True), nullable=True)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_activity_user", "user_id"),
        Index("idx_activity_created", "created_at"),
    )
