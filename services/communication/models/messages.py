# services/communication/models/messages.py
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index, UniqueConstraint, Uuid
from shared.db import Base


class GroupMessage(Base):
    __tablename__ = "group_messages"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    group_id = Column(Uuid(as_uuid=True), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    is_important = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_group_message_group", "group_id"),
    )


class MessageComment(Base):
    __tablename__ = "message_comments"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    message_id = Column(Uuid(as_uuid=True), ForeignKey("group_messages.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False)


class MessageLike(Base):
    __tablename__ = "message_likes"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    message_id = Column(Uuid(as_uuid=True), ForeignKey("group_messages.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("message_id", "user_id", name="uq_message_like_per_user"),
    )
