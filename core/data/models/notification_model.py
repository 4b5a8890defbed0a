"""SQLAlchemy ORM model for in-app notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text

from .base import Base, new_id, utcnow


class NotificationModel(Base):
    """SQLAlchemy ORM model for notifications table."""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    type = Column(String(30), nullable=False, default="GENERAL")
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
