"""SQLAlchemy ORM model for the audit trail."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String

from .base import Base, new_id, utcnow


class AuditLogModel(Base):
    """Who changed what, with before/after snapshots."""

    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=new_id)
    action = Column(String(50), nullable=False, index=True)
    entity = Column(String(50), nullable=False, index=True)
    entity_id = Column(String(36), nullable=False, index=True)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    execution_id = Column(String(36), nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow)
