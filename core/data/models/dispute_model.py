"""SQLAlchemy ORM models for order disputes."""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class DisputeModel(Base):
    """SQLAlchemy ORM model for disputes table."""

    __tablename__ = "disputes"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id"), unique=True, nullable=False)
    raised_by_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    reason = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="OPEN", index=True)
    resolution = Column(Text, nullable=True)
    refund_amount = Column(Numeric(12, 2), nullable=True)
    resolved_by_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    raised_by = relationship("UserModel", foreign_keys=[raised_by_id], lazy="selectin")
    messages = relationship(
        "DisputeMessageModel",
        lazy="selectin",
        order_by="DisputeMessageModel.created_at",
    )


class DisputeMessageModel(Base):
    """Message posted on a dispute thread."""

    __tablename__ = "dispute_messages"

    id = Column(String(36), primary_key=True, default=new_id)
    dispute_id = Column(String(36), ForeignKey("disputes.id"), nullable=False, index=True)
    sender_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    sender = relationship("UserModel", lazy="selectin")
