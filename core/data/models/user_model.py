"""SQLAlchemy ORM models for accounts and marketplace profiles."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class UserModel(Base):
    """SQLAlchemy ORM model for users table."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    role = Column(String(20), nullable=False, default="BUYER", index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class BuyerModel(Base):
    """SQLAlchemy ORM model for buyers table."""

    __tablename__ = "buyers"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    user = relationship("UserModel", lazy="selectin")


class ProducerModel(Base):
    """SQLAlchemy ORM model for producers table."""

    __tablename__ = "producers"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    business_name = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    verification_status = Column(String(20), nullable=False, default="PENDING")
    created_at = Column(DateTime, default=utcnow)

    user = relationship("UserModel", lazy="selectin")
