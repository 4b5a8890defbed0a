"""SQLAlchemy ORM model for producer payout accounts."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String

from .base import Base, new_id, utcnow


class ProducerBankAccountModel(Base):
    """
    Bank or mobile wallet account a producer is paid into.

    At most one account per producer has is_primary set.
    """

    __tablename__ = "producer_bank_accounts"

    id = Column(String(36), primary_key=True, default=new_id)
    producer_id = Column(String(36), ForeignKey("producers.id"), nullable=False, index=True)
    bank_name = Column(String(100), nullable=False)
    account_number = Column(String(50), nullable=False)
    account_name = Column(String(255), nullable=False)
    branch_name = Column(String(100), nullable=True)
    swift_code = Column(String(20), nullable=True)
    account_type = Column(String(20), nullable=False, default="SAVINGS")
    is_primary = Column(Boolean, nullable=False, default=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
