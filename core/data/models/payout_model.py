"""SQLAlchemy ORM models for the payout ledger."""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class OrderProducerModel(Base):
    """
    One producer's split of one order.

    producer_amount + marketplace_commission == subtotal
    """

    __tablename__ = "order_producers"
    __table_args__ = (UniqueConstraint("order_id", "producer_id", name="uq_order_producer"),)

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    producer_id = Column(String(36), ForeignKey("producers.id"), nullable=False, index=True)
    product_ids = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(12, 2), nullable=False)
    marketplace_commission = Column(Numeric(12, 2), nullable=False)
    producer_amount = Column(Numeric(12, 2), nullable=False)
    payout_status = Column(String(20), nullable=False, default="PENDING", index=True)
    paid_at = Column(DateTime, nullable=True)
    payout_reference = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=utcnow)


class ProducerPayoutModel(Base):
    """
    Batch of order producer splits paid out together.

    amount == commission + net_amount
    """

    __tablename__ = "producer_payouts"

    id = Column(String(36), primary_key=True, default=new_id)
    producer_id = Column(String(36), ForeignKey("producers.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    commission = Column(Numeric(12, 2), nullable=False, default=0)
    net_amount = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="ETB")
    status = Column(String(20), nullable=False, default="PENDING", index=True)
    payout_method = Column(String(20), nullable=True)
    payout_reference = Column(String(100), nullable=True)
    bank_account_id = Column(
        String(36), ForeignKey("producer_bank_accounts.id"), nullable=True
    )
    payout_destination = Column(String(255), nullable=True)
    scheduled_for = Column(DateTime, nullable=True, index=True)
    paid_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    producer = relationship("ProducerModel", lazy="selectin")
    items = relationship("PayoutOrderItemModel", lazy="selectin")


class PayoutOrderItemModel(Base):
    """Link between a payout batch and an order producer split."""

    __tablename__ = "payout_order_items"
    __table_args__ = (
        UniqueConstraint("payout_id", "order_producer_id", name="uq_payout_order_producer"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    payout_id = Column(String(36), ForeignKey("producer_payouts.id"), nullable=False, index=True)
    order_producer_id = Column(
        String(36), ForeignKey("order_producers.id"), nullable=False, index=True
    )
    amount = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, default=utcnow)

    order_producer = relationship("OrderProducerModel", lazy="selectin")
