"""SQLAlchemy ORM models for the Order aggregate and its payment records."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class OrderModel(Base):
    """SQLAlchemy ORM model for orders table."""

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=new_id)
    buyer_id = Column(String(36), ForeignKey("buyers.id"), nullable=False, index=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="ETB")
    payment_status = Column(String(20), nullable=False, default="PENDING", index=True)
    delivery_status = Column(String(20), nullable=False, default="PENDING", index=True)
    shipping_address = Column(JSON, nullable=True)
    order_date = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    buyer = relationship("BuyerModel", lazy="selectin")
    items = relationship(
        "OrderItemModel", lazy="selectin", cascade="all, delete-orphan"
    )
    order_producers = relationship("OrderProducerModel", lazy="selectin")


class OrderItemModel(Base):
    """SQLAlchemy ORM model for order_items table."""

    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)


class OrderStatusHistoryModel(Base):
    """One row per delivery/payment status change."""

    __tablename__ = "order_status_history"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    notes = Column(Text, nullable=True)
    changed_by_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    changed_at = Column(DateTime, default=utcnow)


class PaymentReferenceModel(Base):
    """Gateway transaction reference issued for an order."""

    __tablename__ = "payment_references"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    payment_code = Column(String(50), unique=True, nullable=False, index=True)
    generated_at = Column(DateTime, default=utcnow)
    used_at = Column(DateTime, nullable=True)


class PaymentConfirmationModel(Base):
    """Outcome of a payment attempt."""

    __tablename__ = "payment_confirmations"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    method = Column(String(20), nullable=False, default="CHAPA")
    is_confirmed = Column(Boolean, nullable=False, default=False)
    confirmed_at = Column(DateTime, nullable=True)
    transaction_id = Column(String(100), nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow)
