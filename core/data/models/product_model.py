"""SQLAlchemy ORM models for the product catalog."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class ProductModel(Base):
    """SQLAlchemy ORM model for products table."""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id)
    producer_id = Column(String(36), ForeignKey("producers.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True, index=True)
    price = Column(Numeric(12, 2), nullable=False)
    quantity_available = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    average_rating = Column(Numeric(3, 1), nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    producer = relationship("ProducerModel", lazy="selectin")
    shares = relationship(
        "ProductProducerModel",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="ProductProducerModel.position",
    )


class ProductProducerModel(Base):
    """Co-producer share of a product's revenue."""

    __tablename__ = "product_producers"
    __table_args__ = (UniqueConstraint("product_id", "producer_id", name="uq_product_producer"),)

    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    producer_id = Column(String(36), ForeignKey("producers.id"), nullable=False, index=True)
    share_percentage = Column(Numeric(5, 2), nullable=False)
    role = Column(String(50), nullable=False, default="OWNER")
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow)
