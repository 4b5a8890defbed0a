"""SQLAlchemy ORM model for product reviews."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class ReviewModel(Base):
    """One buyer's review of one product."""

    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("buyer_id", "product_id", name="uq_review_buyer_product"),)

    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    buyer_id = Column(String(36), ForeignKey("buyers.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    buyer = relationship("BuyerModel", lazy="selectin")
    product = relationship("ProductModel", lazy="selectin")
