# storefront/data/models/order.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, Numeric, JSON
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    order_number = Column(String, nullable=False)

    status = Column(String, nullable=False, default="placed")  # placed, packed, shipped, delivered, cancelled
    total_amount = Column(Numeric(10, 2), nullable=False)

    payment_method = Column(String, nullable=False, default="cod")
    payment_status = Column(String, nullable=False, default="pending")
    payment_id = Column(String, nullable=True)

    shipping_address = Column(JSON, nullable=False)
    phone_number = Column(String, nullable=False)
    notes = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    order_items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
