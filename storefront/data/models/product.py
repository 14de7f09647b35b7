# storefront/data/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, Integer, Boolean, Numeric, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    discount_price = Column(Numeric(10, 2), nullable=True)

    images = Column(JSON, nullable=False, default=list)  # first one is the primary image
    sizes = Column(JSON, nullable=False, default=list)  # [{"size": "M", "stock": 3}, ...]
    stock_quantity = Column(Integer, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)

    sku = Column(String, nullable=False, unique=True)
    fabric_details = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    category = relationship("CategoryModel", back_populates="products")
