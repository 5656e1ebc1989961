# storefront/data/models/product.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Numeric
from datetime import datetime, timezone

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    inventory = Column(Integer, nullable=False, default=0)
    sku = Column(String, nullable=False)
    featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
