#pharmacy/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from pharmacy.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    manufacturer = Column(String(255), nullable=True)
    country = Column(String(100), nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    old_price = Column(Numeric(10, 2), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    stock_quantity = Column(Integer, nullable=False, default=0)
    in_stock = Column(Boolean, nullable=False, default=True)
    is_popular = Column(Boolean, nullable=False, default=False)
    is_new = Column(Boolean, nullable=False, default=False)

    # karta leku
    composition = Column(Text, nullable=True)
    indications = Column(Text, nullable=True)
    usage = Column(Text, nullable=True)
    contraindications = Column(Text, nullable=True)
    dosage = Column(Text, nullable=True)
    expiry_date = Column(String(50), nullable=True)
    storage_conditions = Column(Text, nullable=True)

    image = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    category = relationship("CategoryModel")

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category else None
