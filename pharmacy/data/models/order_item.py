from sqlalchemy import Column, Integer, ForeignKey, String, Numeric
from sqlalchemy.orm import relationship

from pharmacy.data.database import Base


class DeliveryOrderItemModel(Base):
    __tablename__ = "delivery_order_items"

    id = Column(Integer, primary_key=True)
    delivery_order_id = Column(Integer, ForeignKey("delivery_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True)

    # snapshot produktu w chwili zamowienia
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    order = relationship("DeliveryOrderModel", back_populates="items")
