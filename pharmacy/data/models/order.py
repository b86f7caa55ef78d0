from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, DateTime, Numeric
from sqlalchemy.orm import relationship

from pharmacy.data.database import Base
from pharmacy.domain.order_state import OrderStatus


class DeliveryOrderModel(Base):
    __tablename__ = "delivery_orders"

    id = Column(Integer, primary_key=True)
    order_code = Column(String(32), nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    courier_id = Column(Integer, ForeignKey("couriers.id"), nullable=True, index=True)

    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)
    total_amount = Column(Numeric(10, 2), nullable=False)

    delivery_address = Column(Text, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=False)
    customer_notes = Column(Text, nullable=True)
    payment_method = Column(String(50), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    assigned_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    items = relationship(
        "DeliveryOrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="DeliveryOrderItemModel.id",
    )
    courier = relationship("CourierModel")
