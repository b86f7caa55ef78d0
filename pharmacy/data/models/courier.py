#pharmacy/data/models/courier.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric

from pharmacy.data.database import Base


class CourierModel(Base):
    __tablename__ = "couriers"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    courier_code = Column(String(32), nullable=False, unique=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    vehicle_type = Column(String(50), nullable=False, default="bicycle")
    vehicle_number = Column(String(50), nullable=False, default="")

    status = Column(String(20), nullable=False, default="active")
    rating = Column(Numeric(3, 2), nullable=False, default=5)

    # liczniki i zarobki
    total_orders = Column(Integer, nullable=False, default=0)
    completed_orders = Column(Integer, nullable=False, default=0)
    current_daily_orders = Column(Integer, nullable=False, default=0)
    daily_goal = Column(Integer, nullable=False, default=10)
    total_earnings = Column(Numeric(12, 2), nullable=False, default=0)
    today_earnings = Column(Numeric(12, 2), nullable=False, default=0)

    last_activity = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
