from sqlalchemy import Column, Integer, ForeignKey, String, Boolean

from pharmacy.data.database import Base


class CourierScheduleModel(Base):
    __tablename__ = "courier_work_schedule"

    id = Column(Integer, primary_key=True)
    courier_id = Column(Integer, ForeignKey("couriers.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = poniedzialek
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
