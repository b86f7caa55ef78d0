from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, Boolean, DateTime
from sqlalchemy.orm import relationship

from pharmacy.data.database import Base


class CourierChatModel(Base):
    __tablename__ = "courier_chats"

    id = Column(Integer, primary_key=True)
    courier_id = Column(Integer, ForeignKey("couriers.id", ondelete="CASCADE"), nullable=False, index=True)
    participant_type = Column(String(20), nullable=False, default="support")
    participant_name = Column(String(255), nullable=False)

    last_message = Column(Text, nullable=True)
    last_message_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    unread_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    messages = relationship(
        "CourierChatMessageModel",
        back_populates="chat",
        cascade="all, delete-orphan",
    )


class CourierChatMessageModel(Base):
    __tablename__ = "courier_chat_messages"

    id = Column(Integer, primary_key=True)
    chat_id = Column(Integer, ForeignKey("courier_chats.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_type = Column(String(20), nullable=False)
    sender_name = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    chat = relationship("CourierChatModel", back_populates="messages")
