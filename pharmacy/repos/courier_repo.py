# pharmacy/repos/courier_repo.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select, update, delete, or_
from sqlalchemy.orm import Session

from pharmacy.data.models.courier import CourierModel
from pharmacy.data.models.courier_message import CourierMessageModel
from pharmacy.data.models.courier_chat import CourierChatModel, CourierChatMessageModel
from pharmacy.data.models.courier_schedule import CourierScheduleModel


class CourierRepo:
    def __init__(self, db: Session):
        self.db = db

    # ---------- kurier ----------
    def get_by_user(self, user_id: int) -> CourierModel | None:
        return self.db.execute(
            select(CourierModel)
            .where(CourierModel.user_id == user_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def find_by_user_or_email(self, user_id: int, email: str) -> CourierModel | None:
        return self.db.execute(
            select(CourierModel)
            .where(or_(CourierModel.user_id == user_id, CourierModel.email == email))
            .limit(1)
        ).scalar_one_or_none()

    def add_courier(self, courier: CourierModel) -> CourierModel:
        self.db.add(courier)
        self.db.flush()
        return courier

    def update_courier(self, courier_id: int, **values) -> int:
        values.setdefault("updated_at", datetime.now(timezone.utc))
        result = self.db.execute(
            update(CourierModel)
            .where(CourierModel.id == courier_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def record_accept(self, courier_id: int) -> int:
        return self.update_courier(
            courier_id,
            total_orders=CourierModel.total_orders + 1,
            current_daily_orders=CourierModel.current_daily_orders + 1,
        )

    def record_delivery(self, courier_id: int, earnings: Decimal) -> int:
        return self.update_courier(
            courier_id,
            completed_orders=CourierModel.completed_orders + 1,
            total_earnings=CourierModel.total_earnings + earnings,
            today_earnings=CourierModel.today_earnings + earnings,
        )

    def reset_daily_counters(self) -> int:
        result = self.db.execute(
            update(CourierModel)
            .values(today_earnings=0, current_daily_orders=0)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # ---------- skrzynka ----------
    def add_message(self, message: CourierMessageModel) -> CourierMessageModel:
        self.db.add(message)
        return message

    def list_messages(self, courier_id: int, limit: int = 50) -> list[CourierMessageModel]:
        return list(
            self.db.execute(
                select(CourierMessageModel)
                .where(CourierMessageModel.courier_id == courier_id)
                .order_by(CourierMessageModel.created_at.desc(), CourierMessageModel.id.desc())
                .limit(limit)
            ).scalars()
        )

    def mark_message_read(self, message_id: int, courier_id: int) -> int:
        result = self.db.execute(
            update(CourierMessageModel)
            .where(
                CourierMessageModel.id == message_id,
                CourierMessageModel.courier_id == courier_id,
            )
            .values(is_read=True)
        )
        return result.rowcount

    # ---------- czaty ----------
    def add_chat(self, chat: CourierChatModel) -> CourierChatModel:
        self.db.add(chat)
        return chat

    def list_chats(self, courier_id: int) -> list[CourierChatModel]:
        return list(
            self.db.execute(
                select(CourierChatModel)
                .where(
                    CourierChatModel.courier_id == courier_id,
                    CourierChatModel.is_active.is_(True),
                )
                .order_by(CourierChatModel.last_message_at.desc(), CourierChatModel.id.desc())
            ).scalars()
        )

    def get_chat(self, chat_id: int, courier_id: int) -> CourierChatModel | None:
        return self.db.execute(
            select(CourierChatModel)
            .where(CourierChatModel.id == chat_id, CourierChatModel.courier_id == courier_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_chat_messages(self, chat_id: int, limit: int = 100) -> list[CourierChatMessageModel]:
        return list(
            self.db.execute(
                select(CourierChatMessageModel)
                .where(CourierChatMessageModel.chat_id == chat_id)
                .order_by(CourierChatMessageModel.created_at.asc(), CourierChatMessageModel.id.asc())
                .limit(limit)
            ).scalars()
        )

    def add_chat_message(self, message: CourierChatMessageModel) -> CourierChatMessageModel:
        self.db.add(message)
        self.db.flush()
        return message

    def touch_chat(self, chat_id: int, last_message: str, at: datetime) -> int:
        result = self.db.execute(
            update(CourierChatModel)
            .where(CourierChatModel.id == chat_id)
            .values(
                last_message=last_message,
                last_message_at=at,
                unread_count=CourierChatModel.unread_count + 1,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def mark_chat_read(self, chat_id: int) -> int:
        self.db.execute(
            update(CourierChatMessageModel)
            .where(CourierChatMessageModel.chat_id == chat_id)
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(
            update(CourierChatModel)
            .where(CourierChatModel.id == chat_id)
            .values(unread_count=0)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # ---------- grafik ----------
    def list_schedule(self, courier_id: int) -> list[CourierScheduleModel]:
        return list(
            self.db.execute(
                select(CourierScheduleModel)
                .where(
                    CourierScheduleModel.courier_id == courier_id,
                    CourierScheduleModel.is_active.is_(True),
                )
                .order_by(CourierScheduleModel.day_of_week, CourierScheduleModel.start_time)
            ).scalars()
        )

    def replace_schedule(self, courier_id: int, entries: list[CourierScheduleModel]) -> None:
        self.db.execute(
            delete(CourierScheduleModel).where(CourierScheduleModel.courier_id == courier_id)
        )
        self.db.add_all(entries)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
