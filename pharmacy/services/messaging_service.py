# pharmacy/services/messaging_service.py
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from pharmacy.data.models.courier_chat import CourierChatMessageModel
from pharmacy.domain.errors import NotFoundError
from pharmacy.domain.schemas import ChatMessageOut, ChatOut, CourierMessageOut
from pharmacy.repos.courier_repo import CourierRepo
from pharmacy.services.courier_service import CourierService
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)


class MessagingService:
    """
    Skrzynka kuriera (wiadomosci rozsylane) i czaty 1:1.
    Kazdy czat nalezy do jednego kuriera, obcy czat traktujemy jak nieistniejacy.
    """

    def __init__(self, db: Session):
        self.repo = CourierRepo(db)
        self.couriers = CourierService(db)

    # skrzynka
    def list_messages(self, user_id: int) -> list[CourierMessageOut]:
        courier = self.couriers.require_courier(user_id)
        return [CourierMessageOut.model_validate(m) for m in self.repo.list_messages(courier.id)]

    def mark_message_read(self, user_id: int, message_id: int) -> None:
        courier = self.couriers.require_courier(user_id)
        if self.repo.mark_message_read(message_id, courier.id) == 0:
            self.repo.rollback()
            raise NotFoundError("Wiadomość nie znaleziona")
        self.repo.commit()

    # czaty
    def list_chats(self, user_id: int) -> list[ChatOut]:
        courier = self.couriers.require_courier(user_id)
        return [ChatOut.model_validate(c) for c in self.repo.list_chats(courier.id)]

    def _chat(self, user_id: int, chat_id: int):
        courier = self.couriers.require_courier(user_id)
        chat = self.repo.get_chat(chat_id, courier.id)
        if not chat:
            raise NotFoundError("Czat nie znaleziony")
        return courier, chat

    def get_transcript(self, user_id: int, chat_id: int) -> list[ChatMessageOut]:
        _, chat = self._chat(user_id, chat_id)
        return [ChatMessageOut.model_validate(m) for m in self.repo.list_chat_messages(chat.id)]

    def send(self, user_id: int, chat_id: int, text: str) -> ChatMessageOut:
        courier, chat = self._chat(user_id, chat_id)
        now = datetime.now(timezone.utc)

        try:
            message = self.repo.add_chat_message(
                CourierChatMessageModel(
                    chat_id=chat.id,
                    sender_type="courier",
                    sender_name=courier.first_name,
                    message=text,
                    created_at=now,
                )
            )
            self.repo.touch_chat(chat.id, text, now)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Kurier {courier.id} napisal w czacie {chat.id}")
        return ChatMessageOut.model_validate(message)

    def mark_chat_read(self, user_id: int, chat_id: int) -> None:
        _, chat = self._chat(user_id, chat_id)
        self.repo.mark_chat_read(chat.id)
        self.repo.commit()
