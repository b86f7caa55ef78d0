# pharmacy/services/support_service.py
from sqlalchemy.orm import Session

from pharmacy.repos.courier_repo import CourierRepo
from pharmacy.repos.user_repo import UserRepo
from pharmacy.services.notification_service import NotificationService, format_admin_message
from pharmacy.services.telegram_client import TelegramClient
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)


class SupportService:
    """Wiadomosci z aplikacji do administratora (Telegram)."""

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.users = UserRepo(db)
        self.couriers = CourierRepo(db)
        self.notification_service = notification_service or NotificationService()

    def _context(self, user_id: int | None) -> tuple[str, str]:
        user_info = "👤 Użytkownik niezalogowany"
        courier_info = "🚴 Kurier niezarejestrowany"
        if not user_id:
            return user_info, courier_info

        user = self.users.get_user(user_id)
        if user:
            name = " ".join(x for x in (user.first_name, user.last_name) if x) or user.username
            user_info = f"👤 Użytkownik: {name} ({user.email or 'brak email'})"

        courier = self.couriers.get_by_user(user_id)
        if courier:
            courier_info = f"🚴 Kurier: {courier.first_name} {courier.last_name} ({courier.courier_code})"
        return user_info, courier_info

    def send_to_admin(self, message: str, user_id: int | None = None) -> bool:
        """True = zakolejkowane, False = tryb demo (tylko log)."""
        text = format_admin_message(message, *self._context(user_id))
        queued = self.notification_service.send_admin_message(text)
        logger.info(f"Wiadomosc do administratora od {user_id or 'anonim'}, queued={queued}")
        return queued

    @staticmethod
    def probe(client: TelegramClient | None = None) -> dict:
        """Synchroniczny test polaczenia z Bot API."""
        client = client or TelegramClient()
        data = client.send_message("🧪 *Wiadomość testowa*\n\n✅ Serwer działa poprawnie")
        sender = data.get("result", {}).get("from", {})
        return {
            "id": sender.get("id"),
            "name": sender.get("first_name"),
            "username": sender.get("username"),
        }
