# pharmacy/services/notification_service.py
from datetime import datetime, timezone

from pharmacy.celery_worker import celery_app
from pharmacy.services.telegram_client import TelegramClient, escape_markdown
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)


def format_order_message(order) -> str:
    e = escape_markdown
    lines = [
        "🛒 *Nowe zamówienie*",
        f"Kod: {e(order.order_code)}",
        f"Klient: {e(order.customer_name)}, {e(order.customer_phone)}",
        f"Adres: {e(order.delivery_address)}",
        f"Suma: {order.total_amount}",
    ]
    for item in order.items:
        lines.append(f"• {e(item.product_name)} x{item.quantity}")
    return "\n".join(lines)


def format_admin_message(message: str, user_info: str, courier_info: str) -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    return (
        "📱 *Nowa wiadomość z aplikacji*\n\n"
        f"{escape_markdown(user_info)}\n{escape_markdown(courier_info)}\n\n"
        f"💬 *Wiadomość:* {escape_markdown(message)}\n\n⏰ {stamp}"
    )


class NotificationService:
    """
    Serwis do wysyłania powiadomień na czat administratora w Telegramie.
    Używa Celery do asynchronicznego przetwarzania.
    """

    def __init__(self, client: TelegramClient | None = None):
        self.client = client or TelegramClient()

    @property
    def demo_mode(self) -> bool:
        return not self.client.configured

    def send_order_notification(self, order) -> None:
        """Powiadomienie o nowym zamówieniu, nie blokuje odpowiedzi."""
        self._enqueue(format_order_message(order), f"order {order.id}")

    def send_admin_message(self, text: str) -> bool:
        """Zwraca True jesli wiadomosc poszla do kolejki, False w trybie demo."""
        if self.demo_mode:
            logger.info(f"[TELEGRAM DEMO] {text}")
            return False
        self._enqueue(text, "admin message")
        return True

    def _enqueue(self, text: str, what: str) -> None:
        try:
            send_telegram_message_task.delay(text)
        except Exception as e:
            # zamowienie jest juz zapisane, brak brokera nie moze go cofnac
            logger.error(f"Nie udalo sie zakolejkowac powiadomienia ({what}): {e}")


@celery_app.task(name="pharmacy.services.notification_service.send_telegram_message_task")
def send_telegram_message_task(text: str):
    """
    Celery task - wysyła wiadomość przez Telegram Bot API.
    Bez tokenu i chat id tylko loguje (tryb demo).
    """
    client = TelegramClient()
    if not client.configured:
        logger.info(f"[TELEGRAM DEMO] {text}")
        return {"status": "demo"}

    data = client.send_message(text)
    message_id = data.get("result", {}).get("message_id")
    logger.info(f"[TELEGRAM] wyslano wiadomosc {message_id}")
    return {"status": "sent", "message_id": message_id}
