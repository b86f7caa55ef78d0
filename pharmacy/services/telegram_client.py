# pharmacy/services/telegram_client.py
import re

import requests

from pharmacy.utils.retry import http_retry
from pharmacy.utils.settings import TELEGRAM_API_URL, TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)

# znaki specjalne starego trybu Markdown w Bot API
_MARKDOWN_SPECIAL = re.compile(r"([_*`\[])")


def escape_markdown(text) -> str:
    """Tekst od uzytkownika wstawiany do wiadomosci z parse_mode=Markdown."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", str(text or ""))


class TelegramError(RuntimeError):
    pass


class TelegramClient:
    def __init__(self, bot_token: str | None = None, chat_id: str | None = None, timeout: int = 5):
        self.bot_token = bot_token if bot_token is not None else TELEGRAM_BOT_TOKEN
        self.chat_id = chat_id if chat_id is not None else TELEGRAM_CHAT_ID
        self.base_url = TELEGRAM_API_URL.rstrip("/")
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    @http_retry()
    def _post(self, text: str) -> requests.Response:
        url = f"{self.base_url}/bot{self.bot_token}/sendMessage"
        return requests.post(
            url,
            json={"chat_id": self.chat_id, "text": text, "parse_mode": "Markdown"},
            timeout=self.timeout,
        )

    def send_message(self, text: str) -> dict:
        if not self.configured:
            raise TelegramError("Telegram nie jest skonfigurowany")

        logger.info("TelegramClient sendMessage")
        resp = self._post(text)
        data = resp.json()
        if not resp.ok or not data.get("ok"):
            raise TelegramError(f"Telegram error: {data.get('description', 'Unknown error')}")
        return data
