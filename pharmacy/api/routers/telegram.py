# pharmacy/api/routers/telegram.py
import requests
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pharmacy.data.database import get_db
from pharmacy.domain.schemas import TelegramMessageIn, TelegramResponse
from pharmacy.services.support_service import SupportService
from pharmacy.services.telegram_client import TelegramError
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/telegram", tags=["telegram"])


@router.post("/send-message", response_model=TelegramResponse)
def send_message(payload: TelegramMessageIn, db: Session = Depends(get_db)):
    """
    Wiadomosc z aplikacji do administratora.
    Bez konfiguracji bota dziala w trybie demo (tylko log).
    """
    svc = SupportService(db)
    queued = svc.send_to_admin(payload.message.strip(), payload.user_id)
    if not queued:
        return {"success": True, "message": "Wiadomość zapisana (tryb demo)", "demo": True}
    return {"success": True, "message": "Wiadomość wysłana", "queued": True}


@router.get("/test")
def test_connection():
    try:
        bot = SupportService.probe()
    except (TelegramError, requests.RequestException) as e:
        logger.warning(f"Test Telegrama nieudany: {e}")
        return {"success": False, "error": str(e)}
    return {"success": True, "message": "Połączenie z Telegramem działa", "bot": bot}
