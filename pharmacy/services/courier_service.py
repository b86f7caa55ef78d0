# pharmacy/services/courier_service.py
import secrets
import time
from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pharmacy.data.models.courier import CourierModel
from pharmacy.data.models.courier_chat import CourierChatModel
from pharmacy.data.models.courier_message import CourierMessageModel
from pharmacy.data.models.courier_schedule import CourierScheduleModel
from pharmacy.data.models.order import DeliveryOrderModel
from pharmacy.domain.errors import ConflictError, NotFoundError, ValidationError
from pharmacy.domain.order_state import TransitionResult
from pharmacy.domain.schemas import (
    CourierOut,
    CourierProfileIn,
    CourierRegisterIn,
    ScheduleEntryIn,
    ScheduleEntryOut,
)
from pharmacy.repos.courier_repo import CourierRepo
from pharmacy.repos.order_repo import OrderRepo
from pharmacy.repos.user_repo import UserRepo
from pharmacy.services.order_service import OrderService, courier_commission
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)

SUPPORT_CHAT_NAME = "Wsparcie apteki"
WELCOME_SUBJECT = "Witamy!"
WELCOME_TEXT = "Witamy w zespole kurierów! Cieszymy się, że jesteś z nami."

EARNING_PERIODS = ("today", "week", "month")


def generate_courier_code() -> str:
    # zegar + losowy sufiks, kody nie powtarzaja sie po przekreceniu licznika
    return "C-" + str(time.time_ns() // 1000)[-10:] + secrets.token_hex(3).upper()


def period_start(period: str, now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "today":
        return midnight
    if period == "week":
        return midnight - timedelta(days=7)
    if period == "month":
        return midnight - timedelta(days=30)
    raise ValidationError(f"Nieznany okres: {period}")


def to_courier_order(order: DeliveryOrderModel) -> Dict[str, Any]:
    """Ksztalt zamowienia na liscie kuriera."""
    return {
        "id": order.id,
        "order_code": order.order_code,
        "address": order.delivery_address,
        "status": order.status,
        "customer_name": order.customer_name,
        "customer_phone": order.customer_phone,
        "customer_notes": order.customer_notes,
        "total_amount": order.total_amount,
        "created_at": order.created_at,
        "assigned_at": order.assigned_at,
        "delivered_at": order.delivered_at,
        "cancelled_at": order.cancelled_at,
        "courier_name": order.courier.first_name if order.courier else None,
        "products": [
            {
                "id": i.product_id,
                "name": i.product_name,
                "quantity": i.quantity,
                "price": i.unit_price,
                "total_price": i.total_price,
            }
            for i in order.items
        ],
    }


class CourierService:
    """Workflow kuriera: profil, status, tablica zamowien, przejscia, grafik, zarobki."""

    def __init__(self, db: Session, order_service: OrderService | None = None):
        self.repo = CourierRepo(db)
        self.orders = OrderRepo(db)
        self.users = UserRepo(db)
        self.order_service = order_service or OrderService(db)

    def require_courier(self, user_id: int) -> CourierModel:
        if not user_id:
            raise ValidationError("user_id jest wymagany")
        courier = self.repo.get_by_user(user_id)
        if not courier:
            raise NotFoundError("Kurier nie znaleziony")
        return courier

    def _out(self, courier: CourierModel) -> CourierOut:
        out = CourierOut.model_validate(courier)
        user = self.users.get_user(courier.user_id)
        if user:
            out.username = user.username
            out.avatar = user.avatar
        return out

    # =====================================================
    # PROFIL
    # =====================================================
    def register(self, payload: CourierRegisterIn) -> CourierOut:
        """
        Rejestracja kuriera. Razem z kurierem powstaje czat ze wsparciem
        i wiadomosc powitalna, wszystko w jednej transakcji.
        """
        if not self.users.exists(payload.user_id):
            raise NotFoundError("Użytkownik nie znaleziony")

        if self.repo.find_by_user_or_email(payload.user_id, payload.email):
            raise ConflictError("Kurier jest już zarejestrowany")

        try:
            courier = self.repo.add_courier(
                CourierModel(
                    user_id=payload.user_id,
                    courier_code=generate_courier_code(),
                    first_name=payload.first_name,
                    last_name=payload.last_name,
                    phone=payload.phone,
                    email=payload.email,
                    vehicle_type=payload.vehicle_type,
                    vehicle_number=payload.vehicle_number,
                    status="active",
                )
            )
            self.repo.add_chat(
                CourierChatModel(
                    courier_id=courier.id,
                    participant_type="support",
                    participant_name=SUPPORT_CHAT_NAME,
                    last_message=WELCOME_TEXT,
                )
            )
            self.repo.add_message(
                CourierMessageModel(
                    courier_id=courier.id,
                    subject=WELCOME_SUBJECT,
                    message=WELCOME_TEXT,
                    message_type="info",
                )
            )
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            logger.info(f"Konflikt przy rejestracji kuriera dla uzytkownika {payload.user_id}")
            raise ConflictError("Kurier jest już zarejestrowany")
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Zarejestrowano kuriera {courier.id} ({courier.courier_code})")
        return self._out(self.require_courier(payload.user_id))

    def get_profile(self, user_id: int) -> CourierOut:
        return self._out(self.require_courier(user_id))

    def update_profile(self, payload: CourierProfileIn) -> CourierOut:
        courier = self.require_courier(payload.user_id)
        values = payload.model_dump(exclude={"user_id"}, exclude_none=True)
        self.repo.update_courier(courier.id, **values)
        self.repo.commit()
        logger.info(f"Zaktualizowano profil kuriera {courier.id}")
        return self._out(self.require_courier(payload.user_id))

    def set_status(self, user_id: int, status: str) -> CourierOut:
        courier = self.require_courier(user_id)
        self.repo.update_courier(courier.id, status=status, last_activity=datetime.now(timezone.utc))
        self.repo.commit()
        logger.info(f"Kurier {courier.id} zmienil status na {status}")
        return self._out(self.require_courier(user_id))

    # =====================================================
    # ZAMOWIENIA
    # =====================================================
    def list_orders(self, user_id: int) -> list[Dict[str, Any]]:
        courier = self.repo.get_by_user(user_id)
        if not courier:
            # uzytkownik bez profilu kuriera nie widzi tablicy
            return []
        orders = self.orders.list_courier_board(courier.id)
        logger.info(f"Kurier {courier.id}: {len(orders)} zamowien na tablicy")
        return [to_courier_order(o) for o in orders]

    def get_order(self, user_id: int, order_id: int) -> Dict[str, Any]:
        courier = self.require_courier(user_id)
        order = self.orders.get_order(order_id)
        if not order:
            raise NotFoundError("Zamówienie nie istnieje")
        # kurier widzi oczekujace i swoje
        if order.courier_id not in (None, courier.id):
            raise NotFoundError("Zamówienie nie istnieje")
        return to_courier_order(order)

    def accept_order(self, user_id: int, order_id: int) -> TransitionResult:
        courier = self.require_courier(user_id)
        result = self.order_service.accept(order_id, courier)
        if result.ok:
            result.extra = {"courier_name": courier.first_name}
        return result

    def complete_order(self, user_id: int, order_id: int) -> TransitionResult:
        courier = self.require_courier(user_id)
        return self.order_service.complete(order_id, courier)

    def cancel_order(self, user_id: int, order_id: int, reason: str | None = None) -> TransitionResult:
        courier = self.require_courier(user_id)
        return self.order_service.cancel(order_id, courier, reason)

    # =====================================================
    # GRAFIK
    # =====================================================
    def get_schedule(self, user_id: int) -> list[ScheduleEntryOut]:
        courier = self.require_courier(user_id)
        return [ScheduleEntryOut.model_validate(s) for s in self.repo.list_schedule(courier.id)]

    def replace_schedule(self, user_id: int, entries: list[ScheduleEntryIn]) -> list[ScheduleEntryOut]:
        courier = self.require_courier(user_id)
        for e in entries:
            if e.end_time <= e.start_time:
                raise ValidationError("Godzina końca musi być po godzinie rozpoczęcia")

        try:
            self.repo.replace_schedule(
                courier.id,
                [
                    CourierScheduleModel(
                        courier_id=courier.id,
                        day_of_week=e.day_of_week,
                        start_time=e.start_time,
                        end_time=e.end_time,
                        is_active=e.is_active,
                    )
                    for e in entries
                ],
            )
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Kurier {courier.id}: nowy grafik ({len(entries)} pozycji)")
        return self.get_schedule(user_id)

    # =====================================================
    # ZAROBKI
    # =====================================================
    def earnings(self, user_id: int, period: str = "today") -> Dict[str, Any]:
        if period not in EARNING_PERIODS:
            raise ValidationError(f"Nieznany okres: {period}")

        courier = self.require_courier(user_id)
        delivered = self.orders.list_delivered_since(courier.id, period_start(period))

        rows = [
            {
                "id": o.id,
                "order_code": o.order_code,
                "total_amount": o.total_amount,
                "courier_earnings": courier_commission(o.total_amount),
                "delivered_at": o.delivered_at,
            }
            for o in delivered
        ]

        return {
            "period": period,
            "total_earnings": courier.total_earnings or Decimal("0.00"),
            "today_earnings": courier.today_earnings or Decimal("0.00"),
            "period_earnings": sum((r["courier_earnings"] for r in rows), Decimal("0.00")),
            "orders": rows,
        }
