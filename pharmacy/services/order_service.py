# pharmacy/services/order_service.py
import secrets
import time
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from pharmacy.data.models.courier import CourierModel
from pharmacy.data.models.order import DeliveryOrderModel
from pharmacy.data.models.order_item import DeliveryOrderItemModel
from pharmacy.domain.errors import ForbiddenError, NotFoundError, ValidationError
from pharmacy.domain.order_state import (
    OrderAction,
    TransitionOutcome,
    TransitionResult,
    transition_for,
)
from pharmacy.domain.schemas import CheckoutIn, OrderCreateIn, OrderOut
from pharmacy.repos.cart_repo import CartRepo
from pharmacy.repos.courier_repo import CourierRepo
from pharmacy.repos.order_repo import OrderRepo
from pharmacy.repos.product_repo import ProductRepo
from pharmacy.services.notification_service import NotificationService
from pharmacy.services.user_service import UserService
from pharmacy.utils.settings import COURIER_COMMISSION_RATE
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")
# Numeric(10, 2)
MAX_ORDER_TOTAL = Decimal("99999999.99")


def generate_order_code() -> str:
    """Czytelny kod zamowienia z zegara (mikrosekundy) i losowego sufiksu, niezalezny od klucza glownego."""
    return "D-" + str(time.time_ns() // 1000)[-10:] + secrets.token_hex(3).upper()


def courier_commission(total_amount) -> Decimal:
    return (Decimal(total_amount or 0) * COURIER_COMMISSION_RATE).quantize(CENT, rounding=ROUND_HALF_UP)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.

    Tworzenie zamowien (pojedynczy produkt albo caly koszyk) jest atomowe:
    zamowienie i jego pozycje ida w jednej transakcji. Zmiany statusu sa
    warunkowymi UPDATE-ami, wynik to TransitionResult (OK / CONFLICT / NOT_FOUND).
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.carts = CartRepo(db)
        self.couriers = CourierRepo(db)
        self.users = UserService(db)
        self.notification_service = notification_service or NotificationService()

    # =====================================================
    # QUERY
    # =====================================================
    def get_order(self, order_id: int, user_id: int) -> OrderOut:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Zamówienie nie istnieje")

        if order.user_id != user_id:
            raise ForbiddenError("Brak dostępu do zamówienia")

        return OrderOut.model_validate(order)

    def list_orders(self, user_id: int) -> list[OrderOut]:
        self.users.ensure_exists(user_id)
        return [OrderOut.model_validate(o) for o in self.repo.list_user_orders(user_id)]

    # =====================================================
    # COMMANDS - tworzenie
    # =====================================================
    def _new_order(self, payload, total: Decimal) -> DeliveryOrderModel:
        return DeliveryOrderModel(
            order_code=generate_order_code(),
            user_id=payload.user_id,
            total_amount=total,
            delivery_address=payload.delivery_address,
            customer_name=payload.customer_name,
            customer_phone=payload.customer_phone,
            customer_notes=payload.customer_notes,
            payment_method=payload.payment_method,
        )

    def _save(self, order: DeliveryOrderModel) -> DeliveryOrderModel:
        try:
            self.repo.add_order(order)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            logger.exception("Nie udalo sie zapisac zamowienia, rollback")
            raise

        created = self.repo.get_order(order.id)
        logger.info(f"Order {created.id} ({created.order_code}) created for user {created.user_id}")

        # Wyślij powiadomienie asynchronicznie
        self.notification_service.send_order_notification(created)
        return created

    def create_order(self, payload: OrderCreateIn) -> OrderOut:
        """
        Use Case: szybkie zamowienie jednego produktu.
        Produkt sprawdzany jest przed jakimkolwiek zapisem.
        """
        self.users.ensure_exists(payload.user_id)

        product = self.products.get_product(payload.product_id)
        if not product:
            raise NotFoundError("Produkt nie znaleziony")

        total = Decimal(payload.total_amount).quantize(CENT)
        order = self._new_order(payload, total)
        order.items.append(
            DeliveryOrderItemModel(
                product_id=product.id,
                product_name=product.name,
                quantity=payload.quantity,
                unit_price=product.price,
                total_price=total,
            )
        )
        return OrderOut.model_validate(self._save(order))

    def checkout_cart(self, payload: CheckoutIn) -> OrderOut:
        """
        Use Case: zamowienie z calego koszyka.

        1. Pobiera pozycje koszyka z aktualnymi cenami
        2. Liczy total po stronie serwera
        3. Tworzy zamowienie z pozycjami i czysci koszyk w jednej transakcji
        4. Wysyla powiadomienie (async)
        """
        self.users.ensure_exists(payload.user_id)

        items = self.carts.get_cart_items(payload.user_id)
        if not items:
            raise ValidationError("Koszyk jest pusty")

        lines = []
        total = Decimal("0.00")
        for i in items:
            p = i.product
            if p is None:
                raise ValidationError(f"Produkt {i.product_id} jest niedostępny")
            line_total = (p.price * i.quantity).quantize(CENT)
            total += line_total
            lines.append(
                DeliveryOrderItemModel(
                    product_id=p.id,
                    product_name=p.name,
                    quantity=i.quantity,
                    unit_price=p.price,
                    total_price=line_total,
                )
            )

        if total > MAX_ORDER_TOTAL:
            raise ValidationError("Wartość zamówienia przekracza dopuszczalny limit")

        order = self._new_order(payload, total)
        order.items.extend(lines)

        # czyszczenie koszyka w tej samej transakcji co zamowienie
        self.carts.clear(payload.user_id)
        return OrderOut.model_validate(self._save(order))

    # =====================================================
    # COMMANDS - przejscia statusu
    # =====================================================
    def _miss(self, order_id: int) -> TransitionResult:
        self.repo.rollback()
        order = self.repo.get_order(order_id)
        if not order:
            return TransitionResult(TransitionOutcome.NOT_FOUND)
        return TransitionResult(TransitionOutcome.CONFLICT, OrderOut.model_validate(order))

    def accept(self, order_id: int, courier: CourierModel) -> TransitionResult:
        """pending -> assigned; dwa rownolegle accept: wygrywa pierwszy UPDATE."""
        now = datetime.now(timezone.utc)
        rowcount = self.repo.apply_transition(
            order_id,
            transition_for(OrderAction.ACCEPT),
            now,
            assign_courier=courier.id,
        )
        if rowcount == 0:
            return self._miss(order_id)

        self.couriers.record_accept(courier.id)
        self.repo.commit()

        logger.info(f"Kurier {courier.id} przyjal zamowienie {order_id}")
        return TransitionResult(TransitionOutcome.OK, OrderOut.model_validate(self.repo.get_order(order_id)))

    def complete(self, order_id: int, courier: CourierModel) -> TransitionResult:
        """assigned -> delivered, naliczenie prowizji kuriera w tej samej transakcji."""
        now = datetime.now(timezone.utc)
        rowcount = self.repo.apply_transition(
            order_id,
            transition_for(OrderAction.COMPLETE),
            now,
            courier_id=courier.id,
        )
        if rowcount == 0:
            return self._miss(order_id)

        order = self.repo.get_order(order_id)
        earnings = courier_commission(order.total_amount)
        self.couriers.record_delivery(courier.id, earnings)
        self.repo.commit()

        logger.info(f"Kurier {courier.id} dostarczyl zamowienie {order_id}, prowizja {earnings}")
        return TransitionResult(
            TransitionOutcome.OK,
            OrderOut.model_validate(self.repo.get_order(order_id)),
            extra={"earnings": earnings},
        )

    def cancel(self, order_id: int, courier: CourierModel, reason: str | None = None) -> TransitionResult:
        now = datetime.now(timezone.utc)
        rowcount = self.repo.apply_transition(
            order_id,
            transition_for(OrderAction.CANCEL),
            now,
            courier_id=courier.id,
        )
        if rowcount == 0:
            return self._miss(order_id)

        self.repo.commit()
        logger.info(f"Kurier {courier.id} anulowal zamowienie {order_id}, powod: {reason or '-'}")
        return TransitionResult(TransitionOutcome.OK, OrderOut.model_validate(self.repo.get_order(order_id)))

    def withdraw(self, order_id: int, user_id: int) -> TransitionResult:
        """Klient wycofuje zamowienie, ktore nie ma jeszcze kuriera."""
        self.users.ensure_exists(user_id)
        now = datetime.now(timezone.utc)
        rowcount = self.repo.apply_transition(
            order_id,
            transition_for(OrderAction.WITHDRAW),
            now,
            user_id=user_id,
        )
        if rowcount == 0:
            result = self._miss(order_id)
            if result.order is not None and result.order.user_id != user_id:
                raise ForbiddenError("Brak dostępu do zamówienia")
            return result

        self.repo.commit()
        logger.info(f"Uzytkownik {user_id} wycofal zamowienie {order_id}")
        return TransitionResult(TransitionOutcome.OK, OrderOut.model_validate(self.repo.get_order(order_id)))
