from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session
from pharmacy.domain.errors import NotFoundError, ValidationError
from pharmacy.domain.schemas import MAX_QUANTITY, CartItemOut
from pharmacy.repos.cart_repo import CartRepo
from pharmacy.repos.product_repo import ProductRepo
from pharmacy.services.user_service import UserService
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Koszyk per uzytkownik, klucz (user_id, product_id)
    commands (add, update, remove, clear) modyfikuja stan
    query (get) laczy pozycje z aktualnymi danymi produktow
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserService(db)

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        items = self.repo.get_cart_items(user_id)

        lines = []
        total = Decimal("0.00")
        for i in items:
            p = i.product
            price = p.price if p else None
            if price is not None:
                total += price * i.quantity
            lines.append(
                {
                    "id": i.id,
                    "user_id": i.user_id,
                    "product_id": i.product_id,
                    "quantity": i.quantity,
                    "created_at": i.created_at,
                    "name": p.name if p else None,
                    "price": price,
                    "image": p.image if p else None,
                    "description": p.description if p else None,
                    "manufacturer": p.manufacturer if p else None,
                    "in_stock": p.in_stock if p else None,
                }
            )

        #total liczony przy odczycie, nie jest nigdzie zapisywany
        return {"items": lines, "total": total}

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> CartItemOut:
        self.users.ensure_exists(user_id)

        if not self.products.get_product(product_id):
            raise NotFoundError("Produkt nie znaleziony")

        existing = self.repo.get_item_by_product(user_id, product_id)
        if existing and existing.quantity + quantity > MAX_QUANTITY:
            raise ValidationError(f"Maksymalna ilość produktu w koszyku to {MAX_QUANTITY}")

        item = self.repo.upsert_item(user_id, product_id, quantity)
        logger.info(f"Produkt {product_id} w koszyku uzytkownika {user_id}, ilosc {item.quantity}")
        return CartItemOut.model_validate(item)

    def update_quantity(self, user_id: int, item_id: int, quantity: int) -> None:
        self.users.ensure_exists(user_id)

        rowcount = self.repo.update_quantity(item_id, user_id, quantity)
        if rowcount == 0:
            self.repo.rollback()
            raise NotFoundError("Pozycja koszyka nie znaleziona")

        self.repo.commit()
        logger.info(f"Pozycja {item_id} uzytkownika {user_id}: ilosc {quantity}")

    def remove_item(self, user_id: int, item_id: int) -> None:
        self.users.ensure_exists(user_id)

        rowcount = self.repo.delete_item(item_id, user_id)
        if rowcount == 0:
            self.repo.rollback()
            raise NotFoundError("Pozycja koszyka nie znaleziona")

        self.repo.commit()
        logger.info(f"Usunieto pozycje {item_id} z koszyka uzytkownika {user_id}")

    def clear(self, user_id: int) -> int:
        self.users.ensure_exists(user_id)
        removed = self.repo.clear(user_id)
        self.repo.commit()
        logger.info(f"Wyczyszczono koszyk uzytkownika {user_id} ({removed} pozycji)")
        return removed
