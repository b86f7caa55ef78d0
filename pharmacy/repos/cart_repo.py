# pharmacy/repos/cart_repo.py
from sqlalchemy import select, update, delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, selectinload

from pharmacy.data.models.cart_item import CartItemModel


def _insert_for(db: Session):
    #ON CONFLICT DO UPDATE jest dialektowe
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise NotImplementedError(f"Upsert koszyka nie jest wspierany dla dialektu {dialect}")


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def upsert_item(self, user_id: int, product_id: int, quantity: int) -> CartItemModel:
        """INSERT albo zwiekszenie ilosci gdy para (user, produkt) juz istnieje."""
        insert = _insert_for(self.db)
        stmt = insert(CartItemModel).values(
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[CartItemModel.user_id, CartItemModel.product_id],
            set_={"quantity": CartItemModel.quantity + stmt.excluded.quantity},
        )
        self.db.execute(stmt)
        self.db.commit()
        return self.get_item_by_product(user_id, product_id)

    def get_item_by_product(self, user_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            ).execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get_cart_items(self, user_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .options(selectinload(CartItemModel.product))
                .where(CartItemModel.user_id == user_id)
                .order_by(CartItemModel.created_at.desc(), CartItemModel.id.desc())
            ).scalars()
        )

    def update_quantity(self, item_id: int, user_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(CartItemModel)
            .where(CartItemModel.id == item_id, CartItemModel.user_id == user_id)
            .values(quantity=quantity)
        )
        return result.rowcount

    def delete_item(self, item_id: int, user_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.id == item_id,
                CartItemModel.user_id == user_id,
            )
        )
        return result.rowcount

    def clear(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(CartItemModel.user_id == user_id)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
