# pharmacy/repos/order_repo.py
from datetime import datetime

from sqlalchemy import select, update, case, or_
from sqlalchemy.orm import Session, selectinload

from pharmacy.data.models.order import DeliveryOrderModel
from pharmacy.data.models.order_item import DeliveryOrderItemModel
from pharmacy.domain.order_state import OrderStatus, STATUS_RANK, Transition


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: DeliveryOrderModel) -> DeliveryOrderModel:
        """Dodaje zamowienie razem z pozycjami bez commita (commit robi serwis)."""
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> DeliveryOrderModel | None:
        return self.db.execute(
            select(DeliveryOrderModel)
            .options(
                selectinload(DeliveryOrderModel.items),
                selectinload(DeliveryOrderModel.courier),
            )
            .where(DeliveryOrderModel.id == order_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_user_orders(self, user_id: int) -> list[DeliveryOrderModel]:
        return list(
            self.db.execute(
                select(DeliveryOrderModel)
                .options(selectinload(DeliveryOrderModel.items))
                .where(DeliveryOrderModel.user_id == user_id)
                .order_by(DeliveryOrderModel.created_at.desc(), DeliveryOrderModel.id.desc())
            ).scalars()
        )

    def list_courier_board(self, courier_id: int) -> list[DeliveryOrderModel]:
        """Zamowienia kuriera plus wszystkie oczekujace, od pending do delivered."""
        rank = case(
            *[(DeliveryOrderModel.status == s.value, r) for s, r in STATUS_RANK.items()],
            else_=len(STATUS_RANK) + 1,
        )
        return list(
            self.db.execute(
                select(DeliveryOrderModel)
                .options(
                    selectinload(DeliveryOrderModel.items),
                    selectinload(DeliveryOrderModel.courier),
                )
                .where(
                    or_(
                        DeliveryOrderModel.courier_id == courier_id,
                        DeliveryOrderModel.status == OrderStatus.PENDING.value,
                    )
                )
                .order_by(rank, DeliveryOrderModel.created_at.desc(), DeliveryOrderModel.id.desc())
            ).scalars()
        )

    def list_delivered_since(self, courier_id: int, since: datetime) -> list[DeliveryOrderModel]:
        return list(
            self.db.execute(
                select(DeliveryOrderModel)
                .where(
                    DeliveryOrderModel.courier_id == courier_id,
                    DeliveryOrderModel.status == OrderStatus.DELIVERED.value,
                    DeliveryOrderModel.delivered_at >= since,
                )
                .order_by(DeliveryOrderModel.delivered_at.desc())
            ).scalars()
        )

    def apply_transition(
        self,
        order_id: int,
        transition: Transition,
        at: datetime,
        courier_id: int | None = None,
        user_id: int | None = None,
        assign_courier: int | None = None,
    ) -> int:
        """
        Warunkowy UPDATE na oczekiwanym statusie.
        Zwraca liczbe zmienionych wierszy, 0 = nie ma zamowienia albo ktos byl szybszy.
        """
        stmt = update(DeliveryOrderModel).where(
            DeliveryOrderModel.id == order_id,
            DeliveryOrderModel.status == transition.source.value,
        )
        if courier_id is not None:
            stmt = stmt.where(DeliveryOrderModel.courier_id == courier_id)
        if user_id is not None:
            stmt = stmt.where(DeliveryOrderModel.user_id == user_id)

        values = {"status": transition.target.value, transition.stamp_field: at}
        if assign_courier is not None:
            values["courier_id"] = assign_courier

        result = self.db.execute(
            stmt.values(**values).execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
