# pharmacy/domain/order_state.py
"""
Cykl zycia zamowienia dostawy.

    pending -> assigned -> delivered
    pending -> cancelled          (klient wycofuje zamowienie)
    assigned -> cancelled         (kurier anuluje)

Kazde przejscie wykonywane jest jako warunkowy UPDATE na oczekiwanym statusie,
wiec przegrany wyscig po prostu nie trafia w zaden wiersz.
"""
import enum
from dataclasses import dataclass
from typing import Any


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderAction(str, enum.Enum):
    ACCEPT = "accept"
    COMPLETE = "complete"
    CANCEL = "cancel"
    WITHDRAW = "withdraw"


@dataclass(frozen=True)
class Transition:
    source: OrderStatus
    target: OrderStatus
    stamp_field: str


TRANSITIONS = {
    OrderAction.ACCEPT: Transition(OrderStatus.PENDING, OrderStatus.ASSIGNED, "assigned_at"),
    OrderAction.COMPLETE: Transition(OrderStatus.ASSIGNED, OrderStatus.DELIVERED, "delivered_at"),
    OrderAction.CANCEL: Transition(OrderStatus.ASSIGNED, OrderStatus.CANCELLED, "cancelled_at"),
    OrderAction.WITHDRAW: Transition(OrderStatus.PENDING, OrderStatus.CANCELLED, "cancelled_at"),
}

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# kolejnosc na liscie kuriera
STATUS_RANK = {
    OrderStatus.PENDING: 1,
    OrderStatus.ASSIGNED: 2,
    OrderStatus.DELIVERED: 3,
}


def transition_for(action: OrderAction) -> Transition:
    return TRANSITIONS[OrderAction(action)]


def can_transition(current: str, action: OrderAction) -> bool:
    return OrderStatus(current) == transition_for(action).source


class TransitionOutcome(str, enum.Enum):
    OK = "ok"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"


@dataclass
class TransitionResult:
    outcome: TransitionOutcome
    order: Any = None
    extra: dict | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == TransitionOutcome.OK
