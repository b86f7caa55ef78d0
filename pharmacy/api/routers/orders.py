# pharmacy/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from pharmacy.data.database import get_db
from pharmacy.domain.errors import ServiceError
from pharmacy.domain.order_state import TransitionOutcome
from pharmacy.domain.schemas import (
    CheckoutIn,
    OrderCreateIn,
    OrderListResponse,
    OrderResponse,
    UserRef,
)
from pharmacy.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/create", response_model=OrderResponse)
def create_order(payload: OrderCreateIn, db: Session = Depends(get_db)):
    """
    Tworzy zamówienie jednego produktu.
    Wysyła powiadomienie asynchronicznie.
    """
    svc = get_service(db)
    try:
        order = svc.create_order(payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Zamówienie utworzone", "order": order}


@router.post("/checkout", response_model=OrderResponse)
def checkout(payload: CheckoutIn, db: Session = Depends(get_db)):
    """
    Tworzy zamówienie z całego koszyka i czyści koszyk.
    """
    svc = get_service(db)
    try:
        order = svc.checkout_cart(payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Zamówienie utworzone", "order": order}


@router.get("", response_model=OrderListResponse)
def list_orders(
    user_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return {"success": True, "orders": svc.list_orders(user_id)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    user_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    """
    Pobiera szczegóły zamówienia.
    """
    svc = get_service(db)
    try:
        return {"success": True, "order": svc.get_order(order_id, user_id)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/{order_id}/cancel", response_model=OrderResponse)
def withdraw_order(order_id: int, payload: UserRef, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        result = svc.withdraw(order_id, payload.user_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    if result.outcome == TransitionOutcome.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Zamówienie nie istnieje")
    if result.outcome == TransitionOutcome.CONFLICT:
        raise HTTPException(status_code=400, detail="Zamówienie jest już w realizacji")
    return {"success": True, "message": "Zamówienie anulowane", "order": result.order}
