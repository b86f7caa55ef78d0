#pharmacy/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from pharmacy.data.database import get_db
from pharmacy.domain.errors import ServiceError
from pharmacy.domain.schemas import (
    CartAddIn,
    CartItemResponse,
    CartQuantityIn,
    CartResponse,
    Envelope,
)
from pharmacy.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db=db)


@router.get("", response_model=CartResponse)
def get_cart(
    user_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return {"success": True, **svc.get_cart(user_id)}


@router.post("/add", response_model=CartItemResponse)
def add_item(payload: CartAddIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        item = svc.add_item(
            user_id=payload.user_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Produkt dodany do koszyka", "item": item}


@router.put("/{item_id}", response_model=Envelope)
def update_quantity(item_id: int, payload: CartQuantityIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.update_quantity(payload.user_id, item_id, payload.quantity)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Ilość zaktualizowana"}


@router.delete("/{item_id}", response_model=Envelope)
def remove_item(
    item_id: int,
    user_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.remove_item(user_id, item_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Produkt usunięty z koszyka"}


@router.delete("", response_model=Envelope)
def clear_cart(
    user_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.clear(user_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Koszyk wyczyszczony"}
