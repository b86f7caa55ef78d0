# pharmacy/api/routers/courier.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from pharmacy.data.database import get_db
from pharmacy.domain.errors import ServiceError
from pharmacy.domain.order_state import TransitionOutcome, TransitionResult
from pharmacy.domain.schemas import (
    ChatMessageIn,
    ChatMessageResponse,
    ChatMessagesResponse,
    ChatsResponse,
    CourierMessagesResponse,
    CourierOrderActionIn,
    CourierOrderListResponse,
    CourierOrderResponse,
    CourierProfileIn,
    CourierRegisterIn,
    CourierResponse,
    CourierStatusIn,
    EarningsResponse,
    Envelope,
    OrderActionResponse,
    ScheduleIn,
    ScheduleResponse,
    UserRef,
)
from pharmacy.services.courier_service import CourierService
from pharmacy.services.messaging_service import MessagingService

router = APIRouter(prefix="/api/courier", tags=["courier"])


def _action_response(result: TransitionResult, conflict_detail: str, message: str) -> dict:
    if result.outcome == TransitionOutcome.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Zamówienie nie istnieje")
    if result.outcome == TransitionOutcome.CONFLICT:
        raise HTTPException(status_code=400, detail=conflict_detail)
    return {"success": True, "message": message, "order": result.order, **(result.extra or {})}


# =====================================================
# PROFIL
# =====================================================
@router.post("/register", response_model=CourierResponse)
def register(payload: CourierRegisterIn, db: Session = Depends(get_db)):
    svc = CourierService(db)
    try:
        courier = svc.register(payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Kurier zarejestrowany", "courier": courier}


@router.get("/profile", response_model=CourierResponse)
def get_profile(user_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    svc = CourierService(db)
    try:
        return {"success": True, "courier": svc.get_profile(user_id)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/profile", response_model=CourierResponse)
def update_profile(payload: CourierProfileIn, db: Session = Depends(get_db)):
    svc = CourierService(db)
    try:
        courier = svc.update_profile(payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Profil zaktualizowany", "courier": courier}


@router.post("/status", response_model=CourierResponse)
def set_status(payload: CourierStatusIn, db: Session = Depends(get_db)):
    svc = CourierService(db)
    try:
        courier = svc.set_status(payload.user_id, payload.status)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Status zaktualizowany", "courier": courier}


# =====================================================
# ZAMOWIENIA
# =====================================================
@router.get("/orders", response_model=CourierOrderListResponse)
def list_orders(user_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    """Oczekujace zamowienia oraz zamowienia tego kuriera."""
    svc = CourierService(db)
    return {"success": True, "orders": svc.list_orders(user_id)}


@router.get("/orders/{order_id}", response_model=CourierOrderResponse)
def get_order(order_id: int, user_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    svc = CourierService(db)
    try:
        return {"success": True, "order": svc.get_order(user_id, order_id)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/orders/accept", response_model=OrderActionResponse)
def accept_order(payload: CourierOrderActionIn, db: Session = Depends(get_db)):
    svc = CourierService(db)
    try:
        result = svc.accept_order(payload.user_id, payload.order_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return _action_response(result, "Zamówienie zostało już przyjęte", "Zamówienie przyjęte")


@router.post("/orders/complete", response_model=OrderActionResponse)
def complete_order(payload: CourierOrderActionIn, db: Session = Depends(get_db)):
    svc = CourierService(db)
    try:
        result = svc.complete_order(payload.user_id, payload.order_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return _action_response(result, "Nie można zakończyć tego zamówienia", "Zamówienie dostarczone")


@router.post("/orders/cancel", response_model=OrderActionResponse)
def cancel_order(payload: CourierOrderActionIn, db: Session = Depends(get_db)):
    svc = CourierService(db)
    try:
        result = svc.cancel_order(payload.user_id, payload.order_id, payload.reason)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return _action_response(result, "Nie można anulować tego zamówienia", "Zamówienie anulowane")


# =====================================================
# GRAFIK I ZAROBKI
# =====================================================
@router.get("/schedule", response_model=ScheduleResponse)
def get_schedule(user_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    svc = CourierService(db)
    try:
        return {"success": True, "schedule": svc.get_schedule(user_id)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/schedule", response_model=ScheduleResponse)
def replace_schedule(payload: ScheduleIn, db: Session = Depends(get_db)):
    svc = CourierService(db)
    try:
        schedule = svc.replace_schedule(payload.user_id, payload.schedule)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Grafik zapisany", "schedule": schedule}


@router.get("/earnings", response_model=EarningsResponse)
def earnings(
    user_id: int = Query(..., gt=0),
    period: str = Query("today"),
    db: Session = Depends(get_db),
):
    svc = CourierService(db)
    try:
        return {"success": True, "earnings": svc.earnings(user_id, period)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


# =====================================================
# WIADOMOSCI I CZATY
# =====================================================
@router.get("/messages", response_model=CourierMessagesResponse)
def list_messages(user_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    svc = MessagingService(db)
    try:
        return {"success": True, "messages": svc.list_messages(user_id)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/messages/{message_id}/read", response_model=Envelope)
def mark_message_read(message_id: int, payload: UserRef, db: Session = Depends(get_db)):
    svc = MessagingService(db)
    try:
        svc.mark_message_read(payload.user_id, message_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Oznaczono jako przeczytane"}


@router.get("/chats", response_model=ChatsResponse)
def list_chats(user_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    svc = MessagingService(db)
    try:
        return {"success": True, "chats": svc.list_chats(user_id)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/chats/{chat_id}/messages", response_model=ChatMessagesResponse)
def chat_transcript(chat_id: int, user_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    svc = MessagingService(db)
    try:
        return {"success": True, "messages": svc.get_transcript(user_id, chat_id)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/chats/{chat_id}/messages", response_model=ChatMessageResponse)
def send_chat_message(chat_id: int, payload: ChatMessageIn, db: Session = Depends(get_db)):
    svc = MessagingService(db)
    try:
        message = svc.send(payload.user_id, chat_id, payload.message)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "chat_message": message}


@router.post("/chats/{chat_id}/read", response_model=Envelope)
def mark_chat_read(chat_id: int, payload: UserRef, db: Session = Depends(get_db)):
    svc = MessagingService(db)
    try:
        svc.mark_chat_read(payload.user_id, chat_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True}
