# pharmacy/api/routers/auth.py
from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session

from pharmacy.data.database import get_db
from pharmacy.domain.errors import ServiceError
from pharmacy.domain.schemas import (
    GoogleAuthResponse,
    GoogleRegisterIn,
    GoogleTokenIn,
    LoginIn,
    RegisterIn,
    UserResponse,
)
from pharmacy.services.google_client import GoogleIdentityClient, get_google_client
from pharmacy.services.user_service import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        user = service.register(payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Rejestracja udana", "user": user}


@router.post("/login", response_model=UserResponse)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        user = service.login(payload.username, payload.password)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Zalogowano", "user": user}


@router.get("/me", response_model=UserResponse)
def me(
    user_id: int | None = Query(None),
    header_user_id: int | None = Header(None, alias="user-id"),
    db: Session = Depends(get_db),
):
    uid = user_id or header_user_id
    if not uid:
        raise HTTPException(status_code=401, detail="Brak autoryzacji")

    service = UserService(db)
    try:
        return {"success": True, "user": service.get_user(uid)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/google", response_model=GoogleAuthResponse)
def google_sign_in(
    payload: GoogleTokenIn,
    db: Session = Depends(get_db),
    google: GoogleIdentityClient = Depends(get_google_client),
):
    """
    Wymiana Google ID tokenu na lokalnego uzytkownika.
    Brakujace konto jest zakladane.
    """
    service = UserService(db)
    try:
        identity = google.verify(payload.token)
        if not identity:
            raise HTTPException(status_code=401, detail="Nieprawidłowy token Google")
        user, created = service.google_sign_in(identity)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {
        "success": True,
        "user": user,
        "created": created,
        # nowe konto nie ma jeszcze telefonu
        "requires_additional_info": created and not user.phone,
    }


@router.post("/google/register", response_model=UserResponse)
def google_register(payload: GoogleRegisterIn, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        user = service.google_register(payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Autoryzacja Google udana", "user": user}
