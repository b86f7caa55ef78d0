from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pharmacy.data.database import get_db
from pharmacy.domain.errors import ServiceError
from pharmacy.services.user_service import UserService
from pharmacy.domain.schemas import (
    AvatarIn,
    AvatarResponse,
    Envelope,
    PasswordChangeIn,
    ProfileUpdateIn,
    UserResponse,
)

router = APIRouter(prefix="/api/user", tags=["users"])

@router.put("/update-profile", response_model=UserResponse)
def update_profile(payload: ProfileUpdateIn, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        user = service.update_profile(payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Profil zaktualizowany", "user": user}

@router.post("/change-password", response_model=Envelope)
def change_password(payload: PasswordChangeIn, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        service.change_password(payload.user_id, payload.current_password, payload.new_password)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Hasło zmienione"}

@router.post("/upload-avatar", response_model=AvatarResponse)
def upload_avatar(payload: AvatarIn, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        avatar = service.set_avatar(payload.user_id, payload.avatar)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Avatar zapisany", "avatar_url": avatar}
