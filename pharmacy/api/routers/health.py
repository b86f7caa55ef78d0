# pharmacy/api/routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from pharmacy.data.database import check_connection, get_db
from pharmacy.data.models import DeliveryOrderModel, ProductModel, UserModel
from pharmacy.domain.schemas import ConfigResponse
from pharmacy.utils.settings import GOOGLE_CLIENT_ID
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: Session = Depends(get_db)):
    now = datetime.now(timezone.utc).isoformat()
    try:
        check_connection()
        counts = {
            "users": db.scalar(select(func.count(UserModel.id))),
            "products": db.scalar(select(func.count(ProductModel.id))),
            "orders": db.scalar(select(func.count(DeliveryOrderModel.id))),
        }
    except OperationalError as e:
        logger.error(f"Health check: baza niedostepna: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "ERROR", "database": "disconnected", "timestamp": now},
        )
    return {"status": "OK", "database": "connected", "timestamp": now, "tables": counts}


@router.get("/api/config", response_model=ConfigResponse)
def config():
    return {"success": True, "google_client_id": GOOGLE_CLIENT_ID}
