# pharmacy/api/routers/admin.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pharmacy.data.database import get_db
from pharmacy.domain.errors import ServiceError
from pharmacy.domain.schemas import ProductCreateIn, ProductResponse
from pharmacy.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/products", response_model=ProductResponse)
def create_product(payload: ProductCreateIn, db: Session = Depends(get_db)):
    svc = CatalogService(db)
    try:
        product = svc.create_product(payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"success": True, "message": "Produkt dodany", "product": product}
