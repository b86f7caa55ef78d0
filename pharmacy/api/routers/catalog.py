# pharmacy/api/routers/catalog.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from pharmacy.data.database import get_db
from pharmacy.domain.errors import ServiceError
from pharmacy.domain.schemas import CategoriesResponse, ProductPageResponse, ProductResponse
from pharmacy.repos.product_repo import ProductFilter
from pharmacy.services.catalog_service import CatalogService
from pharmacy.utils.settings import DEFAULT_PAGE_SIZE

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/categories", response_model=CategoriesResponse)
def list_categories(db: Session = Depends(get_db)):
    svc = CatalogService(db)
    return {"success": True, "categories": svc.list_categories()}


@router.get("/products", response_model=ProductPageResponse)
def list_products(
    category: str | None = Query(None),
    category_id: int | None = Query(None, gt=0),
    search: str | None = Query(None),
    popular: bool = Query(False),
    new: bool = Query(False),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    db: Session = Depends(get_db),
):
    svc = CatalogService(db)
    flt = ProductFilter(
        category=category,
        category_id=category_id,
        search=search.strip() if search else None,
        popular=popular,
        new=new,
    )
    return {"success": True, **svc.list_products(flt, page=page, limit=limit)}


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    svc = CatalogService(db)
    try:
        return {"success": True, "product": svc.get_product(product_id)}
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
