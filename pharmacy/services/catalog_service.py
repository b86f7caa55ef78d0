# pharmacy/services/catalog_service.py
import math
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from pharmacy.data.models.product import ProductModel
from pharmacy.domain.errors import ForbiddenError, NotFoundError, ValidationError
from pharmacy.domain.schemas import CategoryOut, ProductCreateIn, ProductOut
from pharmacy.repos.product_repo import ProductFilter, ProductRepo
from pharmacy.repos.user_repo import UserRepo
from pharmacy.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    """Odczyt katalogu (kategorie, produkty) i dodawanie produktow przez admina."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.users = UserRepo(db)

    def list_categories(self) -> list[CategoryOut]:
        return [CategoryOut.model_validate(c) for c in self.repo.list_categories()]

    def list_products(
        self,
        flt: ProductFilter,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Dict[str, Any]:
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)
        offset = (page - 1) * limit

        products = self.repo.list_products(flt, limit=limit, offset=offset)
        total = self.repo.count_products(flt)

        return {
            "products": [ProductOut.model_validate(p) for p in products],
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": math.ceil(total / limit),
        }

    def get_product(self, product_id: int) -> ProductOut:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Produkt nie znaleziony")
        return ProductOut.model_validate(product)

    def create_product(self, payload: ProductCreateIn) -> ProductOut:
        user = self.users.get_user(payload.user_id)
        if not user:
            raise NotFoundError("Użytkownik nie znaleziony")
        if not user.is_admin:
            raise ForbiddenError("Brak uprawnień")

        if not self.repo.get_category(payload.category_id):
            raise ValidationError("Wskazana kategoria nie istnieje")

        data = payload.model_dump(exclude={"user_id"})
        data["price"] = Decimal(data["price"]).quantize(Decimal("0.01"))
        if data["old_price"] is not None:
            data["old_price"] = Decimal(data["old_price"]).quantize(Decimal("0.01"))

        created = self.repo.create_product(ProductModel(**data))
        logger.info(f"Admin {payload.user_id} dodal produkt {created.id}")
        return self.get_product(created.id)
