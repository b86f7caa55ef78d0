# pharmacy/repos/product_repo.py
from dataclasses import dataclass

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session, selectinload

from pharmacy.data.models.category import CategoryModel
from pharmacy.data.models.product import ProductModel


@dataclass
class ProductFilter:
    """Opcjonalne predykaty katalogu, puste pola sa pomijane."""

    category: str | None = None
    category_id: int | None = None
    search: str | None = None
    popular: bool = False
    new: bool = False


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_categories(self) -> list[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars())

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel)
            .options(selectinload(ProductModel.category))
            .where(ProductModel.id == product_id)
        ).scalar_one_or_none()

    def _where(self, stmt, flt: ProductFilter):
        #budujemy predykat krok po kroku, ten sam dla strony i dla COUNT
        stmt = stmt.outerjoin(CategoryModel, ProductModel.category_id == CategoryModel.id)

        if flt.category and flt.category != "all":
            stmt = stmt.where(CategoryModel.name == flt.category)

        if flt.category_id:
            stmt = stmt.where(ProductModel.category_id == flt.category_id)

        if flt.search:
            pattern = f"%{flt.search}%"
            stmt = stmt.where(
                or_(
                    ProductModel.name.ilike(pattern),
                    ProductModel.description.ilike(pattern),
                    ProductModel.manufacturer.ilike(pattern),
                    CategoryModel.name.ilike(pattern),
                )
            )

        if flt.popular:
            stmt = stmt.where(ProductModel.is_popular.is_(True))

        if flt.new:
            stmt = stmt.where(ProductModel.is_new.is_(True))

        return stmt

    def list_products(self, flt: ProductFilter, limit: int, offset: int) -> list[ProductModel]:
        stmt = self._where(select(ProductModel), flt)
        stmt = (
            stmt.options(selectinload(ProductModel.category))
            .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.db.execute(stmt).scalars())

    def count_products(self, flt: ProductFilter) -> int:
        stmt = self._where(select(func.count(ProductModel.id)).select_from(ProductModel), flt)
        return self.db.execute(stmt).scalar_one()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product
