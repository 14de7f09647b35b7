# storefront/repos/catalog_repo.py
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import select, func
from sqlalchemy.orm import Session, joinedload

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.domain.enums import SortKey
from storefront.domain.pricing import effective_price, discount_percent

_ORDERING = {
    SortKey.PRICE_LOW: ProductModel.price.asc(),
    SortKey.PRICE_HIGH: ProductModel.price.desc(),
    SortKey.NAME: ProductModel.name.asc(),
    SortKey.NEWEST: ProductModel.created_at.desc(),
}


def product_dict(p: ProductModel) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description,
        "category_id": p.category_id,
        "price": p.price,
        "discount_price": p.discount_price,
        "images": list(p.images or []),
        "sizes": list(p.sizes or []),
        "stock_quantity": p.stock_quantity,
        "is_available": p.is_available,
        "sku": p.sku,
        "fabric_details": p.fabric_details,
        "created_at": p.created_at,
        "effective_price": effective_price(p.price, p.discount_price),
        "discount_percent": discount_percent(p.price, p.discount_price),
    }


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    # categories
    def list_categories(self) -> List[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars().all())

    def get_category_by_slug(self, slug: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()

    # products
    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def search_products(
        self,
        category_id: str | None = None,
        search: str = "",
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        in_stock_only: bool = False,
        sort: SortKey = SortKey.NEWEST,
        limit: int | None = None,
    ) -> List[ProductModel]:
        query = select(ProductModel).where(ProductModel.is_available.is_(True))

        if category_id:
            query = query.where(ProductModel.category_id == category_id)
        if search:
            query = query.where(ProductModel.name.ilike(f"%{search}%"))
        if min_price is not None:
            query = query.where(ProductModel.price >= min_price)
        if max_price is not None:
            query = query.where(ProductModel.price <= max_price)
        if in_stock_only:
            query = query.where(ProductModel.stock_quantity > 0)

        query = query.order_by(_ORDERING.get(sort, _ORDERING[SortKey.NEWEST]))
        if limit:
            query = query.limit(limit)

        return list(self.db.execute(query).scalars().all())

    def list_all_products(self) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .options(joinedload(ProductModel.category))
                .order_by(ProductModel.created_at.desc())
            ).scalars().all()
        )

    def count_products(self) -> int:
        return self.db.execute(select(func.count()).select_from(ProductModel)).scalar_one()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update_product(self, product_id: str, data: Dict[str, Any]) -> ProductModel | None:
        product = self.get_product(product_id)
        if product:
            for field, value in data.items():
                setattr(product, field, value)
            self.db.commit()
            self.db.refresh(product)
        return product

    def delete_product(self, product_id: str) -> bool:
        product = self.get_product(product_id)
        if not product:
            return False
        self.db.delete(product)
        self.db.commit()
        return True

    def rollback(self):
        self.db.rollback()
