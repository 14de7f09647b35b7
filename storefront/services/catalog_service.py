# storefront/services/catalog_service.py
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.enums import SortKey
from storefront.domain.errors import BackendError
from storefront.domain.schemas import ProductFilters
from storefront.repos.catalog_repo import CatalogRepo, product_dict
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

FEATURED_LIMIT = 8


def category_dict(c) -> Dict[str, Any]:
    return {
        "id": c.id,
        "name": c.name,
        "slug": c.slug,
        "description": c.description,
        "image_url": c.image_url,
    }


class CatalogService:
    """
    Storefront reads. A failed list read is logged and comes back empty,
    a failed single lookup raises BackendError. Every filter change is a fresh query.
    """

    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    def list_categories(self) -> List[Dict[str, Any]]:
        try:
            return [category_dict(c) for c in self.repo.list_categories()]
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error fetching categories: {e}")
            return []

    def home(self) -> Dict[str, Any]:
        try:
            featured = self.repo.search_products(sort=SortKey.NEWEST, limit=FEATURED_LIMIT)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error fetching featured products: {e}")
            featured = []
        return {
            "categories": self.list_categories(),
            "featured_products": [product_dict(p) for p in featured],
        }

    def list_products(self, filters: ProductFilters) -> List[Dict[str, Any]]:
        category_id = None
        if filters.category:
            # slug -> id against the category list, an unknown slug filters nothing
            match = next((c for c in self.list_categories() if c["slug"] == filters.category), None)
            if match:
                category_id = match["id"]

        try:
            products = self.repo.search_products(
                category_id=category_id,
                search=filters.search.strip(),
                min_price=filters.min_price,
                max_price=filters.max_price,
                in_stock_only=filters.in_stock_only,
                sort=filters.sort,
            )
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error fetching products: {e}")
            return []

        return [product_dict(p) for p in products]

    def get_product(self, product_id: str) -> Dict[str, Any]:
        try:
            product = self.repo.get_product(product_id)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error fetching product {product_id}: {e}")
            raise BackendError("Failed to load product") from e
        if not product:
            raise LookupError("Product not found")
        return product_dict(product)

    def category_page(self, slug: str, sort: SortKey = SortKey.NEWEST) -> Dict[str, Any]:
        try:
            category = self.repo.get_category_by_slug(slug)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error fetching category {slug}: {e}")
            raise BackendError("Failed to load category") from e
        if not category:
            raise LookupError("Category not found")

        try:
            products = self.repo.search_products(category_id=category.id, sort=sort)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error fetching products for category {slug}: {e}")
            products = []
        return {
            "category": category_dict(category),
            "products": [product_dict(p) for p in products],
        }
