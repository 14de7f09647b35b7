# storefront/services/admin_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.enums import OrderStatus, PENDING_STATUSES
from storefront.domain.errors import BackendError
from storefront.domain.schemas import ProductIn
from storefront.repos.base import CommerceStore
from storefront.repos.catalog_repo import CatalogRepo, product_dict
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def product_fields(payload: ProductIn) -> Dict[str, Any]:
    """Form payload -> product columns, stock is always the sum of size stocks."""
    sizes = [s.model_dump() for s in payload.sizes]
    return {
        "name": payload.name,
        "description": payload.description,
        "category_id": payload.category_id,
        "price": payload.price,
        "discount_price": payload.discount_price,
        "sku": payload.sku,
        "fabric_details": payload.fabric_details,
        "stock_quantity": sum(s["stock"] for s in sizes),
        "is_available": payload.is_available,
        "images": [img.strip() for img in payload.images if img.strip()],
        "sizes": sizes,
        "updated_at": datetime.now(timezone.utc),
    }


class AdminService:
    """
    Back office: dashboard, product management and order status.
    Orders come from the admin's own store, products always from the database.
    """

    def __init__(self, db: Session, store: CommerceStore):
        self.catalog = CatalogRepo(db)
        self.store = store

    # dashboard
    def dashboard(self) -> Dict[str, Any]:
        try:
            total_products = self.catalog.count_products()
        except SQLAlchemyError as e:
            self.catalog.rollback()
            logger.error(f"Error counting products: {e}")
            total_products = 0

        try:
            orders = self.store.list_all_orders()
        except BackendError as e:
            logger.error(f"Error fetching orders for dashboard: {e}")
            orders = []

        pending = {s.value for s in PENDING_STATUSES}
        return {
            "total_products": total_products,
            "total_orders": len(orders),
            "pending_orders": sum(1 for o in orders if o["status"] in pending),
            "total_revenue": sum((Decimal(str(o["total_amount"])) for o in orders), Decimal("0.00")),
        }

    # products
    def list_products(self, search: str = "") -> List[Dict[str, Any]]:
        try:
            products = self.catalog.list_all_products()
        except SQLAlchemyError as e:
            self.catalog.rollback()
            logger.error(f"Error fetching products: {e}")
            return []

        needle = search.strip().lower()
        result = []
        for p in products:
            if needle and needle not in p.name.lower() and needle not in p.sku.lower():
                continue
            result.append({**product_dict(p), "category_name": p.category.name if p.category else None})
        return result

    def get_product(self, product_id: str) -> Dict[str, Any]:
        product = self.catalog.get_product(product_id)
        if not product:
            raise LookupError("Product not found")
        return product_dict(product)

    def create_product(self, payload: ProductIn) -> Dict[str, Any]:
        try:
            created = self.catalog.create_product(ProductModel(**product_fields(payload)))
        except IntegrityError as e:
            self.catalog.rollback()
            logger.error(f"Error saving product {payload.sku}: {e}")
            raise ValueError(f"Failed to save product: SKU {payload.sku} or category is invalid") from e
        except SQLAlchemyError as e:
            self.catalog.rollback()
            logger.error(f"Error saving product {payload.sku}: {e}")
            raise BackendError("Failed to save product") from e

        logger.info(f"Product {created.id} ({created.sku}) created")
        return product_dict(created)

    def update_product(self, product_id: str, payload: ProductIn) -> Dict[str, Any]:
        try:
            updated = self.catalog.update_product(product_id, product_fields(payload))
        except IntegrityError as e:
            self.catalog.rollback()
            logger.error(f"Error saving product {product_id}: {e}")
            raise ValueError(f"Failed to save product: SKU {payload.sku} or category is invalid") from e
        except SQLAlchemyError as e:
            self.catalog.rollback()
            logger.error(f"Error saving product {product_id}: {e}")
            raise BackendError("Failed to save product") from e

        if not updated:
            raise LookupError("Product not found")

        logger.info(f"Product {product_id} updated")
        return product_dict(updated)

    def delete_product(self, product_id: str) -> None:
        try:
            deleted = self.catalog.delete_product(product_id)
        except SQLAlchemyError as e:
            self.catalog.rollback()
            logger.error(f"Error deleting product {product_id}: {e}")
            raise BackendError("Failed to delete product") from e

        if not deleted:
            raise LookupError("Product not found")
        logger.info(f"Product {product_id} deleted")

    # orders
    def list_orders(self, status: str | None = None, search: str = "") -> List[Dict[str, Any]]:
        try:
            orders = self.store.list_all_orders(status)
        except BackendError as e:
            logger.error(f"Error fetching orders: {e}")
            return []

        needle = search.strip()
        if not needle:
            return orders
        return [
            o
            for o in orders
            if needle.lower() in o["order_number"].lower() or needle in (o.get("phone_number") or "")
        ]

    def update_order_status(self, order_id: str, status: OrderStatus) -> List[Dict[str, Any]]:
        """Any status may follow any other. On failure nothing is written."""
        self.store.update_order_status(order_id, status.value)
        logger.info(f"Order {order_id} status -> {status.value}")
        return self.list_orders()
