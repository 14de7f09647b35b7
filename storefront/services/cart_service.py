# storefront/services/cart_service.py
from typing import Any, Dict, List

from storefront.domain import pricing
from storefront.repos.base import CommerceStore
from storefront.services.catalog_service import CatalogService
from storefront.utils.settings import FREE_SHIPPING_THRESHOLD
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart use cases for the signed-in identity.
    query (get_cart) returns lines with prices and totals,
    commands (add, update, remove) write through the store and return the fresh cart.
    """

    def __init__(self, store: CommerceStore, catalog: CatalogService):
        self.store = store
        self.catalog = catalog

    # query
    def get_cart(self) -> Dict[str, Any]:
        return self.summarize(self.store.get_cart())

    @staticmethod
    def summarize(lines: List[Dict[str, Any]]) -> Dict[str, Any]:
        totals = pricing.summarize(lines)
        return {
            "items": [
                {
                    **line,
                    "unit_price": pricing.unit_price(line),
                    "line_total": pricing.line_total(line),
                }
                for line in lines
            ],
            "subtotal": totals.subtotal,
            "shipping": totals.shipping,
            "total": totals.total,
            "item_count": totals.item_count,
            "free_shipping_threshold": FREE_SHIPPING_THRESHOLD,
        }

    # commands
    def add_to_cart(self, product_id: str, size: str, quantity: int = 1) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValueError("Quantity must be at least 1")

        product = self.catalog.get_product(product_id)

        if not size:
            raise ValueError("Please select a size")

        option = next((s for s in product["sizes"] if s["size"] == size), None)
        if not option:
            raise ValueError(f"Size {size} is not offered for this product")
        if option["stock"] <= 0 or product["stock_quantity"] <= 0:
            raise ValueError(f"Size {size} is out of stock")

        logger.info(f"Adding product {product_id} ({size}) x{quantity} to cart of {self.store.user_id}")
        self.store.add_cart_line(product, size, quantity)
        return self.get_cart()

    def update_quantity(self, line_id: str, quantity: int) -> Dict[str, Any]:
        # floor of 1, going lower is ignored rather than removing the line
        if quantity < 1:
            return self.get_cart()

        self.store.set_cart_quantity(line_id, quantity)
        logger.info(f"Cart line {line_id} quantity set to {quantity}")
        return self.get_cart()

    def _line(self, line_id: str) -> Dict[str, Any]:
        line = next((i for i in self.store.get_cart() if i["id"] == line_id), None)
        if not line:
            raise LookupError("Cart item not found")
        return line

    def increment(self, line_id: str) -> Dict[str, Any]:
        return self.update_quantity(line_id, self._line(line_id)["quantity"] + 1)

    def decrement(self, line_id: str) -> Dict[str, Any]:
        return self.update_quantity(line_id, self._line(line_id)["quantity"] - 1)

    def remove(self, line_id: str) -> Dict[str, Any]:
        self.store.remove_cart_line(line_id)
        logger.info(f"Cart line {line_id} removed")
        return self.get_cart()
