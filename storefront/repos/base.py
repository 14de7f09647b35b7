# storefront/repos/base.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List


def product_snapshot(product: Dict[str, Any]) -> Dict[str, Any]:
    """Display fields of a product as carried on a cart line."""
    return {
        "name": product["name"],
        "price": product["price"],
        "discount_price": product.get("discount_price"),
        "images": list(product.get("images") or []),
        "stock_quantity": product.get("stock_quantity", 0),
    }


class CommerceStore(ABC):
    """
    Cart and order persistence for one identity.

    Both implementations hand back the same plain-dict shapes:
    cart line  -> id, product_id, quantity, selected_size, product{...}
    order      -> id, user_id, order_number, status, ..., order_items[...]
    so everything above this layer does not care where the data lives.
    """

    def __init__(self, user_id: str):
        self.user_id = user_id

    # cart
    @abstractmethod
    def get_cart(self) -> List[Dict[str, Any]]: ...

    @abstractmethod
    def add_cart_line(self, product: Dict[str, Any], size: str, quantity: int) -> Dict[str, Any]:
        """Add a line, or bump the quantity of the existing product+size line."""

    @abstractmethod
    def set_cart_quantity(self, line_id: str, quantity: int) -> None: ...

    @abstractmethod
    def remove_cart_line(self, line_id: str) -> None: ...

    @abstractmethod
    def clear_cart(self) -> None: ...

    # orders
    @abstractmethod
    def get_orders(self) -> List[Dict[str, Any]]: ...

    @abstractmethod
    def get_order(self, order_id: str) -> Dict[str, Any] | None: ...

    @abstractmethod
    def add_order(self, order: Dict[str, Any], items: List[Dict[str, Any]]) -> Dict[str, Any]: ...

    @abstractmethod
    def update_order_status(self, order_id: str, status: str) -> None: ...

    @abstractmethod
    def list_all_orders(self, status: str | None = None) -> List[Dict[str, Any]]:
        """Back office view, not limited to this identity."""
