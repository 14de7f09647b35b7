# storefront/repos/local_store.py
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from storefront.data.local_storage import LocalStorage
from storefront.repos.base import CommerceStore, product_snapshot
from storefront.utils.settings import LOCAL_STORAGE_PREFIX
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CART_KEY = f"{LOCAL_STORAGE_PREFIX}cart"
ORDERS_KEY = f"{LOCAL_STORAGE_PREFIX}orders"


def _local_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class LocalStore(CommerceStore):
    """
    Demo identity data kept as two JSON lists in the device's local storage.
    Read-modify-write without locking, one client per device is assumed.
    """

    def __init__(self, storage: LocalStorage, user_id: str):
        super().__init__(user_id)
        self.storage = storage

    def _save_cart(self, cart: List[Dict[str, Any]]) -> None:
        self.storage.set_json(CART_KEY, cart)

    def _save_orders(self, orders: List[Dict[str, Any]]) -> None:
        self.storage.set_json(ORDERS_KEY, orders)

    # cart
    def get_cart(self) -> List[Dict[str, Any]]:
        return self.storage.get_json(CART_KEY, [])

    def add_cart_line(self, product: Dict[str, Any], size: str, quantity: int) -> Dict[str, Any]:
        cart = self.get_cart()
        line = next(
            (i for i in cart if i["product_id"] == product["id"] and i["selected_size"] == size),
            None,
        )

        if line:
            line["quantity"] += quantity
        else:
            line = {
                "id": _local_id("cart"),
                "product_id": product["id"],
                "quantity": quantity,
                "selected_size": size,
                "product": product_snapshot(product),
            }
            cart.append(line)

        self._save_cart(cart)
        return line

    def set_cart_quantity(self, line_id: str, quantity: int) -> None:
        cart = self.get_cart()
        for line in cart:
            if line["id"] == line_id:
                line["quantity"] = quantity
                self._save_cart(cart)
                return
        raise LookupError("Cart item not found")

    def remove_cart_line(self, line_id: str) -> None:
        self._save_cart([i for i in self.get_cart() if i["id"] != line_id])

    def clear_cart(self) -> None:
        self.storage.remove_item(CART_KEY)

    # orders
    def get_orders(self) -> List[Dict[str, Any]]:
        return self.storage.get_json(ORDERS_KEY, [])

    def get_order(self, order_id: str) -> Dict[str, Any] | None:
        return next((o for o in self.get_orders() if o["id"] == order_id), None)

    def add_order(self, order: Dict[str, Any], items: List[Dict[str, Any]]) -> Dict[str, Any]:
        now = _now_iso()
        record = {
            "id": _local_id("order"),
            "user_id": self.user_id,
            "payment_id": None,
            "notes": "",
            **order,
            "created_at": now,
            "updated_at": now,
            "order_items": items,
        }
        orders = self.get_orders()
        orders.insert(0, record)
        self._save_orders(orders)
        # read back so numbers come out the way every later read sees them
        return self.get_order(record["id"])

    def update_order_status(self, order_id: str, status: str) -> None:
        orders = self.get_orders()
        for order in orders:
            if order["id"] == order_id:
                order["status"] = status
                order["updated_at"] = _now_iso()
                self._save_orders(orders)
                return
        raise LookupError("Order not found")

    def list_all_orders(self, status: str | None = None) -> List[Dict[str, Any]]:
        orders = self.get_orders()
        if status:
            orders = [o for o in orders if o["status"] == status]
        return orders
