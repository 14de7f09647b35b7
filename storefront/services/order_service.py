# storefront/services/order_service.py
from typing import Any, Dict, List

from storefront.domain.enums import ORDER_PROGRESS, OrderStatus
from storefront.domain.errors import BackendError
from storefront.repos.base import CommerceStore
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def progress_steps(status: str) -> List[Dict[str, Any]]:
    """placed -> packed -> shipped -> delivered, a cancelled order reaches none of them."""
    if status == OrderStatus.CANCELLED.value or status not in {s.value for s in ORDER_PROGRESS}:
        return [{"status": s, "reached": False} for s in ORDER_PROGRESS]

    position = [s.value for s in ORDER_PROGRESS].index(status)
    return [{"status": s, "reached": i <= position} for i, s in enumerate(ORDER_PROGRESS)]


class OrderService:
    """Customer side of orders: history and the confirmation view."""

    def __init__(self, store: CommerceStore):
        self.store = store

    def list_orders(self) -> List[Dict[str, Any]]:
        try:
            orders = self.store.get_orders()
        except BackendError as e:
            logger.error(f"Error fetching orders for {self.store.user_id}: {e}")
            return []
        return [{**o, "progress": progress_steps(o["status"])} for o in orders]

    def get_order(self, order_id: str) -> Dict[str, Any]:
        order = self.store.get_order(order_id)
        if not order:
            raise LookupError("Order not found")
        return {**order, "progress": progress_steps(order["status"])}
