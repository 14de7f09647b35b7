# storefront/services/checkout_service.py
import random
import string
import time
from typing import Any, Dict

from storefront.domain import pricing
from storefront.domain.enums import (
    ENABLED_PAYMENT_METHODS,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from storefront.domain.errors import BackendError, EmptyCartError, PartialOrderError
from storefront.domain.schemas import CheckoutIn
from storefront.repos.base import CommerceStore
from storefront.services.cart_service import CartService
from storefront.utils.retry import db_retry
from storefront.utils.settings import ORDER_NUMBER_PREFIX, PHONE_COUNTRY_CODE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number() -> str:
    """
    Prefix + last 6 digits of the epoch millis + 4 random characters.
    Readable, not guaranteed unique.
    """
    timestamp = str(int(time.time() * 1000))[-6:]
    suffix = "".join(random.choices(_SUFFIX_ALPHABET, k=4))
    return f"{ORDER_NUMBER_PREFIX}{timestamp}{suffix}"


class CheckoutService:
    def __init__(self, store: CommerceStore, cart_service: CartService):
        self.store = store
        self.cart_service = cart_service

    def prepare(self, profile: Dict[str, Any] | None) -> Dict[str, Any]:
        """Checkout form state: the cart plus an address pre-filled from the profile."""
        cart = self.cart_service.get_cart()
        if not cart["items"]:
            raise EmptyCartError("Cart is empty")

        profile = profile or {}
        phone = (profile.get("phone_number") or "").replace(PHONE_COUNTRY_CODE, "", 1)
        return {
            "cart": cart,
            "address": {
                "full_name": profile.get("full_name") or "",
                "phone": phone,
                "address_line1": "",
                "address_line2": "",
                "city": "",
                "state": "",
                "pincode": "",
            },
            "email": profile.get("email") or "",
            "payment_methods": [
                {"method": m, "enabled": m in ENABLED_PAYMENT_METHODS} for m in PaymentMethod
            ],
        }

    def place_order(self, request: CheckoutIn) -> Dict[str, Any]:
        """
        Writes the order, its lines, then clears the cart.
        The steps are not one transaction: once the order exists a later
        failure raises PartialOrderError with the order id.
        """
        if request.payment_method not in ENABLED_PAYMENT_METHODS:
            raise ValueError("Online payment is not available yet, please choose cash on delivery")

        lines = self.store.get_cart()
        if not lines:
            raise EmptyCartError("Cart is empty")

        totals = pricing.summarize(lines)
        address = request.address.model_dump()

        order = {
            "order_number": generate_order_number(),
            "status": OrderStatus.PLACED.value,
            "total_amount": totals.total,
            "payment_method": request.payment_method.value,
            "payment_status": PaymentStatus.PENDING.value,
            "shipping_address": address,
            "phone_number": address["phone"],
            "notes": request.notes,
        }
        items = [
            {
                "product_id": line["product_id"],
                "product_name": line["product"]["name"],
                "product_image": (line["product"].get("images") or [""])[0],
                "quantity": line["quantity"],
                "size": line["selected_size"],
                "price": pricing.unit_price(line),
            }
            for line in lines
        ]

        created = self.store.add_order(order, items)
        logger.info(
            f"Order {created['order_number']} ({created['id']}) placed by {self.store.user_id}, "
            f"total {totals.total}"
        )

        try:
            self._clear_cart()
        except BackendError as e:
            logger.error(f"Order {created['id']} placed but cart was not cleared: {e}")
            raise PartialOrderError("Order placed but the cart could not be cleared", created["id"]) from e

        return {
            "order_id": created["id"],
            "order_number": created["order_number"],
            "total_amount": totals.total,
            "redirect_to": f"/orders/{created['id']}",
        }

    @db_retry()
    def _clear_cart(self):
        self.store.clear_cart()
