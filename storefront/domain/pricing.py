# storefront/domain/pricing.py
"""
Price rules shared by the catalog, the cart and checkout.

Prices may arrive as Decimal (database rows) or float (JSON from local
storage), everything is normalised to Decimal before any arithmetic.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Mapping

from storefront.domain.schemas import CartTotals
from storefront.utils.settings import FREE_SHIPPING_THRESHOLD, SHIPPING_FEE

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    return Decimal(str(value))


def has_discount(price: Any, discount_price: Any) -> bool:
    base = to_decimal(price)
    discount = to_decimal(discount_price)
    # a zero discount counts as unset
    return bool(discount) and base is not None and discount < base


def effective_price(price: Any, discount_price: Any) -> Decimal:
    """Discount price when it is set and below the base price, otherwise the base price."""
    if has_discount(price, discount_price):
        return to_decimal(discount_price).quantize(CENT)
    return to_decimal(price).quantize(CENT)


def discount_percent(price: Any, discount_price: Any) -> int:
    if not has_discount(price, discount_price):
        return 0
    base = to_decimal(price)
    off = (base - to_decimal(discount_price)) / base * 100
    return int(off.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def shipping_cost(subtotal: Decimal) -> Decimal:
    if subtotal >= FREE_SHIPPING_THRESHOLD:
        return ZERO
    return SHIPPING_FEE.quantize(CENT)


def unit_price(line: Mapping[str, Any]) -> Decimal:
    product = line["product"]
    return effective_price(product["price"], product.get("discount_price"))


def line_total(line: Mapping[str, Any]) -> Decimal:
    return unit_price(line) * int(line["quantity"])


def summarize(lines: Iterable[Mapping[str, Any]]) -> CartTotals:
    lines = list(lines)
    subtotal = sum((line_total(line) for line in lines), ZERO)
    shipping = shipping_cost(subtotal)
    return CartTotals(
        subtotal=subtotal,
        shipping=shipping,
        total=subtotal + shipping,
        item_count=sum(int(line["quantity"]) for line in lines),
    )
