# storefront/domain/enums.py
from enum import Enum


class OrderStatus(str, Enum):
    PLACED = "placed"
    PACKED = "packed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# what the customer's progress indicator walks through, cancelled is off the track
ORDER_PROGRESS = (
    OrderStatus.PLACED,
    OrderStatus.PACKED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)

PENDING_STATUSES = (OrderStatus.PLACED, OrderStatus.PACKED)


class PaymentMethod(str, Enum):
    COD = "cod"
    PAYTM = "paytm"


ENABLED_PAYMENT_METHODS = (PaymentMethod.COD,)


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class SortKey(str, Enum):
    NEWEST = "newest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    NAME = "name"
