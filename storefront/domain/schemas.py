# storefront/domain/schemas.py
import re
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.domain.enums import OrderStatus, PaymentMethod, SortKey


# ---------------------------------------------------------------- catalog

class SizeOption(BaseModel):
    size: str = Field(..., min_length=1)
    stock: int = Field(0, ge=0)


class CategoryOut(BaseModel):
    id: str
    name: str
    slug: str
    description: str = ""
    image_url: str = ""

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: str
    name: str
    description: str = ""
    category_id: Optional[str] = None
    price: Decimal
    discount_price: Optional[Decimal] = None
    images: List[str] = []
    sizes: List[SizeOption] = []
    stock_quantity: int = 0
    is_available: bool = True
    sku: str
    fabric_details: str = ""
    created_at: Optional[datetime] = None
    effective_price: Decimal
    discount_percent: int = 0


class AdminProductOut(ProductOut):
    category_name: Optional[str] = None


class ProductFilters(BaseModel):
    category: str = ""
    search: str = ""
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    in_stock_only: bool = False
    sort: SortKey = SortKey.NEWEST


class HomeOut(BaseModel):
    categories: List[CategoryOut]
    featured_products: List[ProductOut]


class CategoryPageOut(BaseModel):
    category: CategoryOut
    products: List[ProductOut]


class ProductIn(BaseModel):
    """Admin product form."""

    name: str = Field(..., min_length=1)
    description: str = ""
    category_id: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0)
    discount_price: Optional[Decimal] = Field(None, ge=0)
    sku: str = Field(..., min_length=1)
    fabric_details: str = ""
    is_available: bool = True
    images: List[str] = []
    sizes: List[SizeOption] = Field(default_factory=lambda: [SizeOption(size="M", stock=0)])


# ---------------------------------------------------------------- cart

class CartProductSnapshot(BaseModel):
    name: str
    price: Decimal
    discount_price: Optional[Decimal] = None
    images: List[str] = []
    stock_quantity: int = 0


class CartLineOut(BaseModel):
    id: str
    product_id: str
    quantity: int
    selected_size: str
    product: CartProductSnapshot
    unit_price: Decimal
    line_total: Decimal


class CartTotals(BaseModel):
    subtotal: Decimal
    shipping: Decimal
    total: Decimal
    item_count: int


class CartOut(CartTotals):
    items: List[CartLineOut]
    free_shipping_threshold: Decimal


class AddToCartIn(BaseModel):
    product_id: str = Field(..., min_length=1)
    size: str = ""
    quantity: int = Field(1, gt=0)


class UpdateQuantityIn(BaseModel):
    quantity: int


# ---------------------------------------------------------------- checkout / orders

def _digits(value: str) -> str:
    return re.sub(r"\D", "", value or "")


class ShippingAddress(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address_line1: str = Field(..., min_length=1)
    address_line2: str = ""
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    pincode: str = Field(..., min_length=1)


class CheckoutIn(BaseModel):
    address: ShippingAddress
    email: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.COD
    notes: str = ""


class PaymentOption(BaseModel):
    method: PaymentMethod
    enabled: bool


class CheckoutOut(BaseModel):
    cart: CartOut
    address: dict[str, Any]
    email: str = ""
    payment_methods: List[PaymentOption]


class OrderItemOut(BaseModel):
    product_id: Optional[str] = None
    product_name: str
    product_image: str = ""
    quantity: int
    size: str
    price: Decimal


class OrderOut(BaseModel):
    id: str
    user_id: str
    order_number: str
    status: OrderStatus
    total_amount: Decimal
    payment_method: PaymentMethod
    payment_status: str
    payment_id: Optional[str] = None
    shipping_address: dict[str, Any]
    phone_number: str
    notes: str = ""
    created_at: datetime
    updated_at: datetime
    order_items: List[OrderItemOut] = []


class ProgressStep(BaseModel):
    status: OrderStatus
    reached: bool


class TrackedOrderOut(OrderOut):
    progress: List[ProgressStep]


class PlacedOrderOut(BaseModel):
    order_id: str
    order_number: str
    total_amount: Decimal
    redirect_to: str


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


# ---------------------------------------------------------------- identity

class UserProfileOut(BaseModel):
    id: str
    phone_number: str
    full_name: str
    email: Optional[str] = None
    default_address: Optional[dict[str, Any]] = None
    is_admin: bool = False

    model_config = ConfigDict(from_attributes=True)


class PhoneIn(BaseModel):
    phone: str

    @field_validator("phone")
    @classmethod
    def digits_only(cls, v: str) -> str:
        v = _digits(v)
        if not v:
            raise ValueError("Mobile number is required")
        return v


class SendOtpOut(BaseModel):
    phone: str
    is_demo: bool


class VerifyOtpIn(PhoneIn):
    otp: str = Field(..., min_length=1)


class VerifyOtpOut(BaseModel):
    step: Literal["signed_in", "create_profile"]
    is_demo: bool
    access_token: Optional[str] = None
    suggested_name: str = ""
    profile: Optional[UserProfileOut] = None


class CreateProfileIn(PhoneIn):
    full_name: str = Field(..., min_length=1)
    email: Optional[str] = None


class ProfileUpdateIn(BaseModel):
    full_name: str = Field(..., min_length=1)
    email: Optional[str] = None


class SessionOut(BaseModel):
    user_id: Optional[str] = None
    is_demo: bool = False
    profile: Optional[UserProfileOut] = None


# ---------------------------------------------------------------- admin

class DashboardStats(BaseModel):
    total_products: int
    total_orders: int
    pending_orders: int
    total_revenue: Decimal
