# storefront/repos/remote_store.py
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import BackendError, PartialOrderError
from storefront.repos.base import CommerceStore, product_snapshot
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _now():
    return datetime.now(timezone.utc)


def cart_line_dict(item: CartItemModel) -> Dict[str, Any]:
    p = item.product
    return {
        "id": item.id,
        "product_id": item.product_id,
        "quantity": item.quantity,
        "selected_size": item.selected_size,
        "product": product_snapshot(
            {
                "name": p.name,
                "price": p.price,
                "discount_price": p.discount_price,
                "images": p.images,
                "stock_quantity": p.stock_quantity,
            }
        ),
    }


def order_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "order_number": order.order_number,
        "status": order.status,
        "total_amount": order.total_amount,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "payment_id": order.payment_id,
        "shipping_address": order.shipping_address,
        "phone_number": order.phone_number,
        "notes": order.notes,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "order_items": [
            {
                "product_id": i.product_id,
                "product_name": i.product_name,
                "product_image": i.product_image,
                "quantity": i.quantity,
                "size": i.size,
                "price": i.price,
            }
            for i in order.order_items
        ],
    }


class RemoteStore(CommerceStore):
    """Cart and orders in the relational store, filtered by user_id."""

    def __init__(self, db: Session, user_id: str):
        super().__init__(user_id)
        self.db = db

    @contextmanager
    def _write(self, action: str):
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action} for user {self.user_id}: {e}")
            raise BackendError(f"Failed to {action}") from e

    @contextmanager
    def _read(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action} for user {self.user_id}: {e}")
            raise BackendError(f"Failed to {action}") from e

    def _own_line(self, line_id: str) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.id == line_id,
                CartItemModel.user_id == self.user_id,
            )
        ).scalar_one_or_none()

    # cart
    def get_cart(self) -> List[Dict[str, Any]]:
        with self._read("fetch cart"):
            items = self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.user_id == self.user_id)
                .order_by(CartItemModel.created_at)
            ).scalars().all()
            return [cart_line_dict(i) for i in items]

    def add_cart_line(self, product: Dict[str, Any], size: str, quantity: int) -> Dict[str, Any]:
        with self._write("add item to cart"):
            existing = self.db.execute(
                select(CartItemModel).where(
                    CartItemModel.user_id == self.user_id,
                    CartItemModel.product_id == product["id"],
                    CartItemModel.selected_size == size,
                )
            ).scalar_one_or_none()

            if existing:
                logger.info(
                    f"Product {product['id']} ({size}) already in cart, quantity "
                    f"{existing.quantity} -> {existing.quantity + quantity}"
                )
                existing.quantity += quantity
                existing.updated_at = _now()
                line = existing
            else:
                line = CartItemModel(
                    user_id=self.user_id,
                    product_id=product["id"],
                    quantity=quantity,
                    selected_size=size,
                )
                self.db.add(line)
            self.db.flush()
            self.db.refresh(line)
            return cart_line_dict(line)

    def set_cart_quantity(self, line_id: str, quantity: int) -> None:
        with self._write("update quantity"):
            line = self._own_line(line_id)
            if not line:
                raise LookupError("Cart item not found")
            line.quantity = quantity
            line.updated_at = _now()

    def remove_cart_line(self, line_id: str) -> None:
        with self._write("remove cart item"):
            self.db.execute(
                delete(CartItemModel).where(
                    CartItemModel.id == line_id,
                    CartItemModel.user_id == self.user_id,
                )
            )

    def clear_cart(self) -> None:
        with self._write("clear cart"):
            self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == self.user_id))

    # orders
    def get_orders(self) -> List[Dict[str, Any]]:
        with self._read("fetch orders"):
            orders = self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == self.user_id)
                .order_by(OrderModel.created_at.desc())
            ).scalars().all()
            return [order_dict(o) for o in orders]

    def get_order(self, order_id: str) -> Dict[str, Any] | None:
        with self._read("fetch order"):
            order = self.db.execute(
                select(OrderModel).where(
                    OrderModel.id == order_id,
                    OrderModel.user_id == self.user_id,
                )
            ).scalar_one_or_none()
            return order_dict(order) if order else None

    def add_order(self, order: Dict[str, Any], items: List[Dict[str, Any]]) -> Dict[str, Any]:
        # two separate writes, the order row exists before its lines do
        created = OrderModel(user_id=self.user_id, **order)
        with self._write("create order"):
            self.db.add(created)

        try:
            with self._write("create order items"):
                for item in items:
                    self.db.add(OrderItemModel(order_id=created.id, **item))
        except BackendError as e:
            raise PartialOrderError(str(e), created.id) from e

        self.db.expire(created)
        return order_dict(created)

    def update_order_status(self, order_id: str, status: str) -> None:
        with self._write("update order status"):
            order = self.db.get(OrderModel, order_id)
            if not order:
                raise LookupError("Order not found")
            order.status = status
            order.updated_at = _now()

    def list_all_orders(self, status: str | None = None) -> List[Dict[str, Any]]:
        with self._read("fetch orders"):
            query = select(OrderModel).order_by(OrderModel.created_at.desc())
            if status:
                query = query.where(OrderModel.status == status)
            return [order_dict(o) for o in self.db.execute(query).scalars().all()]
