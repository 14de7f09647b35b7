from decimal import Decimal

import pytest

from storefront.repos.local_store import LocalStore, CART_KEY, ORDERS_KEY
from storefront.utils.settings import DEMO_USER_ID

PRODUCT = {
    "id": "prod-1",
    "name": "White Kurti",
    "price": Decimal("1499.00"),
    "discount_price": Decimal("1199.00"),
    "images": ["a.jpg", "b.jpg"],
    "stock_quantity": 5,
}


@pytest.fixture
def store(storage):
    return LocalStore(storage, DEMO_USER_ID)


def test_add_keeps_product_snapshot(store, storage):
    store.add_cart_line(PRODUCT, "M", 1)

    cart = storage.get_json(CART_KEY)
    assert len(cart) == 1
    assert cart[0]["id"].startswith("cart-")
    assert cart[0]["product"] == {
        "name": "White Kurti",
        "price": 1499.0,
        "discount_price": 1199.0,
        "images": ["a.jpg", "b.jpg"],
        "stock_quantity": 5,
    }


def test_same_product_and_size_is_merged(store):
    store.add_cart_line(PRODUCT, "M", 1)
    store.add_cart_line(PRODUCT, "M", 2)
    store.add_cart_line(PRODUCT, "L", 1)

    cart = store.get_cart()
    assert [(i["selected_size"], i["quantity"]) for i in cart] == [("M", 3), ("L", 1)]


def test_set_quantity_and_remove(store):
    line = store.add_cart_line(PRODUCT, "M", 1)
    store.set_cart_quantity(line["id"], 4)
    assert store.get_cart()[0]["quantity"] == 4

    store.remove_cart_line(line["id"])
    assert store.get_cart() == []


def test_set_quantity_unknown_line(store):
    with pytest.raises(LookupError):
        store.set_cart_quantity("cart-missing", 2)


def test_clear_cart_removes_key(store, storage):
    store.add_cart_line(PRODUCT, "M", 1)
    store.clear_cart()
    assert storage.get_item(CART_KEY) is None
    assert store.get_cart() == []


def test_orders_are_prepended_and_status_updates(store, storage):
    first = store.add_order({"order_number": "CHK1", "status": "placed", "total_amount": Decimal("350")}, [])
    second = store.add_order({"order_number": "CHK2", "status": "placed", "total_amount": Decimal("1000")}, [])

    assert [o["order_number"] for o in store.get_orders()] == ["CHK2", "CHK1"]
    assert first["id"].startswith("order-")
    assert first["user_id"] == DEMO_USER_ID

    store.update_order_status(first["id"], "shipped")
    assert store.get_order(first["id"])["status"] == "shipped"
    assert store.get_order(second["id"])["status"] == "placed"
    assert [o["order_number"] for o in store.list_all_orders("shipped")] == ["CHK1"]
    assert len(storage.get_json(ORDERS_KEY)) == 2


def test_update_status_unknown_order(store):
    with pytest.raises(LookupError):
        store.update_order_status("order-missing", "packed")


def test_devices_do_not_share_data(store, redis_client):
    from storefront.data.local_storage import LocalStorage

    store.add_cart_line(PRODUCT, "M", 1)
    other = LocalStore(LocalStorage(redis_client, "device-2"), DEMO_USER_ID)
    assert other.get_cart() == []


def test_unreadable_cart_reads_as_empty(storage):
    storage.set_item(CART_KEY, "[{broken")
    assert LocalStore(storage, DEMO_USER_ID).get_cart() == []
