from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from storefront.domain.errors import BackendError, PartialOrderError
from storefront.repos.catalog_repo import product_dict
from storefront.repos.remote_store import RemoteStore


def boom(*args, **kwargs):
    raise OperationalError("COMMIT", {}, Exception("connection lost"))


@pytest.fixture
def store(db):
    return RemoteStore(db, "user-1")


def order_fields(number="CHK123456ABCD", status="placed"):
    return {
        "order_number": number,
        "status": status,
        "total_amount": Decimal("350.00"),
        "payment_method": "cod",
        "payment_status": "pending",
        "shipping_address": {"full_name": "Meera", "city": "Lucknow"},
        "phone_number": "9876543210",
    }


def test_cart_line_expands_product(store, make_product):
    product = make_product(price="1499", discount_price="1199")
    store.add_cart_line(product_dict(product), "M", 2)

    [line] = store.get_cart()
    assert line["product_id"] == product.id
    assert line["quantity"] == 2
    assert line["selected_size"] == "M"
    assert line["product"]["name"] == "White Kurti"
    assert line["product"]["discount_price"] == Decimal("1199.00")


def test_existing_product_and_size_increments(store, make_product):
    product = make_product(sizes=(("M", 5), ("L", 5)))
    store.add_cart_line(product_dict(product), "M", 1)
    store.add_cart_line(product_dict(product), "M", 3)
    store.add_cart_line(product_dict(product), "L", 1)

    cart = store.get_cart()
    assert len(cart) == 2
    assert {i["selected_size"]: i["quantity"] for i in cart} == {"M": 4, "L": 1}


def test_cart_is_scoped_to_identity(db, store, make_product):
    product = make_product()
    other = RemoteStore(db, "user-2")
    store.add_cart_line(product_dict(product), "M", 1)
    line = other.add_cart_line(product_dict(product), "M", 1)

    store.clear_cart()
    assert store.get_cart() == []
    assert [i["id"] for i in other.get_cart()] == [line["id"]]

    with pytest.raises(LookupError):
        store.set_cart_quantity(line["id"], 5)


def test_add_order_with_items(store, make_product):
    product = make_product()
    created = store.add_order(
        order_fields(),
        [{
            "product_id": product.id,
            "product_name": "White Kurti",
            "product_image": "a.jpg",
            "quantity": 1,
            "size": "M",
            "price": Decimal("300.00"),
        }],
    )

    assert created["status"] == "placed"
    assert [i["product_name"] for i in created["order_items"]] == ["White Kurti"]
    assert store.get_order(created["id"])["order_number"] == "CHK123456ABCD"
    assert RemoteStore(store.db, "user-2").get_order(created["id"]) is None


def test_order_lines_failure_reports_the_order(store, monkeypatch):
    calls = {"n": 0}
    real_commit = store.db.commit

    def commit_once():
        calls["n"] += 1
        if calls["n"] > 1:
            boom()
        real_commit()

    monkeypatch.setattr(store.db, "commit", commit_once)

    with pytest.raises(PartialOrderError) as exc:
        store.add_order(order_fields(), [{
            "product_id": None,
            "product_name": "Kurti",
            "quantity": 1,
            "size": "M",
            "price": Decimal("300"),
        }])

    monkeypatch.setattr(store.db, "commit", real_commit)
    order = store.get_order(exc.value.order_id)
    assert order is not None
    assert order["order_items"] == []


def test_failed_status_update_keeps_previous_status(store, monkeypatch):
    created = store.add_order(order_fields(), [])

    monkeypatch.setattr(store.db, "commit", boom)
    with pytest.raises(BackendError):
        store.update_order_status(created["id"], "shipped")
    monkeypatch.undo()

    assert store.get_order(created["id"])["status"] == "placed"


def test_any_status_can_follow_any_other(store):
    created = store.add_order(order_fields(), [])
    for status in ("delivered", "placed", "cancelled", "packed"):
        store.update_order_status(created["id"], status)
        assert store.get_order(created["id"])["status"] == status


def test_list_all_orders_covers_every_user(db, store):
    store.add_order(order_fields("CHK000001AAAA"), [])
    RemoteStore(db, "user-2").add_order(order_fields("CHK000002BBBB", status="shipped"), [])

    assert len(store.list_all_orders()) == 2
    assert [o["order_number"] for o in store.list_all_orders("shipped")] == ["CHK000002BBBB"]
    assert len(store.get_orders()) == 1
