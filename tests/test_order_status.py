import pytest

from storefront.services.admin_service import AdminService
from storefront.services.order_service import OrderService
from storefront.services.order_status import (
    OrderStatusView,
    payment_label,
    status_label,
    status_progress,
)


@pytest.mark.parametrize(
    "status, label, progress",
    [
        ("placed", "Order Placed", 25),
        ("confirmed", "Confirmed", 25),
        ("packaging", "Packaging", 50),
        ("out_for_delivery", "Out for Delivery", 75),
        ("delivered", "Delivered", 100),
        ("cancelled", "Cancelled", 0),
        ("lost_in_space", "Unknown", 0),
    ],
)
def test_status_presentation(status, label, progress):
    assert status_label(status) == label
    assert status_progress(status) == progress


def test_payment_label():
    assert payment_label("verified") == "Paid"
    assert payment_label("paid") == "Pending"
    assert payment_label("pending") == "Pending"


def _place(db, feed, make_cart, product, user_id, address, qty):
    cart = make_cart(user_id=user_id)
    cart.add_to_cart(product.id, qty)
    return OrderService(db, feed).place_order(cart, address.id)


def test_history_is_newest_first_with_lines(db, feed, make_cart, make_product, make_address, user_id):
    product = make_product("A", "10")
    address = make_address(user_id)
    first = _place(db, feed, make_cart, product, user_id, address, 1)
    second = _place(db, feed, make_cart, product, user_id, address, 3)

    orders = OrderStatusView(db, user_id).load()

    assert [o.order_id for o in orders] == [second.order_id, first.order_id]
    assert orders[0].items[0].qty == 3
    assert orders[0].progress == 25


def test_view_reloads_on_admin_status_change(db, feed, make_cart, make_product, make_address, user_id, admin_id):
    order = _place(db, feed, make_cart, make_product(), user_id, make_address(user_id), 1)
    view = OrderStatusView(db, user_id)
    view.load()
    view.subscribe(feed)

    AdminService(db, admin_id, feed).update_order_status(order.order_id, "out_for_delivery")

    assert view.poll(timeout=0.1)
    assert view.orders[0].status_label == "Out for Delivery"
    assert view.orders[0].progress == 75
    view.unsubscribe()


def test_unreadable_history_is_empty(db):
    assert OrderStatusView(db, "not-a-user").load() == []
