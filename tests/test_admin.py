from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.data.models import OrderModel
from storefront.domain.errors import NotFound, Unauthorized
from storefront.domain.schemas import BannerIn, ProductIn, ProductPatch
from storefront.services.admin_service import AdminService
from storefront.services.order_service import OrderService
from storefront.tasks.expire import expire_payments


@pytest.fixture
def order(db, feed, make_cart, make_product, make_address, user_id):
    cart = make_cart(user_id=user_id)
    cart.add_to_cart(make_product("Phone", "29999").id, 1)
    return OrderService(db, feed).place_order(cart, make_address(user_id).id)


def test_non_admin_is_refused(db, feed, user_id):
    svc = AdminService(db, user_id, feed)
    with pytest.raises(Unauthorized):
        svc.overview()
    with pytest.raises(Unauthorized):
        svc.create_product(ProductIn(title="X", price=Decimal("1")))


def test_overview(db, feed, order, admin_id):
    AdminService(db, admin_id, feed).create_banner(BannerIn(title="Sale", image_url="/sale.jpg"))

    overview = AdminService(db, admin_id, feed).overview()

    assert overview.total_products == 1
    assert overview.total_orders == 1
    assert overview.revenue == Decimal("29999")
    assert overview.active_banners == 1
    assert overview.recent_orders[0].order_id == order.order_id


def test_cancelled_orders_do_not_count_as_revenue(db, feed, order, admin_id):
    svc = AdminService(db, admin_id, feed)
    svc.update_order_status(order.order_id, "cancelled")
    assert svc.overview().revenue == Decimal("0")


def test_status_updates(db, feed, order, admin_id):
    svc = AdminService(db, admin_id, feed)

    updated = svc.update_order_status(order.order_id, "packaging")
    assert updated.progress == 50

    verified = svc.update_payment_status(order.order_id, "verified")
    assert verified.payment_label == "Paid"

    with pytest.raises(ValueError):
        svc.update_order_status(order.order_id, "teleported")
    with pytest.raises(NotFound):
        svc.update_payment_status("000000000000", "paid")


def test_product_management(db, feed, admin_id):
    svc = AdminService(db, admin_id, feed)
    created = svc.create_product(ProductIn(title="Earbuds", price=Decimal("1999"), stock_qty=3))

    updated = svc.update_product(created.id, ProductPatch(price=Decimal("1499")))

    assert updated.price == Decimal("1499")
    assert updated.title == "Earbuds"
    assert updated.stock_qty == 3


def test_settings(db, feed, admin_id):
    settings = AdminService(db, admin_id, feed).settings()
    assert settings.payment_upi == "teamexe@ybl"
    assert settings.payment_qr_ttl_minutes == 5


def test_expire_payments(db, feed, order):
    row = db.query(OrderModel).filter_by(order_id=order.order_id).one()
    row.payment_qr_expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
    db.commit()

    assert expire_payments(db, feed) == 1
    assert expire_payments(db, feed) == 0
    assert db.query(OrderModel).one().payment_status == "expired"
