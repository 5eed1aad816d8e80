from decimal import Decimal

from storefront.domain.schemas import CartLine
from storefront.services.local_cart_store import LocalCartStore


def _line(product_id="p-1", qty=1):
    return CartLine(id="l-1", product_id=product_id, title="Gaming Laptop", price=Decimal("79999"), qty=qty, images=["/a.jpg"])


def test_missing_value_is_empty_cart(r):
    assert LocalCartStore(r, "dev").get() == []


def test_lines_stored_under_device_namespace(r):
    store = LocalCartStore(r, "dev")
    store.put([_line(qty=3)])

    assert r.exists("picamart-cart:dev")
    lines = store.get()
    assert len(lines) == 1
    assert lines[0].qty == 3
    assert lines[0].price == Decimal("79999")


def test_devices_do_not_share_carts(r):
    LocalCartStore(r, "phone").put([_line()])
    assert LocalCartStore(r, "laptop").get() == []


def test_corrupt_value_is_empty_cart(r):
    r.set("picamart-cart:dev", "{not json")
    assert LocalCartStore(r, "dev").get() == []


def test_wrong_shape_is_empty_cart(r):
    r.set("picamart-cart:dev", '[{"product_id": "p-1", "qty": 0}]')
    assert LocalCartStore(r, "dev").get() == []


def test_clear_twice(r):
    store = LocalCartStore(r, "dev")
    store.put([_line()])
    store.clear()
    store.clear()
    assert store.get() == []
