import uuid

from storefront.services.realtime import ChangeEvent, channel_name


def test_owner_filter(feed):
    mine, theirs = str(uuid.uuid4()), str(uuid.uuid4())
    sub = feed.subscribe("cart_items", mine)

    feed.publish("cart_items", "INSERT", user_id=theirs, row_id="r1")
    feed.publish("cart_items", "UPDATE", user_id=mine, row_id="r2")

    assert sub.poll(timeout=0.1) == [ChangeEvent("cart_items", "UPDATE", mine, "r2")]
    sub.close()


def test_table_channel_sees_every_owner(feed):
    sub = feed.subscribe("products")
    feed.publish("products", "INSERT", row_id="p1")
    feed.publish("products", "DELETE", user_id="u1", row_id="p2")

    assert [e.row_id for e in sub.poll(timeout=0.1)] == ["p1", "p2"]
    assert channel_name("products", "u1") == "realtime:products:user_id=u1"


def test_resubscribe_moves_to_new_owner(feed):
    first, second = "u-1", "u-2"
    sub = feed.subscribe("orders", first)
    sub.resubscribe(second)

    feed.publish("orders", "UPDATE", user_id=first)
    feed.publish("orders", "UPDATE", user_id=second)

    events = sub.poll(timeout=0.1)
    assert [e.user_id for e in events] == [second]
    sub.close()
    assert sub.closed
    assert sub.poll() == []


def test_malformed_payload_is_dropped(r, feed):
    sub = feed.subscribe("orders")
    r.publish("realtime:orders", "nonsense")
    feed.publish("orders", "INSERT", row_id="o1")

    assert [e.row_id for e in sub.poll(timeout=0.1)] == ["o1"]


def test_other_session_change_reloads_cart(make_cart, make_product, feed, user_id):
    product = make_product()
    watcher = make_cart("tablet", user_id)
    watcher.subscribe(feed)

    make_cart("phone", user_id).add_to_cart(product.id, 2)
    assert watcher.items == []

    assert watcher.poll(timeout=0.1)
    assert watcher.total_items == 2


def test_sign_in_retargets_subscription(make_cart, feed, user_id):
    cart = make_cart("dev")
    assert cart.subscribe(feed) is None

    cart.sign_in(user_id)
    assert cart.subscription.user_id == user_id

    cart.sign_out()
    assert cart.subscription is None
