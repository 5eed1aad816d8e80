import uuid

from storefront.data.models import ProfileModel


def _product(client, admin_id, title, price):
    resp = client.post(
        "/admin/products",
        params={"user_id": admin_id},
        json={"title": title, "price": price, "stock_qty": 5},
    )
    assert resp.status_code == 201
    return resp.json()["id"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_catalog_endpoints(client):
    products = client.get("/products").json()
    assert len(products) == 2
    assert client.get(f"/products/{products[0]['id']}").status_code == 200
    assert client.get(f"/products/{uuid.uuid4()}").status_code == 404
    assert client.get("/banners").json()[0]["display_order"] == 1


def test_shopping_flow(client, admin_id):
    phone = _product(client, admin_id, "Phone", "100")
    case = _product(client, admin_id, "Case", "50")
    user_id = str(uuid.uuid4())
    device = {"device_id": "browser-1"}

    # anonymous cart
    client.post("/carts/items", params=device, json={"product_id": phone, "qty": 2})
    resp = client.post("/carts/items", params=device, json={"product_id": case})
    cart = resp.json()
    assert cart["owner"] == "device"
    assert cart["total_items"] == 3
    assert float(cart["total_amount"]) == 250

    # sign up, sign in
    client.post("/profiles/", json={"user_id": user_id, "email": "asha@example.com"})
    cart = client.post("/carts/sync", params={**device, "user_id": user_id}).json()
    assert cart["owner"] == "user"
    assert cart["total_items"] == 3
    assert client.get("/carts/", params=device).json()["items"] == []

    address = client.post(
        f"/profiles/{user_id}/addresses",
        json={
            "full_name": "Asha Rao",
            "phone": "9876543210",
            "house_flat": "12B",
            "road_area_colony": "MG Road",
            "city": "Kolkata",
            "state": "West Bengal",
            "pincode": "700001",
        },
    ).json()

    resp = client.post("/orders/", json={"user_id": user_id, "address_id": address["id"]})
    assert resp.status_code == 201
    order = resp.json()
    assert float(order["amount_total"]) == 250
    assert order["status_label"] == "Order Placed"
    assert len(order["order_id"]) == 12

    assert client.get("/carts/", params={**device, "user_id": user_id}).json()["items"] == []

    history = client.get("/orders/", params={"user_id": user_id}).json()
    assert [o["order_id"] for o in history] == [order["order_id"]]

    payment_url = f"/orders/{order['order_id']}/payment"
    resp = client.post(payment_url, json={"user_id": user_id, "utr": "   4123   "})
    assert resp.status_code == 422

    resp = client.post(payment_url, json={"user_id": user_id, "utr": " 412345678901 "})
    assert resp.json()["payment_status"] == "paid"
    assert resp.json()["payment_utr"] == "412345678901"

    resp = client.patch(
        f"/admin/orders/{order['order_id']}/payment",
        params={"user_id": admin_id},
        json={"status": "verified"},
    )
    assert resp.json()["payment_label"] == "Paid"


def test_cart_errors_come_back_as_notices(client):
    resp = client.post("/carts/items", params={"device_id": "d"}, json={"product_id": str(uuid.uuid4())})
    assert resp.status_code == 200
    assert resp.json()["notices"][0]["variant"] == "destructive"

    resp = client.put(f"/carts/items/{uuid.uuid4()}", params={"device_id": "d"}, json={"qty": 0})
    assert resp.status_code == 200
    assert resp.json()["items"] == []


def test_order_errors(client):
    user_id = str(uuid.uuid4())
    resp = client.post("/orders/", json={"user_id": user_id, "address_id": str(uuid.uuid4())})
    assert resp.status_code == 400  # empty cart

    resp = client.get("/orders/000000000000", params={"user_id": user_id})
    assert resp.status_code == 404


def test_admin_requires_role(client, db):
    user_id = uuid.uuid4()
    db.add(ProfileModel(user_id=user_id, is_admin=False))
    db.commit()

    assert client.get("/admin/overview", params={"user_id": str(user_id)}).status_code == 403
    assert client.get("/admin/overview", params={"user_id": str(uuid.uuid4())}).status_code == 403
