from conftest import CARD, SHIPPING

from storefront.app.extensions import db
from storefront.app.models import Order, Product


def fill_cart(client, catalog):
    client.post("/api/cart", json={"product_id": catalog["plain"], "quantity": 2})
    client.post("/api/cart", json={"product_id": catalog["sale"], "quantity": 1})


def checkout(client, **overrides):
    body = {"shipping_address": SHIPPING, "payment_method": "card", "payment": CARD}
    body.update(overrides)
    return client.post("/api/orders", json=body)


# ORD-001: checkout turns the cart into a pending order
def test_place_order(app, alice, catalog):
    fill_cart(alice, catalog)

    r = checkout(alice)

    assert r.status_code == 201
    order = r.json
    assert order["status"] == "pending"
    assert order["subtotal_cents"] == 2300
    assert order["shipping_cents"] == 1500
    assert order["tax_cents"] == 184
    assert order["total_cents"] == 3984
    assert order["card_last4"] == "4242"
    assert order["shipping_address"]["city"] == "Oxford"
    assert sorted((i["product_id"], i["quantity"], i["unit_price_cents"]) for i in order["items"]) == sorted(
        [(catalog["plain"], 2, 1000), (catalog["sale"], 1, 300)]
    )

    # cart is cleared and stock decremented
    assert alice.get("/api/cart").json["items"] == []
    with app.app_context():
        assert db.session.get(Product, catalog["plain"]).stock == 8
        assert db.session.get(Product, catalog["sale"]).stock == 4


def test_place_order_with_paypal_needs_no_card(alice, catalog):
    fill_cart(alice, catalog)
    r = checkout(alice, payment_method="paypal", payment=None)
    assert r.status_code == 201
    assert r.json["payment_method"] == "paypal"
    assert r.json["card_last4"] is None


def test_checkout_validates_shipping_and_card(alice, catalog):
    fill_cart(alice, catalog)

    r = checkout(alice, shipping_address={**SHIPPING, "city": "  "})
    assert r.status_code == 400
    assert "shipping_address.city" in r.json["error"]["details"]["fields"]

    r = checkout(alice, payment={**CARD, "cvv": "1"})
    assert r.status_code == 400
    assert "payment.cvv" in r.json["error"]["details"]["fields"]

    r = checkout(alice, payment=None)
    assert r.status_code == 400
    assert r.json["error"]["details"]["fields"]["__root__"] == "Card details are required"

    # nothing was ordered
    assert len(alice.get("/api/cart").json["items"]) == 2
    assert alice.get("/api/orders").json["items"] == []


def test_checkout_with_empty_cart(alice, catalog):
    r = checkout(alice)
    assert r.status_code == 409
    assert r.json["error"]["message"] == "Cart is empty"


def test_checkout_rechecks_stock(app, alice, catalog):
    fill_cart(alice, catalog)
    with app.app_context():
        db.session.get(Product, catalog["plain"]).stock = 1
        db.session.commit()

    r = checkout(alice)
    assert r.status_code == 409
    assert r.json["error"]["details"]["product_id"] == catalog["plain"]
    assert len(alice.get("/api/cart").json["items"]) == 2


# ORD-002: order history
def test_list_orders_newest_first(alice, catalog):
    fill_cart(alice, catalog)
    first = checkout(alice).json["id"]
    fill_cart(alice, catalog)
    second = checkout(alice).json["id"]

    items = alice.get("/api/orders").json["items"]
    assert [o["id"] for o in items] == [second, first]
    assert items[0]["badge"] == "orange"
    assert items[0]["actions"] == {"view": True, "track": True, "reorder": False, "cancel": True}


def test_customers_only_see_their_orders(app, alice, login, admin_client, catalog):
    fill_cart(alice, catalog)
    order_id = checkout(alice).json["id"]

    bob = app.test_client()
    login(bob, "bob")
    assert bob.get("/api/orders").json["items"] == []
    assert bob.get(f"/api/orders/{order_id}").status_code == 404

    assert [o["id"] for o in admin_client.get("/api/orders").json["items"]] == [order_id]
    assert admin_client.get(f"/api/orders/{order_id}").status_code == 200


def test_orders_require_login(client):
    assert client.get("/api/orders").status_code == 401
    assert client.post("/api/orders", json={}).status_code == 401


# ORD-003: cancel returns stock
def test_cancel_pending_order(app, alice, catalog):
    fill_cart(alice, catalog)
    order_id = checkout(alice).json["id"]

    r = alice.post(f"/api/orders/{order_id}/cancel")
    assert r.status_code == 200
    assert r.json["status"] == "cancelled"
    assert r.json["badge"] == "red"
    assert r.json["actions"]["track"] is False

    with app.app_context():
        assert db.session.get(Product, catalog["plain"]).stock == 10

    assert alice.post(f"/api/orders/{order_id}/cancel").status_code == 409


# ORD-004: reorder puts a delivered order back into the cart
def test_reorder_only_delivered(app, alice, catalog):
    fill_cart(alice, catalog)
    order_id = checkout(alice).json["id"]

    assert alice.post(f"/api/orders/{order_id}/reorder").status_code == 409

    with app.app_context():
        db.session.get(Order, order_id).status = "delivered"
        db.session.get(Product, catalog["sale"]).stock = 0
        db.session.commit()

    r = alice.post(f"/api/orders/{order_id}/reorder")
    assert r.status_code == 200
    assert r.json == {"added": [catalog["plain"]], "skipped": [catalog["sale"]]}

    items = alice.get("/api/cart").json["items"]
    assert [(i["product_id"], i["quantity"]) for i in items] == [(catalog["plain"], 2)]


def test_reorder_is_bounded_by_stock(app, alice, catalog):
    alice.post("/api/cart", json={"product_id": catalog["plain"], "quantity": 6})
    order_id = checkout(alice).json["id"]  # plain stock 10 -> 4

    with app.app_context():
        db.session.get(Order, order_id).status = "delivered"
        db.session.commit()

    alice.post(f"/api/orders/{order_id}/reorder")
    items = alice.get("/api/cart").json["items"]
    assert items[0]["quantity"] == 4
