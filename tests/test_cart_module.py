from storefront.app.extensions import db
from storefront.app.models import CartItem


def add(client, product_id, quantity=1):
    return client.post("/api/cart", json={"product_id": product_id, "quantity": quantity})


# CART-001: cart requires a signed-in user
def test_cart_requires_login(client, catalog):
    assert client.get("/api/cart").status_code == 401
    r = add(client, catalog["plain"])
    assert r.status_code == 401
    assert r.json["error"]["code"] == "unauthorized"


# CART-002: add product to cart
def test_add_to_cart(alice, catalog):
    r = add(alice, catalog["plain"], 2)

    assert r.status_code == 201
    assert r.json["quantity"] == 2
    assert r.json["product"]["name"] == "Headphones"

    cart = alice.get("/api/cart").json
    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 2


# CART-003: get cart shows correct totals
def test_get_cart_totals(alice, catalog):
    add(alice, catalog["plain"], 2)
    add(alice, catalog["sale"], 1)

    summary = alice.get("/api/cart").json["summary"]

    assert summary["item_count"] == 3
    assert summary["subtotal_cents"] == 2300  # 10.00*2 + 3.00 (sale)
    assert summary["shipping_cents"] == 1500
    assert summary["tax_cents"] == 184  # 8% of subtotal
    assert summary["total_cents"] == 3984
    assert summary["total"] == "39.84"


def test_empty_cart_totals(alice, catalog):
    summary = alice.get("/api/cart").json["summary"]
    assert summary["subtotal_cents"] == 0
    assert summary["shipping_cents"] == 0
    assert summary["total_cents"] == 0


# CART-004: adding the same product increases quantity
def test_add_same_product_increases_quantity(alice, catalog):
    add(alice, catalog["plain"], 2)
    add(alice, catalog["plain"], 3)

    cart = alice.get("/api/cart").json
    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 5


# CART-005: stock gates purchasability
def test_sold_out_product_cannot_be_added(alice, catalog):
    r = add(alice, catalog["soldout"])
    assert r.status_code == 409
    assert r.json["error"]["details"]["available"] == 0


def test_add_beyond_stock_is_rejected(alice, catalog):
    assert add(alice, catalog["sale"], 4).status_code == 201
    r = add(alice, catalog["sale"], 2)  # stock is 5
    assert r.status_code == 409
    assert alice.get("/api/cart").json["items"][0]["quantity"] == 4


def test_add_rejects_bad_quantity_and_unknown_product(alice, catalog):
    assert add(alice, catalog["plain"], 0).status_code == 400
    assert add(alice, 9999).status_code == 404
    assert add(alice, catalog["hidden"]).status_code == 404


def test_add_rejects_out_of_range_product_id(alice, catalog):
    for bad in (10**30, 0, -1):
        r = add(alice, bad)
        assert r.status_code == 400
        assert r.json["error"]["code"] == "validation_error"
        assert "product_id" in r.json["error"]["details"]["fields"]

    assert alice.put(f"/api/cart/{10**30}", json={"quantity": 1}).status_code == 404
    assert alice.delete(f"/api/cart/{10**30}").status_code == 404


# CART-006: update cart item with PUT
def test_update_cart_item(alice, catalog):
    item_id = add(alice, catalog["plain"], 2).json["id"]

    r = alice.put(f"/api/cart/{item_id}", json={"quantity": 5})

    assert r.status_code == 200
    assert alice.get("/api/cart").json["items"][0]["quantity"] == 5


def test_update_keeps_quantity_between_one_and_stock(alice, catalog):
    item_id = add(alice, catalog["plain"], 2).json["id"]

    assert alice.put(f"/api/cart/{item_id}", json={"quantity": 0}).status_code == 400
    assert alice.put(f"/api/cart/{item_id}", json={"quantity": 11}).status_code == 409
    assert alice.put(f"/api/cart/{item_id}", json={"quantity": 10}).status_code == 200


# CART-007: delete cart item
def test_delete_cart_item(alice, catalog):
    item_id = add(alice, catalog["plain"], 1).json["id"]

    r = alice.delete(f"/api/cart/{item_id}")

    assert r.status_code == 200
    assert alice.get("/api/cart").json["items"] == []
    assert alice.delete(f"/api/cart/{item_id}").status_code == 404


# CART-008: clear cart
def test_clear_cart(alice, catalog):
    add(alice, catalog["plain"], 1)
    add(alice, catalog["sale"], 1)

    assert alice.delete("/api/cart").status_code == 200
    assert alice.get("/api/cart").json["items"] == []


# CART-009: one user cannot touch another user's items
def test_cannot_modify_other_users_item(app, alice, login, catalog):
    item_id = add(alice, catalog["plain"], 1).json["id"]

    bob = app.test_client()
    login(bob, "bob")
    assert bob.put(f"/api/cart/{item_id}", json={"quantity": 2}).status_code == 404
    assert bob.delete(f"/api/cart/{item_id}").status_code == 404
    assert bob.get("/api/cart").json["items"] == []

    with app.app_context():
        assert db.session.get(CartItem, item_id).quantity == 1
