import os
import sys
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from werkzeug.security import generate_password_hash

from storefront.app.config import TestConfig
from storefront.app.extensions import db
from storefront.app.factory import create_app
from storefront.app.models import Category, Product, User

PASSWORD = "Secret123"

SHIPPING = {
    "first_name": "Alice",
    "last_name": "Liddell",
    "address": "1 Rabbit Hole",
    "city": "Oxford",
    "state": "OX",
    "zip_code": "12345",
}
CARD = {"card_number": "4242 4242 4242 4242", "expiry_date": "12/30", "cvv": "123"}


@pytest.fixture()
def app():
    # In-memory SQLite per test.
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def users(app):
    """alice and bob are customers; ada is the admin."""
    with app.app_context():
        rows = {
            "alice": User(email="alice@storefront.io", first_name="Alice", last_name="Liddell", role="customer"),
            "bob": User(email="bob@storefront.io", first_name="Bob", last_name="Builder", role="customer"),
            "ada": User(email="ada@storefront.io", first_name="Ada", last_name="Admin", role="admin"),
        }
        for u in rows.values():
            u.password_hash = generate_password_hash(PASSWORD)
            db.session.add(u)
        db.session.commit()
        return {name: {"id": u.id, "email": u.email} for name, u in rows.items()}


@pytest.fixture()
def catalog(app):
    """Three active products (plain, on sale, sold out) plus an inactive one."""
    with app.app_context():
        electronics = Category(name="Electronics", description="Gadgets")
        home = Category(name="Home", description="Kitchen and living")
        db.session.add_all([electronics, home])
        db.session.flush()

        plain = Product(
            name="Headphones",
            description="Noise cancelling over-ear",
            price_cents=1000,
            stock=10,
            rating=4.5,
            review_count=12,
            category_id=electronics.id,
            images=["/img/headphones-side.jpg"],
            features=["Bluetooth 5.3"],
        )
        sale = Product(
            name="Kettle",
            description="Gooseneck pour-over",
            price_cents=500,
            sale_price_cents=300,
            stock=5,
            rating=3.0,
            review_count=2,
            category_id=home.id,
        )
        soldout = Product(
            name="Speaker",
            description="Smart speaker",
            price_cents=2000,
            stock=0,
            rating=4.8,
            review_count=40,
            category_id=electronics.id,
        )
        hidden = Product(name="Prototype", price_cents=100, stock=3, is_active=False)
        for p in (plain, sale, soldout, hidden):
            db.session.add(p)
            db.session.flush()
        db.session.commit()
        return {
            "electronics": electronics.id,
            "home": home.id,
            "plain": plain.id,
            "sale": sale.id,
            "soldout": soldout.id,
            "hidden": hidden.id,
        }


@pytest.fixture()
def login(users):
    def _login(client, name="alice"):
        r = client.post("/api/auth/login", json={"email": users[name]["email"], "password": PASSWORD})
        assert r.status_code == 200, r.json
        return r.json

    return _login


@pytest.fixture()
def alice(client, login):
    login(client, "alice")
    return client


@pytest.fixture()
def admin_client(app, login):
    c = app.test_client()
    login(c, "ada")
    return c
