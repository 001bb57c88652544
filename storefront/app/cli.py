from __future__ import annotations

import click
from flask import Blueprint
from werkzeug.security import generate_password_hash

from storefront.app.extensions import db
from storefront.app.models import Category, Product, User

cli_bp = Blueprint("cli", __name__, cli_group=None)

DEMO_PASSWORD = "Password123!"

DEMO_USERS = [
    ("admin@storefront.io", "Ada", "Admin", "admin"),
    ("vendor@storefront.io", "Victor", "Vendor", "vendor"),
    ("user@storefront.io", "Demo", "User", "customer"),
]

DEMO_CATEGORIES = [
    ("Electronics", "Phones, audio and accessories"),
    ("Home", "Kitchen and living"),
    ("Outdoors", "Gear for getting outside"),
]

# name, category, price_cents, sale_price_cents, stock
DEMO_PRODUCTS = [
    ("Wireless Headphones", "Electronics", 12999, 9999, 25),
    ("USB-C Charger", "Electronics", 2999, None, 100),
    ("Smart Speaker", "Electronics", 7999, None, 0),
    ("Pour-Over Kettle", "Home", 4999, 3999, 40),
    ("Linen Throw", "Home", 5999, None, 15),
    ("Trail Backpack", "Outdoors", 8999, None, 30),
    ("Camp Lantern", "Outdoors", 2499, 1999, 60),
]


@cli_bp.cli.command("init-db")
def init_db() -> None:
    """Create tables."""
    db.create_all()
    click.echo("DB initialized (tables created).")


@cli_bp.cli.command("seed")
def seed_data() -> None:
    """Seed demo accounts, categories and products.

    Safe to run multiple times; existing rows are left alone.
    """
    db.create_all()

    users = {}
    for email, first, last, role in DEMO_USERS:
        user = User.query.filter_by(email=email).first()
        if not user:
            user = User(
                email=email,
                password_hash=generate_password_hash(DEMO_PASSWORD),
                first_name=first,
                last_name=last,
                role=role,
            )
            db.session.add(user)
        users[role] = user

    categories = {}
    for name, description in DEMO_CATEGORIES:
        cat = Category.query.filter_by(name=name).first()
        if not cat:
            cat = Category(name=name, description=description)
            db.session.add(cat)
        categories[name] = cat
    db.session.flush()

    if Product.query.count() == 0:
        for name, category, price, sale, stock in DEMO_PRODUCTS:
            db.session.add(
                Product(
                    name=name,
                    description=f"{name} from the {category.lower()} range.",
                    price_cents=price,
                    sale_price_cents=sale,
                    stock=stock,
                    category_id=categories[category].id,
                    vendor_id=users["vendor"].id,
                )
            )

    db.session.commit()
    click.echo(f"Seed complete. Login: user@storefront.io / {DEMO_PASSWORD}")
