"""Cart operations shared by the JSON API and the pages.

The server is the source of truth for quantities: every write checks that
the quantity stays within [1, stock].
"""

from __future__ import annotations

from typing import Any, Dict, List

from storefront.app.extensions import db
from storefront.app.models import CartItem, Product
from storefront.app.common.converters import valid_id
from storefront.app.common.errors import abort_json
from storefront.modules.cart.pricing import CartSummary, format_money, summarize, unit_price_cents


def cart_items(user_id: int) -> List[CartItem]:
    return CartItem.query.filter_by(user_id=user_id).order_by(CartItem.id.asc()).all()


def cart_summary(items: List[CartItem]) -> CartSummary:
    return summarize(
        (unit_price_cents(i.product.price_cents, i.product.sale_price_cents), i.quantity) for i in items
    )


def item_to_dict(i: CartItem) -> Dict[str, Any]:
    p = i.product
    unit = unit_price_cents(p.price_cents, p.sale_price_cents)
    return {
        "id": i.id,
        "product_id": i.product_id,
        "quantity": i.quantity,
        "created_at": i.created_at.isoformat() if i.created_at else None,
        "line_total_cents": unit * i.quantity,
        "line_total": format_money(unit * i.quantity),
        "product": {
            "id": p.id,
            "name": p.name,
            "price_cents": p.price_cents,
            "sale_price_cents": p.sale_price_cents,
            "price": format_money(p.price_cents),
            "sale_price": format_money(p.sale_price_cents) if p.sale_price_cents is not None else None,
            "image_url": p.image_url,
            "vendor_id": p.vendor_id,
            "stock": p.stock,
        },
    }


def cart_payload(user_id: int) -> Dict[str, Any]:
    items = cart_items(user_id)
    return {
        "items": [item_to_dict(i) for i in items],
        "summary": cart_summary(items).to_dict(),
    }


def _purchasable(product_id: int) -> Product:
    product = db.session.get(Product, product_id) if valid_id(product_id) else None
    if not product or not product.is_active:
        abort_json(404, "not_found", "Product not found")
    return product


def _check_stock(product: Product, qty: int) -> None:
    if product.stock < qty:
        abort_json(409, "conflict", "Out of stock", {"product_id": product.id, "available": product.stock})


def _own_item(user_id: int, item_id: int) -> CartItem:
    item = CartItem.query.filter_by(id=item_id, user_id=user_id).first()
    if not item:
        abort_json(404, "not_found", "Cart item not found")
    return item


def add_item(user_id: int, product_id: int, quantity: int = 1) -> CartItem:
    if quantity < 1:
        abort_json(400, "validation_error", "Quantity must be at least 1")

    product = _purchasable(product_id)
    item = CartItem.query.filter_by(user_id=user_id, product_id=product_id).first()
    new_qty = quantity + (item.quantity if item else 0)
    _check_stock(product, new_qty)

    if item:
        item.quantity = new_qty
    else:
        item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
        db.session.add(item)
    db.session.commit()
    return item


def update_item(user_id: int, item_id: int, quantity: int) -> CartItem:
    if quantity < 1:
        abort_json(400, "validation_error", "Quantity must be at least 1")

    item = _own_item(user_id, item_id)
    _check_stock(item.product, quantity)
    item.quantity = quantity
    db.session.commit()
    return item


def remove_item(user_id: int, item_id: int) -> None:
    item = _own_item(user_id, item_id)
    db.session.delete(item)
    db.session.commit()


def clear(user_id: int) -> None:
    CartItem.query.filter_by(user_id=user_id).delete()
    db.session.commit()
