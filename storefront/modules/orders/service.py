from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from flask import current_app

from storefront.app.extensions import db
from storefront.app.models import CartItem, Order, OrderItem, Product, User
from storefront.app.common.errors import abort_json
from storefront.modules.cart.pricing import format_money, summarize, unit_price_cents
from storefront.modules.catalog.products import clamp_quantity
from storefront.modules.orders.schemas import CheckoutForm
from storefront.modules.orders.status import CANCELLABLE, available_actions, badge_color, can_transition


def order_to_dict(o: Order, include_items: bool = False) -> Dict[str, Any]:
    data = {
        "id": o.id,
        "user_id": o.user_id,
        "status": o.status,
        "badge": badge_color(o.status),
        "actions": available_actions(o.status),
        "subtotal_cents": o.subtotal_cents,
        "shipping_cents": o.shipping_cents,
        "tax_cents": o.tax_cents,
        "total_cents": o.total_cents,
        "total": format_money(o.total_cents),
        "payment_method": o.payment_method,
        "card_last4": o.card_last4,
        "created_at": o.created_at.isoformat() if o.created_at else None,
    }
    if include_items:
        data["shipping_address"] = dict(o.shipping_address or {})
        data["items"] = [
            {
                "id": i.id,
                "product_id": i.product_id,
                "product_name": i.product.name if i.product else None,
                "quantity": i.quantity,
                "unit_price_cents": i.unit_price_cents,
                "line_total_cents": i.unit_price_cents * i.quantity,
            }
            for i in o.items
        ]
    return data


def list_orders(user: User) -> List[Order]:
    q = Order.query
    if not user.is_admin:
        q = q.filter_by(user_id=user.id)
    return q.order_by(Order.created_at.desc(), Order.id.desc()).all()


def get_order(user: User, order_id: int) -> Order:
    o = db.session.get(Order, order_id)
    if not o or (o.user_id != user.id and not user.is_admin):
        abort_json(404, "not_found", "Order not found")
    return o


def place_order(user: User, form: CheckoutForm) -> Order:
    """Checkout: cart -> order.

    Re-checks stock, decrements it, snapshots unit prices and clears the cart
    in one transaction.
    """
    cart_items = CartItem.query.filter_by(user_id=user.id).order_by(CartItem.id.asc()).all()
    if not cart_items:
        abort_json(409, "conflict", "Cart is empty")

    product_ids = [ci.product_id for ci in cart_items]
    products_by_id = {p.id: p for p in Product.query.filter(Product.id.in_(product_ids)).all()}

    lines = []
    for ci in cart_items:
        p = products_by_id.get(ci.product_id)
        if not p or not p.is_active:
            abort_json(409, "conflict", "Product unavailable", {"product_id": ci.product_id})
        if p.stock < ci.quantity:
            abort_json(409, "conflict", "Out of stock", {"product_id": p.id, "available": p.stock})
        lines.append((p, unit_price_cents(p.price_cents, p.sale_price_cents), ci.quantity))

    summary = summarize((unit, qty) for _, unit, qty in lines)

    try:
        order = Order(
            user_id=user.id,
            status="pending",
            subtotal_cents=summary.subtotal_cents,
            shipping_cents=summary.shipping_cents,
            tax_cents=summary.tax_cents,
            total_cents=summary.total_cents,
            payment_method=form.payment_method,
            card_last4=form.payment.last4 if form.payment_method == "card" and form.payment else None,
            shipping_address=form.shipping_address.model_dump(),
            created_at=datetime.utcnow(),
        )
        db.session.add(order)
        db.session.flush()

        for p, unit, qty in lines:
            p.stock = p.stock - qty
            db.session.add(OrderItem(order_id=order.id, product_id=p.id, quantity=qty, unit_price_cents=unit))

        CartItem.query.filter_by(user_id=user.id).delete()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info("order %s placed by user %s total=%s", order.id, user.id, format_money(order.total_cents))
    return order


def cancel_order(user: User, order_id: int) -> Order:
    o = get_order(user, order_id)
    if o.user_id != user.id:
        abort_json(404, "not_found", "Order not found")
    if o.status not in CANCELLABLE:
        abort_json(409, "conflict", "Order cannot be cancelled in its current status")

    # Cancelled orders give their stock back.
    for i in o.items:
        if i.product:
            i.product.stock = i.product.stock + i.quantity
    o.status = "cancelled"
    db.session.commit()
    current_app.logger.info("order %s cancelled by user %s", o.id, user.id)
    return o


def reorder(user: User, order_id: int) -> Dict[str, List[int]]:
    """Put a delivered order's items back into the cart, bounded by current stock."""
    o = get_order(user, order_id)
    if o.user_id != user.id:
        abort_json(404, "not_found", "Order not found")
    if o.status != "delivered":
        abort_json(409, "conflict", "Only delivered orders can be reordered")

    added: List[int] = []
    skipped: List[int] = []
    for i in o.items:
        p = i.product
        if not p or not p.is_active or p.stock < 1:
            skipped.append(i.product_id)
            continue
        item = CartItem.query.filter_by(user_id=user.id, product_id=p.id).first()
        current = item.quantity if item else 0
        qty = clamp_quantity(current + i.quantity, p.stock)
        if qty <= current:
            skipped.append(p.id)
            continue
        if item:
            item.quantity = qty
        else:
            db.session.add(CartItem(user_id=user.id, product_id=p.id, quantity=qty))
        added.append(p.id)

    db.session.commit()
    return {"added": added, "skipped": skipped}


def set_status(order_id: int, new_status: str) -> Order:
    o = db.session.get(Order, order_id)
    if not o:
        abort_json(404, "not_found", "Order not found")
    if not can_transition(o.status, new_status):
        abort_json(409, "conflict", "Invalid status transition", {"from": o.status, "to": new_status})

    if new_status == "cancelled":
        for i in o.items:
            if i.product:
                i.product.stock = i.product.stock + i.quantity
    old = o.status
    o.status = new_status
    db.session.commit()
    current_app.logger.info("order %s status %s -> %s", o.id, old, new_status)
    return o
