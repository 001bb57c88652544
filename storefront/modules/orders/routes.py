from __future__ import annotations

from flask import Blueprint

from storefront.app.common.auth import current_user, login_required
from storefront.app.common.validation import parse_body
from storefront.modules.orders import service
from storefront.modules.orders.schemas import CheckoutForm

bp = Blueprint("orders", __name__)


@bp.get("/orders")
@login_required
def list_orders():
    """GET /api/orders - Caller's orders, newest first (admins see every order)."""
    orders = service.list_orders(current_user())
    return {"items": [service.order_to_dict(o) for o in orders]}, 200


@bp.get("/orders/<id:order_id>")
@login_required
def get_order(order_id: int):
    o = service.get_order(current_user(), order_id)
    return service.order_to_dict(o, include_items=True), 200


@bp.post("/orders")
@login_required
def create_order():
    """Checkout: cart -> order.

    Request JSON:
      {"shipping_address": {...}, "payment_method": "card", "payment": {...}}
    """
    form = parse_body(CheckoutForm)
    order = service.place_order(current_user(), form)
    return service.order_to_dict(order, include_items=True), 201


@bp.post("/orders/<id:order_id>/cancel")
@login_required
def cancel_order(order_id: int):
    o = service.cancel_order(current_user(), order_id)
    return service.order_to_dict(o), 200


@bp.post("/orders/<id:order_id>/reorder")
@login_required
def reorder(order_id: int):
    return service.reorder(current_user(), order_id), 200
