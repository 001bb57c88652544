from __future__ import annotations

from flask import Blueprint
from sqlalchemy import func

from storefront.app.extensions import db
from storefront.app.models import Order, Product, User
from storefront.app.common.auth import admin_required
from storefront.app.common.validation import parse_body
from storefront.modules.cart.pricing import format_money
from storefront.modules.orders import service as orders_service
from storefront.modules.orders.schemas import OrderStatusForm

bp = Blueprint("admin", __name__)


def dashboard_stats() -> dict:
    revenue = (
        db.session.query(func.coalesce(func.sum(Order.total_cents), 0))
        .filter(Order.status != "cancelled")
        .scalar()
    )
    revenue = int(revenue or 0)
    return {
        "total_revenue_cents": revenue,
        "total_revenue": format_money(revenue),
        "total_orders": Order.query.count(),
        "total_users": User.query.count(),
        "total_products": Product.query.count(),
    }


@bp.get("/admin/stats")
@admin_required
def stats():
    """GET /api/admin/stats - Dashboard counters."""
    return dashboard_stats(), 200


@bp.patch("/admin/orders/<id:order_id>")
@admin_required
def update_order_status(order_id: int):
    form = parse_body(OrderStatusForm)
    o = orders_service.set_status(order_id, form.status)
    return orders_service.order_to_dict(o), 200
