from __future__ import annotations

from flask import Blueprint

from storefront.app.common.auth import current_user, login_required
from storefront.app.common.validation import parse_body
from storefront.modules.cart import service
from storefront.modules.cart.schemas import AddToCartForm, UpdateCartItemForm

bp = Blueprint("cart", __name__)


@bp.get("/cart")
@login_required
def get_cart():
    return service.cart_payload(current_user().id), 200


@bp.post("/cart")
@login_required
def add_to_cart():
    form = parse_body(AddToCartForm)
    item = service.add_item(current_user().id, form.product_id, form.quantity)
    return service.item_to_dict(item), 201


@bp.put("/cart/<id:item_id>")
@login_required
def update_cart_item(item_id: int):
    form = parse_body(UpdateCartItemForm)
    item = service.update_item(current_user().id, item_id, form.quantity)
    return service.item_to_dict(item), 200


@bp.delete("/cart/<id:item_id>")
@login_required
def remove_cart_item(item_id: int):
    service.remove_item(current_user().id, item_id)
    return {"message": "removed"}, 200


@bp.delete("/cart")
@login_required
def clear_cart():
    service.clear(current_user().id)
    return {"message": "cleared"}, 200
