"""Server-rendered pages.

Pages read straight from the models and reuse the module services for form
posts. Failures come back as flashed messages and a redirect, so the user can
correct the form and retry.
"""

from __future__ import annotations

from functools import wraps

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for

from storefront.app.extensions import db
from storefront.app.models import Category, Product
from storefront.app.common.auth import current_user, login_user, logout_user
from storefront.app.common.converters import valid_id
from storefront.app.common.errors import ApiError
from storefront.app.common.validation import validate
from storefront.modules.admin.routes import dashboard_stats
from storefront.modules.auth import service as auth_service
from storefront.modules.auth.schemas import LoginForm, ProfileForm, RegisterForm
from storefront.modules.cart import service as cart_service
from storefront.modules.cart.pricing import format_money
from storefront.modules.catalog.products import (
    DEFAULT_SORT,
    SORT_KEYS,
    can_add_to_cart,
    category_to_dict,
    product_to_dict,
    stock_label,
)
from storefront.modules.catalog.routes import search_products
from storefront.modules.orders import service as orders_service
from storefront.modules.orders.schemas import CheckoutForm
from storefront.modules.orders.status import TRACKING_STEPS, badge_color, status_label, tracking_progress

ui_bp = Blueprint("ui", __name__)

SHIPPING_FIELDS = ("first_name", "last_name", "address", "city", "state", "zip_code")
CARD_FIELDS = ("card_number", "expiry_date", "cvv")


@ui_bp.app_context_processor
def inject_nav():
    user = current_user()
    count = 0
    if user:
        count = sum(i.quantity for i in cart_service.cart_items(user.id))
    return {
        "nav_user": user,
        "nav_cart_count": count,
        "money": format_money,
        "badge_color": badge_color,
        "status_label": status_label,
    }


def page_login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            flash("Please sign in to continue.", "info")
            return redirect(url_for("ui.auth_page"))
        return fn(*args, **kwargs)

    return wrapper


def flash_api_error(err: ApiError) -> None:
    fields = (err.details or {}).get("fields") or {}
    if fields:
        for name, msg in fields.items():
            flash(f"{name}: {msg}", "error")
    else:
        flash(err.message, "error")


@ui_bp.get("/")
def home():
    categories = Category.query.order_by(Category.name.asc()).all()
    featured = search_products()[:8]
    return render_template(
        "home.html",
        categories=[category_to_dict(c) for c in categories],
        products=featured,
    )


@ui_bp.get("/auth")
def auth_page():
    if current_user():
        return redirect(url_for("ui.home"))
    mode = "register" if request.args.get("mode") == "register" else "login"
    return render_template("auth.html", mode=mode)


@ui_bp.post("/auth/login")
def login_post():
    try:
        form = validate(LoginForm, {"email": request.form.get("email", ""), "password": request.form.get("password", "")})
        user = auth_service.authenticate(form)
    except ApiError as err:
        flash_api_error(err)
        return redirect(url_for("ui.auth_page"))
    login_user(user)
    flash("Signed in.", "success")
    return redirect(url_for("ui.home"))


@ui_bp.post("/auth/register")
def register_post():
    fields = ("first_name", "last_name", "email", "password", "confirm_password", "role")
    data = {k: request.form.get(k) for k in fields if request.form.get(k) is not None}
    try:
        user = auth_service.register(validate(RegisterForm, data))
    except ApiError as err:
        flash_api_error(err)
        return redirect(url_for("ui.auth_page", mode="register"))
    login_user(user)
    flash("Account created.", "success")
    return redirect(url_for("ui.home"))


@ui_bp.post("/auth/logout")
def logout_post():
    logout_user()
    flash("Signed out.", "success")
    return redirect(url_for("ui.home"))


@ui_bp.get("/products")
def products_page():
    search = (request.args.get("search") or "").strip()
    sort = request.args.get("sort") or DEFAULT_SORT
    try:
        category_id = int(request.args.get("category_id") or 0)
    except ValueError:
        category_id = None
    if not valid_id(category_id):
        category_id = None

    categories = Category.query.order_by(Category.name.asc()).all()
    selected = next((c for c in categories if c.id == category_id), None)
    return render_template(
        "products.html",
        products=search_products(search, category_id, sort),
        categories=[category_to_dict(c) for c in categories],
        search=search,
        sort=sort,
        sort_keys=SORT_KEYS,
        category_id=category_id,
        heading=selected.name if selected else "All Products",
    )


@ui_bp.get("/product/<id:product_id>")
def product_page(product_id: int):
    p = db.session.get(Product, product_id)
    if not p or not p.is_active:
        abort(404)
    product = product_to_dict(p, detail=True)
    return render_template(
        "product_detail.html",
        product=product,
        all_images=[i for i in [product["image_url"], *product["images"]] if i],
        can_add=can_add_to_cart(p),
        stock_text=stock_label(p.stock),
        max_quantity=max(1, p.stock),
    )


@ui_bp.get("/cart")
@page_login_required
def cart_page():
    return render_template("cart.html", cart=cart_service.cart_payload(current_user().id))


@ui_bp.post("/cart/add")
@page_login_required
def cart_add():
    product_id = request.form.get("product_id", type=int)
    quantity = request.form.get("quantity", default=1, type=int)
    try:
        cart_service.add_item(current_user().id, product_id or 0, quantity)
    except ApiError as err:
        flash_api_error(err)
    else:
        flash("Item added to cart", "success")
    return redirect(request.referrer or url_for("ui.cart_page"))


@ui_bp.post("/cart/<id:item_id>/update")
@page_login_required
def cart_update(item_id: int):
    quantity = request.form.get("quantity", type=int)
    if quantity is None or quantity < 1:
        # Quantity controls stop at 1; removal goes through the remove button.
        return redirect(url_for("ui.cart_page"))
    try:
        cart_service.update_item(current_user().id, item_id, quantity)
    except ApiError as err:
        flash_api_error(err)
    return redirect(url_for("ui.cart_page"))


@ui_bp.post("/cart/<id:item_id>/remove")
@page_login_required
def cart_remove(item_id: int):
    try:
        cart_service.remove_item(current_user().id, item_id)
    except ApiError as err:
        flash_api_error(err)
    else:
        flash("Item removed from cart", "success")
    return redirect(url_for("ui.cart_page"))


@ui_bp.get("/checkout")
@page_login_required
def checkout_page():
    cart = cart_service.cart_payload(current_user().id)
    return render_template("checkout.html", cart=cart)


@ui_bp.post("/checkout")
@page_login_required
def checkout_post():
    payment_method = request.form.get("payment_method") or "card"
    data = {
        "shipping_address": {k: request.form.get(k, "") for k in SHIPPING_FIELDS},
        "payment_method": payment_method,
    }
    if payment_method == "card":
        data["payment"] = {k: request.form.get(k, "") for k in CARD_FIELDS}

    try:
        form = validate(CheckoutForm, data)
    except ApiError as err:
        flash("Please fill in all required fields.", "error")
        flash_api_error(err)
        return redirect(url_for("ui.checkout_page"))

    try:
        orders_service.place_order(current_user(), form)
    except ApiError as err:
        flash("Failed to place order. Please try again.", "error")
        flash_api_error(err)
        return redirect(url_for("ui.checkout_page"))

    flash("Your order has been placed successfully.", "success")
    return redirect(url_for("ui.profile_page"))


@ui_bp.get("/profile")
@page_login_required
def profile_page():
    user = current_user()
    orders = [o for o in orders_service.list_orders(user) if o.user_id == user.id]
    return render_template(
        "profile.html",
        user=user,
        orders=[orders_service.order_to_dict(o) for o in orders],
    )


@ui_bp.post("/profile")
@page_login_required
def profile_update():
    data = {k: request.form.get(k) for k in ("first_name", "last_name", "phone_number") if request.form.get(k) is not None}
    try:
        auth_service.update_profile(current_user(), validate(ProfileForm, data))
    except ApiError as err:
        flash_api_error(err)
    else:
        flash("Profile updated.", "success")
    return redirect(url_for("ui.profile_page"))


@ui_bp.get("/orders/<id:order_id>")
@page_login_required
def order_page(order_id: int):
    try:
        o = orders_service.get_order(current_user(), order_id)
    except ApiError:
        abort(404)
    return render_template(
        "order.html",
        order=orders_service.order_to_dict(o, include_items=True),
        tracking_steps=TRACKING_STEPS,
        reached=tracking_progress(o.status),
    )


@ui_bp.post("/orders/<id:order_id>/reorder")
@page_login_required
def order_reorder(order_id: int):
    try:
        result = orders_service.reorder(current_user(), order_id)
    except ApiError as err:
        flash_api_error(err)
        return redirect(url_for("ui.profile_page"))
    if result["added"]:
        flash("Items added to cart", "success")
    else:
        flash("No items could be added to your cart.", "error")
    return redirect(url_for("ui.cart_page"))


@ui_bp.post("/orders/<id:order_id>/cancel")
@page_login_required
def order_cancel(order_id: int):
    try:
        orders_service.cancel_order(current_user(), order_id)
    except ApiError as err:
        flash_api_error(err)
    else:
        flash("Order cancelled.", "success")
    return redirect(url_for("ui.order_page", order_id=order_id))


@ui_bp.get("/admin")
@page_login_required
def admin_page():
    if not current_user().is_admin:
        return redirect(url_for("ui.home"))
    recent = orders_service.list_orders(current_user())[:10]
    return render_template(
        "admin.html",
        stats=dashboard_stats(),
        orders=[orders_service.order_to_dict(o) for o in recent],
    )
