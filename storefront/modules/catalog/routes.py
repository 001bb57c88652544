from __future__ import annotations

from flask import Blueprint, request
from sqlalchemy import func, or_

from storefront.app.extensions import db
from storefront.app.models import Category, Product, Review, User
from storefront.app.common.converters import valid_id
from storefront.app.common.auth import current_user, login_required
from storefront.app.common.errors import abort_json
from storefront.app.common.validation import parse_body
from storefront.modules.catalog.products import category_to_dict, product_to_dict, sort_products
from storefront.modules.catalog.schemas import ReviewForm

bp = Blueprint("catalog", __name__)


def get_active_product(product_id: int) -> Product:
    p = db.session.get(Product, product_id)
    if not p or not p.is_active:
        abort_json(404, "not_found", "Product not found")
    return p


def search_products(search: str = "", category_id: int | None = None, sort: str | None = None) -> list[dict]:
    q = Product.query.filter_by(is_active=True)
    if search:
        # Literal substring match: % and _ in the search text are not wildcards.
        q = q.filter(
            or_(Product.name.icontains(search, autoescape=True), Product.description.icontains(search, autoescape=True))
        )
    if category_id is not None:
        q = q.filter(Product.category_id == category_id)
    return sort_products([product_to_dict(p) for p in q.all()], sort)


@bp.get("/categories")
def list_categories():
    """GET /api/categories - All categories, by name."""
    categories = Category.query.order_by(Category.name.asc()).all()
    return {"items": [category_to_dict(c) for c in categories]}, 200


@bp.get("/products")
def list_products():
    """GET /api/products - Active products.

    Query params:
      - search: substring of name/description
      - category_id: integer
      - sort: newest|price-low|price-high|rating
    """
    search = (request.args.get("search") or "").strip()
    sort = (request.args.get("sort") or "").strip() or None

    category_raw = (request.args.get("category_id") or "").strip()
    category_id = None
    if category_raw:
        try:
            category_id = int(category_raw)
        except ValueError:
            category_id = None
        if not valid_id(category_id):
            abort_json(400, "validation_error", "category_id must be a positive integer")

    items = search_products(search, category_id, sort)
    return {"items": items, "count": len(items)}, 200


@bp.get("/products/<id:product_id>")
def get_product(product_id: int):
    """GET /api/products/<id> - Product details."""
    return product_to_dict(get_active_product(product_id), detail=True), 200


@bp.get("/products/<id:product_id>/reviews")
def list_reviews(product_id: int):
    get_active_product(product_id)
    rows = (
        db.session.query(Review, User.first_name)
        .join(User, User.id == Review.user_id)
        .filter(Review.product_id == product_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .limit(100)
        .all()
    )
    return {
        "product_id": product_id,
        "items": [
            {
                "id": r.id,
                "user_id": r.user_id,
                "author": first_name,
                "rating": r.rating,
                "comment": r.comment,
                "created_at": r.created_at.isoformat(),
            }
            for r, first_name in rows
        ],
    }, 200


@bp.post("/products/<id:product_id>/reviews")
@login_required
def post_review(product_id: int):
    form = parse_body(ReviewForm)
    p = get_active_product(product_id)

    comment = (form.comment or "").strip() or None
    r = Review(product_id=p.id, user_id=current_user().id, rating=form.rating, comment=comment)
    db.session.add(r)
    db.session.flush()

    # Keep the denormalized aggregates on the product in step with the reviews table.
    avg_rating, count = (
        db.session.query(func.avg(Review.rating), func.count(Review.id))
        .filter(Review.product_id == p.id)
        .one()
    )
    p.rating = round(float(avg_rating or 0), 2)
    p.review_count = int(count)
    db.session.commit()

    return {"id": r.id, "product_id": p.id, "rating": p.rating, "review_count": p.review_count}, 201
