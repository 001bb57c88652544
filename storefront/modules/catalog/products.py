from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from storefront.modules.cart.pricing import discount_percent, format_money, unit_price_cents

if TYPE_CHECKING:
    from storefront.app.models import Category, Product

SORT_KEYS = ("newest", "price-low", "price-high", "rating")
DEFAULT_SORT = "newest"


def category_to_dict(c: Category) -> Dict[str, Any]:
    return {
        "id": c.id,
        "name": c.name,
        "description": c.description,
        "image_url": c.image_url,
    }


def product_to_dict(p: Product, detail: bool = False) -> Dict[str, Any]:
    discount = discount_percent(p.price_cents, p.sale_price_cents)
    data = {
        "id": p.id,
        "name": p.name,
        "price_cents": p.price_cents,
        "sale_price_cents": p.sale_price_cents,
        "price": format_money(p.price_cents),
        "sale_price": format_money(p.sale_price_cents) if p.sale_price_cents is not None else None,
        "unit_price_cents": unit_price_cents(p.price_cents, p.sale_price_cents),
        "discount_percent": discount,
        "on_sale": discount > 0,
        "image_url": p.image_url,
        "rating": round(p.rating or 0.0, 1),
        "review_count": p.review_count,
        "stock": p.stock,
        "in_stock": p.stock > 0,
        "vendor_id": p.vendor_id,
        "category_id": p.category_id,
    }
    if detail:
        data["description"] = p.description
        data["images"] = list(p.images or [])
        data["features"] = list(p.features or [])
        data["category"] = p.category.name if p.category else None
    return data


def _effective_price(item: Dict[str, Any]) -> int:
    return unit_price_cents(item["price_cents"], item.get("sale_price_cents"))


def sort_products(items: List[Dict[str, Any]], sort: str | None) -> List[Dict[str, Any]]:
    """Order serialized products; unknown keys fall back to newest first."""
    if sort == "price-low":
        return sorted(items, key=_effective_price)
    if sort == "price-high":
        return sorted(items, key=_effective_price, reverse=True)
    if sort == "rating":
        return sorted(items, key=lambda i: i.get("rating") or 0, reverse=True)
    return sorted(items, key=lambda i: i["id"], reverse=True)


def can_add_to_cart(product: Product | Dict[str, Any]) -> bool:
    stock = product["stock"] if isinstance(product, dict) else product.stock
    return stock > 0


def clamp_quantity(quantity: int, stock: int) -> int:
    """Bound a quantity control to [1, stock]; never below 1."""
    return max(1, min(quantity, stock))


def stock_label(stock: int) -> str:
    return f"In Stock ({stock} available)" if stock > 0 else "Out of Stock"
