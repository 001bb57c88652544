"""Data hooks over the storefront API.

Reads go through the query cache. Each mutation invalidates the queries it
affects only after the server accepted it; a failed mutation pushes an error
toast, leaves the cache as it was, and re-raises.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

import requests

from storefront.client.api import ApiClient, ApiRequestError
from storefront.client.query_cache import QueryCache, make_key
from storefront.client.toasts import Notifier
from storefront.modules.cart.pricing import CartSummary, summarize, unit_price_cents
from storefront.modules.catalog.products import sort_products

log = logging.getLogger(__name__)

USER_KEY = "/api/users/me"
CART_KEY = "/api/cart"
ORDERS_KEY = "/api/orders"
PRODUCTS_KEY = "/api/products"
CATEGORIES_KEY = "/api/categories"
STATS_KEY = "/api/admin/stats"


class Store:
    """Shared API client, query cache and toast queue."""

    def __init__(self, api: Optional[ApiClient] = None, cache: Optional[QueryCache] = None, notifier: Optional[Notifier] = None):
        self.api = api or ApiClient()
        self.cache = cache or QueryCache()
        self.notifier = notifier or Notifier()

    def query(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.cache.fetch(make_key(path, params), lambda: self.api.get(path, params=params))

    def mutate(
        self,
        fn: Callable[[], Any],
        invalidate: Iterable[str] = (),
        success: Optional[str] = None,
        failure: str = "Request failed",
    ) -> Any:
        try:
            result = fn()
        except ApiRequestError as err:
            self.notifier.error(err.message or failure)
            raise
        except requests.RequestException:
            log.warning("request failed", exc_info=True)
            self.notifier.error(failure)
            raise

        for path in invalidate:
            self.cache.invalidate(path)
        if success:
            self.notifier.success(success)
        return result


class AuthHooks:
    def __init__(self, store: Store):
        self.store = store

    def user(self) -> Optional[Dict[str, Any]]:
        def load():
            try:
                return self.store.api.get(USER_KEY)
            except ApiRequestError as err:
                if err.status == 401:
                    return None
                raise

        return self.store.cache.fetch(make_key(USER_KEY), load)

    def _signed_in(self, user: Dict[str, Any]) -> Dict[str, Any]:
        self.store.cache.clear()
        self.store.cache.set(make_key(USER_KEY), user)
        return user

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self.store.mutate(
            lambda: self.store.api.post("/api/auth/login", {"email": email, "password": password}),
            failure="Login failed",
        )
        return self._signed_in(user)

    def register(self, **fields: Any) -> Dict[str, Any]:
        user = self.store.mutate(
            lambda: self.store.api.post("/api/users", fields),
            failure="Registration failed",
        )
        return self._signed_in(user)

    def logout(self) -> None:
        self.store.mutate(lambda: self.store.api.post("/api/auth/logout"), failure="Logout failed")
        self.store.cache.clear()
        self.store.cache.set(make_key(USER_KEY), None)


class CatalogHooks:
    def __init__(self, store: Store):
        self.store = store

    def categories(self) -> List[Dict[str, Any]]:
        return self.store.query(CATEGORIES_KEY)["items"]

    def products(self, search: str = "", category_id: Optional[int] = None, sort: str = "newest") -> List[Dict[str, Any]]:
        data = self.store.query(PRODUCTS_KEY, {"search": search, "category_id": category_id})
        return sort_products(data["items"], sort)

    def product(self, product_id: int) -> Dict[str, Any]:
        return self.store.query(f"{PRODUCTS_KEY}/{product_id}")


class CartHooks:
    def __init__(self, store: Store, auth: AuthHooks):
        self.store = store
        self.auth = auth

    def items(self) -> List[Dict[str, Any]]:
        # The cart is only fetched for a signed-in user.
        if not self.auth.user():
            return []
        return self.store.query(CART_KEY)["items"]

    def summary(self) -> CartSummary:
        return summarize(
            (unit_price_cents(i["product"]["price_cents"], i["product"].get("sale_price_cents")), i["quantity"])
            for i in self.items()
        )

    def add(self, product_id: int, quantity: int = 1) -> Dict[str, Any]:
        return self.store.mutate(
            lambda: self.store.api.post(CART_KEY, {"product_id": product_id, "quantity": quantity}),
            invalidate=[CART_KEY],
            success="Item added to cart",
            failure="Failed to add item to cart",
        )

    def update(self, item_id: int, quantity: int) -> Optional[Dict[str, Any]]:
        if quantity < 1:
            return None
        return self.store.mutate(
            lambda: self.store.api.put(f"{CART_KEY}/{item_id}", {"quantity": quantity}),
            invalidate=[CART_KEY],
            failure="Failed to update cart item",
        )

    def remove(self, item_id: int) -> None:
        self.store.mutate(
            lambda: self.store.api.delete(f"{CART_KEY}/{item_id}"),
            invalidate=[CART_KEY],
            success="Item removed from cart",
            failure="Failed to remove item from cart",
        )

    def clear(self) -> None:
        self.store.mutate(
            lambda: self.store.api.delete(CART_KEY),
            invalidate=[CART_KEY],
            success="Cart cleared",
            failure="Failed to clear cart",
        )


class OrderHooks:
    def __init__(self, store: Store):
        self.store = store

    def list(self) -> List[Dict[str, Any]]:
        return self.store.query(ORDERS_KEY)["items"]

    def place(
        self,
        shipping_address: Dict[str, str],
        payment_method: str = "card",
        payment: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"shipping_address": shipping_address, "payment_method": payment_method}
        if payment is not None:
            body["payment"] = payment
        return self.store.mutate(
            lambda: self.store.api.post(ORDERS_KEY, body),
            invalidate=[CART_KEY, ORDERS_KEY, STATS_KEY],
            success="Your order has been placed successfully.",
            failure="Failed to place order. Please try again.",
        )


class AdminHooks:
    def __init__(self, store: Store):
        self.store = store

    def stats(self) -> Dict[str, Any]:
        return self.store.query(STATS_KEY)
