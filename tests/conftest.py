"""
Shared pytest fixtures.

Reconciler tests run against an in-memory fake of the backend client and a
synchronous executor, so every confirmation has finished by the time a
mutation call returns.
"""

from concurrent.futures import Future
from typing import Callable, Dict, List, Optional

import pytest
import requests

from storefront.domain.schemas import CartItemRef, WishlistItemRef
from storefront.services.cart_service import CartService
from storefront.services.identity import IdentityContext
from storefront.services.snapshot_store import SnapshotStore
from storefront.services.wishlist_service import WishlistService


PRODUCTS = [
    {"id": "p1", "title": "Calculator", "price": 100.0, "category": "Electronics",
     "sellerEmail": "seller@campus.edu", "sellerName": "Seller", "stock": 4},
    {"id": "p2", "title": "Textbook", "price": 50.0, "category": "Books",
     "sellerEmail": "seller@campus.edu", "sellerName": "Seller", "stock": 1},
    {"id": "p3", "title": "Lamp", "price": 25.5, "category": "Dorm"},
]


class ImmediateExecutor:
    """Runs every task inline; same submit() contract as KeyedSerialExecutor."""

    def submit(self, key, fn, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def submit_barrier(self, key, fn, *args, **kwargs) -> Future:
        return self.submit(key, fn, *args, **kwargs)


class FakeStorefrontClient:
    """In-memory backend with per-method failure injection."""

    def __init__(self, products=None):
        self.products: Dict[str, dict] = {p["id"]: dict(p) for p in (products or PRODUCTS)}
        self.carts: Dict[str, Dict[str, int]] = {}
        self.wishlists: Dict[str, List[str]] = {}
        self.orders: List[dict] = []
        self.calls: List[tuple] = []
        self.failing: set = set()
        self.failing_wishlist_ids: set = set()
        self.before_get_cart: Optional[Callable[[str], None]] = None

    def _call(self, name, *args):
        self.calls.append((name, *args))
        if name in self.failing:
            raise requests.ConnectionError(f"{name} unavailable")

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]

    def get_product(self, product_id):
        self._call("get_product", product_id)
        if product_id not in self.products:
            raise requests.HTTPError(f"404 product {product_id}")
        return dict(self.products[product_id])

    def get_cart(self, email):
        self._call("get_cart", email)
        if self.before_get_cart:
            hook, self.before_get_cart = self.before_get_cart, None
            hook(email)
        return [
            CartItemRef(product_id=pid, quantity=qty)
            for pid, qty in self.carts.get(email, {}).items()
        ]

    def add_cart_item(self, email, product_id, quantity=1):
        self._call("add_cart_item", email, product_id, quantity)
        cart = self.carts.setdefault(email, {})
        cart[product_id] = cart.get(product_id, 0) + quantity

    def update_cart_item(self, email, product_id, quantity):
        self._call("update_cart_item", email, product_id, quantity)
        self.carts.setdefault(email, {})[product_id] = quantity

    def remove_cart_item(self, email, product_id):
        self._call("remove_cart_item", email, product_id)
        self.carts.get(email, {}).pop(product_id, None)

    def clear_cart(self, email):
        self._call("clear_cart", email)
        self.carts.pop(email, None)

    def get_wishlist(self, email):
        self._call("get_wishlist", email)
        return [WishlistItemRef(product_id=pid) for pid in self.wishlists.get(email, [])]

    def add_wishlist_item(self, email, product_id):
        self._call("add_wishlist_item", email, product_id)
        items = self.wishlists.setdefault(email, [])
        if product_id not in items:
            items.append(product_id)

    def remove_wishlist_item(self, email, product_id):
        self._call("remove_wishlist_item", email, product_id)
        if product_id in self.failing_wishlist_ids:
            raise requests.HTTPError(f"500 deleting {product_id}")
        items = self.wishlists.get(email, [])
        if product_id in items:
            items.remove(product_id)

    def create_order(self, payload):
        self._call("create_order", payload)
        order = {**payload, "id": f"o{len(self.orders) + 1}", "status": "pending"}
        self.orders.append(order)
        return order

    def list_orders(self, email):
        self._call("list_orders", email)
        return [o for o in self.orders if o["buyerEmail"] == email]


@pytest.fixture
def fake_client():
    return FakeStorefrontClient()


@pytest.fixture
def executor():
    return ImmediateExecutor()


@pytest.fixture
def identity():
    return IdentityContext()


@pytest.fixture
def no_snapshots():
    return SnapshotStore(directory="")


@pytest.fixture
def cart(identity, fake_client, executor, no_snapshots):
    return CartService(identity, client=fake_client, executor=executor, snapshot_store=no_snapshots)


@pytest.fixture
def wishlist(identity, fake_client, executor, no_snapshots):
    return WishlistService(identity, client=fake_client, executor=executor, snapshot_store=no_snapshots)
