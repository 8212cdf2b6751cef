# storefront/api/store.py
import threading
import uuid
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import Request

SEED_PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "title": "Casio fx-991EX calculator",
        "price": 1450.0,
        "imageUrl": "https://example.com/img/calculator.jpg",
        "category": "Electronics",
        "condition": "Used - like new",
        "sellerEmail": "rafi@campus.edu",
        "sellerName": "Rafi",
        "stock": 2,
    },
    {
        "id": "2",
        "title": "Data Structures textbook",
        "price": 600.0,
        "imageUrl": "https://example.com/img/textbook.jpg",
        "category": "Books",
        "condition": "Used - good",
        "sellerEmail": "mitu@campus.edu",
        "sellerName": "Mitu",
        "stock": 1,
    },
    {
        "id": "3",
        "title": "Desk lamp",
        "price": 850.0,
        "imageUrl": "https://example.com/img/lamp.jpg",
        "category": "Dorm",
        "condition": "New",
        "sellerEmail": "rafi@campus.edu",
        "sellerName": "Rafi",
        "stock": 5,
    },
]


class MemoryStore:
    """Stan dev backendu w pamieci. Zero logiki biznesowej, samo przechowywanie."""

    def __init__(self, products: List[Dict[str, Any]] | None = None):
        self.lock = threading.Lock()
        self.products: Dict[str, Dict[str, Any]] = {
            str(p["id"]): deepcopy(p) for p in (SEED_PRODUCTS if products is None else products)
        }
        self.users: Dict[str, Dict[str, Any]] = {}
        # email -> {productId: quantity}, dict trzyma kolejnosc dodania
        self.carts: Dict[str, Dict[str, int]] = {}
        self.wishlists: Dict[str, List[str]] = {}
        self.orders: List[Dict[str, Any]] = []
        self.profiles: Dict[str, Dict[str, Any]] = {}

    def new_product(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        product_id = uuid.uuid4().hex
        product = {**payload, "id": product_id}
        with self.lock:
            self.products[product_id] = product
        return product

    def delete_product(self, product_id: str) -> bool:
        with self.lock:
            if self.products.pop(product_id, None) is None:
                return False
            # bez osieroconych pozycji, inaczej fetch koszyka by padal
            for cart in self.carts.values():
                cart.pop(product_id, None)
            for items in self.wishlists.values():
                if product_id in items:
                    items.remove(product_id)
        return True

    def new_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        order = {
            **payload,
            "id": uuid.uuid4().hex,
            "status": "pending",
            "createdAt": datetime.now(timezone.utc),
        }
        with self.lock:
            self.orders.append(order)
        return order


def get_store(request: Request) -> MemoryStore:
    return request.app.state.store
