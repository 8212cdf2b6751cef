# storefront/api/__init__.py
from fastapi import FastAPI

from storefront.api.routers import carts, health, orders, products, users, wishlists
from storefront.api.store import MemoryStore


def create_app(store: MemoryStore | None = None) -> FastAPI:
    app = FastAPI(title="Campus Storefront Backend (dev mock)", version="1.0.0")
    app.state.store = store or MemoryStore()

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(users.router)
    app.include_router(carts.router)
    app.include_router(wishlists.router)
    app.include_router(orders.router)

    return app
