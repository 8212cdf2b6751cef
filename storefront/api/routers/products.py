# storefront/api/routers/products.py
from fastapi import APIRouter, Depends, HTTPException, Response

from storefront.api.store import MemoryStore, get_store
from storefront.domain.schemas import ProductCreate

router = APIRouter(prefix="/api", tags=["products"])


@router.get("/products")
def list_products(category: str | None = None, store: MemoryStore = Depends(get_store)):
    products = list(store.products.values())
    if category:
        products = [p for p in products if p.get("category") == category]
    return products


@router.post("/products", status_code=201)
def create_product(payload: ProductCreate, store: MemoryStore = Depends(get_store)):
    product = store.new_product(payload.model_dump(by_alias=True))
    return {**product, "productId": product["id"]}


@router.get("/products/{product_id}")
def get_product(product_id: str, store: MemoryStore = Depends(get_store)):
    product = store.products.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: str, store: MemoryStore = Depends(get_store)):
    if not store.delete_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return Response(status_code=204)


@router.get("/categories")
def list_categories(store: MemoryStore = Depends(get_store)):
    return sorted({p["category"] for p in store.products.values() if p.get("category")})


@router.get("/stats")
def stats(store: MemoryStore = Depends(get_store)):
    return {
        "products": len(store.products),
        "users": len(store.users),
        "orders": len(store.orders),
    }
