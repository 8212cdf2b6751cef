# storefront/api/routers/wishlists.py
from fastapi import APIRouter, Depends, HTTPException, Response

from storefront.api.store import MemoryStore, get_store
from storefront.domain.schemas import WishlistItemIn

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


@router.get("/{email}")
def get_wishlist(email: str, store: MemoryStore = Depends(get_store)):
    return {"items": [{"productId": pid} for pid in store.wishlists.get(email, [])]}


@router.post("/{email}", status_code=201)
def add_item(email: str, payload: WishlistItemIn, store: MemoryStore = Depends(get_store)):
    if payload.product_id not in store.products:
        raise HTTPException(status_code=404, detail="Product not found")

    with store.lock:
        items = store.wishlists.setdefault(email, [])
        if payload.product_id not in items:
            items.append(payload.product_id)
    return {"productId": payload.product_id}


@router.delete("/{email}/{product_id}", status_code=204)
def remove_item(email: str, product_id: str, store: MemoryStore = Depends(get_store)):
    with store.lock:
        items = store.wishlists.get(email, [])
        if product_id not in items:
            raise HTTPException(status_code=404, detail="Item not in wishlist")
        items.remove(product_id)
    return Response(status_code=204)
